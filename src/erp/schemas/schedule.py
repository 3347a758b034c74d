"""Timeline and delay overview responses."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from src.erp.schemas.project import StageRead


class TimelineStage(StageRead):
    # Days between planned and actual end; None unless both are set
    delay_days: int | None = None


class TimelineStats(BaseModel):
    total: int
    completed: int
    in_progress: int
    pending: int
    final_deadline: datetime | None


class TimelineRead(BaseModel):
    project_id: UUID
    stages: list[TimelineStage]
    stats: TimelineStats


class ProcessStage(StageRead):
    prerequisites: list[UUID] = []
    dependents: list[UUID] = []
    delay_days: int = 0
    on_critical_path: bool = False


class ProcessStats(BaseModel):
    total: int
    completed: int
    in_progress: int
    delayed: int
    total_delay_days: int


class ProcessOverviewRead(BaseModel):
    """Per-stage delay flags for display; nothing here affects gating."""

    project_id: UUID
    stages: list[ProcessStage]
    critical_path: list[UUID]
    stats: ProcessStats
