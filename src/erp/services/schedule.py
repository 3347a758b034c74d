"""Delay and critical-path heuristics for display.

Nothing here changes stored state or feeds into the dependency gate.
"""

import math
from collections.abc import Sequence
from datetime import datetime, timedelta
from uuid import UUID

from src.erp.models import ProjectStage, StageStatus
from src.erp.schemas.project import StageRead
from src.erp.schemas.schedule import (
    ProcessOverviewRead,
    ProcessStage,
    ProcessStats,
    TimelineRead,
    TimelineStage,
    TimelineStats,
)
from src.erp.services.stage_dependencies import DependencyIndex

_DAY = timedelta(days=1)


def _ceil_days(delta: timedelta) -> int:
    return math.ceil(delta / _DAY)


def calculate_delay(stage: ProjectStage, now: datetime) -> int:
    """Whole days an in-progress stage is past its planned end, else 0."""
    if stage.planned_end_date is None or stage.status == StageStatus.COMPLETED.value:
        return 0
    if stage.status == StageStatus.IN_PROGRESS.value and now > stage.planned_end_date:
        return _ceil_days(now - stage.planned_end_date)
    return 0


def find_critical_path(
    stages: Sequence[ProjectStage], index: DependencyIndex, now: datetime
) -> set[UUID]:
    """Delayed stages plus their direct dependents (one hop only)."""
    critical: set[UUID] = set()
    for stage in stages:
        if calculate_delay(stage, now) > 0:
            critical.add(stage.id)
            critical.update(index.dependents_of(stage.id))
    return critical


def build_process_overview(
    project_id: UUID,
    stages: Sequence[ProjectStage],
    index: DependencyIndex,
    now: datetime,
) -> ProcessOverviewRead:
    critical = find_critical_path(stages, index, now)

    rows = []
    total_delay = 0
    delayed = 0
    for stage in stages:
        delay = calculate_delay(stage, now)
        if delay > 0:
            delayed += 1
            total_delay += delay
        rows.append(
            ProcessStage(
                **StageRead.model_validate(stage).model_dump(),
                prerequisites=index.prerequisites_of(stage.id),
                dependents=index.dependents_of(stage.id),
                delay_days=delay,
                on_critical_path=stage.id in critical,
            )
        )

    return ProcessOverviewRead(
        project_id=project_id,
        stages=rows,
        critical_path=[stage.id for stage in stages if stage.id in critical],
        stats=ProcessStats(
            total=len(stages),
            completed=sum(1 for s in stages if s.status == StageStatus.COMPLETED.value),
            in_progress=sum(1 for s in stages if s.status == StageStatus.IN_PROGRESS.value),
            delayed=delayed,
            total_delay_days=total_delay,
        ),
    )


def build_timeline(project_id: UUID, stages: Sequence[ProjectStage]) -> TimelineRead:
    """Planned-versus-actual view of a project's stages."""
    rows = []
    final_deadline: datetime | None = None
    for stage in stages:
        delay = None
        if stage.actual_end_date is not None and stage.planned_end_date is not None:
            delay = _ceil_days(stage.actual_end_date - stage.planned_end_date)
        rows.append(
            TimelineStage(**StageRead.model_validate(stage).model_dump(), delay_days=delay)
        )

        end = stage.actual_end_date or stage.planned_end_date
        if end is not None and (final_deadline is None or end > final_deadline):
            final_deadline = end

    def count(status: StageStatus) -> int:
        return sum(1 for s in stages if s.status == status.value)

    return TimelineRead(
        project_id=project_id,
        stages=rows,
        stats=TimelineStats(
            total=len(stages),
            completed=count(StageStatus.COMPLETED),
            in_progress=count(StageStatus.IN_PROGRESS),
            pending=count(StageStatus.PENDING),
            final_deadline=final_deadline,
        ),
    )
