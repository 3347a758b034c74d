"""Project progress aggregation."""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.erp.core.logging import get_logger
from src.erp.models import Project, ProjectStage, StageStatus
from src.erp.models.base import utc_now
from src.erp.repositories import ProjectRepository, ProjectStageRepository

logger = get_logger(__name__)


def compute_progress(stages: Sequence[ProjectStage]) -> tuple[int, int]:
    """Return (progress percent, total duration days) for a project's stages.

    Progress rounds half up, so 1 of 8 completed stages (12.5%) gives 13.
    A project without stages has progress 0 and duration 0.
    """
    total = len(stages)
    if total == 0:
        return 0, 0

    completed = sum(1 for stage in stages if stage.status == StageStatus.COMPLETED.value)
    ratio = Decimal(100 * completed) / Decimal(total)
    progress = int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    duration = sum(stage.duration_days or 0 for stage in stages)
    return progress, duration


class ProgressAggregator:
    """Writes derived ``progress`` and ``duration_days`` onto a project.

    Runs as its own commit after the stage mutation that triggered it. If the
    process dies in between, the next stage write brings the values back in
    line.
    """

    def __init__(
        self,
        project_repo: ProjectRepository,
        stage_repo: ProjectStageRepository,
        session: AsyncSession,
    ):
        self.project_repo = project_repo
        self.stage_repo = stage_repo
        self.session = session

    async def recompute(self, project_id: UUID) -> Project | None:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            return None

        stages = await self.stage_repo.list_by_project(project_id)
        progress, duration = compute_progress(stages)

        project.progress = progress
        project.duration_days = duration
        project.updated_at = utc_now()
        await self.session.commit()

        logger.info(
            "Project progress recomputed",
            project_id=str(project_id),
            progress=progress,
            stage_count=len(stages),
        )
        return project
