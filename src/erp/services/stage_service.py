"""Stage service: gated status changes, dependency edges and schedule views."""

from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.erp.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.erp.core.logging import get_logger
from src.erp.models import Project, ProjectStage, StageDependency, StageStatus
from src.erp.models.base import utc_now
from src.erp.repositories import (
    ProjectItemRepository,
    ProjectRepository,
    ProjectStageRepository,
    StageDependencyRepository,
)
from src.erp.schemas.project import StageCreate, StageUpdate
from src.erp.schemas.schedule import ProcessOverviewRead, TimelineRead
from src.erp.services.progress import ProgressAggregator
from src.erp.services.schedule import build_process_overview, build_timeline
from src.erp.services.stage_dependencies import DependencyIndex

logger = get_logger(__name__)

# Columns that may not be cleared by sending an explicit null
_NON_NULLABLE = frozenset({"name", "status", "order"})


class StageService:
    """Every stage mutation ends with a progress recompute of the owning project."""

    def __init__(
        self,
        project_repo: ProjectRepository,
        item_repo: ProjectItemRepository,
        stage_repo: ProjectStageRepository,
        dependency_repo: StageDependencyRepository,
        progress: ProgressAggregator,
        session: AsyncSession,
    ):
        self.project_repo = project_repo
        self.item_repo = item_repo
        self.stage_repo = stage_repo
        self.dependency_repo = dependency_repo
        self.progress = progress
        self.session = session

    # --- lookups ---

    async def get_stage(self, stage_id: UUID) -> ProjectStage:
        stage = await self.stage_repo.get_by_id(stage_id)
        if stage is None:
            raise NotFoundError("Stage", stage_id)
        return stage

    async def _get_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    async def _check_item(self, project_id: UUID, item_id: UUID) -> None:
        item = await self.item_repo.get_by_id(item_id)
        if item is None or item.project_id != project_id:
            raise NotFoundError("Project item", item_id)

    async def list_project_stages(self, project_id: UUID) -> list[ProjectStage]:
        await self._get_project(project_id)
        return await self.stage_repo.list_by_project(project_id)

    async def list_item_stages(self, project_id: UUID, item_id: UUID) -> list[ProjectStage]:
        await self._check_item(project_id, item_id)
        return await self.stage_repo.list_by_item(item_id)

    async def list_assigned(self, user_id: UUID) -> list[tuple[ProjectStage, Project]]:
        """Stages assigned to ``user_id`` together with their projects."""
        stages = await self.stage_repo.list_by_assignee(user_id)
        result = []
        projects: dict[UUID, Project | None] = {}
        for stage in stages:
            if stage.project_id not in projects:
                projects[stage.project_id] = await self.project_repo.get_by_id(stage.project_id)
            project = projects[stage.project_id]
            if project is not None:
                result.append((stage, project))
        return result

    # --- dependency engine ---

    async def build_index(self, project_id: UUID) -> DependencyIndex:
        """Index the project's stages and edges for this request.

        Prerequisites living outside the project are loaded too so the gate
        sees their real item_id and status.
        """
        stages = await self.stage_repo.list_by_project(project_id)
        edges = await self.dependency_repo.list_for_project(project_id)
        known = {stage.id for stage in stages}
        outside = {e.depends_on_stage_id for e in edges if e.depends_on_stage_id not in known}
        if outside:
            stages.extend(await self.stage_repo.list_by_ids(list(outside)))
        return DependencyIndex(stages, edges)

    async def get_incomplete_required_stages(self, stage_id: UUID) -> list[ProjectStage]:
        stage = await self.get_stage(stage_id)
        index = await self.build_index(stage.project_id)
        return index.incomplete_prerequisites(stage_id)

    async def can_start_stage(self, stage_id: UUID) -> bool:
        return not await self.get_incomplete_required_stages(stage_id)

    # --- mutations ---

    async def create_stage(
        self,
        project_id: UUID,
        data: StageCreate,
        item_id: UUID | None = None,
    ) -> ProjectStage:
        await self._get_project(project_id)
        values = data.model_dump()
        if item_id is not None:
            values["item_id"] = item_id
        if values["item_id"] is not None:
            await self._check_item(project_id, values["item_id"])
        if values["order"] is None:
            siblings = (
                await self.stage_repo.list_by_item(values["item_id"])
                if values["item_id"] is not None
                else await self.stage_repo.list_by_project(project_id)
            )
            values["order"] = max((s.order for s in siblings), default=-1) + 1
        values["status"] = data.status.value

        stage = ProjectStage(project_id=project_id, **values)
        self.stage_repo.add(stage)
        await self.session.commit()

        logger.info(
            "Stage created",
            stage_id=str(stage.id),
            project_id=str(project_id),
            item_id=str(stage.item_id) if stage.item_id else None,
        )
        await self.progress.recompute(project_id)
        return stage

    async def update_stage(self, stage_id: UUID, data: StageUpdate) -> ProjectStage:
        """Apply a partial update; a non-pending status passes through the gate first."""
        stage = await self.get_stage(stage_id)
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field not in _NON_NULLABLE
        }

        new_status = changes.get("status")
        if new_status is not None:
            new_status = StageStatus(new_status).value
            changes["status"] = new_status
            index = await self.build_index(stage.project_id)
            index.check_transition(stage.id, new_status)

        return await self._write(stage, changes)

    async def start_stage(self, stage_id: UUID) -> ProjectStage:
        stage = await self.get_stage(stage_id)
        index = await self.build_index(stage.project_id)
        index.check_transition(stage.id, StageStatus.IN_PROGRESS.value)
        return await self._write(
            stage,
            {"status": StageStatus.IN_PROGRESS.value, "actual_start_date": utc_now()},
        )

    async def complete_stage(self, stage_id: UUID) -> ProjectStage:
        stage = await self.get_stage(stage_id)
        index = await self.build_index(stage.project_id)
        index.check_transition(stage.id, StageStatus.COMPLETED.value)
        return await self._write(
            stage,
            {"status": StageStatus.COMPLETED.value, "actual_end_date": utc_now()},
        )

    async def _write(self, stage: ProjectStage, changes: dict) -> ProjectStage:
        previous_status = stage.status
        for field, value in changes.items():
            setattr(stage, field, value)
        stage.updated_at = utc_now()
        await self.session.commit()

        if stage.status != previous_status:
            logger.info(
                "Stage status changed",
                stage_id=str(stage.id),
                project_id=str(stage.project_id),
                previous=previous_status,
                status=stage.status,
            )
        await self.progress.recompute(stage.project_id)
        return stage

    async def delete_stage(self, stage_id: UUID) -> None:
        """Delete a stage and every dependency edge touching it."""
        stage = await self.get_stage(stage_id)
        project_id = stage.project_id
        await self.dependency_repo.delete_touching([stage_id])
        await self.stage_repo.delete(stage)
        await self.session.commit()

        logger.info("Stage deleted", stage_id=str(stage_id), project_id=str(project_id))
        await self.progress.recompute(project_id)

    async def reorder_item_stages(
        self, project_id: UUID, item_id: UUID, stage_ids: list[UUID]
    ) -> list[ProjectStage]:
        """Assign ``order = position`` to each of the item's stages in one commit."""
        if not stage_ids:
            raise ValidationError("stage_ids must not be empty")
        if len(set(stage_ids)) != len(stage_ids):
            raise ValidationError("stage_ids must not contain duplicates")

        stages = await self.list_item_stages(project_id, item_id)
        if len(stage_ids) != len(stages):
            raise ValidationError(
                f"Invalid stage_ids count. Expected {len(stages)}, got {len(stage_ids)}"
            )

        by_id = {stage.id: stage for stage in stages}
        foreign = [str(sid) for sid in stage_ids if sid not in by_id]
        if foreign:
            raise ValidationError(
                f"Some stage IDs do not belong to this item: {', '.join(foreign)}"
            )

        now = utc_now()
        for position, sid in enumerate(stage_ids):
            by_id[sid].order = position
            by_id[sid].updated_at = now
        await self.session.commit()

        return sorted(stages, key=lambda s: s.order)

    # --- dependency edges ---

    async def list_project_dependencies(self, project_id: UUID) -> list[StageDependency]:
        await self._get_project(project_id)
        return await self.dependency_repo.list_for_project(project_id)

    async def list_stage_dependencies(self, stage_id: UUID) -> list[StageDependency]:
        await self.get_stage(stage_id)
        return await self.dependency_repo.list_for_stage(stage_id)

    async def create_dependency(self, stage_id: UUID, depends_on_stage_id: UUID) -> StageDependency:
        """Store an edge. Only self-edges are rejected; cycles are not detected."""
        if stage_id == depends_on_stage_id:
            raise ValidationError("A stage cannot depend on itself")
        await self.get_stage(stage_id)
        await self.get_stage(depends_on_stage_id)
        if await self.dependency_repo.exists(stage_id, depends_on_stage_id):
            raise ConflictError("Dependency already exists")

        dependency = StageDependency(stage_id=stage_id, depends_on_stage_id=depends_on_stage_id)
        self.dependency_repo.add(dependency)
        await self.session.commit()
        logger.info(
            "Stage dependency created",
            stage_id=str(stage_id),
            depends_on_stage_id=str(depends_on_stage_id),
        )
        return dependency

    async def delete_dependency(self, dependency_id: UUID) -> None:
        dependency = await self.dependency_repo.get_by_id(dependency_id)
        if dependency is None:
            raise NotFoundError("Stage dependency", dependency_id)
        await self.dependency_repo.delete(dependency)
        await self.session.commit()

    # --- schedule views ---

    async def timeline(self, project_id: UUID) -> TimelineRead:
        stages = await self.list_project_stages(project_id)
        return build_timeline(project_id, stages)

    async def process_overview(
        self, project_id: UUID, now: datetime | None = None
    ) -> ProcessOverviewRead:
        stages = await self.list_project_stages(project_id)
        index = await self.build_index(project_id)
        return build_process_overview(project_id, stages, index, now or utc_now())
