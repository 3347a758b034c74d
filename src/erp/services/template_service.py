"""Process template service: template CRUD and applying a template to an item."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.erp.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.erp.core.logging import get_logger
from src.erp.models import (
    ProcessTemplate,
    ProjectStage,
    StageDependency,
    StageStatus,
    TemplateDependency,
    TemplateStage,
)
from src.erp.models.base import utc_now
from src.erp.repositories import (
    ProcessTemplateRepository,
    ProjectItemRepository,
    ProjectStageRepository,
    StageDependencyRepository,
    TemplateDependencyRepository,
    TemplateStageRepository,
)
from src.erp.schemas.template import (
    ApplyTemplateResult,
    ProcessTemplateCreate,
    ProcessTemplateUpdate,
    TemplateStageCreate,
    TemplateStageUpdate,
)
from src.erp.services.progress import ProgressAggregator

logger = get_logger(__name__)


class TemplateService:
    def __init__(
        self,
        template_repo: ProcessTemplateRepository,
        template_stage_repo: TemplateStageRepository,
        template_dependency_repo: TemplateDependencyRepository,
        item_repo: ProjectItemRepository,
        stage_repo: ProjectStageRepository,
        dependency_repo: StageDependencyRepository,
        progress: ProgressAggregator,
        session: AsyncSession,
    ):
        self.template_repo = template_repo
        self.template_stage_repo = template_stage_repo
        self.template_dependency_repo = template_dependency_repo
        self.item_repo = item_repo
        self.stage_repo = stage_repo
        self.dependency_repo = dependency_repo
        self.progress = progress
        self.session = session

    # --- templates ---

    async def get_template(self, template_id: UUID) -> ProcessTemplate:
        template = await self.template_repo.get_by_id(template_id)
        if template is None:
            raise NotFoundError("Process template", template_id)
        return template

    async def list_templates(self, include_inactive: bool = False) -> list[ProcessTemplate]:
        return await self.template_repo.list_all(include_inactive=include_inactive)

    async def get_template_detail(
        self, template_id: UUID
    ) -> tuple[ProcessTemplate, list[TemplateStage], list[TemplateDependency]]:
        template = await self.get_template(template_id)
        stages = await self.template_stage_repo.list_by_template(template_id)
        dependencies = await self.template_dependency_repo.list_for_stages(
            [stage.id for stage in stages]
        )
        return template, stages, dependencies

    async def create_template(
        self, data: ProcessTemplateCreate, created_by: UUID | None
    ) -> ProcessTemplate:
        template = ProcessTemplate(**data.model_dump(), created_by=created_by)
        self.template_repo.add(template)
        await self.session.commit()
        logger.info("Process template created", template_id=str(template.id))
        return template

    async def update_template(
        self, template_id: UUID, data: ProcessTemplateUpdate
    ) -> ProcessTemplate:
        template = await self.get_template(template_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in ("name", "is_active"):
                continue
            setattr(template, field, value)
        template.updated_at = utc_now()
        await self.session.commit()
        return template

    async def delete_template(self, template_id: UUID) -> None:
        template = await self.get_template(template_id)
        stages = await self.template_stage_repo.list_by_template(template_id)
        await self.template_dependency_repo.delete_touching([stage.id for stage in stages])
        await self.template_stage_repo.delete_where(TemplateStage.template_id == template_id)
        await self.template_repo.delete(template)
        await self.session.commit()
        logger.info("Process template deleted", template_id=str(template_id))

    # --- template stages ---

    async def get_template_stage(self, stage_id: UUID) -> TemplateStage:
        stage = await self.template_stage_repo.get_by_id(stage_id)
        if stage is None:
            raise NotFoundError("Template stage", stage_id)
        return stage

    async def list_template_stages(self, template_id: UUID) -> list[TemplateStage]:
        await self.get_template(template_id)
        return await self.template_stage_repo.list_by_template(template_id)

    async def create_template_stage(
        self, template_id: UUID, data: TemplateStageCreate
    ) -> TemplateStage:
        await self.get_template(template_id)
        values = data.model_dump()
        if values["order"] is None:
            siblings = await self.template_stage_repo.list_by_template(template_id)
            values["order"] = max((s.order for s in siblings), default=-1) + 1
        stage = TemplateStage(template_id=template_id, **values)
        self.template_stage_repo.add(stage)
        await self.session.commit()
        return stage

    async def update_template_stage(
        self, stage_id: UUID, data: TemplateStageUpdate
    ) -> TemplateStage:
        stage = await self.get_template_stage(stage_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in ("name", "order"):
                continue
            setattr(stage, field, value)
        stage.updated_at = utc_now()
        await self.session.commit()
        return stage

    async def delete_template_stage(self, stage_id: UUID) -> None:
        stage = await self.get_template_stage(stage_id)
        await self.template_dependency_repo.delete_touching([stage_id])
        await self.template_stage_repo.delete(stage)
        await self.session.commit()

    # --- template dependencies ---

    async def create_template_dependency(
        self, stage_id: UUID, depends_on_stage_id: UUID
    ) -> TemplateDependency:
        if stage_id == depends_on_stage_id:
            raise ValidationError("A stage cannot depend on itself")
        stage = await self.get_template_stage(stage_id)
        prerequisite = await self.get_template_stage(depends_on_stage_id)
        if stage.template_id != prerequisite.template_id:
            raise ValidationError("Both stages must belong to the same template")

        existing = await self.template_dependency_repo.list_for_stages([stage_id])
        if any(dep.depends_on_template_stage_id == depends_on_stage_id for dep in existing):
            raise ConflictError("Dependency already exists")

        dependency = TemplateDependency(
            template_stage_id=stage_id,
            depends_on_template_stage_id=depends_on_stage_id,
        )
        self.template_dependency_repo.add(dependency)
        await self.session.commit()
        return dependency

    async def delete_template_dependency(self, dependency_id: UUID) -> None:
        dependency = await self.template_dependency_repo.get_by_id(dependency_id)
        if dependency is None:
            raise NotFoundError("Template dependency", dependency_id)
        await self.template_dependency_repo.delete(dependency)
        await self.session.commit()

    # --- apply ---

    async def apply_to_item(self, template_id: UUID, item_id: UUID) -> ApplyTemplateResult:
        """Copy the template's stages onto a project item as pending stages.

        Template dependencies are recreated between the copies. Existing
        stages of the item are left alone; new ones are appended after them.
        """
        template, stages, dependencies = await self.get_template_detail(template_id)
        item = await self.item_repo.get_by_id(item_id)
        if item is None:
            raise NotFoundError("Project item", item_id)

        existing = await self.stage_repo.list_by_item(item_id)
        offset = max((s.order for s in existing), default=-1) + 1
        copies: dict[UUID, UUID] = {}
        for position, template_stage in enumerate(stages):
            stage = ProjectStage(
                project_id=item.project_id,
                item_id=item_id,
                name=template_stage.name,
                description=template_stage.description,
                duration_days=template_stage.duration_days,
                assignee_id=template_stage.assignee_id,
                cost=template_stage.cost,
                status=StageStatus.PENDING.value,
                order=offset + position,
            )
            self.stage_repo.add(stage)
            copies[template_stage.id] = stage.id
        await self.session.flush()

        created_edges = 0
        for dependency in dependencies:
            stage_id = copies.get(dependency.template_stage_id)
            depends_on = copies.get(dependency.depends_on_template_stage_id)
            if stage_id is None or depends_on is None:
                continue
            self.dependency_repo.add(
                StageDependency(stage_id=stage_id, depends_on_stage_id=depends_on)
            )
            created_edges += 1
        await self.session.commit()

        logger.info(
            "Process template applied",
            template_id=str(template.id),
            item_id=str(item_id),
            project_id=str(item.project_id),
            stages_created=len(copies),
            dependencies_created=created_edges,
        )
        await self.progress.recompute(item.project_id)

        return ApplyTemplateResult(
            item_id=item_id,
            stages_created=len(copies),
            dependencies_created=created_edges,
        )
