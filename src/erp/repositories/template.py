"""Repositories for process templates."""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import or_
from sqlmodel import col, select

from src.erp.models import ProcessTemplate, TemplateDependency, TemplateStage
from src.erp.repositories.base import BaseRepository


class ProcessTemplateRepository(BaseRepository[ProcessTemplate]):
    model = ProcessTemplate

    async def list_all(self, include_inactive: bool = False) -> list[ProcessTemplate]:
        query = select(ProcessTemplate)
        if not include_inactive:
            query = query.where(col(ProcessTemplate.is_active).is_(True))
        result = await self.session.execute(query.order_by(col(ProcessTemplate.name)))
        return list(result.scalars().all())


class TemplateStageRepository(BaseRepository[TemplateStage]):
    model = TemplateStage

    async def list_by_template(self, template_id: UUID) -> list[TemplateStage]:
        return await self.list_where(
            TemplateStage.template_id == template_id, order_by=col(TemplateStage.order)
        )


class TemplateDependencyRepository(BaseRepository[TemplateDependency]):
    model = TemplateDependency

    async def list_for_stages(self, stage_ids: Sequence[UUID]) -> list[TemplateDependency]:
        if not stage_ids:
            return []
        return await self.list_where(col(TemplateDependency.template_stage_id).in_(stage_ids))

    async def delete_touching(self, stage_ids: Sequence[UUID]) -> None:
        if not stage_ids:
            return
        await self.delete_where(
            or_(
                col(TemplateDependency.template_stage_id).in_(stage_ids),
                col(TemplateDependency.depends_on_template_stage_id).in_(stage_ids),
            )
        )
