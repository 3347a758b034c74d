"""Repositories for projects, items, stages and stage dependencies."""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import or_
from sqlmodel import col, select

from src.erp.models import Project, ProjectItem, ProjectStage, StageDependency
from src.erp.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    model = Project

    async def list_filtered(
        self,
        status: str | None = None,
        manager_id: UUID | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[Project], str | None, bool]:
        """List projects newest first, optionally by status and/or manager."""
        query = select(Project)
        if status is not None:
            query = query.where(Project.status == status)
        if manager_id is not None:
            query = query.where(Project.manager_id == manager_id)
        return await self.paginate(query, cursor, limit, Project.created_at)

    async def get_by_deal(self, deal_id: UUID) -> Project | None:
        result = await self.session.execute(
            select(Project).where(Project.deal_id == deal_id).limit(1)
        )
        return result.scalar_one_or_none()


class ProjectItemRepository(BaseRepository[ProjectItem]):
    model = ProjectItem

    async def list_by_project(self, project_id: UUID) -> list[ProjectItem]:
        return await self.list_where(
            ProjectItem.project_id == project_id, order_by=col(ProjectItem.order)
        )


class ProjectStageRepository(BaseRepository[ProjectStage]):
    model = ProjectStage

    async def list_by_project(self, project_id: UUID) -> list[ProjectStage]:
        return await self.list_where(
            ProjectStage.project_id == project_id, order_by=col(ProjectStage.order)
        )

    async def list_by_item(self, item_id: UUID) -> list[ProjectStage]:
        return await self.list_where(
            ProjectStage.item_id == item_id, order_by=col(ProjectStage.order)
        )

    async def list_by_assignee(self, user_id: UUID) -> list[ProjectStage]:
        return await self.list_where(
            ProjectStage.assignee_id == user_id,
            order_by=col(ProjectStage.created_at),
        )

    async def list_by_ids(self, stage_ids: Sequence[UUID]) -> list[ProjectStage]:
        if not stage_ids:
            return []
        return await self.list_where(col(ProjectStage.id).in_(stage_ids))


class StageDependencyRepository(BaseRepository[StageDependency]):
    model = StageDependency

    async def list_for_project(self, project_id: UUID) -> list[StageDependency]:
        """Edges whose dependent stage belongs to the project."""
        query = (
            select(StageDependency)
            .join(ProjectStage, col(ProjectStage.id) == col(StageDependency.stage_id))
            .where(ProjectStage.project_id == project_id)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_for_stage(self, stage_id: UUID) -> list[StageDependency]:
        """Edges pointing at ``stage_id`` (its prerequisites)."""
        return await self.list_where(StageDependency.stage_id == stage_id)

    async def exists(self, stage_id: UUID, depends_on_stage_id: UUID) -> bool:
        result = await self.session.execute(
            select(StageDependency.id).where(
                StageDependency.stage_id == stage_id,
                StageDependency.depends_on_stage_id == depends_on_stage_id,
            )
        )
        return result.first() is not None

    async def delete_touching(self, stage_ids: Sequence[UUID]) -> None:
        """Delete every edge that references any of ``stage_ids`` in either direction."""
        if not stage_ids:
            return
        await self.delete_where(
            or_(
                col(StageDependency.stage_id).in_(stage_ids),
                col(StageDependency.depends_on_stage_id).in_(stage_ids),
            )
        )
