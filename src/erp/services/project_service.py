"""Project service: projects, items and project-from-invoice generation."""

from typing import Any
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col

from src.erp.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.erp.core.logging import get_logger
from src.erp.models import (
    DealDocument,
    DocumentType,
    Project,
    ProjectItem,
    ProjectStage,
    ProjectStatus,
    StageDependency,
    StageStatus,
    WarehouseItem,
    WarehouseTransaction,
)
from src.erp.models.base import utc_now
from src.erp.repositories import (
    DealDocumentRepository,
    DealRepository,
    ProjectItemRepository,
    ProjectRepository,
    ProjectStageRepository,
    StageDependencyRepository,
)
from src.erp.schemas.invoice import InvoicePosition, PositionStages, ProjectFromInvoiceRequest
from src.erp.schemas.project import (
    ProjectCreate,
    ProjectItemCreate,
    ProjectItemUpdate,
    ProjectUpdate,
)
from src.erp.services.progress import ProgressAggregator

logger = get_logger(__name__)


class ProjectService:
    def __init__(
        self,
        project_repo: ProjectRepository,
        item_repo: ProjectItemRepository,
        stage_repo: ProjectStageRepository,
        dependency_repo: StageDependencyRepository,
        deal_repo: DealRepository,
        document_repo: DealDocumentRepository,
        progress: ProgressAggregator,
        session: AsyncSession,
    ):
        self.project_repo = project_repo
        self.item_repo = item_repo
        self.stage_repo = stage_repo
        self.dependency_repo = dependency_repo
        self.deal_repo = deal_repo
        self.document_repo = document_repo
        self.progress = progress
        self.session = session

    # --- projects ---

    async def get_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    async def get_by_deal(self, deal_id: UUID) -> Project:
        project = await self.project_repo.get_by_deal(deal_id)
        if project is None:
            raise NotFoundError("Project for deal", deal_id)
        return project

    async def list_projects(
        self,
        status: ProjectStatus | None = None,
        manager_id: UUID | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[Project], str | None, bool]:
        return await self.project_repo.list_filtered(
            status=status.value if status else None,
            manager_id=manager_id,
            cursor=cursor,
            limit=limit,
        )

    async def get_project_detail(
        self, project_id: UUID
    ) -> tuple[Project, list[ProjectItem], list[ProjectStage]]:
        project = await self.get_project(project_id)
        items = await self.item_repo.list_by_project(project_id)
        stages = await self.stage_repo.list_by_project(project_id)
        return project, items, stages

    async def create_project(self, data: ProjectCreate) -> Project:
        values = data.model_dump()
        values["status"] = data.status.value
        project = Project(**values)
        self.project_repo.add(project)
        await self.session.commit()
        logger.info("Project created", project_id=str(project.id), name=project.name)
        return project

    async def update_project(self, project_id: UUID, data: ProjectUpdate) -> Project:
        project = await self.get_project(project_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in ("name", "client_name", "status"):
                continue
            if field == "status":
                value = ProjectStatus(value).value
            setattr(project, field, value)
        project.updated_at = utc_now()
        await self.session.commit()
        return project

    async def delete_project(self, project_id: UUID) -> None:
        """Delete a project with its items, stages and their dependency edges.

        Warehouse rows that reference the project are kept and detached.
        """
        project = await self.get_project(project_id)
        stages = await self.stage_repo.list_by_project(project_id)

        await self.dependency_repo.delete_touching([stage.id for stage in stages])
        await self.stage_repo.delete_where(ProjectStage.project_id == project_id)
        await self.item_repo.delete_where(ProjectItem.project_id == project_id)
        for model in (WarehouseItem, WarehouseTransaction):
            await self.session.execute(
                update(model)
                .where(col(model.project_id) == project_id)
                .values(project_id=None)
                .execution_options(synchronize_session=False)
            )
        await self.project_repo.delete(project)
        await self.session.commit()
        logger.info("Project deleted", project_id=str(project_id), stage_count=len(stages))

    # --- items ---

    async def get_item(self, project_id: UUID, item_id: UUID) -> ProjectItem:
        item = await self.item_repo.get_by_id(item_id)
        if item is None or item.project_id != project_id:
            raise NotFoundError("Project item", item_id)
        return item

    async def list_items(self, project_id: UUID) -> list[ProjectItem]:
        await self.get_project(project_id)
        return await self.item_repo.list_by_project(project_id)

    async def create_item(self, project_id: UUID, data: ProjectItemCreate) -> ProjectItem:
        await self.get_project(project_id)
        values = data.model_dump()
        if values["order"] is None:
            items = await self.item_repo.list_by_project(project_id)
            values["order"] = max((i.order for i in items), default=-1) + 1
        item = ProjectItem(project_id=project_id, **values)
        self.item_repo.add(item)
        await self.session.commit()
        return item

    async def update_item(
        self, project_id: UUID, item_id: UUID, data: ProjectItemUpdate
    ) -> ProjectItem:
        item = await self.get_item(project_id, item_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in ("name", "quantity", "order"):
                continue
            setattr(item, field, value)
        item.updated_at = utc_now()
        await self.session.commit()
        return item

    async def delete_item(self, project_id: UUID, item_id: UUID) -> None:
        """Delete an item together with its stages, then recompute progress."""
        item = await self.get_item(project_id, item_id)
        stages = await self.stage_repo.list_by_item(item_id)

        await self.dependency_repo.delete_touching([stage.id for stage in stages])
        await self.stage_repo.delete_where(ProjectStage.item_id == item_id)
        await self.item_repo.delete(item)
        await self.session.commit()

        await self.progress.recompute(project_id)

    # --- generation from invoice ---

    async def create_from_invoice(self, request: ProjectFromInvoiceRequest) -> Project:
        """Create a project (items and draft stages included) from a deal's invoice."""
        deal = await self.deal_repo.get_by_id(request.deal_id)
        if deal is None:
            raise NotFoundError("Deal", request.deal_id)

        invoice = await self.document_repo.get_by_id(request.invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice", request.invoice_id)
        if invoice.document_type != DocumentType.INVOICE.value:
            raise ValidationError("Document is not an invoice")

        if await self.project_repo.get_by_deal(request.deal_id) is not None:
            raise ConflictError("Project already exists for this deal")

        project = Project(
            name=f"Project #{invoice.name}",
            client_name=deal.client_name,
            deal_id=deal.id,
            invoice_id=invoice.id,
            manager_id=deal.manager_id,
            status=ProjectStatus.PENDING.value,
            progress=0,
            duration_days=0,
        )
        self.project_repo.add(project)
        await self.session.flush()

        positions = self._select_positions(request, invoice)
        stage_count = 0
        for order, (position_index, position) in enumerate(positions):
            item = ProjectItem(
                project_id=project.id,
                name=position.name,
                article=position.article or None,
                quantity=position.quantity or 1,
                price=position.price,
                source_document_id=invoice.id,
                order=order,
            )
            self.item_repo.add(item)
            await self.session.flush()

            drafts = (request.position_stages or {}).get(position_index)
            if drafts is not None and drafts.stages:
                stage_count += await self._add_draft_stages(project.id, item.id, drafts)

        await self.session.commit()
        logger.info(
            "Project created from invoice",
            project_id=str(project.id),
            deal_id=str(deal.id),
            invoice_id=str(invoice.id),
            item_count=len(positions),
            stage_count=stage_count,
        )

        if stage_count:
            await self.progress.recompute(project.id)
        return project

    @staticmethod
    def _select_positions(
        request: ProjectFromInvoiceRequest, invoice: DealDocument
    ) -> list[tuple[int, InvoicePosition]]:
        """Pair each chosen position with its index in the source list.

        Edited positions win when both they and a selection are given;
        otherwise the invoice's own positions are used, filtered by the
        selection if there is one.
        """
        selected = request.selected_positions or []
        if request.edited_positions and selected:
            edited = request.edited_positions
            return [(i, edited[i]) for i in selected if 0 <= i < len(edited)]

        raw: Any = (invoice.data or {}).get("positions")
        if not isinstance(raw, list):
            return []
        positions = [InvoicePosition.model_validate(p) for p in raw]
        return [
            (i, position)
            for i, position in enumerate(positions)
            if not selected or i in selected
        ]

    async def _add_draft_stages(
        self, project_id: UUID, item_id: UUID, drafts: PositionStages
    ) -> int:
        """Create pending stages for an item and remap draft ids on their edges.

        Edges that name an unknown draft id are skipped.
        """
        real_ids: dict[str, UUID] = {}
        for draft in drafts.stages:
            stage = ProjectStage(
                project_id=project_id,
                item_id=item_id,
                name=draft.name,
                status=StageStatus.PENDING.value,
                order=draft.order_index,
            )
            self.stage_repo.add(stage)
            real_ids[draft.id] = stage.id
        await self.session.flush()

        for edge in drafts.dependencies:
            stage_id = real_ids.get(edge.stage_id)
            depends_on = real_ids.get(edge.depends_on_stage_id)
            if stage_id is None or depends_on is None or stage_id == depends_on:
                continue
            self.dependency_repo.add(
                StageDependency(stage_id=stage_id, depends_on_stage_id=depends_on)
            )
        return len(drafts.stages)
