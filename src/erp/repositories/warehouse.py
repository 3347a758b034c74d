"""Repositories for warehouse items and transactions."""

from uuid import UUID

from sqlmodel import col, select

from src.erp.models import WarehouseItem, WarehouseTransaction
from src.erp.repositories.base import BaseRepository


class WarehouseItemRepository(BaseRepository[WarehouseItem]):
    model = WarehouseItem

    async def list_filtered(
        self,
        category: str | None = None,
        status: str | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[WarehouseItem], str | None, bool]:
        query = select(WarehouseItem)
        if category is not None:
            query = query.where(WarehouseItem.category == category)
        if status is not None:
            query = query.where(WarehouseItem.status == status)
        return await self.paginate(query, cursor, limit, WarehouseItem.created_at)


class WarehouseTransactionRepository(BaseRepository[WarehouseTransaction]):
    model = WarehouseTransaction

    async def list_by_item(self, item_id: UUID) -> list[WarehouseTransaction]:
        """Transactions for an item, newest first."""
        return await self.list_where(
            WarehouseTransaction.item_id == item_id,
            order_by=col(WarehouseTransaction.created_at).desc(),
        )

    async def delete_by_item(self, item_id: UUID) -> None:
        await self.delete_where(WarehouseTransaction.item_id == item_id)
