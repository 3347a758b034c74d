"""Warehouse stock service: item CRUD, transactions and status derivation."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.erp.core.exceptions import NotFoundError
from src.erp.core.logging import get_logger
from src.erp.models import StockStatus, TransactionType, WarehouseItem, WarehouseTransaction
from src.erp.models.base import utc_now
from src.erp.repositories import WarehouseItemRepository, WarehouseTransactionRepository
from src.erp.schemas.warehouse import (
    WarehouseItemCreate,
    WarehouseItemUpdate,
    WarehouseTransactionCreate,
)

logger = get_logger(__name__)

_NON_NULLABLE = frozenset({"name", "category", "unit", "quantity", "min_stock"})


def derive_stock_status(quantity: Decimal, min_stock: Decimal) -> StockStatus:
    """Classify stock: zero is critical, at or below min_stock is low.

    Negative quantities (an "out" larger than the stock) classify as low.
    """
    if quantity == 0:
        return StockStatus.CRITICAL
    if quantity <= min_stock:
        return StockStatus.LOW
    return StockStatus.NORMAL


class WarehouseService:
    def __init__(
        self,
        item_repo: WarehouseItemRepository,
        transaction_repo: WarehouseTransactionRepository,
        session: AsyncSession,
    ):
        self.item_repo = item_repo
        self.transaction_repo = transaction_repo
        self.session = session

    async def get_item(self, item_id: UUID) -> WarehouseItem:
        item = await self.item_repo.get_by_id(item_id)
        if item is None:
            raise NotFoundError("Warehouse item", item_id)
        return item

    async def list_items(
        self,
        category: str | None = None,
        status: StockStatus | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[WarehouseItem], str | None, bool]:
        return await self.item_repo.list_filtered(
            category=category,
            status=status.value if status else None,
            cursor=cursor,
            limit=limit,
        )

    async def create_item(self, data: WarehouseItemCreate) -> WarehouseItem:
        item = WarehouseItem(**data.model_dump())
        self.item_repo.add(item)
        await self.session.commit()
        return await self.recompute_status(item.id)

    async def update_item(self, item_id: UUID, data: WarehouseItemUpdate) -> WarehouseItem:
        item = await self.get_item(item_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in _NON_NULLABLE:
                continue
            setattr(item, field, value)
        item.updated_at = utc_now()
        await self.session.commit()
        return await self.recompute_status(item.id)

    async def delete_item(self, item_id: UUID) -> None:
        item = await self.get_item(item_id)
        await self.transaction_repo.delete_by_item(item_id)
        await self.item_repo.delete(item)
        await self.session.commit()
        logger.info("Warehouse item deleted", item_id=str(item_id))

    async def recompute_status(self, item_id: UUID) -> WarehouseItem:
        """Re-derive the item's status; writes only when it changed."""
        item = await self.get_item(item_id)
        status = derive_stock_status(Decimal(item.quantity), Decimal(item.min_stock))
        if item.status != status.value:
            previous = item.status
            item.status = status.value
            item.updated_at = utc_now()
            await self.session.commit()
            logger.info(
                "Stock status changed",
                item_id=str(item_id),
                previous=previous,
                status=status.value,
            )
        return item

    async def apply_transaction(
        self,
        item_id: UUID,
        data: WarehouseTransactionCreate,
        user_id: UUID,
    ) -> WarehouseTransaction:
        """Apply a stock movement.

        The new quantity is persisted first, then the transaction row is
        appended, then status is recomputed. There is no floor: an "out"
        larger than the stock leaves a negative quantity.
        """
        item = await self.get_item(item_id)

        current = Decimal(item.quantity)
        if data.type == TransactionType.IN:
            new_quantity = current + data.quantity
        else:
            new_quantity = current - data.quantity

        item.quantity = new_quantity
        item.updated_at = utc_now()
        await self.session.commit()

        transaction = WarehouseTransaction(
            item_id=item_id,
            type=data.type.value,
            quantity=data.quantity,
            user_id=user_id,
            project_id=data.project_id,
            notes=data.notes,
        )
        self.transaction_repo.add(transaction)
        await self.session.commit()

        logger.info(
            "Warehouse transaction applied",
            item_id=str(item_id),
            type=data.type.value,
            quantity=str(data.quantity),
            new_quantity=str(new_quantity),
        )

        await self.recompute_status(item_id)
        return transaction

    async def list_transactions(self, item_id: UUID) -> list[WarehouseTransaction]:
        await self.get_item(item_id)
        return await self.transaction_repo.list_by_item(item_id)
