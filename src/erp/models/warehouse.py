"""Warehouse stock items and their append-only transaction log."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.erp.models.base import utc_now
from src.erp.models.enums import StockStatus


class WarehouseItem(SQLModel, table=True):
    """Stock item. ``status`` is derived and never accepted from callers."""

    __tablename__ = "warehouse_items"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255, index=True)
    sku: str | None = Field(default=None, max_length=100, index=True)
    barcode: str | None = Field(default=None, max_length=100)
    category: str = Field(default="other", max_length=100, index=True)
    unit: str = Field(default="pcs", max_length=20)
    quantity: Decimal = Field(default=Decimal(0), max_digits=14, decimal_places=3)
    min_stock: Decimal = Field(default=Decimal(0), max_digits=14, decimal_places=3)
    price: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    location: str | None = Field(default=None, max_length=255)
    supplier: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    project_id: UUID | None = Field(default=None, foreign_key="projects.id")
    status: str = Field(default=StockStatus.NORMAL.value, max_length=20, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class WarehouseTransaction(SQLModel, table=True):
    """Immutable record of a stock movement."""

    __tablename__ = "warehouse_transactions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    item_id: UUID = Field(foreign_key="warehouse_items.id", index=True)
    type: str = Field(max_length=10)
    quantity: Decimal = Field(max_digits=14, decimal_places=3)
    user_id: UUID = Field(foreign_key="users.id")
    project_id: UUID | None = Field(default=None, foreign_key="projects.id")
    notes: str | None = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utc_now, index=True)
