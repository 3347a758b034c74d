"""Warehouse schemas. Stock status is derived and never accepted as input."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.erp.models.enums import TransactionType


class WarehouseItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    sku: str | None = Field(default=None, max_length=100)
    barcode: str | None = Field(default=None, max_length=100)
    category: str = Field(default="other", min_length=1, max_length=100)
    unit: str = Field(default="pcs", min_length=1, max_length=20)
    quantity: Decimal = Field(default=Decimal(0))
    min_stock: Decimal = Field(default=Decimal(0), ge=0)
    price: Decimal | None = Field(default=None, ge=0)
    location: str | None = Field(default=None, max_length=255)
    supplier: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    project_id: UUID | None = None

    model_config = {"extra": "ignore"}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Item name cannot be empty or whitespace only")
        return v


class WarehouseItemUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    sku: str | None = Field(default=None, max_length=100)
    barcode: str | None = Field(default=None, max_length=100)
    category: str | None = Field(default=None, min_length=1, max_length=100)
    unit: str | None = Field(default=None, min_length=1, max_length=20)
    quantity: Decimal | None = None
    min_stock: Decimal | None = Field(default=None, ge=0)
    price: Decimal | None = Field(default=None, ge=0)
    location: str | None = Field(default=None, max_length=255)
    supplier: str | None = Field(default=None, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    project_id: UUID | None = None

    # "status" sent by a client is dropped here
    model_config = {"extra": "ignore"}


class WarehouseItemRead(BaseModel):
    id: UUID
    name: str
    sku: str | None
    barcode: str | None
    category: str
    unit: str
    quantity: Decimal
    min_stock: Decimal
    price: Decimal | None
    location: str | None
    supplier: str | None
    description: str | None
    project_id: UUID | None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class WarehouseTransactionCreate(BaseModel):
    type: TransactionType
    quantity: Decimal = Field(gt=0)
    project_id: UUID | None = None
    notes: str | None = Field(default=None, max_length=1000)


class WarehouseTransactionRead(BaseModel):
    id: UUID
    item_id: UUID
    type: str
    quantity: Decimal
    user_id: UUID
    project_id: UUID | None
    notes: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
