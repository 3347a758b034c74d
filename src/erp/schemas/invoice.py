"""Request body for generating a project from a deal's invoice."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field


class InvoicePosition(BaseModel):
    """One invoice line. Mirrors the shape stored in ``DealDocument.data["positions"]``."""

    name: str = Field(min_length=1, max_length=255)
    article: str | None = None
    quantity: int | None = Field(default=None, ge=0)
    price: Decimal | None = None

    model_config = {"extra": "ignore"}


class DraftStage(BaseModel):
    # Client-side temporary id, only used to wire up dependencies
    id: str
    name: str = Field(min_length=1, max_length=255)
    order_index: int = 0


class DraftDependency(BaseModel):
    stage_id: str
    depends_on_stage_id: str


class PositionStages(BaseModel):
    stages: list[DraftStage] = []
    dependencies: list[DraftDependency] = []


class ProjectFromInvoiceRequest(BaseModel):
    deal_id: UUID
    invoice_id: UUID
    selected_positions: list[int] | None = None
    edited_positions: list[InvoicePosition] | None = None
    # Keyed by the position's index in the invoice (or in edited_positions)
    position_stages: dict[int, PositionStages] | None = None
