"""Deals and their documents.

Only read here: projects are generated from a deal's invoice.
"""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from src.erp.models.base import utc_now


class Deal(SQLModel, table=True):
    __tablename__ = "deals"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    client_name: str = Field(max_length=255)
    manager_id: UUID | None = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utc_now)


class DealDocument(SQLModel, table=True):
    """Quote, invoice or contract. ``data["positions"]`` holds the line items."""

    __tablename__ = "deal_documents"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    deal_id: UUID = Field(foreign_key="deals.id", index=True)
    document_type: str = Field(max_length=20)
    name: str = Field(max_length=255)
    data: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utc_now)
