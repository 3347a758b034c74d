"""Reusable production process templates."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.erp.models.base import utc_now


class ProcessTemplate(SQLModel, table=True):
    __tablename__ = "process_templates"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255, index=True)
    description: str | None = Field(default=None, max_length=2000)
    created_by: UUID | None = Field(default=None, foreign_key="users.id")
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class TemplateStage(SQLModel, table=True):
    __tablename__ = "template_stages"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    template_id: UUID = Field(foreign_key="process_templates.id", index=True)
    name: str = Field(max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    duration_days: int | None = Field(default=None)
    assignee_id: UUID | None = Field(default=None, foreign_key="users.id")
    cost: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    order: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class TemplateDependency(SQLModel, table=True):
    __tablename__ = "template_dependencies"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    template_stage_id: UUID = Field(foreign_key="template_stages.id", index=True)
    depends_on_template_stage_id: UUID = Field(foreign_key="template_stages.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)
