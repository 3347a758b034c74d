"""Project, item, stage and stage dependency tables."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.erp.models.base import utc_now
from src.erp.models.enums import ProjectStatus, StageStatus


class Project(SQLModel, table=True):
    """Aggregate root for a production order.

    ``progress`` and ``duration_days`` are derived from the project's stages
    and are only written by the progress aggregator.
    """

    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255, index=True)
    client_name: str = Field(max_length=255)
    deal_id: UUID | None = Field(default=None, foreign_key="deals.id", index=True)
    invoice_id: UUID | None = Field(default=None, foreign_key="deal_documents.id")
    manager_id: UUID | None = Field(default=None, foreign_key="users.id", index=True)
    status: str = Field(default=ProjectStatus.PENDING.value, max_length=20, index=True)
    progress: int = Field(default=0)
    duration_days: int = Field(default=0)
    started_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)


class ProjectItem(SQLModel, table=True):
    """A furniture piece within a project."""

    __tablename__ = "project_items"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    name: str = Field(max_length=255)
    article: str | None = Field(default=None, max_length=100)
    quantity: int = Field(default=1)
    price: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    source_document_id: UUID | None = Field(default=None)
    image_url: str | None = Field(default=None, max_length=500)
    order: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ProjectStage(SQLModel, table=True):
    """A unit of production work, normally owned by a project item."""

    __tablename__ = "project_stages"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    item_id: UUID | None = Field(default=None, foreign_key="project_items.id", index=True)
    name: str = Field(max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    status: str = Field(default=StageStatus.PENDING.value, max_length=20)
    assignee_id: UUID | None = Field(default=None, foreign_key="users.id", index=True)
    duration_days: int | None = Field(default=None)
    planned_start_date: datetime | None = Field(default=None)
    planned_end_date: datetime | None = Field(default=None)
    actual_start_date: datetime | None = Field(default=None)
    actual_end_date: datetime | None = Field(default=None)
    cost: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    order: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class StageDependency(SQLModel, table=True):
    """Edge: ``stage_id`` cannot leave pending until ``depends_on_stage_id`` is completed."""

    __tablename__ = "stage_dependencies"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    stage_id: UUID = Field(foreign_key="project_stages.id", index=True)
    depends_on_stage_id: UUID = Field(foreign_key="project_stages.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)
