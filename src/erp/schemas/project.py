"""Project, item and stage schemas for API request/response."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.erp.models.base import as_naive_utc
from src.erp.models.enums import ProjectStatus, StageStatus


def _strip_required(v: str, label: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{label} cannot be empty or whitespace only")
    return v


def _strip_optional(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            return None
    return v


# --- Projects ---


class ProjectCreate(BaseModel):
    """Schema for creating a project. Progress is always derived."""

    name: str = Field(min_length=1, max_length=255)
    client_name: str = Field(min_length=1, max_length=255)
    deal_id: UUID | None = None
    manager_id: UUID | None = None
    status: ProjectStatus = ProjectStatus.PENDING
    started_at: datetime | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_required(v, "Project name")

    @field_validator("client_name")
    @classmethod
    def validate_client_name(cls, v: str) -> str:
        return _strip_required(v, "Client name")

    @field_validator("started_at")
    @classmethod
    def normalize_started_at(cls, v: datetime | None) -> datetime | None:
        return as_naive_utc(v)


class ProjectUpdate(BaseModel):
    """Schema for updating a project."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    client_name: str | None = Field(default=None, min_length=1, max_length=255)
    manager_id: UUID | None = None
    status: ProjectStatus | None = None
    started_at: datetime | None = None

    @field_validator("name", "client_name")
    @classmethod
    def validate_text(cls, v: str | None) -> str | None:
        if v is not None:
            return _strip_required(v, "Value")
        return v

    @field_validator("started_at")
    @classmethod
    def normalize_started_at(cls, v: datetime | None) -> datetime | None:
        return as_naive_utc(v)


class ProjectRead(BaseModel):
    id: UUID
    name: str
    client_name: str
    deal_id: UUID | None
    invoice_id: UUID | None
    manager_id: UUID | None
    status: str
    progress: int
    duration_days: int
    started_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# --- Items ---


class ProjectItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    article: str | None = Field(default=None, max_length=100)
    quantity: int = Field(default=1, ge=1)
    price: Decimal | None = Field(default=None, ge=0)
    image_url: str | None = Field(default=None, max_length=500)
    order: int | None = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_required(v, "Item name")

    @field_validator("article")
    @classmethod
    def validate_article(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class ProjectItemUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    article: str | None = Field(default=None, max_length=100)
    quantity: int | None = Field(default=None, ge=1)
    price: Decimal | None = Field(default=None, ge=0)
    image_url: str | None = Field(default=None, max_length=500)
    order: int | None = Field(default=None, ge=0)


class ProjectItemRead(BaseModel):
    id: UUID
    project_id: UUID
    name: str
    article: str | None
    quantity: int
    price: Decimal | None
    source_document_id: UUID | None
    image_url: str | None
    order: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# --- Stages ---

_STAGE_DATE_FIELDS = (
    "planned_start_date",
    "planned_end_date",
    "actual_start_date",
    "actual_end_date",
)


class StageCreate(BaseModel):
    """Schema for creating a stage.

    When posted to an item route ``item_id`` comes from the path and any value
    here is ignored.
    """

    name: str = Field(min_length=1, max_length=255)
    item_id: UUID | None = None
    description: str | None = Field(default=None, max_length=2000)
    status: StageStatus = StageStatus.PENDING
    assignee_id: UUID | None = None
    duration_days: int | None = Field(default=None, ge=0)
    planned_start_date: datetime | None = None
    planned_end_date: datetime | None = None
    actual_start_date: datetime | None = None
    actual_end_date: datetime | None = None
    cost: Decimal | None = Field(default=None, ge=0)
    order: int | None = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_required(v, "Stage name")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return _strip_optional(v)

    @field_validator(*_STAGE_DATE_FIELDS)
    @classmethod
    def normalize_dates(cls, v: datetime | None) -> datetime | None:
        return as_naive_utc(v)


class StageUpdate(BaseModel):
    """Partial stage update. Setting a non-pending status is gated by prerequisites."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    status: StageStatus | None = None
    assignee_id: UUID | None = None
    duration_days: int | None = Field(default=None, ge=0)
    planned_start_date: datetime | None = None
    planned_end_date: datetime | None = None
    actual_start_date: datetime | None = None
    actual_end_date: datetime | None = None
    cost: Decimal | None = Field(default=None, ge=0)
    order: int | None = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            return _strip_required(v, "Stage name")
        return v

    @field_validator(*_STAGE_DATE_FIELDS)
    @classmethod
    def normalize_dates(cls, v: datetime | None) -> datetime | None:
        return as_naive_utc(v)


class StageRead(BaseModel):
    id: UUID
    project_id: UUID
    item_id: UUID | None
    name: str
    description: str | None
    status: str
    assignee_id: UUID | None
    duration_days: int | None
    planned_start_date: datetime | None
    planned_end_date: datetime | None
    actual_start_date: datetime | None
    actual_end_date: datetime | None
    cost: Decimal | None
    order: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AssignedStageRead(StageRead):
    project_name: str | None = None


class StageReorderRequest(BaseModel):
    stage_ids: list[UUID]


class StageBlockersRead(BaseModel):
    can_start: bool
    blocking_stages: list[StageRead]


class ProjectDetailRead(ProjectRead):
    items: list[ProjectItemRead] = []
    stages: list[StageRead] = []


# --- Dependencies ---


class StageDependencyCreate(BaseModel):
    depends_on_stage_id: UUID


class StageDependencyRead(BaseModel):
    id: UUID
    stage_id: UUID
    depends_on_stage_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}
