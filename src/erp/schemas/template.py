"""Process template schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class ProcessTemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Template name cannot be empty or whitespace only")
        return v


class ProcessTemplateUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    is_active: bool | None = None


class ProcessTemplateRead(BaseModel):
    id: UUID
    name: str
    description: str | None
    created_by: UUID | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TemplateStageCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    duration_days: int | None = Field(default=None, ge=0)
    assignee_id: UUID | None = None
    cost: Decimal | None = Field(default=None, ge=0)
    order: int | None = Field(default=None, ge=0)


class TemplateStageUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    duration_days: int | None = Field(default=None, ge=0)
    assignee_id: UUID | None = None
    cost: Decimal | None = Field(default=None, ge=0)
    order: int | None = Field(default=None, ge=0)


class TemplateStageRead(BaseModel):
    id: UUID
    template_id: UUID
    name: str
    description: str | None
    duration_days: int | None
    assignee_id: UUID | None
    cost: Decimal | None
    order: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TemplateDependencyCreate(BaseModel):
    depends_on_template_stage_id: UUID


class TemplateDependencyRead(BaseModel):
    id: UUID
    template_stage_id: UUID
    depends_on_template_stage_id: UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class ProcessTemplateDetailRead(ProcessTemplateRead):
    stages: list[TemplateStageRead] = []
    dependencies: list[TemplateDependencyRead] = []


class ApplyTemplateRequest(BaseModel):
    item_id: UUID


class ApplyTemplateResult(BaseModel):
    item_id: UUID
    stages_created: int
    dependencies_created: int
