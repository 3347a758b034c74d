from uuid import UUID

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=200)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class ModulePermissions(BaseModel):
    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False
    view_all: bool = False


class UserPermissions(BaseModel):
    """Effective permissions of a user, keyed by module name."""

    user_id: UUID
    role_id: UUID | None = None
    role_name: str | None = None
    is_active: bool
    permissions: dict[str, ModulePermissions] = {}


class UserRead(BaseModel):
    id: UUID
    username: str
    email: str | None
    full_name: str | None
    phone: str | None
    role_id: UUID | None
    is_active: bool

    model_config = {"from_attributes": True}


class CurrentUserRead(UserRead):
    role_name: str | None = None
    permissions: dict[str, ModulePermissions] = {}
