"""Repositories for users, roles and role permissions."""

from uuid import UUID

from sqlmodel import select

from src.erp.models import Role, RolePermission, User
from src.erp.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_username(self, username: str) -> User | None:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()


class RoleRepository(BaseRepository[Role]):
    model = Role

    async def get_by_name(self, name: str) -> Role | None:
        result = await self.session.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()


class RolePermissionRepository(BaseRepository[RolePermission]):
    model = RolePermission

    async def list_by_role(self, role_id: UUID) -> list[RolePermission]:
        return await self.list_where(RolePermission.role_id == role_id)
