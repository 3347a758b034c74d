"""Permission resolution and admin seeding."""

from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.erp.models import PermissionAction, PermissionModule, Role, RolePermission
from src.erp.repositories import RolePermissionRepository, RoleRepository, UserRepository
from src.erp.seed import ADMIN_ROLE_NAME, seed_admin_user
from src.erp.services import PermissionService
from tests.factories import UserFactory
from tests.helpers import create_user_with_permissions

pytestmark = pytest.mark.integration


@pytest.fixture
def permission_service(db_session: AsyncSession) -> PermissionService:
    return PermissionService(
        UserRepository(db_session),
        RoleRepository(db_session),
        RolePermissionRepository(db_session),
    )


class TestPermissionService:
    async def test_flags_per_module(
        self, db_session: AsyncSession, permission_service: PermissionService
    ):
        user, role = await create_user_with_permissions(
            db_session,
            {PermissionModule.WAREHOUSE: {"can_view": True, "can_edit": True}},
        )

        assert await permission_service.has_permission(
            user.id, PermissionModule.WAREHOUSE, PermissionAction.EDIT
        )
        assert not await permission_service.has_permission(
            user.id, PermissionModule.WAREHOUSE, PermissionAction.DELETE
        )
        assert not await permission_service.has_permission(
            user.id, PermissionModule.PROJECTS, PermissionAction.VIEW
        )

        permissions = await permission_service.get_user_permissions(user.id)
        assert permissions is not None
        assert permissions.role_name == role.name
        assert set(permissions.permissions) == {"warehouse"}

    async def test_user_without_role(
        self, db_session: AsyncSession, permission_service: PermissionService
    ):
        user = UserFactory.build()
        db_session.add(user)
        await db_session.commit()

        permissions = await permission_service.get_user_permissions(user.id)
        assert permissions is not None
        assert permissions.role_name is None
        assert permissions.permissions == {}
        assert not await permission_service.can_view_all(user.id, PermissionModule.PROJECTS)

    async def test_inactive_user_has_nothing(
        self, db_session: AsyncSession, permission_service: PermissionService
    ):
        user, _ = await create_user_with_permissions(
            db_session,
            {PermissionModule.PROJECTS: {"can_view": True, "view_all": True}},
            is_active=False,
        )

        flags = await permission_service.get_module_permissions(user.id, "projects")
        assert flags.can_view is False
        assert flags.view_all is False

    async def test_unknown_user(self, permission_service: PermissionService):
        assert await permission_service.get_user_permissions(uuid4()) is None
        assert not await permission_service.has_permission(
            uuid4(), PermissionModule.PROJECTS, PermissionAction.VIEW
        )


class TestSeed:
    async def test_seed_is_idempotent(
        self, db_session: AsyncSession, permission_service: PermissionService
    ):
        first = await seed_admin_user(db_session, "admin", "admin-password-1")
        second = await seed_admin_user(db_session, "admin", "another-password")

        assert first.id == second.id

        roles = await db_session.scalar(
            select(func.count()).select_from(Role).where(Role.name == ADMIN_ROLE_NAME)
        )
        assert roles == 1
        rows = await db_session.scalar(select(func.count()).select_from(RolePermission))
        assert rows == len(PermissionModule)

        for module in PermissionModule:
            flags = await permission_service.get_module_permissions(first.id, module)
            assert flags.can_delete and flags.view_all
