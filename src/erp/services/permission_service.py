"""Role-based permission lookups."""

from uuid import UUID

from src.erp.models import PermissionAction, PermissionModule
from src.erp.repositories import RolePermissionRepository, RoleRepository, UserRepository
from src.erp.schemas.auth import ModulePermissions, UserPermissions

_ACTION_FLAGS = {
    PermissionAction.VIEW: "can_view",
    PermissionAction.CREATE: "can_create",
    PermissionAction.EDIT: "can_edit",
    PermissionAction.DELETE: "can_delete",
}


class PermissionService:
    """Resolves user -> role -> per-module flags.

    An inactive user, a user without a role, or a user whose role row is
    missing has no permissions at all.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        role_repo: RoleRepository,
        role_permission_repo: RolePermissionRepository,
    ):
        self.user_repo = user_repo
        self.role_repo = role_repo
        self.role_permission_repo = role_permission_repo

    async def get_user_permissions(self, user_id: UUID) -> UserPermissions | None:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return None

        result = UserPermissions(user_id=user.id, role_id=user.role_id, is_active=user.is_active)
        if user.role_id is None:
            return result

        role = await self.role_repo.get_by_id(user.role_id)
        if role is None:
            return result

        result.role_name = role.name
        for row in await self.role_permission_repo.list_by_role(role.id):
            result.permissions[row.module] = ModulePermissions(
                can_view=row.can_view,
                can_create=row.can_create,
                can_edit=row.can_edit,
                can_delete=row.can_delete,
                view_all=row.view_all,
            )
        return result

    async def get_module_permissions(
        self, user_id: UUID, module: PermissionModule | str
    ) -> ModulePermissions:
        """Flags for one module; all False when the user has none."""
        permissions = await self.get_user_permissions(user_id)
        if permissions is None or not permissions.is_active:
            return ModulePermissions()
        key = module.value if isinstance(module, PermissionModule) else module
        return permissions.permissions.get(key, ModulePermissions())

    async def has_permission(
        self,
        user_id: UUID,
        module: PermissionModule | str,
        action: PermissionAction,
    ) -> bool:
        flags = await self.get_module_permissions(user_id, module)
        return bool(getattr(flags, _ACTION_FLAGS[action]))

    async def can_view_all(self, user_id: UUID, module: PermissionModule | str) -> bool:
        flags = await self.get_module_permissions(user_id, module)
        return flags.view_all
