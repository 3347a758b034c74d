"""Authentication and permission dependencies.

The authenticated user is resolved from the bearer token on every request
and handed to route handlers explicitly; permission checks re-read the
user's role from the database each time.
"""

from collections.abc import Awaitable, Callable
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.erp.api.dependencies.repositories import UserRepo
from src.erp.api.dependencies.services import PermissionServiceDep
from src.erp.core.logging import bind_user_context
from src.erp.core.security import ACCESS_TOKEN_TYPE, decode_token
from src.erp.models import PermissionAction, PermissionModule, User


async def get_current_user(
    user_repo: UserRepo,
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Validate the bearer token and return the active user it names."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_token(authorization[7:])
    if payload is None or payload.get("type") != ACCESS_TOKEN_TYPE:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        ) from e

    user = await user_repo.get_by_id(user_id)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    bind_user_context(user.id, payload.get("role"))
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def require_permission(
    module: PermissionModule, action: PermissionAction
) -> Callable[..., Awaitable[User]]:
    """Build a dependency that returns the current user if they hold ``action`` on ``module``."""

    async def _check(user: CurrentUser, permissions: PermissionServiceDep) -> User:
        if not await permissions.has_permission(user.id, module, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission denied: {action.value} on {module.value}",
            )
        return user

    return _check


ProjectViewer = Annotated[
    User, Depends(require_permission(PermissionModule.PROJECTS, PermissionAction.VIEW))
]
ProjectCreator = Annotated[
    User, Depends(require_permission(PermissionModule.PROJECTS, PermissionAction.CREATE))
]
ProjectEditor = Annotated[
    User, Depends(require_permission(PermissionModule.PROJECTS, PermissionAction.EDIT))
]
ProjectDeleter = Annotated[
    User, Depends(require_permission(PermissionModule.PROJECTS, PermissionAction.DELETE))
]

WarehouseViewer = Annotated[
    User, Depends(require_permission(PermissionModule.WAREHOUSE, PermissionAction.VIEW))
]
WarehouseCreator = Annotated[
    User, Depends(require_permission(PermissionModule.WAREHOUSE, PermissionAction.CREATE))
]
WarehouseEditor = Annotated[
    User, Depends(require_permission(PermissionModule.WAREHOUSE, PermissionAction.EDIT))
]
WarehouseDeleter = Annotated[
    User, Depends(require_permission(PermissionModule.WAREHOUSE, PermissionAction.DELETE))
]
