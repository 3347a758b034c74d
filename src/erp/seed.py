"""Seed the system admin role and the admin user.

Usage:
    python -m src.erp.seed [--migrate]

Safe to run repeatedly: existing rows are updated, never duplicated.
"""

import argparse
import asyncio

from sqlalchemy.ext.asyncio import AsyncSession

from src.erp.core.config import get_settings
from src.erp.core.db import dispose_engine, get_session, run_migrations_async
from src.erp.core.logging import get_logger, setup_logging
from src.erp.core.security import hash_password
from src.erp.models import PermissionModule, Role, RolePermission, User
from src.erp.repositories import RolePermissionRepository, RoleRepository, UserRepository

logger = get_logger(__name__)

ADMIN_ROLE_NAME = "admin"


async def seed_admin_role(session: AsyncSession) -> Role:
    """Create the system admin role with every permission on every module."""
    role_repo = RoleRepository(session)
    permission_repo = RolePermissionRepository(session)

    role = await role_repo.get_by_name(ADMIN_ROLE_NAME)
    if role is None:
        role = Role(name=ADMIN_ROLE_NAME, description="Full access", is_system=True)
        role_repo.add(role)
        await session.flush()
        logger.info("Admin role created", role_id=str(role.id))

    existing = {p.module: p for p in await permission_repo.list_by_role(role.id)}
    for module in PermissionModule:
        permission = existing.get(module.value)
        if permission is None:
            permission = RolePermission(role_id=role.id, module=module.value)
            permission_repo.add(permission)
        permission.can_view = True
        permission.can_create = True
        permission.can_edit = True
        permission.can_delete = True
        permission.view_all = True

    return role


async def seed_admin_user(session: AsyncSession, username: str, password: str) -> User:
    """Create the admin user, or re-attach an existing one to the admin role.

    An existing user's password is left unchanged.
    """
    role = await seed_admin_role(session)
    user_repo = UserRepository(session)

    user = await user_repo.get_by_username(username)
    if user is None:
        user = User(
            username=username,
            hashed_password=hash_password(password),
            full_name="Administrator",
            role_id=role.id,
        )
        user_repo.add(user)
        logger.info("Admin user created", username=username)
    else:
        user.role_id = role.id
        user.is_active = True
        logger.info("Admin user already exists", username=username)

    await session.commit()
    return user


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the admin role and user")
    parser.add_argument(
        "--migrate",
        action="store_true",
        help="Apply database migrations before seeding",
    )
    return parser.parse_args()


async def main() -> None:
    args = parse_args()
    settings = get_settings()
    setup_logging(settings.debug)

    if not settings.seed_admin_password:
        raise SystemExit("SEED_ADMIN_PASSWORD must be set to seed the admin user")

    if args.migrate:
        await run_migrations_async()

    try:
        async with get_session() as session:
            await seed_admin_user(
                session, settings.seed_admin_username, settings.seed_admin_password
            )
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
