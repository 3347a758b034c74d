"""Test helper functions for common data creation patterns."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.erp.core.security import create_access_token
from src.erp.models import (
    Deal,
    DealDocument,
    PermissionModule,
    Project,
    ProjectItem,
    ProjectStage,
    Role,
    User,
)
from tests.factories import (
    DealDocumentFactory,
    DealFactory,
    ProjectFactory,
    ProjectItemFactory,
    ProjectStageFactory,
    RoleFactory,
    RolePermissionFactory,
    UserFactory,
)


def auth_headers(user: User, role: str | None = None) -> dict[str, str]:
    """Bearer headers for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id, role=role)}"}


async def create_user_with_permissions(
    session: AsyncSession,
    permissions: dict[PermissionModule, dict[str, bool]],
    **user_kwargs,
) -> tuple[User, Role]:
    """Create a role with the given per-module flags and a user holding it.

    Args:
        session: Database session
        permissions: Module to flag overrides, e.g. ``{PROJECTS: {"can_view": True}}``
        **user_kwargs: Additional args passed to UserFactory

    Returns:
        Tuple of (user, role)
    """
    role = RoleFactory.build()
    session.add(role)
    await session.flush()

    for module, flags in permissions.items():
        session.add(RolePermissionFactory.build(role_id=role.id, module=module.value, **flags))

    user = UserFactory.build(role_id=role.id, **user_kwargs)
    session.add(user)
    await session.commit()
    return user, role


async def create_project_with_stages(
    session: AsyncSession,
    stage_names: list[str],
    **project_kwargs,
) -> tuple[Project, ProjectItem, list[ProjectStage]]:
    """Create a project with one item whose stages are ``stage_names`` in order."""
    project = ProjectFactory.build(**project_kwargs)
    session.add(project)
    await session.flush()

    item = ProjectItemFactory.build(project_id=project.id)
    session.add(item)
    await session.flush()

    stages = [
        ProjectStageFactory.build(project_id=project.id, item_id=item.id, name=name, order=i)
        for i, name in enumerate(stage_names)
    ]
    session.add_all(stages)
    await session.commit()
    return project, item, stages


async def create_deal_with_invoice(
    session: AsyncSession,
    positions: list[dict[str, Any]],
    **document_kwargs,
) -> tuple[Deal, DealDocument]:
    """Create a deal and an invoice document carrying ``positions``."""
    deal = DealFactory.build()
    session.add(deal)
    await session.flush()

    document = DealDocumentFactory.build(
        deal_id=deal.id, data={"positions": positions}, **document_kwargs
    )
    session.add(document)
    await session.commit()
    return deal, document
