"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, ProjectFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.project import ProjectFactory, ProjectItemFactory, ProjectStageFactory
from tests.factories.user import (
    DEFAULT_TEST_PASSWORD,
    RoleFactory,
    RolePermissionFactory,
    UserFactory,
)
from tests.factories.warehouse import DealDocumentFactory, DealFactory, WarehouseItemFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # Users
    "DEFAULT_TEST_PASSWORD",
    "RoleFactory",
    "RolePermissionFactory",
    "UserFactory",
    # Projects
    "ProjectFactory",
    "ProjectItemFactory",
    "ProjectStageFactory",
    # Warehouse and deals
    "DealDocumentFactory",
    "DealFactory",
    "WarehouseItemFactory",
]
