"""User, role and permission factories for test data generation."""

from polyfactory import Use

from src.erp.core.security import hash_password
from src.erp.models import Role, RolePermission, User
from tests.factories.base import BaseFactory, generate_uuid, utc_now

# Default test password - stored for convenience in tests
DEFAULT_TEST_PASSWORD = "testpassword123"


class RoleFactory(BaseFactory):
    """Factory for generating Role test data."""

    __model__ = Role

    id = Use(generate_uuid)
    name = Use(lambda: f"role_{generate_uuid().hex[-8:]}")
    description = None
    is_system = False
    created_at = Use(utc_now)
    updated_at = Use(utc_now)


class RolePermissionFactory(BaseFactory):
    """Factory for generating RolePermission test data. All flags default to False."""

    __model__ = RolePermission

    id = Use(generate_uuid)
    role_id = None
    module = "projects"
    can_view = False
    can_create = False
    can_edit = False
    can_delete = False
    view_all = False
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def full(cls, **kwargs):
        """Every action plus view_all."""
        return cls.build(
            can_view=True,
            can_create=True,
            can_edit=True,
            can_delete=True,
            view_all=True,
            **kwargs,
        )


class UserFactory(BaseFactory):
    """Factory for generating User test data."""

    __model__ = User

    id = Use(generate_uuid)
    username = Use(lambda: f"user_{generate_uuid().hex[-8:]}")
    hashed_password = Use(lambda: hash_password(DEFAULT_TEST_PASSWORD))
    email = None
    full_name = "Test User"
    phone = None
    role_id = None
    is_active = True
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def inactive(cls, **kwargs):
        """Create an inactive user."""
        return cls.build(is_active=False, **kwargs)
