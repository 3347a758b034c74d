"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite database file, created from the model metadata.
Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlmodel import SQLModel

import src.erp.models  # noqa: F401
from src.erp.core import db
from src.erp.core.config import get_settings
from src.erp.main import create_app
from src.erp.models import PermissionModule, User
from src.erp.seed import seed_admin_role
from tests.factories import UserFactory
from tests.helpers import auth_headers, create_user_with_permissions


@pytest.fixture(scope="function")
async def engine(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[AsyncEngine]:
    """Point the application at a fresh database and create all tables."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    get_settings.cache_clear()
    await db.dispose_engine()

    test_engine = db.get_engine()
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    await db.dispose_engine()
    get_settings.cache_clear()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    Tests must commit explicitly; the application reads through its own
    sessions on the same database.
    """
    async with db.get_session(engine) as session:
        yield session


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """A user holding the seeded admin role (every permission, view_all)."""
    role = await seed_admin_role(db_session)
    await db_session.flush()
    user = UserFactory.build(role_id=role.id, full_name="Admin")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return auth_headers(admin_user, role="admin")


@pytest.fixture
async def viewer_user(db_session: AsyncSession) -> User:
    """A user who may only view projects and the warehouse, and only their own projects."""
    user, _ = await create_user_with_permissions(
        db_session,
        {
            PermissionModule.PROJECTS: {"can_view": True},
            PermissionModule.WAREHOUSE: {"can_view": True},
        },
    )
    return user


@pytest.fixture
def viewer_headers(viewer_user: User) -> dict[str, str]:
    return auth_headers(viewer_user)


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """Create test client bound to the per-test database."""
    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
