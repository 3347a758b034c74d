"""Root test fixtures shared across all test types.

Environment defaults must be in place before any application import: the
settings, the rate limiter and the password hasher are built at import time.
Database-specific fixtures are in tests/integration/conftest.py.
"""

import os

# Set APP_ENV to testing before any app imports to disable rate limiting
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./erp-test.db")
os.environ.setdefault("DATABASE_SSL_MODE", "disable")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-at-least-32-characters")
# Cheap argon2 parameters keep user fixtures fast
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")

# ruff: noqa: E402 - Imports must be after env var setup
from src.erp.core.config import get_settings

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()
