"""Tests for security-critical functionality."""

from datetime import timedelta
from uuid import uuid4

import pytest
from pydantic import ValidationError

from src.erp.core.config import Settings
from src.erp.core.security import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)

pytestmark = pytest.mark.unit


class TestPasswordHashing:
    def test_roundtrip(self):
        hashed = hash_password("correct horse battery staple")
        assert hashed != "correct horse battery staple"
        assert verify_password("correct horse battery staple", hashed)

    def test_wrong_password(self):
        hashed = hash_password("secret-one")
        assert not verify_password("secret-two", hashed)

    def test_garbage_hash_is_rejected_not_raised(self):
        assert not verify_password("anything", "not-a-hash")


class TestAccessTokens:
    def test_claims(self):
        user_id = uuid4()
        payload = decode_token(create_access_token(user_id, role="admin"))

        assert payload is not None
        assert payload["sub"] == str(user_id)
        assert payload["type"] == ACCESS_TOKEN_TYPE
        assert payload["role"] == "admin"

    def test_role_is_optional(self):
        payload = decode_token(create_access_token(uuid4()))
        assert payload is not None
        assert "role" not in payload

    def test_expired_token(self):
        token = create_access_token(uuid4(), expires_delta=timedelta(seconds=-1))
        assert decode_token(token) is None

    def test_tampered_token(self):
        header, payload, _ = create_access_token(uuid4()).split(".")
        _, _, other_signature = create_access_token(uuid4()).split(".")
        assert decode_token(f"{header}.{payload}.{other_signature}") is None


class TestSettingsValidation:
    def test_short_jwt_secret_rejected(self):
        with pytest.raises(ValidationError, match="at least 32 characters"):
            Settings(database_url="sqlite+aiosqlite://", jwt_secret_key="short")

    def test_placeholder_jwt_secret_rejected(self):
        with pytest.raises(ValidationError, match="must be changed"):
            Settings(
                database_url="sqlite+aiosqlite://",
                jwt_secret_key="change-this-to-a-secure-random-string",
            )

    def test_cors_wildcard_rejected(self):
        with pytest.raises(ValidationError, match="wildcard"):
            Settings(
                database_url="sqlite+aiosqlite://",
                jwt_secret_key="x" * 32,
                cors_origins=["*"],
            )

    def test_is_sqlite(self):
        settings = Settings(database_url="sqlite+aiosqlite://", jwt_secret_key="x" * 32)
        assert settings.is_sqlite
