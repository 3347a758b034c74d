"""Security utilities - crypto and response headers."""

from src.erp.core.security.crypto import (
    ACCESS_TOKEN_TYPE,
    DUMMY_PASSWORD_HASH,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from src.erp.core.security.headers import SecurityHeadersMiddleware

__all__ = [
    "ACCESS_TOKEN_TYPE",
    "DUMMY_PASSWORD_HASH",
    "SecurityHeadersMiddleware",
    "create_access_token",
    "decode_token",
    "hash_password",
    "verify_password",
]
