"""Per-endpoint rate limiting with slowapi.

Only the login endpoint is limited. Storage is in-memory (per process), which
is enough to slow down password guessing against a single deployment.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.erp.core.config import get_settings
from src.erp.core.logging import get_logger

logger = get_logger(__name__)


def get_rate_limit_key(request: Request) -> str:
    """Key requests by client IP only; never by user-supplied headers."""
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    """Create the limiter. Disabled in the testing environment."""
    settings = get_settings()

    if settings.app_env == "testing":
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)

    return Limiter(key_func=get_rate_limit_key)


def login_rate_limit() -> str:
    """Limit string for the login endpoint, read lazily from settings."""
    return get_settings().login_rate_limit


limiter = create_limiter()
