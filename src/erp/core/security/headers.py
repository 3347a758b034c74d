"""Security headers middleware (Helmet-style)."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

# CSP for Swagger UI: requires inline scripts and CDN assets
DOCS_CSP = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' cdn.jsdelivr.net; "
    "img-src 'self' data: cdn.jsdelivr.net; "
    "frame-ancestors 'none'"
)

DEFAULT_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add a fixed set of security headers to every response.

    ``overrides`` replaces or removes individual headers: an empty string
    drops the header entirely.
    """

    def __init__(
        self,
        app: ASGIApp,
        content_security_policy: str | None = None,
        overrides: dict[str, str] | None = None,
    ):
        super().__init__(app)
        headers = dict(DEFAULT_HEADERS)
        headers["Content-Security-Policy"] = content_security_policy or DOCS_CSP
        headers.update(overrides or {})
        self.headers = {name: value for name, value in headers.items() if value}

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(self.headers)
        return response
