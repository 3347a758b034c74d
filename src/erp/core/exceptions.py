"""Domain errors and the exception handlers that render them with request_id."""

from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.erp.core.logging import get_logger

logger = get_logger(__name__)


class ERPError(Exception):
    """Base class for errors raised by the service layer."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def extra(self) -> dict[str, Any]:
        return {}


class ValidationError(ERPError):
    """Malformed or inconsistent input."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ERPError):
    """A referenced stage, item, project or other record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: object):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(ERPError):
    status_code = status.HTTP_409_CONFLICT


class DependencyBlockedError(ERPError):
    """A stage cannot leave pending while prerequisites are incomplete."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, blocking_stages: list[str]):
        self.blocking_stages = blocking_stages
        super().__init__(
            f"Cannot start this stage. Complete the required stages first: "
            f"{join_names(blocking_stages)}"
        )

    def extra(self) -> dict[str, Any]:
        return {"blocking_stages": self.blocking_stages}


def join_names(names: list[str]) -> str:
    """Join names for display: "A", "A and B", "A, B and C"."""
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    return f"{', '.join(names[:-1])} and {names[-1]}"


def _error_body(detail: Any, **extra: Any) -> dict[str, Any]:
    return {"detail": detail, "request_id": correlation_id.get(), **extra}


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(ERPError)
    async def erp_exception_handler(request: Request, exc: ERPError) -> JSONResponse:
        if isinstance(exc, DependencyBlockedError):
            logger.warning(
                "Stage transition blocked",
                path=request.url.path,
                blocking_stages=exc.blocking_stages,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.detail, **exc.extra()),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(jsonable_encoder(exc.errors())),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
