"""Authentication endpoints."""

from fastapi import APIRouter, HTTPException, status
from starlette.requests import Request

from src.erp.api.dependencies import AuthServiceDep, CurrentUser, PermissionServiceDep
from src.erp.core.rate_limit import limiter, login_rate_limit
from src.erp.schemas.auth import CurrentUserRead, LoginRequest, LoginResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        200: {
            "description": "Successful authentication",
            "content": {
                "application/json": {
                    "example": {
                        "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                        "token_type": "bearer",
                    }
                }
            },
        },
        401: {"description": "Invalid credentials"},
        429: {"description": "Too many login attempts"},
    },
)
@limiter.limit(login_rate_limit)
async def login(
    request: Request, login_data: LoginRequest, service: AuthServiceDep
) -> LoginResponse:
    """Authenticate with username and password and return an access token."""
    result = await service.authenticate(login_data.username, login_data.password)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    return result


@router.get(
    "/me",
    response_model=CurrentUserRead,
    summary="Current user",
    description="Return the authenticated user with their role and module permissions.",
    responses={
        200: {"description": "Current user"},
        401: {"description": "Not authenticated"},
    },
)
async def me(user: CurrentUser, permissions: PermissionServiceDep) -> CurrentUserRead:
    resolved = await permissions.get_user_permissions(user.id)
    result = CurrentUserRead.model_validate(user)
    if resolved is not None:
        result.role_name = resolved.role_name
        result.permissions = resolved.permissions
    return result
