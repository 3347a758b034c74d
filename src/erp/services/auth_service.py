"""Authentication service - username/password login."""

from src.erp.core.logging import get_logger
from src.erp.core.security import DUMMY_PASSWORD_HASH, create_access_token, verify_password
from src.erp.repositories import RoleRepository, UserRepository
from src.erp.schemas.auth import LoginResponse

logger = get_logger(__name__)


class AuthService:
    def __init__(self, user_repo: UserRepository, role_repo: RoleRepository):
        self.user_repo = user_repo
        self.role_repo = role_repo

    async def authenticate(self, username: str, password: str) -> LoginResponse | None:
        """Return an access token, or None for bad credentials or an inactive user."""
        user = await self.user_repo.get_by_username(username)

        # Always verify a hash so response time does not reveal unknown usernames
        password_hash = user.hashed_password if user else DUMMY_PASSWORD_HASH
        password_valid = verify_password(password, password_hash)

        if user is None or not password_valid:
            logger.info("Login failed", username=username)
            return None
        if not user.is_active:
            logger.info("Login rejected for inactive user", user_id=str(user.id))
            return None

        role_name = None
        if user.role_id is not None:
            role = await self.role_repo.get_by_id(user.role_id)
            role_name = role.name if role else None

        logger.info("Login succeeded", user_id=str(user.id))
        return LoginResponse(access_token=create_access_token(user.id, role=role_name))
