"""Authentication service."""
import logging

from carrental.domain.exceptions import InvalidCredentialsException
from carrental.domain.models import RoleName
from carrental.domain.schemas import (
    AdminRegisterRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserInfo,
)
from carrental.infrastructure.jwt_handler import JWTHandler
from carrental.infrastructure.repositories import LookupRepository, UserRepository
from carrental.services.user_service import UserService, normalize_email, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """Service for registration and login."""

    def __init__(
        self,
        user_repository: UserRepository,
        role_repository: LookupRepository,
        user_service: UserService,
        jwt_handler: JWTHandler,
    ):
        self.user_repository = user_repository
        self.role_repository = role_repository
        self.user_service = user_service
        self.jwt_handler = jwt_handler

    async def register(self, request: RegisterRequest) -> UserInfo:
        """Public self-registration. The role is always Customer."""
        logger.info(f"Registration for email: {request.email}")
        return await self.user_service.create(request, role_name=RoleName.CUSTOMER.value)

    async def register_with_role(self, request: AdminRegisterRequest) -> UserInfo:
        """Registration by an administrator, honoring the requested role."""
        logger.info(f"Admin registration for email: {request.email} role_id={request.role_id}")
        return await self.user_service.create(request, role_id=request.role_id)

    async def login(self, request: LoginRequest) -> LoginResponse:
        """Authenticate user and return an access token."""
        email = normalize_email(request.email)
        logger.info(f"Login attempt for email: {email}")

        user = await self.user_repository.get_by_email(email)
        if not user:
            logger.warning(f"User not found: {email}")
            raise InvalidCredentialsException()

        if not verify_password(request.password, user.password_hash):
            logger.warning(f"Invalid password for user: {user.id}")
            raise InvalidCredentialsException()

        if not user.is_active:
            logger.warning(f"User not active: {user.id}")
            raise InvalidCredentialsException()

        role = await self.role_repository.get_by_id(user.role_id)
        role_name = role.name if role else RoleName.CUSTOMER.value

        access_token = self.jwt_handler.create_access_token(user.email, user.id, role_name)

        logger.info(f"User logged in successfully: {user.id}")

        return LoginResponse(
            access_token=access_token,
            user_id=user.id,
            role=role_name,
            expires_in_minutes=self.jwt_handler.expires_in_minutes,
        )
