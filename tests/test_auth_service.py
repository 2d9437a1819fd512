"""Tests for AuthService."""
import pytest

from carrental.domain.exceptions import (
    BadRequestException,
    InvalidCredentialsException,
    UserAlreadyExistsException,
)
from carrental.domain.models import RoleName
from carrental.domain.schemas import AdminRegisterRequest, LoginRequest, RegisterRequest
from carrental.infrastructure.jwt_handler import JWTHandler
from carrental.infrastructure.repositories_postgres import (
    PostgresBookingRepository,
    PostgresLookupRepository,
    PostgresMaintenanceRequestRepository,
    PostgresUserRepository,
)
from carrental.services.auth_service import AuthService
from carrental.services.user_service import UserService


@pytest.fixture
def jwt_handler() -> JWTHandler:
    """JWT handler fixture."""
    return JWTHandler(secret="test-secret-key")


@pytest.fixture
def user_service(
    user_repository: PostgresUserRepository,
    role_repository: PostgresLookupRepository,
    booking_repository: PostgresBookingRepository,
    maintenance_repository: PostgresMaintenanceRequestRepository,
) -> UserService:
    return UserService(
        user_repository, role_repository, booking_repository, maintenance_repository
    )


@pytest.fixture
def auth_service(
    user_repository: PostgresUserRepository,
    role_repository: PostgresLookupRepository,
    user_service: UserService,
    jwt_handler: JWTHandler,
) -> AuthService:
    """Auth service fixture."""
    return AuthService(
        user_repository=user_repository,
        role_repository=role_repository,
        user_service=user_service,
        jwt_handler=jwt_handler,
    )


@pytest.fixture
def register_request() -> RegisterRequest:
    return RegisterRequest(
        first_name="Test",
        last_name="User",
        email="Test@Example.com",
        phone_number="+1234567890",
        password="testpassword123",
    )


@pytest.mark.asyncio
async def test_register_creates_customer(
    auth_service: AuthService, register_request: RegisterRequest
) -> None:
    """Test public registration always yields a Customer."""
    user = await auth_service.register(register_request)

    assert user.id is not None
    assert user.email == "test@example.com"
    assert user.role_name == RoleName.CUSTOMER.value
    assert user.is_active is True


@pytest.mark.asyncio
async def test_register_duplicate_email_fails(
    auth_service: AuthService, register_request: RegisterRequest
) -> None:
    """Test emails are unique regardless of case."""
    await auth_service.register(register_request)

    duplicate = register_request.model_copy(update={"email": "TEST@example.COM"})
    with pytest.raises(UserAlreadyExistsException):
        await auth_service.register(duplicate)


@pytest.mark.asyncio
async def test_register_with_role(
    auth_service: AuthService, register_request: RegisterRequest, roles: dict
) -> None:
    request = AdminRegisterRequest(
        **register_request.model_dump(), role_id=roles[RoleName.RENTAL_AGENT].id
    )

    user = await auth_service.register_with_role(request)

    assert user.role_name == RoleName.RENTAL_AGENT.value


@pytest.mark.asyncio
async def test_register_with_unknown_role_fails(
    auth_service: AuthService, register_request: RegisterRequest
) -> None:
    request = AdminRegisterRequest(**register_request.model_dump(), role_id=999)

    with pytest.raises(BadRequestException) as exc_info:
        await auth_service.register_with_role(request)

    assert exc_info.value.message == "Invalid role."


@pytest.mark.asyncio
async def test_login_success(
    auth_service: AuthService,
    jwt_handler: JWTHandler,
    register_request: RegisterRequest,
) -> None:
    """Test successful login returns a token with the user's claims."""
    # Arrange
    user = await auth_service.register(register_request)

    # Act
    response = await auth_service.login(
        LoginRequest(email=" test@example.com ", password="testpassword123")
    )

    # Assert
    assert response.user_id == user.id
    assert response.role == RoleName.CUSTOMER.value
    assert response.token_type == "bearer"
    payload = jwt_handler.validate_access_token(response.access_token)
    assert payload["sub"] == "test@example.com"
    assert payload["uid"] == user.id
    assert payload["role"] == RoleName.CUSTOMER.value


@pytest.mark.asyncio
async def test_login_invalid_email(auth_service: AuthService) -> None:
    """Test login with unknown email."""
    with pytest.raises(InvalidCredentialsException):
        await auth_service.login(LoginRequest(email="nobody@example.com", password="whatever"))


@pytest.mark.asyncio
async def test_login_invalid_password(
    auth_service: AuthService, register_request: RegisterRequest
) -> None:
    """Test login with wrong password."""
    await auth_service.register(register_request)

    with pytest.raises(InvalidCredentialsException):
        await auth_service.login(LoginRequest(email="test@example.com", password="wrong-password"))


@pytest.mark.asyncio
async def test_login_inactive_user(
    auth_service: AuthService, user_service: UserService, register_request: RegisterRequest
) -> None:
    """Test deactivated accounts cannot log in."""
    user = await auth_service.register(register_request)
    await user_service.set_active(user.id, False)

    with pytest.raises(InvalidCredentialsException):
        await auth_service.login(LoginRequest(email="test@example.com", password="testpassword123"))


@pytest.mark.asyncio
async def test_login_user_with_non_bcrypt_hash(auth_service: AuthService, customer) -> None:
    """Test a stored value that is not a bcrypt hash is a failed login, not a crash."""
    with pytest.raises(InvalidCredentialsException):
        await auth_service.login(LoginRequest(email=customer.email, password="anything"))
