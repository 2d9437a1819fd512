"""Registration, login and token introspection."""
import logging

from fastapi import APIRouter, Depends, status
from prometheus_client import Counter, Histogram

from carrental.domain.exceptions import DomainException
from carrental.domain.schemas import (
    AdminRegisterRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserInfo,
    WhoAmIResponse,
)
from carrental.services.auth_service import AuthService

from ..dependencies import get_auth_service
from ..security import Principal, guard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

# Prometheus metrics
login_counter = Counter("auth_login_total", "Total number of login attempts", ["status"])
register_counter = Counter(
    "auth_register_total", "Total number of registrations", ["status"]
)
login_duration = Histogram("auth_login_duration_seconds", "Time spent on login")


@router.post("/register", response_model=UserInfo, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> UserInfo:
    """Public self-registration as a Customer."""
    try:
        user = await service.register(request)
    except DomainException as e:
        register_counter.labels(status=e.code.lower()).inc()
        raise
    register_counter.labels(status="success").inc()
    return user


@router.post(
    "/register-by-admin", response_model=UserInfo, status_code=status.HTTP_201_CREATED
)
async def register_by_admin(
    request: AdminRegisterRequest,
    principal: Principal = Depends(guard("auth.register_by_admin")),
    service: AuthService = Depends(get_auth_service),
) -> UserInfo:
    """Create an account with any of the fixed roles."""
    logger.info(f"Admin {principal.user_id} registering {request.email}")
    return await service.register_with_role(request)


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """Login endpoint."""
    try:
        with login_duration.time():
            response = await service.login(request)
    except DomainException as e:
        login_counter.labels(status=e.code.lower()).inc()
        raise
    login_counter.labels(status="success").inc()
    return response


@router.get("/whoami", response_model=WhoAmIResponse)
async def whoami(principal: Principal = Depends(guard("auth.whoami"))) -> WhoAmIResponse:
    return WhoAmIResponse(user_id=principal.user_id, email=principal.email, role=principal.role)
