"""Bearer authentication and the per-route permission table."""
import logging
from typing import Dict, FrozenSet, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from carrental.domain.exceptions import InvalidTokenException, UnauthorizedException
from carrental.domain.models import RoleName
from carrental.infrastructure.jwt_handler import JWTHandler
from carrental.infrastructure.repositories import LookupRepository, UserRepository

from .dependencies import get_jwt_handler, get_role_repository, get_user_repository

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

ADMIN = frozenset({RoleName.ADMIN.value})
STAFF = frozenset({RoleName.ADMIN.value, RoleName.RENTAL_AGENT.value})
CUSTOMER = frozenset({RoleName.CUSTOMER.value})
ANY_ROLE = frozenset(role.value for role in RoleName)
# Any valid token, whatever its role claim.
AUTHENTICATED: Optional[FrozenSet[str]] = None

# Routes missing from this table are anonymous.
ROUTE_PERMISSIONS: Dict[str, Optional[FrozenSet[str]]] = {
    "auth.register_by_admin": ADMIN,
    "auth.whoami": AUTHENTICATED,
    "users.me": AUTHENTICATED,
    "users.create": ADMIN,
    "users.list": ADMIN,
    "users.get": ADMIN,
    "users.update": ADMIN,
    "users.delete": ADMIN,
    "users.change_role": ADMIN,
    "users.set_status": ADMIN,
    "locations.create": ADMIN,
    "locations.update": ADMIN,
    "locations.delete": ADMIN,
    "cars.create": STAFF,
    "cars.update": STAFF,
    "cars.set_status": STAFF,
    "cars.delete": STAFF,
    "bookings.quote": AUTHENTICATED,
    "bookings.create": CUSTOMER,
    "bookings.mine": CUSTOMER,
    "bookings.list": STAFF,
    "bookings.get": STAFF,
    "bookings.cancel": CUSTOMER,
    "bookings.update_status": STAFF,
    "bookings.delete": ADMIN,
    "payments.pay": ANY_ROLE,
    "payments.mine": CUSTOMER,
    "payments.list": STAFF,
    "payments.get": STAFF,
    "refunds.request": CUSTOMER,
    "refunds.mine": CUSTOMER,
    "refunds.list": STAFF,
    "refunds.get": STAFF,
    "refunds.approve": STAFF,
    "refunds.reject": STAFF,
    "reviews.create": CUSTOMER,
    "reviews.mine": CUSTOMER,
    "reviews.get": STAFF,
    "reviews.update": CUSTOMER,
    "reviews.delete": ANY_ROLE,
    "maintenance.create": ANY_ROLE,
    "maintenance.mine": ANY_ROLE,
    "maintenance.open": STAFF,
    "maintenance.by_car": STAFF,
    "maintenance.get": STAFF,
    "maintenance.resolve": STAFF,
    "issues.create": CUSTOMER,
    "issues.mine": CUSTOMER,
    "issues.list": STAFF,
    "issues.by_booking": STAFF,
    "issues.update_status": STAFF,
}


class Principal(BaseModel):
    """Caller identity: a validated access token matched to a live account."""

    user_id: int
    email: str
    role: str


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_handler: JWTHandler = Depends(get_jwt_handler),
    user_repository: UserRepository = Depends(get_user_repository),
    role_repository: LookupRepository = Depends(get_role_repository),
) -> Principal:
    """Validate the bearer token and return the caller.

    Email and role come from the stored account, so deactivation and role
    changes apply to tokens that are already issued.
    """
    if credentials is None or not credentials.credentials:
        raise InvalidTokenException("Not authenticated")

    payload = jwt_handler.validate_access_token(credentials.credentials)
    user = await user_repository.get_by_id(payload["uid"])
    if user is None or not user.is_active:
        logger.warning(f"Token presented for missing or inactive user {payload['uid']}")
        raise InvalidTokenException("Account is not active")

    role = await role_repository.get_by_id(user.role_id)
    return Principal(user_id=user.id, email=user.email, role=role.name)


def guard(route: str):
    """Dependency that admits callers whose role the table allows for the route."""
    allowed = ROUTE_PERMISSIONS[route]
    allowed_lower = None if allowed is None else {role.lower() for role in allowed}

    async def check(principal: Principal = Depends(get_current_principal)) -> Principal:
        if allowed_lower is not None and principal.role.lower() not in allowed_lower:
            logger.warning(f"Role {principal.role} denied on {route} for user {principal.user_id}")
            raise UnauthorizedException()
        return principal

    return check
