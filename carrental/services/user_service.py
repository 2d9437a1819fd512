"""User service."""
import logging
from typing import Dict, List, Optional

import bcrypt

from carrental.domain.exceptions import (
    BadRequestException,
    NotFoundException,
    UserAlreadyExistsException,
)
from carrental.domain.models import Lookup, RoleName, User
from carrental.domain.schemas import (
    ChangeRoleRequest,
    RegisterRequest,
    UserInfo,
    UserUpdateRequest,
)
from carrental.infrastructure.repositories import (
    BookingRepository,
    LookupRepository,
    MaintenanceRequestRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Hash password using bcrypt."""
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify password against hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Service for user accounts and roles."""

    def __init__(
        self,
        user_repository: UserRepository,
        role_repository: LookupRepository,
        booking_repository: BookingRepository,
        maintenance_repository: MaintenanceRequestRepository,
    ):
        self.user_repository = user_repository
        self.role_repository = role_repository
        self.booking_repository = booking_repository
        self.maintenance_repository = maintenance_repository

    async def _role_names(self) -> Dict[int, str]:
        return {role.id: role.name for role in await self.role_repository.list_all()}

    def _to_info(self, user: User, role_names: Dict[int, str]) -> UserInfo:
        return UserInfo(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            phone_number=user.phone_number,
            role_id=user.role_id,
            role_name=role_names.get(user.role_id),
            is_active=user.is_active,
            created_at=user.created_at,
        )

    async def _get_user(self, user_id: int) -> User:
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundException("User not found.")
        return user

    async def _resolve_role(
        self, role_id: Optional[int] = None, role_name: Optional[str] = None
    ) -> Lookup:
        """Resolve one of the fixed roles from the Role table."""
        if role_id is not None:
            role = await self.role_repository.get_by_id(role_id)
        else:
            role = await self.role_repository.get_by_name(role_name)

        allowed = {name.value.lower() for name in RoleName}
        if role is None or role.name.lower() not in allowed:
            raise BadRequestException("Invalid role.")
        return role

    async def get_all(self) -> List[UserInfo]:
        """Get all users."""
        role_names = await self._role_names()
        users = await self.user_repository.list_all()
        logger.info(f"Retrieved {len(users)} users")
        return [self._to_info(user, role_names) for user in users]

    async def get_by_id(self, user_id: int) -> UserInfo:
        user = await self._get_user(user_id)
        return self._to_info(user, await self._role_names())

    async def get_me(self, user_id: int) -> UserInfo:
        """Get the account behind the token."""
        user = await self._get_user(user_id)
        return self._to_info(user, await self._role_names())

    async def create(
        self,
        request: RegisterRequest,
        role_id: Optional[int] = None,
        role_name: Optional[str] = None,
    ) -> UserInfo:
        """Create an account with the given role.

        The role must be one of the fixed roles and present in the Role
        table. Emails are unique regardless of case.
        """
        role = await self._resolve_role(role_id=role_id, role_name=role_name)

        email = normalize_email(request.email)
        if await self.user_repository.get_by_email(email):
            logger.warning(f"Registration rejected, email already taken: {email}")
            raise UserAlreadyExistsException(email)

        user = await self.user_repository.add(
            User(
                first_name=request.first_name.strip(),
                last_name=request.last_name.strip() if request.last_name else None,
                email=email,
                phone_number=request.phone_number,
                password_hash=hash_password(request.password),
                role_id=role.id,
            )
        )

        logger.info(f"Created user {user.id} with role {role.name}")
        return self._to_info(user, {role.id: role.name})

    async def update(self, user_id: int, request: UserUpdateRequest) -> UserInfo:
        """Update profile fields; unset fields keep their value."""
        user = await self._get_user(user_id)

        if request.email is not None:
            email = normalize_email(request.email)
            existing = await self.user_repository.get_by_email(email)
            if existing and existing.id != user_id:
                raise UserAlreadyExistsException(email)
            user.email = email
        if request.first_name is not None:
            user.first_name = request.first_name.strip()
        if request.last_name is not None:
            user.last_name = request.last_name.strip()
        if request.phone_number is not None:
            user.phone_number = request.phone_number

        user = await self.user_repository.update(user)
        logger.info(f"Updated user {user_id}")
        return self._to_info(user, await self._role_names())

    async def delete(self, user_id: int) -> None:
        """Delete a user that has no bookings or maintenance reports."""
        await self._get_user(user_id)
        if await self.booking_repository.exists_for_user(user_id):
            raise BadRequestException("Cannot delete a user that has bookings.")
        if await self.maintenance_repository.exists_for_reporter(user_id):
            raise BadRequestException("Cannot delete a user that reported maintenance requests.")

        await self.user_repository.delete(user_id)
        logger.info(f"Deleted user {user_id}")

    async def change_role(self, user_id: int, request: ChangeRoleRequest) -> UserInfo:
        """Assign a role by id or by name."""
        user = await self._get_user(user_id)
        role = await self._resolve_role(role_id=request.role_id, role_name=request.role_name)

        old_role_id = user.role_id
        user.role_id = role.id
        user = await self.user_repository.update(user)

        logger.info(f"Changed role of user {user_id}: {old_role_id} -> {role.id}")
        return self._to_info(user, await self._role_names())

    async def set_active(self, user_id: int, is_active: bool) -> UserInfo:
        """Activate or deactivate an account. Inactive users cannot log in."""
        user = await self._get_user(user_id)
        user.is_active = is_active
        user = await self.user_repository.update(user)

        logger.info(f"User {user_id} active={is_active}")
        return self._to_info(user, await self._role_names())
