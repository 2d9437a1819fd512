"""Reference data seeding.

Idempotent: rows are matched by name and only missing ones are inserted.
"""
import logging
from typing import Iterable, Tuple, Type

from sqlalchemy.ext.asyncio import AsyncSession

from carrental.domain.models import (
    BookingStatusName,
    CarStatusName,
    Location,
    Lookup,
    RoleName,
    User,
)
from carrental.infrastructure.database import Base, async_session_factory
from carrental.infrastructure.models import (
    BookingStatusModel,
    CarBrandModel,
    CarStatusModel,
    PaymentMethodModel,
    RoleModel,
)
from carrental.infrastructure.repositories_postgres import (
    PostgresLocationRepository,
    PostgresLookupRepository,
    PostgresUserRepository,
)

logger = logging.getLogger(__name__)

CAR_BRANDS = ("Toyota", "Honda", "Hyundai", "Ford", "BMW")
PAYMENT_METHODS = ("Credit Card", "Debit Card", "UPI", "Cash")
DEFAULT_LOCATIONS: Tuple[Tuple[str, str], ...] = (
    ("Airport Terminal", "Arrivals hall, Terminal 1"),
    ("City Center", "12 Main Street"),
    ("Railway Station", "Station Road, Gate 2"),
)

LOOKUP_DATA: Tuple[Tuple[Type[Base], Iterable[str]], ...] = (
    (RoleModel, [role.value for role in RoleName]),
    (BookingStatusModel, [status.value for status in BookingStatusName]),
    (CarStatusModel, [status.value for status in CarStatusName]),
    (CarBrandModel, CAR_BRANDS),
    (PaymentMethodModel, PAYMENT_METHODS),
)


async def seed_reference_data(session: AsyncSession) -> int:
    """Insert missing lookup rows and default locations. Returns rows added."""
    added = 0
    for model_class, names in LOOKUP_DATA:
        repository = PostgresLookupRepository(session, model_class)
        for name in names:
            if await repository.get_by_name(name) is None:
                await repository.add(Lookup(name=name))
                added += 1

    locations = PostgresLocationRepository(session)
    if not await locations.list_all():
        for name, address in DEFAULT_LOCATIONS:
            await locations.add(Location(name=name, address=address))
            added += 1

    return added


async def bootstrap_admin(session: AsyncSession, email: str, password: str) -> bool:
    """Create the first Admin account unless the email is already registered."""
    # Imported here: services depend on infrastructure, not the other way round.
    from carrental.services.user_service import hash_password, normalize_email

    users = PostgresUserRepository(session)
    email = normalize_email(email)
    if await users.get_by_email(email):
        return False

    role = await PostgresLookupRepository(session, RoleModel).get_by_name(RoleName.ADMIN.value)
    if role is None:
        raise RuntimeError("Role table has no Admin row; seed reference data first")

    await users.add(
        User(
            first_name="Admin",
            email=email,
            password_hash=hash_password(password),
            role_id=role.id,
        )
    )
    return True


async def run_startup_seed(
    seed_lookups: bool, admin_email: str = None, admin_password: str = None
) -> None:
    """Seed in one transaction at application startup."""
    async with async_session_factory() as session:
        async with session.begin():
            if seed_lookups:
                added = await seed_reference_data(session)
                logger.info(f"Reference data seeded, {added} rows added")
            if admin_email and admin_password:
                if await bootstrap_admin(session, admin_email, admin_password):
                    logger.info(f"Bootstrap admin created: {admin_email}")
