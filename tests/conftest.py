"""Pytest configuration and fixtures.

Service and repository tests run against SQLite in-memory with the
reference data seeded, so lookups resolve by name as in production.
"""
import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from carrental.domain.models import (
    Booking,
    BookingStatusName,
    Car,
    CarStatusName,
    Location,
    Lookup,
    RoleName,
    User,
)
from carrental.infrastructure import models  # noqa: F401
from carrental.infrastructure.database import Base
from carrental.infrastructure.models import (
    BookingStatusModel,
    CarBrandModel,
    CarStatusModel,
    PaymentMethodModel,
    RoleModel,
)
from carrental.infrastructure.repositories_postgres import (
    PostgresBookingIssueRepository,
    PostgresBookingRepository,
    PostgresCarRepository,
    PostgresLocationRepository,
    PostgresLookupRepository,
    PostgresMaintenanceRequestRepository,
    PostgresPaymentRepository,
    PostgresRefundRepository,
    PostgresReviewRepository,
    PostgresUserRepository,
)
from carrental.infrastructure.seed import seed_reference_data
from carrental.services.booking_service import BookingService
from carrental.services.car_service import CarService
from carrental.utils import utcnow

# Not a bcrypt hash; only the auth tests need a real one.
PLACEHOLDER_HASH = "not-a-bcrypt-hash"


@pytest.fixture
async def async_session():
    """Create async session for testing with SQLite in-memory."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    # SQLite leaves foreign keys off unless asked per connection.
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_factory() as session:
        await seed_reference_data(session)
        await session.commit()
        yield session
        await session.rollback()

    await engine.dispose()


# Repositories


@pytest.fixture
def role_repository(async_session: AsyncSession) -> PostgresLookupRepository:
    return PostgresLookupRepository(async_session, RoleModel)


@pytest.fixture
def booking_status_repository(async_session: AsyncSession) -> PostgresLookupRepository:
    return PostgresLookupRepository(async_session, BookingStatusModel)


@pytest.fixture
def car_status_repository(async_session: AsyncSession) -> PostgresLookupRepository:
    return PostgresLookupRepository(async_session, CarStatusModel)


@pytest.fixture
def brand_repository(async_session: AsyncSession) -> PostgresLookupRepository:
    return PostgresLookupRepository(async_session, CarBrandModel)


@pytest.fixture
def payment_method_repository(async_session: AsyncSession) -> PostgresLookupRepository:
    return PostgresLookupRepository(async_session, PaymentMethodModel)


@pytest.fixture
def user_repository(async_session: AsyncSession) -> PostgresUserRepository:
    return PostgresUserRepository(async_session)


@pytest.fixture
def location_repository(async_session: AsyncSession) -> PostgresLocationRepository:
    return PostgresLocationRepository(async_session)


@pytest.fixture
def car_repository(async_session: AsyncSession) -> PostgresCarRepository:
    return PostgresCarRepository(async_session)


@pytest.fixture
def booking_repository(async_session: AsyncSession) -> PostgresBookingRepository:
    return PostgresBookingRepository(async_session)


@pytest.fixture
def payment_repository(async_session: AsyncSession) -> PostgresPaymentRepository:
    return PostgresPaymentRepository(async_session)


@pytest.fixture
def refund_repository(async_session: AsyncSession) -> PostgresRefundRepository:
    return PostgresRefundRepository(async_session)


@pytest.fixture
def review_repository(async_session: AsyncSession) -> PostgresReviewRepository:
    return PostgresReviewRepository(async_session)


@pytest.fixture
def maintenance_repository(async_session: AsyncSession) -> PostgresMaintenanceRequestRepository:
    return PostgresMaintenanceRequestRepository(async_session)


@pytest.fixture
def issue_repository(async_session: AsyncSession) -> PostgresBookingIssueRepository:
    return PostgresBookingIssueRepository(async_session)


# Reference rows


async def _lookup(repository: PostgresLookupRepository, name: str) -> Lookup:
    row = await repository.get_by_name(name)
    assert row is not None, f"lookup row {name} missing"
    return row


@pytest.fixture
async def roles(role_repository: PostgresLookupRepository) -> dict:
    """Role rows keyed by RoleName."""
    return {name: await _lookup(role_repository, name.value) for name in RoleName}


@pytest.fixture
async def booking_statuses(booking_status_repository: PostgresLookupRepository) -> dict:
    """Booking status rows keyed by BookingStatusName."""
    return {
        name: await _lookup(booking_status_repository, name.value)
        for name in BookingStatusName
    }


@pytest.fixture
async def available_status(car_status_repository: PostgresLookupRepository) -> Lookup:
    return await _lookup(car_status_repository, CarStatusName.AVAILABLE.value)


@pytest.fixture
async def toyota(brand_repository: PostgresLookupRepository) -> Lookup:
    return await _lookup(brand_repository, "Toyota")


@pytest.fixture
async def credit_card(payment_method_repository: PostgresLookupRepository) -> Lookup:
    return await _lookup(payment_method_repository, "Credit Card")


@pytest.fixture
async def locations(location_repository: PostgresLocationRepository) -> list:
    """Seeded default locations."""
    return await location_repository.list_all()


# Users


async def _make_user(repository: PostgresUserRepository, email: str, role: Lookup) -> User:
    return await repository.add(
        User(
            first_name=email.split("@")[0].title(),
            email=email,
            password_hash=PLACEHOLDER_HASH,
            role_id=role.id,
        )
    )


@pytest.fixture
async def customer(user_repository: PostgresUserRepository, roles: dict) -> User:
    return await _make_user(user_repository, "alice@example.com", roles[RoleName.CUSTOMER])


@pytest.fixture
async def other_customer(user_repository: PostgresUserRepository, roles: dict) -> User:
    return await _make_user(user_repository, "bob@example.com", roles[RoleName.CUSTOMER])


@pytest.fixture
async def agent(user_repository: PostgresUserRepository, roles: dict) -> User:
    return await _make_user(user_repository, "agent@example.com", roles[RoleName.RENTAL_AGENT])


# Cars and bookings


@pytest.fixture
async def car(car_repository: PostgresCarRepository, toyota: Lookup, available_status: Lookup) -> Car:
    """Toyota Corolla at 100 per day."""
    return await car_repository.add(
        Car(
            brand_id=toyota.id,
            model_name="Corolla",
            year=2022,
            fuel_type="Petrol",
            transmission="Automatic",
            seats=5,
            daily_rate=Decimal("100.00"),
            status_id=available_status.id,
        )
    )


@pytest.fixture
def make_booking(booking_repository: PostgresBookingRepository, booking_statuses: dict, locations: list):
    """Insert a booking directly, bypassing the service rules."""

    async def _make(
        user: User,
        car: Car,
        pickup_at: datetime,
        dropoff_at: datetime,
        status: BookingStatusName = BookingStatusName.CONFIRMED,
        total_amount: Decimal = Decimal("224.00"),
    ) -> Booking:
        location: Location = locations[0]
        return await booking_repository.add(
            Booking(
                user_id=user.id,
                car_id=car.id,
                pickup_location_id=location.id,
                dropoff_location_id=location.id,
                pickup_at=pickup_at,
                dropoff_at=dropoff_at,
                status_id=booking_statuses[status].id,
                total_amount=total_amount,
            )
        )

    return _make


@pytest.fixture
def future_window() -> tuple:
    """Two whole days starting next week at 09:00."""
    start = (utcnow() + timedelta(days=7)).replace(hour=9, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=2)


@pytest.fixture
def past_window() -> tuple:
    """A two-day rental that ended three days ago."""
    end = (utcnow() - timedelta(days=3)).replace(hour=9, minute=0, second=0, microsecond=0)
    return end - timedelta(days=2), end


# Services


@pytest.fixture
def car_service(
    car_repository: PostgresCarRepository,
    brand_repository: PostgresLookupRepository,
    car_status_repository: PostgresLookupRepository,
    booking_repository: PostgresBookingRepository,
    booking_status_repository: PostgresLookupRepository,
) -> CarService:
    """Car service over the SQLite repositories."""
    return CarService(
        car_repository=car_repository,
        brand_repository=brand_repository,
        car_status_repository=car_status_repository,
        booking_repository=booking_repository,
        booking_status_repository=booking_status_repository,
    )


@pytest.fixture
def booking_service(
    booking_repository: PostgresBookingRepository,
    car_repository: PostgresCarRepository,
    location_repository: PostgresLocationRepository,
    booking_status_repository: PostgresLookupRepository,
    car_service: CarService,
) -> BookingService:
    """Booking service with a 12% tax rate."""
    return BookingService(
        booking_repository=booking_repository,
        car_repository=car_repository,
        location_repository=location_repository,
        booking_status_repository=booking_status_repository,
        car_service=car_service,
        tax_rate=Decimal("0.12"),
    )
