"""PostgreSQL repository implementation."""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Generic, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, exists, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from carrental.domain.models import (
    Booking,
    BookingIssue,
    Car,
    Location,
    Lookup,
    MaintenanceRequest,
    Payment,
    PaymentStatus,
    Refund,
    RefundStatus,
    Review,
    User,
)
from carrental.infrastructure.database import Base
from carrental.infrastructure.models import (
    BookingIssueModel,
    BookingModel,
    CarModel,
    LocationModel,
    MaintenanceRequestModel,
    PaymentModel,
    RefundModel,
    ReviewModel,
    UserModel,
)
from carrental.infrastructure.repositories import (
    BookingIssueRepository,
    BookingRepository,
    CarRepository,
    LocationRepository,
    LookupRepository,
    MaintenanceRequestRepository,
    PaymentRepository,
    RefundRepository,
    ReviewRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

D = TypeVar("D", bound=BaseModel)


class PostgresRepository(Generic[D]):
    """SQLAlchemy CRUD shared by the entity repositories.

    Repositories only flush. Commit and rollback belong to the session
    owner (one transaction per request).
    """

    model_class: Type[Base]
    domain_class: Type[D]

    def __init__(self, session: AsyncSession):
        self.session = session

    def _order_by(self):
        return (self.model_class.id,)

    def _to_domain(self, model) -> D:
        """Convert SQLAlchemy model to domain model."""
        return self.domain_class.model_validate(model)

    def _to_model(self, entity: D):
        """Convert domain model to SQLAlchemy model."""
        return self.model_class(**entity.model_dump(exclude={"id"}))

    async def _fetch_all(self, stmt) -> List[D]:
        result = await self.session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def get_by_id(self, entity_id: int) -> Optional[D]:
        """Get entity by ID."""
        model = await self.session.get(self.model_class, entity_id)
        if model is None:
            return None
        return self._to_domain(model)

    async def list_all(self) -> List[D]:
        """List all entities."""
        return await self._fetch_all(select(self.model_class).order_by(*self._order_by()))

    async def add(self, entity: D) -> D:
        """Persist a new entity."""
        model = self._to_model(entity)
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)

        logger.debug(f"Added {self.model_class.__tablename__} row {model.id}")
        return self._to_domain(model)

    async def update(self, entity: D) -> D:
        """Overwrite a stored entity with the domain values."""
        model = await self.session.get(self.model_class, entity.id)
        if model is None:
            raise LookupError(f"{self.model_class.__tablename__} row {entity.id} does not exist")

        for field, value in entity.model_dump(exclude={"id"}).items():
            setattr(model, field, value)
        await self.session.flush()
        await self.session.refresh(model)
        return self._to_domain(model)

    async def delete(self, entity_id: int) -> bool:
        """Delete entity by ID."""
        stmt = delete(self.model_class).where(self.model_class.id == entity_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0


class PostgresLookupRepository(PostgresRepository[Lookup], LookupRepository):
    """Lookup table repository; one instance per lookup model."""

    domain_class = Lookup

    def __init__(self, session: AsyncSession, model_class: Type[Base]):
        super().__init__(session)
        self.model_class = model_class

    async def get_by_name(self, name: str) -> Optional[Lookup]:
        """Get row by name, case-insensitive."""
        if not name:
            return None
        stmt = select(self.model_class).where(
            func.lower(self.model_class.name) == name.strip().lower()
        )
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        if model is None:
            return None
        return self._to_domain(model)

    async def search_by_name(self, fragment: str) -> List[Lookup]:
        """List rows whose name contains the fragment, case-insensitive."""
        escaped = (
            fragment.strip().lower()
            .replace("\\", "\\\\")
            .replace("%", "\\%")
            .replace("_", "\\_")
        )
        stmt = (
            select(self.model_class)
            .where(func.lower(self.model_class.name).like(f"%{escaped}%", escape="\\"))
            .order_by(self.model_class.id)
        )
        return await self._fetch_all(stmt)


class PostgresLocationRepository(PostgresRepository[Location], LocationRepository):
    model_class = LocationModel
    domain_class = Location


class PostgresUserRepository(PostgresRepository[User], UserRepository):
    """PostgreSQL implementation of user repository."""

    model_class = UserModel
    domain_class = User

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email, case-insensitive."""
        stmt = select(UserModel).where(func.lower(UserModel.email) == email.strip().lower())
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_domain(model)


class PostgresCarRepository(PostgresRepository[Car], CarRepository):
    """PostgreSQL implementation of car repository."""

    model_class = CarModel
    domain_class = Car

    async def find_duplicate(
        self,
        brand_id: int,
        model_name: str,
        year: Optional[int],
        exclude_id: Optional[int] = None,
    ) -> Optional[Car]:
        """Find a car with the same brand, model and year."""
        stmt = select(CarModel).where(
            CarModel.brand_id == brand_id,
            func.lower(CarModel.model_name) == model_name.strip().lower(),
            CarModel.year.is_(None) if year is None else CarModel.year == year,
        )
        if exclude_id is not None:
            stmt = stmt.where(CarModel.id != exclude_id)
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    async def get_for_update(self, car_id: int) -> Optional[Car]:
        """Get car by ID under a row lock."""
        stmt = select(CarModel).where(CarModel.id == car_id).with_for_update()
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def search(
        self,
        brand_id: Optional[int] = None,
        fuel_type: Optional[str] = None,
        transmission: Optional[str] = None,
        min_seats: Optional[int] = None,
        max_daily_rate: Optional[Decimal] = None,
    ) -> List[Car]:
        """Filter cars by attributes."""
        stmt = select(CarModel)
        if brand_id is not None:
            stmt = stmt.where(CarModel.brand_id == brand_id)
        if fuel_type:
            stmt = stmt.where(func.lower(CarModel.fuel_type) == fuel_type.strip().lower())
        if transmission:
            stmt = stmt.where(
                func.lower(CarModel.transmission) == transmission.strip().lower()
            )
        if min_seats is not None:
            stmt = stmt.where(CarModel.seats >= min_seats)
        if max_daily_rate is not None:
            stmt = stmt.where(CarModel.daily_rate <= max_daily_rate)
        return await self._fetch_all(stmt.order_by(CarModel.id))

    async def list_by_brand_ids(self, brand_ids: Iterable[int]) -> List[Car]:
        """List cars of the given brands."""
        ids = list(brand_ids)
        if not ids:
            return []
        stmt = select(CarModel).where(CarModel.brand_id.in_(ids)).order_by(CarModel.id)
        return await self._fetch_all(stmt)

    async def delete(self, entity_id: int) -> bool:
        """Delete a car together with its maintenance requests."""
        await self.session.execute(
            delete(MaintenanceRequestModel).where(MaintenanceRequestModel.car_id == entity_id)
        )
        return await super().delete(entity_id)


class PostgresBookingRepository(PostgresRepository[Booking], BookingRepository):
    """PostgreSQL implementation of booking repository."""

    model_class = BookingModel
    domain_class = Booking

    def _order_by(self):
        return (BookingModel.booked_at.desc(), BookingModel.id.desc())

    async def list_by_user(self, user_id: int) -> List[Booking]:
        """List bookings of a user, newest first."""
        stmt = select(BookingModel).where(BookingModel.user_id == user_id)
        return await self._fetch_all(stmt.order_by(*self._order_by()))

    async def list_by_car(self, car_id: int) -> List[Booking]:
        """List bookings of a car by pickup time."""
        stmt = (
            select(BookingModel)
            .where(BookingModel.car_id == car_id)
            .order_by(BookingModel.pickup_at)
        )
        return await self._fetch_all(stmt)

    async def _exists(self, *criteria) -> bool:
        result = await self.session.execute(select(exists().where(*criteria)))
        return bool(result.scalar())

    async def exists_for_car(self, car_id: int) -> bool:
        return await self._exists(BookingModel.car_id == car_id)

    async def exists_for_user(self, user_id: int) -> bool:
        return await self._exists(BookingModel.user_id == user_id)

    async def exists_for_location(self, location_id: int) -> bool:
        return await self._exists(
            or_(
                BookingModel.pickup_location_id == location_id,
                BookingModel.dropoff_location_id == location_id,
            )
        )

    async def find_blocking_overlaps(
        self,
        car_ids: Iterable[int],
        start: datetime,
        end: datetime,
        blocking_status_ids: Iterable[int],
    ) -> List[Booking]:
        """Bookings on the cars in a blocking status overlapping [start, end)."""
        ids = list(car_ids)
        statuses = list(blocking_status_ids)
        if not ids or not statuses:
            return []
        stmt = select(BookingModel).where(
            BookingModel.car_id.in_(ids),
            BookingModel.status_id.in_(statuses),
            BookingModel.pickup_at < end,
            BookingModel.dropoff_at > start,
        )
        return await self._fetch_all(stmt.order_by(BookingModel.pickup_at))

    async def get_for_update(self, booking_id: int) -> Optional[Booking]:
        """Get booking by ID under a row lock."""
        stmt = select(BookingModel).where(BookingModel.id == booking_id).with_for_update()
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def delete_with_dependents(self, booking_id: int) -> bool:
        """Delete a booking with its refunds, payments, reviews and issues."""
        # Refunds reference payments, so they go first.
        for dependent in (RefundModel, PaymentModel, ReviewModel, BookingIssueModel):
            await self.session.execute(
                delete(dependent).where(dependent.booking_id == booking_id)
            )
        deleted = await self.delete(booking_id)
        if deleted:
            logger.info(f"Deleted booking {booking_id} with dependents")
        return deleted


class PostgresPaymentRepository(PostgresRepository[Payment], PaymentRepository):
    """PostgreSQL implementation of payment repository."""

    model_class = PaymentModel
    domain_class = Payment

    def _order_by(self):
        return (PaymentModel.paid_at.desc(), PaymentModel.id.desc())

    async def list_by_booking_ids(self, booking_ids: Iterable[int]) -> List[Payment]:
        """List payments of the given bookings, newest first."""
        ids = list(booking_ids)
        if not ids:
            return []
        stmt = select(PaymentModel).where(PaymentModel.booking_id.in_(ids))
        return await self._fetch_all(stmt.order_by(*self._order_by()))

    async def has_successful_payment(self, booking_id: int) -> bool:
        """Check whether the booking already has a Success payment."""
        stmt = select(
            exists().where(
                PaymentModel.booking_id == booking_id,
                PaymentModel.status == PaymentStatus.SUCCESS,
            )
        )
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def get_for_update(self, payment_id: int) -> Optional[Payment]:
        """Get payment by ID under a row lock."""
        stmt = select(PaymentModel).where(PaymentModel.id == payment_id).with_for_update()
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None


class PostgresRefundRepository(PostgresRepository[Refund], RefundRepository):
    """PostgreSQL implementation of refund repository."""

    model_class = RefundModel
    domain_class = Refund

    def _order_by(self):
        return (RefundModel.requested_at.desc(), RefundModel.id.desc())

    async def find_open_or_completed(self, payment_id: int) -> Optional[Refund]:
        """Find a Pending or Refunded refund for the payment."""
        stmt = select(RefundModel).where(
            RefundModel.payment_id == payment_id,
            RefundModel.status.in_([RefundStatus.PENDING, RefundStatus.REFUNDED]),
        )
        result = await self.session.execute(stmt)
        model = result.scalars().first()
        return self._to_domain(model) if model else None

    async def list_by_user(self, user_id: int) -> List[Refund]:
        """List refunds requested by a user, newest first."""
        stmt = select(RefundModel).where(RefundModel.user_id == user_id)
        return await self._fetch_all(stmt.order_by(*self._order_by()))


class PostgresReviewRepository(PostgresRepository[Review], ReviewRepository):
    """PostgreSQL implementation of review repository."""

    model_class = ReviewModel
    domain_class = Review

    def _order_by(self):
        return (ReviewModel.created_at.desc(), ReviewModel.id.desc())

    async def find_by_booking_and_user(
        self, booking_id: int, user_id: int
    ) -> Optional[Review]:
        stmt = select(ReviewModel).where(
            ReviewModel.booking_id == booking_id,
            ReviewModel.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def list_by_car(self, car_id: int) -> List[Review]:
        stmt = select(ReviewModel).where(ReviewModel.car_id == car_id)
        return await self._fetch_all(stmt.order_by(*self._order_by()))

    async def list_by_user(self, user_id: int) -> List[Review]:
        stmt = select(ReviewModel).where(ReviewModel.user_id == user_id)
        return await self._fetch_all(stmt.order_by(*self._order_by()))


class PostgresMaintenanceRequestRepository(
    PostgresRepository[MaintenanceRequest], MaintenanceRequestRepository
):
    """PostgreSQL implementation of maintenance request repository."""

    model_class = MaintenanceRequestModel
    domain_class = MaintenanceRequest

    def _order_by(self):
        return (MaintenanceRequestModel.reported_at.desc(), MaintenanceRequestModel.id.desc())

    async def list_open(self) -> List[MaintenanceRequest]:
        """List unresolved requests, newest first."""
        stmt = (
            select(MaintenanceRequestModel)
            .where(MaintenanceRequestModel.is_resolved.is_(False))
            .order_by(*self._order_by())
        )
        return await self._fetch_all(stmt)

    async def list_by_car(self, car_id: int) -> List[MaintenanceRequest]:
        stmt = select(MaintenanceRequestModel).where(MaintenanceRequestModel.car_id == car_id)
        return await self._fetch_all(stmt.order_by(*self._order_by()))

    async def list_by_reporter(self, user_id: int) -> List[MaintenanceRequest]:
        stmt = select(MaintenanceRequestModel).where(
            MaintenanceRequestModel.reported_by_id == user_id
        )
        return await self._fetch_all(stmt.order_by(*self._order_by()))

    async def exists_for_reporter(self, user_id: int) -> bool:
        stmt = select(exists().where(MaintenanceRequestModel.reported_by_id == user_id))
        result = await self.session.execute(stmt)
        return bool(result.scalar())


class PostgresBookingIssueRepository(PostgresRepository[BookingIssue], BookingIssueRepository):
    """PostgreSQL implementation of booking issue repository."""

    model_class = BookingIssueModel
    domain_class = BookingIssue

    def _order_by(self):
        return (BookingIssueModel.created_at.desc(), BookingIssueModel.id.desc())

    async def list_by_user(self, user_id: int) -> List[BookingIssue]:
        stmt = select(BookingIssueModel).where(BookingIssueModel.user_id == user_id)
        return await self._fetch_all(stmt.order_by(*self._order_by()))

    async def list_by_booking(self, booking_id: int) -> List[BookingIssue]:
        stmt = select(BookingIssueModel).where(BookingIssueModel.booking_id == booking_id)
        return await self._fetch_all(stmt.order_by(*self._order_by()))
