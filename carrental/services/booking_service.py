"""Booking service: quotes, creation, cancellation and status changes."""
import logging
from datetime import datetime
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Dict, Iterable, List, Optional

from carrental.config import settings
from carrental.domain.exceptions import (
    BadRequestException,
    NotFoundException,
    UnauthorizedException,
)
from carrental.domain.models import (
    BOOKING_STATUS_TRANSITIONS,
    TERMINAL_BOOKING_STATUSES,
    Booking,
    BookingStatusName,
    Car,
    Lookup,
)
from carrental.domain.schemas import BookingCreateRequest, BookingInfo, QuoteRequest, QuoteResponse
from carrental.infrastructure.repositories import (
    BookingRepository,
    CarRepository,
    LocationRepository,
    LookupRepository,
)
from carrental.services.car_service import CarService, validate_window
from carrental.utils import rental_days, to_utc_naive, utcnow

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def calculate_quote(
    daily_rate: Optional[Decimal], start: datetime, end: datetime, tax_rate: Decimal
) -> QuoteResponse:
    """Price a rental: whole days (at least one) times the daily rate, plus tax.

    Taxes are rounded half-to-even to cents.
    """
    if end <= start:
        raise BadRequestException("ToUtc must be after FromUtc")
    if daily_rate is None or daily_rate <= 0:
        raise BadRequestException("Daily rate not set for this car.")

    days = rental_days(start, end)
    subtotal = (daily_rate * days).quantize(CENT)
    taxes = (subtotal * tax_rate).quantize(CENT, rounding=ROUND_HALF_EVEN)
    return QuoteResponse(
        days=days,
        daily_rate=daily_rate,
        subtotal=subtotal,
        taxes=taxes,
        total=subtotal + taxes,
    )


def parse_booking_status(value: str) -> BookingStatusName:
    wanted = (value or "").strip().lower()
    for status in BookingStatusName:
        if status.value.lower() == wanted:
            return status
    allowed = ", ".join(status.value for status in BookingStatusName)
    raise BadRequestException(f"Invalid booking status. Allowed: {allowed}.")


class BookingService:
    """Service for the booking lifecycle."""

    def __init__(
        self,
        booking_repository: BookingRepository,
        car_repository: CarRepository,
        location_repository: LocationRepository,
        booking_status_repository: LookupRepository,
        car_service: CarService,
        tax_rate: Decimal = settings.tax_rate,
    ):
        self.booking_repository = booking_repository
        self.car_repository = car_repository
        self.location_repository = location_repository
        self.booking_status_repository = booking_status_repository
        self.car_service = car_service
        self.tax_rate = tax_rate

    async def _status(self, status: BookingStatusName) -> Lookup:
        """Resolve a booking status row by name."""
        row = await self.booking_status_repository.get_by_name(status.value)
        if row is None:
            raise NotFoundException(f"BookingStatus '{status.value}' not found")
        return row

    async def _status_name(self, status_id: int) -> Optional[str]:
        row = await self.booking_status_repository.get_by_id(status_id)
        return row.name if row else None

    async def _get_booking(self, booking_id: int) -> Booking:
        booking = await self.booking_repository.get_by_id(booking_id)
        if booking is None:
            raise NotFoundException(f"Booking {booking_id} not found")
        return booking

    async def _to_info(self, bookings: Iterable[Booking]) -> List[BookingInfo]:
        """Hydrate car, location and status names."""
        bookings = list(bookings)
        locations = {loc.id: loc.name for loc in await self.location_repository.list_all()}
        statuses = {s.id: s.name for s in await self.booking_status_repository.list_all()}
        cars: Dict[int, Optional[Car]] = {}
        for car_id in {b.car_id for b in bookings}:
            cars[car_id] = await self.car_repository.get_by_id(car_id)

        result = []
        for booking in bookings:
            car = cars.get(booking.car_id)
            result.append(
                BookingInfo(
                    **booking.model_dump(),
                    car_name=car.model_name if car else None,
                    pickup_location_name=locations.get(booking.pickup_location_id),
                    dropoff_location_name=locations.get(booking.dropoff_location_id),
                    status_name=statuses.get(booking.status_id),
                )
            )
        return result

    async def quote(self, request: QuoteRequest) -> QuoteResponse:
        """Price a car for a period without booking it."""
        start, end = validate_window(request.from_utc, request.to_utc)

        car = await self.car_repository.get_by_id(request.car_id)
        if car is None:
            raise NotFoundException(f"Car {request.car_id} not found")

        quote = calculate_quote(car.daily_rate, start, end, self.tax_rate)
        return quote.model_copy(update={"car_id": car.id})

    async def create(self, user_id: int, request: BookingCreateRequest) -> BookingInfo:
        """Book a car.

        The car row is locked before the availability check so concurrent
        bookings of the same car serialize until this transaction ends.
        """
        pickup_at = to_utc_naive(request.pickup_at)
        dropoff_at = to_utc_naive(request.dropoff_at)
        if dropoff_at <= pickup_at:
            raise BadRequestException("Dropoff must be after pickup")

        car = await self.car_repository.get_for_update(request.car_id)
        if car is None:
            raise NotFoundException(f"Car {request.car_id} not found")
        if await self.location_repository.get_by_id(request.pickup_location_id) is None:
            raise NotFoundException(f"Pickup location {request.pickup_location_id} not found")
        if await self.location_repository.get_by_id(request.dropoff_location_id) is None:
            raise NotFoundException(f"Dropoff location {request.dropoff_location_id} not found")

        await self.car_service.ensure_available(car.id, pickup_at, dropoff_at)

        quote = calculate_quote(car.daily_rate, pickup_at, dropoff_at, self.tax_rate)
        pending = await self._status(BookingStatusName.PENDING)

        booking = await self.booking_repository.add(
            Booking(
                user_id=user_id,
                car_id=car.id,
                pickup_location_id=request.pickup_location_id,
                dropoff_location_id=request.dropoff_location_id,
                pickup_at=pickup_at,
                dropoff_at=dropoff_at,
                status_id=pending.id,
                total_amount=quote.total,
                booked_at=utcnow(),
            )
        )

        logger.info(
            f"Created booking {booking.id} for user {user_id} on car {car.id}, "
            f"total {booking.total_amount}"
        )
        return (await self._to_info([booking]))[0]

    async def cancel(self, user_id: int, booking_id: int) -> None:
        """Cancel an own booking before its pickup time."""
        booking = await self._get_booking(booking_id)

        if booking.user_id != user_id:
            raise UnauthorizedException()

        current = await self._status_name(booking.status_id)
        terminal = {status.value.lower() for status in TERMINAL_BOOKING_STATUSES}
        if current and current.lower() in terminal:
            raise BadRequestException(f"Booking is already {current}.")

        if utcnow() >= booking.pickup_at:
            logger.warning(f"Late cancellation rejected for booking {booking_id}")
            raise BadRequestException("Cannot cancel on/after pickup time.")

        cancelled = await self._status(BookingStatusName.CANCELLED)
        booking.status_id = cancelled.id
        await self.booking_repository.update(booking)

        logger.info(f"Booking {booking_id} cancelled by user {user_id}")

    async def get_mine(self, user_id: int) -> List[BookingInfo]:
        return await self._to_info(await self.booking_repository.list_by_user(user_id))

    async def get_all(self) -> List[BookingInfo]:
        """All bookings, newest first."""
        return await self._to_info(await self.booking_repository.list_all())

    async def get_by_id(self, booking_id: int) -> BookingInfo:
        booking = await self._get_booking(booking_id)
        return (await self._to_info([booking]))[0]

    async def update_status(self, booking_id: int, status_name: str) -> BookingInfo:
        """Move a booking along its lifecycle (staff)."""
        target = parse_booking_status(status_name)
        booking = await self._get_booking(booking_id)

        current_name = await self._status_name(booking.status_id)
        current = parse_booking_status(current_name) if current_name else None
        if current is None or target not in BOOKING_STATUS_TRANSITIONS[current]:
            raise BadRequestException(
                f"Cannot change booking status from {current_name} to {target.value}."
            )

        row = await self._status(target)
        booking.status_id = row.id
        booking = await self.booking_repository.update(booking)

        logger.info(f"Booking {booking_id} status: {current_name} -> {target.value}")
        return (await self._to_info([booking]))[0]

    async def delete(self, booking_id: int) -> None:
        """Delete a booking together with its payments, refunds, reviews and issues."""
        await self._get_booking(booking_id)
        await self.booking_repository.delete_with_dependents(booking_id)
