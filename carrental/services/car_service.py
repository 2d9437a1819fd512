"""Car inventory and availability service."""
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Set

from carrental.domain.exceptions import (
    BadRequestException,
    CarUnavailableException,
    NotFoundException,
)
from carrental.domain.models import BLOCKING_BOOKING_STATUSES, Car
from carrental.domain.schemas import CarInfo, CarRequest, CarSearchRequest
from carrental.infrastructure.repositories import (
    BookingRepository,
    CarRepository,
    LookupRepository,
)
from carrental.utils import to_utc_naive

logger = logging.getLogger(__name__)


def validate_window(start: datetime, end: datetime) -> tuple:
    """Normalize a rental window to naive UTC and check its ordering."""
    start, end = to_utc_naive(start), to_utc_naive(end)
    if end <= start:
        raise BadRequestException("ToUtc must be after FromUtc")
    return start, end


class CarService:
    """Service for car inventory, search and availability."""

    def __init__(
        self,
        car_repository: CarRepository,
        brand_repository: LookupRepository,
        car_status_repository: LookupRepository,
        booking_repository: BookingRepository,
        booking_status_repository: LookupRepository,
    ):
        self.car_repository = car_repository
        self.brand_repository = brand_repository
        self.car_status_repository = car_status_repository
        self.booking_repository = booking_repository
        self.booking_status_repository = booking_status_repository

    async def blocking_status_ids(self) -> Set[int]:
        """Resolve the blocking booking statuses to their ids by name."""
        wanted = {status.value.lower() for status in BLOCKING_BOOKING_STATUSES}
        rows = await self.booking_status_repository.list_all()
        return {row.id for row in rows if row.name.lower() in wanted}

    async def _enrich(self, cars: Iterable[Car]) -> List[CarInfo]:
        brands: Dict[int, str] = {b.id: b.name for b in await self.brand_repository.list_all()}
        statuses: Dict[int, str] = {
            s.id: s.name for s in await self.car_status_repository.list_all()
        }
        return [
            CarInfo(
                **car.model_dump(),
                brand_name=brands.get(car.brand_id),
                status_name=statuses.get(car.status_id),
            )
            for car in cars
        ]

    async def _get_car(self, car_id: int) -> Car:
        car = await self.car_repository.get_by_id(car_id)
        if car is None:
            raise NotFoundException(f"Car {car_id} not found")
        return car

    async def _validate_references(self, request: CarRequest) -> None:
        if await self.brand_repository.get_by_id(request.brand_id) is None:
            raise NotFoundException(f"Brand {request.brand_id} not found")
        if await self.car_status_repository.get_by_id(request.status_id) is None:
            raise NotFoundException(f"Car status {request.status_id} not found")

    async def get_all(self) -> List[CarInfo]:
        return await self._enrich(await self.car_repository.list_all())

    async def get_by_id(self, car_id: int) -> CarInfo:
        car = await self._get_car(car_id)
        return (await self._enrich([car]))[0]

    async def create(self, request: CarRequest) -> CarInfo:
        """Add a car. Brand and status must exist; (brand, model, year) is unique."""
        await self._validate_references(request)

        duplicate = await self.car_repository.find_duplicate(
            request.brand_id, request.model_name, request.year
        )
        if duplicate:
            raise BadRequestException("A car with the same brand/model/year already exists.")

        car = await self.car_repository.add(Car(**request.model_dump()))
        logger.info(f"Created car {car.id} ({car.model_name} {car.year})")
        return (await self._enrich([car]))[0]

    async def update(self, car_id: int, request: CarRequest) -> CarInfo:
        """Replace a car's attributes."""
        await self._get_car(car_id)
        await self._validate_references(request)

        duplicate = await self.car_repository.find_duplicate(
            request.brand_id, request.model_name, request.year, exclude_id=car_id
        )
        if duplicate:
            raise BadRequestException("A car with the same brand/model/year already exists.")

        car = await self.car_repository.update(Car(id=car_id, **request.model_dump()))
        logger.info(f"Updated car {car_id}")
        return (await self._enrich([car]))[0]

    async def set_status(self, car_id: int, status_id: int) -> None:
        car = await self._get_car(car_id)
        if await self.car_status_repository.get_by_id(status_id) is None:
            raise NotFoundException(f"Car status {status_id} not found")

        old_status_id = car.status_id
        car.status_id = status_id
        await self.car_repository.update(car)
        logger.info(f"Car {car_id} status: {old_status_id} -> {status_id}")

    async def delete(self, car_id: int) -> None:
        """Delete a car that no booking references."""
        await self._get_car(car_id)
        if await self.booking_repository.exists_for_car(car_id):
            raise BadRequestException("Cannot delete a car that has bookings.")

        await self.car_repository.delete(car_id)
        logger.info(f"Deleted car {car_id}")

    async def search(self, request: CarSearchRequest) -> List[CarInfo]:
        """Filter cars by attributes, then drop cars booked in the window."""
        window = None
        if request.from_utc is not None or request.to_utc is not None:
            if request.from_utc is None or request.to_utc is None:
                raise BadRequestException("Both FromUtc and ToUtc are required for availability")
            window = validate_window(request.from_utc, request.to_utc)

        cars = await self.car_repository.search(
            brand_id=request.brand_id,
            fuel_type=request.fuel_type,
            transmission=request.transmission,
            min_seats=request.min_seats,
            max_daily_rate=request.max_daily_rate,
        )

        if window and cars:
            overlapping = await self.booking_repository.find_blocking_overlaps(
                [car.id for car in cars], window[0], window[1], await self.blocking_status_ids()
            )
            busy = {booking.car_id for booking in overlapping}
            cars = [car for car in cars if car.id not in busy]

        return await self._enrich(cars)

    async def is_available(self, car_id: int, start: datetime, end: datetime) -> bool:
        """True when no blocking booking on the car overlaps [start, end)."""
        start, end = validate_window(start, end)
        await self._get_car(car_id)

        overlapping = await self.booking_repository.find_blocking_overlaps(
            [car_id], start, end, await self.blocking_status_ids()
        )
        return not overlapping

    async def ensure_available(self, car_id: int, start: datetime, end: datetime) -> None:
        if not await self.is_available(car_id, start, end):
            logger.warning(f"Car {car_id} unavailable for {start} - {end}")
            raise CarUnavailableException(car_id)

    async def search_by_brand(self, brand_name: str) -> List[CarInfo]:
        """Cars whose brand name contains the text, case-insensitive."""
        if not brand_name or not brand_name.strip():
            return []

        brands = await self.brand_repository.search_by_name(brand_name)
        if not brands:
            return []

        cars = await self.car_repository.list_by_brand_ids([brand.id for brand in brands])
        return await self._enrich(cars)
