"""Maintenance request service."""
import logging
from datetime import timedelta
from typing import List

from carrental.config import settings
from carrental.domain.exceptions import (
    BadRequestException,
    NotFoundException,
    UnauthorizedException,
)
from carrental.domain.models import MaintenanceRequest, is_staff
from carrental.domain.schemas import MaintenanceRequestCreate
from carrental.infrastructure.repositories import (
    BookingRepository,
    CarRepository,
    MaintenanceRequestRepository,
)
from carrental.utils import utcnow

logger = logging.getLogger(__name__)


class MaintenanceRequestService:
    """Service for reporting and resolving car maintenance issues."""

    def __init__(
        self,
        maintenance_repository: MaintenanceRequestRepository,
        car_repository: CarRepository,
        booking_repository: BookingRepository,
        lead_days: int = settings.maintenance_report_lead_days,
        window_days: int = settings.maintenance_report_window_days,
    ):
        self.maintenance_repository = maintenance_repository
        self.car_repository = car_repository
        self.booking_repository = booking_repository
        self.lead_days = lead_days
        self.window_days = window_days

    async def _has_recent_rental(self, user_id: int, car_id: int) -> bool:
        """A booking of the car starting by tomorrow and ending within the window."""
        now = utcnow()
        latest_pickup = now + timedelta(days=self.lead_days)
        earliest_dropoff = now - timedelta(days=self.window_days)
        for booking in await self.booking_repository.list_by_car(car_id):
            if (
                booking.user_id == user_id
                and booking.pickup_at <= latest_pickup
                and booking.dropoff_at >= earliest_dropoff
            ):
                return True
        return False

    async def create(
        self, user_id: int, role: str, request: MaintenanceRequestCreate
    ) -> MaintenanceRequest:
        """Report a problem with a car.

        Customers can only report cars they rented recently; staff can
        report any car.
        """
        description = (request.description or "").strip()
        if not description:
            raise BadRequestException("Issue description is required.")

        if await self.car_repository.get_by_id(request.car_id) is None:
            raise NotFoundException(f"Car {request.car_id} not found")

        if not is_staff(role) and not await self._has_recent_rental(user_id, request.car_id):
            raise UnauthorizedException(
                "You can only report maintenance for cars you rented recently."
            )

        maintenance_request = await self.maintenance_repository.add(
            MaintenanceRequest(
                car_id=request.car_id,
                reported_by_id=user_id,
                description=description,
                reported_at=utcnow(),
                is_resolved=False,
            )
        )
        logger.info(
            f"Maintenance request {maintenance_request.id} reported for car {request.car_id}"
        )
        return maintenance_request

    async def resolve(self, request_id: int) -> MaintenanceRequest:
        maintenance_request = await self.get_by_id(request_id)
        if maintenance_request.is_resolved:
            raise BadRequestException("Request is already resolved.")

        maintenance_request.is_resolved = True
        maintenance_request = await self.maintenance_repository.update(maintenance_request)
        logger.info(f"Maintenance request {request_id} resolved")
        return maintenance_request

    async def get_open(self) -> List[MaintenanceRequest]:
        return await self.maintenance_repository.list_open()

    async def get_by_car(self, car_id: int) -> List[MaintenanceRequest]:
        return await self.maintenance_repository.list_by_car(car_id)

    async def get_mine(self, user_id: int) -> List[MaintenanceRequest]:
        return await self.maintenance_repository.list_by_reporter(user_id)

    async def get_by_id(self, request_id: int) -> MaintenanceRequest:
        maintenance_request = await self.maintenance_repository.get_by_id(request_id)
        if maintenance_request is None:
            raise NotFoundException(f"Maintenance request {request_id} not found")
        return maintenance_request
