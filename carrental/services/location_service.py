"""Location service."""
import logging
from typing import List

from carrental.domain.exceptions import BadRequestException, NotFoundException
from carrental.domain.models import Location
from carrental.domain.schemas import LocationRequest
from carrental.infrastructure.repositories import BookingRepository, LocationRepository

logger = logging.getLogger(__name__)


class LocationService:
    """Pickup and dropoff branches."""

    def __init__(
        self, location_repository: LocationRepository, booking_repository: BookingRepository
    ):
        self.location_repository = location_repository
        self.booking_repository = booking_repository

    async def get_all(self) -> List[Location]:
        return await self.location_repository.list_all()

    async def get_by_id(self, location_id: int) -> Location:
        location = await self.location_repository.get_by_id(location_id)
        if location is None:
            raise NotFoundException(f"Location {location_id} not found")
        return location

    async def create(self, request: LocationRequest) -> Location:
        location = await self.location_repository.add(
            Location(name=request.name.strip(), address=request.address)
        )
        logger.info(f"Created location {location.id}")
        return location

    async def update(self, location_id: int, request: LocationRequest) -> Location:
        location = await self.get_by_id(location_id)
        location.name = request.name.strip()
        location.address = request.address
        return await self.location_repository.update(location)

    async def delete(self, location_id: int) -> None:
        """Delete a location no booking uses."""
        await self.get_by_id(location_id)
        if await self.booking_repository.exists_for_location(location_id):
            raise BadRequestException("Cannot delete a location used by bookings.")

        await self.location_repository.delete(location_id)
        logger.info(f"Deleted location {location_id}")
