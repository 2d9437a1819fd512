"""Abstract repository interfaces."""
from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Generic, Iterable, List, Optional, TypeVar

from carrental.domain.models import (
    Booking,
    BookingIssue,
    Car,
    Location,
    Lookup,
    MaintenanceRequest,
    Payment,
    Refund,
    Review,
    User,
)

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """CRUD operations shared by every entity repository."""

    @abstractmethod
    async def get_by_id(self, entity_id: int) -> Optional[T]:
        """Get entity by ID."""
        pass

    @abstractmethod
    async def list_all(self) -> List[T]:
        """List all entities."""
        pass

    @abstractmethod
    async def add(self, entity: T) -> T:
        """Persist a new entity and return it with its ID."""
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Overwrite a stored entity."""
        pass

    @abstractmethod
    async def delete(self, entity_id: int) -> bool:
        """Delete entity by ID. Returns False when nothing was deleted."""
        pass


class LookupRepository(Repository[Lookup]):
    """Name lookup table (roles, statuses, brands, payment methods)."""

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Lookup]:
        """Get row by name, case-insensitive."""
        pass

    @abstractmethod
    async def search_by_name(self, fragment: str) -> List[Lookup]:
        """List rows whose name contains the fragment, case-insensitive."""
        pass


class LocationRepository(Repository[Location]):
    """Abstract location repository interface."""


class UserRepository(Repository[User]):
    """Abstract user repository interface."""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email, case-insensitive."""
        pass


class CarRepository(Repository[Car]):
    """Abstract car repository interface."""

    @abstractmethod
    async def find_duplicate(
        self,
        brand_id: int,
        model_name: str,
        year: Optional[int],
        exclude_id: Optional[int] = None,
    ) -> Optional[Car]:
        """Find a car with the same brand, model and year."""
        pass

    @abstractmethod
    async def get_for_update(self, car_id: int) -> Optional[Car]:
        """Get car by ID, locking its row until the transaction ends."""
        pass

    @abstractmethod
    async def search(
        self,
        brand_id: Optional[int] = None,
        fuel_type: Optional[str] = None,
        transmission: Optional[str] = None,
        min_seats: Optional[int] = None,
        max_daily_rate: Optional[Decimal] = None,
    ) -> List[Car]:
        """Filter cars by attributes. Unset filters are ignored."""
        pass

    @abstractmethod
    async def list_by_brand_ids(self, brand_ids: Iterable[int]) -> List[Car]:
        """List cars of the given brands."""
        pass


class BookingRepository(Repository[Booking]):
    """Abstract booking repository interface."""

    @abstractmethod
    async def list_by_user(self, user_id: int) -> List[Booking]:
        """List bookings of a user, newest first."""
        pass

    @abstractmethod
    async def list_by_car(self, car_id: int) -> List[Booking]:
        """List bookings of a car."""
        pass

    @abstractmethod
    async def exists_for_car(self, car_id: int) -> bool:
        """Check whether any booking references the car."""
        pass

    @abstractmethod
    async def exists_for_user(self, user_id: int) -> bool:
        """Check whether any booking references the user."""
        pass

    @abstractmethod
    async def exists_for_location(self, location_id: int) -> bool:
        """Check whether any booking picks up or drops off at the location."""
        pass

    @abstractmethod
    async def find_blocking_overlaps(
        self,
        car_ids: Iterable[int],
        start: datetime,
        end: datetime,
        blocking_status_ids: Iterable[int],
    ) -> List[Booking]:
        """Bookings on the cars in a blocking status overlapping [start, end)."""
        pass

    @abstractmethod
    async def get_for_update(self, booking_id: int) -> Optional[Booking]:
        """Get booking by ID, locking its row until the transaction ends."""
        pass

    @abstractmethod
    async def delete_with_dependents(self, booking_id: int) -> bool:
        """Delete a booking with its refunds, payments, reviews and issues."""
        pass


class PaymentRepository(Repository[Payment]):
    """Abstract payment repository interface."""

    @abstractmethod
    async def list_by_booking_ids(self, booking_ids: Iterable[int]) -> List[Payment]:
        """List payments of the given bookings, newest first."""
        pass

    @abstractmethod
    async def has_successful_payment(self, booking_id: int) -> bool:
        """Check whether the booking already has a Success payment."""
        pass

    @abstractmethod
    async def get_for_update(self, payment_id: int) -> Optional[Payment]:
        """Get payment by ID under a row lock."""
        pass


class RefundRepository(Repository[Refund]):
    """Abstract refund repository interface."""

    @abstractmethod
    async def find_open_or_completed(self, payment_id: int) -> Optional[Refund]:
        """Find a Pending or Refunded refund for the payment."""
        pass

    @abstractmethod
    async def list_by_user(self, user_id: int) -> List[Refund]:
        """List refunds requested by a user, newest first."""
        pass


class ReviewRepository(Repository[Review]):
    """Abstract review repository interface."""

    @abstractmethod
    async def find_by_booking_and_user(
        self, booking_id: int, user_id: int
    ) -> Optional[Review]:
        """Find the review a user left for a booking."""
        pass

    @abstractmethod
    async def list_by_car(self, car_id: int) -> List[Review]:
        """List reviews of a car, newest first."""
        pass

    @abstractmethod
    async def list_by_user(self, user_id: int) -> List[Review]:
        """List reviews written by a user, newest first."""
        pass


class MaintenanceRequestRepository(Repository[MaintenanceRequest]):
    """Abstract maintenance request repository interface."""

    @abstractmethod
    async def list_open(self) -> List[MaintenanceRequest]:
        """List unresolved requests, newest first."""
        pass

    @abstractmethod
    async def list_by_car(self, car_id: int) -> List[MaintenanceRequest]:
        """List requests for a car, newest first."""
        pass

    @abstractmethod
    async def list_by_reporter(self, user_id: int) -> List[MaintenanceRequest]:
        """List requests reported by a user, newest first."""
        pass

    @abstractmethod
    async def exists_for_reporter(self, user_id: int) -> bool:
        """Check whether the user reported any request."""
        pass


class BookingIssueRepository(Repository[BookingIssue]):
    """Abstract booking issue repository interface."""

    @abstractmethod
    async def list_by_user(self, user_id: int) -> List[BookingIssue]:
        """List issues raised by a user, newest first."""
        pass

    @abstractmethod
    async def list_by_booking(self, booking_id: int) -> List[BookingIssue]:
        """List issues of a booking, newest first."""
        pass
