"""Domain models for Car Rental Service."""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, Optional

from pydantic import BaseModel, Field

from carrental.utils import utcnow


class RoleName(str, Enum):
    """Fixed user roles."""

    ADMIN = "Admin"
    RENTAL_AGENT = "RentalAgent"
    CUSTOMER = "Customer"


class BookingStatusName(str, Enum):
    """Booking lifecycle states, stored by name in the booking_statuses table."""

    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"
    CHECKED_OUT = "CheckedOut"
    COMPLETED = "Completed"


class CarStatusName(str, Enum):
    """Car inventory states."""

    AVAILABLE = "Available"
    RESERVED = "Reserved"
    CHECKED_OUT = "CheckedOut"
    MAINTENANCE = "Maintenance"


class PaymentStatus(str, Enum):
    """Payment status enum."""

    SUCCESS = "Success"
    FAILED = "Failed"
    REFUNDED = "Refunded"


class RefundStatus(str, Enum):
    """Refund status enum. Refunded and Rejected are terminal."""

    PENDING = "Pending"
    REFUNDED = "Refunded"
    REJECTED = "Rejected"


class IssueStatus(str, Enum):
    """Booking issue status enum."""

    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"

    @classmethod
    def parse(cls, value: str) -> Optional["IssueStatus"]:
        """Match a status name case-insensitively, None when unknown."""
        if value is None:
            return None
        wanted = value.strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return None


STAFF_ROLES: FrozenSet[RoleName] = frozenset({RoleName.ADMIN, RoleName.RENTAL_AGENT})

# A booking in one of these states makes the car unavailable for its period.
BLOCKING_BOOKING_STATUSES: FrozenSet[BookingStatusName] = frozenset(
    {
        BookingStatusName.PENDING,
        BookingStatusName.CONFIRMED,
        BookingStatusName.CHECKED_OUT,
    }
)

TERMINAL_BOOKING_STATUSES: FrozenSet[BookingStatusName] = frozenset(
    {BookingStatusName.CANCELLED, BookingStatusName.COMPLETED}
)

BOOKING_STATUS_TRANSITIONS: Dict[BookingStatusName, FrozenSet[BookingStatusName]] = {
    BookingStatusName.PENDING: frozenset(
        {BookingStatusName.CONFIRMED, BookingStatusName.CANCELLED}
    ),
    BookingStatusName.CONFIRMED: frozenset(
        {BookingStatusName.CHECKED_OUT, BookingStatusName.CANCELLED}
    ),
    BookingStatusName.CHECKED_OUT: frozenset({BookingStatusName.COMPLETED}),
    BookingStatusName.CANCELLED: frozenset(),
    BookingStatusName.COMPLETED: frozenset(),
}


def is_staff(role: Optional[str]) -> bool:
    """Check whether a role name belongs to staff (case-insensitive)."""
    if not role:
        return False
    return role.lower() in {r.value.lower() for r in STAFF_ROLES}


class Lookup(BaseModel):
    """Row of a name lookup table (roles, statuses, brands, payment methods)."""

    id: Optional[int] = None
    name: str

    model_config = {"from_attributes": True}


class Location(BaseModel):
    """Pickup/dropoff branch."""

    id: Optional[int] = None
    name: str
    address: Optional[str] = None

    model_config = {"from_attributes": True}


class User(BaseModel):
    """User domain model."""

    id: Optional[int] = None
    first_name: str
    last_name: Optional[str] = None
    email: str
    phone_number: Optional[str] = None
    password_hash: str
    role_id: int
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)

    model_config = {"from_attributes": True}


class Car(BaseModel):
    """Car domain model."""

    id: Optional[int] = None
    brand_id: int
    model_name: str
    year: Optional[int] = None
    fuel_type: Optional[str] = None
    transmission: Optional[str] = None
    seats: Optional[int] = None
    daily_rate: Optional[Decimal] = None
    status_id: int
    image_url: Optional[str] = None
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class Booking(BaseModel):
    """Booking domain model."""

    id: Optional[int] = None
    user_id: int
    car_id: int
    pickup_location_id: int
    dropoff_location_id: int
    pickup_at: datetime
    dropoff_at: datetime
    status_id: int
    total_amount: Decimal
    booked_at: datetime = Field(default_factory=utcnow)

    model_config = {"from_attributes": True}


class Payment(BaseModel):
    """Payment domain model."""

    id: Optional[int] = None
    booking_id: int
    method_id: int
    amount: Decimal
    status: PaymentStatus = PaymentStatus.SUCCESS
    transaction_id: Optional[str] = None
    paid_at: datetime = Field(default_factory=utcnow)

    model_config = {"from_attributes": True}


class Refund(BaseModel):
    """Refund domain model."""

    id: Optional[int] = None
    booking_id: int
    payment_id: int
    user_id: int
    amount: Decimal
    reason: Optional[str] = None
    status: RefundStatus = RefundStatus.PENDING
    requested_at: datetime = Field(default_factory=utcnow)
    processed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class Review(BaseModel):
    """Review domain model."""

    id: Optional[int] = None
    booking_id: int
    user_id: int
    car_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)

    model_config = {"from_attributes": True}


class MaintenanceRequest(BaseModel):
    """Maintenance request domain model."""

    id: Optional[int] = None
    car_id: int
    reported_by_id: int
    description: str
    reported_at: datetime = Field(default_factory=utcnow)
    is_resolved: bool = False

    model_config = {"from_attributes": True}


class BookingIssue(BaseModel):
    """Booking issue domain model."""

    id: Optional[int] = None
    booking_id: int
    user_id: int
    issue_type: str
    description: Optional[str] = None
    status: IssueStatus = IssueStatus.OPEN
    created_at: datetime = Field(default_factory=utcnow)

    model_config = {"from_attributes": True}
