"""Domain layer."""
from carrental.domain.exceptions import (
    BadRequestException,
    CarUnavailableException,
    DomainException,
    InvalidCredentialsException,
    InvalidTokenException,
    NotFoundException,
    TokenExpiredException,
    UnauthorizedException,
    UserAlreadyExistsException,
)
from carrental.domain.models import (
    BLOCKING_BOOKING_STATUSES,
    BOOKING_STATUS_TRANSITIONS,
    Booking,
    BookingIssue,
    BookingStatusName,
    Car,
    CarStatusName,
    IssueStatus,
    Location,
    Lookup,
    MaintenanceRequest,
    Payment,
    PaymentStatus,
    Refund,
    RefundStatus,
    Review,
    RoleName,
    User,
)

__all__ = [
    # Models
    "Booking",
    "BookingIssue",
    "Car",
    "Location",
    "Lookup",
    "MaintenanceRequest",
    "Payment",
    "Refund",
    "Review",
    "User",
    # Enumerations
    "BookingStatusName",
    "CarStatusName",
    "IssueStatus",
    "PaymentStatus",
    "RefundStatus",
    "RoleName",
    "BLOCKING_BOOKING_STATUSES",
    "BOOKING_STATUS_TRANSITIONS",
    # Exceptions
    "DomainException",
    "NotFoundException",
    "BadRequestException",
    "CarUnavailableException",
    "UnauthorizedException",
    "UserAlreadyExistsException",
    "InvalidCredentialsException",
    "InvalidTokenException",
    "TokenExpiredException",
]
