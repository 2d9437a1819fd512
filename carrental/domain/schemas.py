"""Request and response models for the HTTP API."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class RegisterRequest(BaseModel):
    """Public registration request model."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: str = Field(min_length=3, max_length=150, pattern=r"^[^@\s]+@[^@\s]+$")
    phone_number: Optional[str] = Field(default=None, max_length=20)
    password: str = Field(min_length=6, max_length=128)


class AdminRegisterRequest(RegisterRequest):
    """Registration by an administrator with an explicit role."""

    role_id: int


class LoginRequest(BaseModel):
    """Login request model."""

    email: str
    password: str


class LoginResponse(BaseModel):
    """Login response model."""

    access_token: str
    token_type: str = "bearer"
    user_id: int
    role: str
    expires_in_minutes: int


class WhoAmIResponse(BaseModel):
    """Claims of the presented token."""

    user_id: int
    email: str
    role: str


class UserInfo(BaseModel):
    """User response model (never exposes the password hash)."""

    id: int
    first_name: str
    last_name: Optional[str] = None
    email: str
    phone_number: Optional[str] = None
    role_id: int
    role_name: Optional[str] = None
    is_active: bool
    created_at: datetime


class UserUpdateRequest(BaseModel):
    """Profile update; unset fields keep their value."""

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+$")
    phone_number: Optional[str] = Field(default=None, max_length=20)


class ChangeRoleRequest(BaseModel):
    """Role change by id or by name."""

    role_id: Optional[int] = None
    role_name: Optional[str] = None

    @model_validator(mode="after")
    def _one_of(self) -> "ChangeRoleRequest":
        if self.role_id is None and not self.role_name:
            raise ValueError("role_id or role_name is required")
        return self


class SetUserStatusRequest(BaseModel):
    is_active: bool


class LocationRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    address: Optional[str] = None


class CarRequest(BaseModel):
    """Car create/update request model."""

    brand_id: int
    model_name: str = Field(min_length=1, max_length=100)
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    fuel_type: Optional[str] = Field(default=None, max_length=30)
    transmission: Optional[str] = Field(default=None, max_length=30)
    seats: Optional[int] = Field(default=None, ge=1, le=60)
    daily_rate: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    status_id: int
    image_url: Optional[str] = Field(default=None, max_length=500)
    description: Optional[str] = None


class CarInfo(BaseModel):
    """Car response model with brand and status names."""

    id: int
    brand_id: int
    brand_name: Optional[str] = None
    model_name: str
    year: Optional[int] = None
    fuel_type: Optional[str] = None
    transmission: Optional[str] = None
    seats: Optional[int] = None
    daily_rate: Optional[Decimal] = None
    status_id: int
    status_name: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None


class CarStatusUpdateRequest(BaseModel):
    status_id: int


class CarSearchRequest(BaseModel):
    """Car search filters. The availability window applies when both ends are set."""

    brand_id: Optional[int] = None
    fuel_type: Optional[str] = None
    transmission: Optional[str] = None
    min_seats: Optional[int] = None
    max_daily_rate: Optional[Decimal] = None
    from_utc: Optional[datetime] = None
    to_utc: Optional[datetime] = None


class QuoteRequest(BaseModel):
    car_id: int
    from_utc: datetime
    to_utc: datetime


class QuoteResponse(BaseModel):
    """Price breakdown for a rental period."""

    car_id: Optional[int] = None
    days: int
    daily_rate: Decimal
    subtotal: Decimal
    taxes: Decimal
    total: Decimal


class BookingCreateRequest(BaseModel):
    """Booking request model. The total is always computed by the server."""

    car_id: int
    pickup_location_id: int
    dropoff_location_id: int
    pickup_at: datetime
    dropoff_at: datetime


class BookingInfo(BaseModel):
    """Booking response model with display names."""

    id: int
    user_id: int
    car_id: int
    car_name: Optional[str] = None
    pickup_location_id: int
    pickup_location_name: Optional[str] = None
    dropoff_location_id: int
    dropoff_location_name: Optional[str] = None
    pickup_at: datetime
    dropoff_at: datetime
    status_id: int
    status_name: Optional[str] = None
    total_amount: Decimal
    booked_at: datetime


class BookingStatusUpdateRequest(BaseModel):
    status_name: str


class PaymentRequest(BaseModel):
    """Payment request model. The amount is taken from the booking."""

    booking_id: int
    method_id: int


class RefundCreateRequest(BaseModel):
    booking_id: int
    payment_id: int
    amount: Decimal = Field(max_digits=10, decimal_places=2)
    reason: Optional[str] = None


class ReviewCreateRequest(BaseModel):
    booking_id: int
    rating: int
    comment: Optional[str] = None


class ReviewUpdateRequest(BaseModel):
    rating: int
    comment: Optional[str] = None


class MaintenanceRequestCreate(BaseModel):
    car_id: int
    description: str


class BookingIssueCreateRequest(BaseModel):
    booking_id: int
    issue_type: str = Field(min_length=1, max_length=50)
    description: Optional[str] = None


class BookingIssueStatusUpdateRequest(BaseModel):
    status: str
