"""SQLAlchemy ORM models for database tables."""
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)

from carrental.domain.models import IssueStatus, PaymentStatus, RefundStatus
from carrental.infrastructure.database import Base
from carrental.utils import utcnow


def _status_enum(enum_cls, name: str) -> Enum:
    """Store enum values ("In Progress"), not member names, as plain strings."""
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        length=50,
        values_callable=lambda members: [m.value for m in members],
    )


class RoleModel(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)


class BookingStatusModel(Base):
    __tablename__ = "booking_statuses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)


class CarStatusModel(Base):
    __tablename__ = "car_statuses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)


class CarBrandModel(Base):
    __tablename__ = "car_brands"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)


class PaymentMethodModel(Base):
    __tablename__ = "payment_methods"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)


class LocationModel(Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    address = Column(Text, nullable=True)


class UserModel(Base):
    """SQLAlchemy model for users table."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    email = Column(String(150), nullable=False, unique=True, index=True)
    phone_number = Column(String(20), nullable=True)
    password_hash = Column(String(255), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="RESTRICT"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class CarModel(Base):
    """SQLAlchemy model for cars table."""

    __tablename__ = "cars"

    id = Column(Integer, primary_key=True, autoincrement=True)
    brand_id = Column(Integer, ForeignKey("car_brands.id", ondelete="RESTRICT"), nullable=False)
    model_name = Column(String(100), nullable=False)
    year = Column(Integer, nullable=True)
    fuel_type = Column(String(30), nullable=True)
    transmission = Column(String(30), nullable=True)
    seats = Column(Integer, nullable=True)
    daily_rate = Column(Numeric(10, 2), nullable=True)
    status_id = Column(Integer, ForeignKey("car_statuses.id", ondelete="RESTRICT"), nullable=False)
    image_url = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)

    __table_args__ = (Index("idx_cars_brand_model_year", "brand_id", "model_name", "year"),)


class BookingModel(Base):
    """SQLAlchemy model for bookings table."""

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    car_id = Column(Integer, ForeignKey("cars.id", ondelete="RESTRICT"), nullable=False, index=True)
    pickup_location_id = Column(
        Integer, ForeignKey("locations.id", ondelete="RESTRICT"), nullable=False
    )
    dropoff_location_id = Column(
        Integer, ForeignKey("locations.id", ondelete="RESTRICT"), nullable=False
    )
    pickup_at = Column(DateTime, nullable=False)
    dropoff_at = Column(DateTime, nullable=False)
    status_id = Column(
        Integer, ForeignKey("booking_statuses.id", ondelete="RESTRICT"), nullable=False
    )
    total_amount = Column(Numeric(10, 2), nullable=False)
    booked_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    __table_args__ = (
        CheckConstraint("dropoff_at > pickup_at", name="ck_bookings_dropoff_after_pickup"),
        Index("idx_bookings_car_period", "car_id", "pickup_at", "dropoff_at"),
    )


class PaymentModel(Base):
    """SQLAlchemy model for payments table."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)
    method_id = Column(
        Integer, ForeignKey("payment_methods.id", ondelete="RESTRICT"), nullable=False
    )
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(_status_enum(PaymentStatus, "payment_status"), nullable=False)
    transaction_id = Column(String(64), nullable=True)
    paid_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (Index("idx_payments_booking_status", "booking_id", "status"),)


class RefundModel(Base):
    """SQLAlchemy model for refunds table."""

    __tablename__ = "refunds"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)
    payment_id = Column(Integer, ForeignKey("payments.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    reason = Column(Text, nullable=True)
    status = Column(_status_enum(RefundStatus, "refund_status"), nullable=False)
    requested_at = Column(DateTime, nullable=False, default=utcnow)
    processed_at = Column(DateTime, nullable=True)

    __table_args__ = (Index("idx_refunds_payment_status", "payment_id", "status"),)


class ReviewModel(Base):
    """SQLAlchemy model for reviews table."""

    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    car_id = Column(Integer, ForeignKey("cars.id", ondelete="RESTRICT"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("booking_id", "user_id", name="uq_reviews_booking_user"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )


class MaintenanceRequestModel(Base):
    """SQLAlchemy model for maintenance_requests table."""

    __tablename__ = "maintenance_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    car_id = Column(Integer, ForeignKey("cars.id", ondelete="CASCADE"), nullable=False, index=True)
    reported_by_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    description = Column(Text, nullable=False)
    reported_at = Column(DateTime, nullable=False, default=utcnow)
    is_resolved = Column(Boolean, nullable=False, default=False, index=True)


class BookingIssueModel(Base):
    """SQLAlchemy model for booking_issues table."""

    __tablename__ = "booking_issues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    issue_type = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(_status_enum(IssueStatus, "issue_status"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
