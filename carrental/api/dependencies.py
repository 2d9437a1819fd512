"""API dependencies with dependency injection.

FastAPI caches dependencies per request, so every repository and service
built for one request shares the same session and transaction.
"""
from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carrental.infrastructure.database import get_async_session
from carrental.infrastructure.jwt_handler import JWTHandler
from carrental.infrastructure.models import (
    BookingStatusModel,
    CarBrandModel,
    CarStatusModel,
    PaymentMethodModel,
    RoleModel,
)
from carrental.infrastructure.repositories_postgres import (
    PostgresBookingIssueRepository,
    PostgresBookingRepository,
    PostgresCarRepository,
    PostgresLocationRepository,
    PostgresLookupRepository,
    PostgresMaintenanceRequestRepository,
    PostgresPaymentRepository,
    PostgresRefundRepository,
    PostgresReviewRepository,
    PostgresUserRepository,
)
from carrental.services.auth_service import AuthService
from carrental.services.booking_issue_service import BookingIssueService
from carrental.services.booking_service import BookingService
from carrental.services.car_service import CarService
from carrental.services.location_service import LocationService
from carrental.services.maintenance_service import MaintenanceRequestService
from carrental.services.payment_service import PaymentService
from carrental.services.refund_service import RefundService
from carrental.services.review_service import ReviewService
from carrental.services.user_service import UserService

# Singleton instances
_jwt_handler: Optional[JWTHandler] = None


def get_jwt_handler() -> JWTHandler:
    """Get JWTHandler singleton."""
    global _jwt_handler
    if _jwt_handler is None:
        _jwt_handler = JWTHandler()
    return _jwt_handler


# Repositories


def get_role_repository(session: AsyncSession = Depends(get_async_session)):
    return PostgresLookupRepository(session, RoleModel)


def get_booking_status_repository(session: AsyncSession = Depends(get_async_session)):
    return PostgresLookupRepository(session, BookingStatusModel)


def get_car_status_repository(session: AsyncSession = Depends(get_async_session)):
    return PostgresLookupRepository(session, CarStatusModel)


def get_brand_repository(session: AsyncSession = Depends(get_async_session)):
    return PostgresLookupRepository(session, CarBrandModel)


def get_payment_method_repository(session: AsyncSession = Depends(get_async_session)):
    return PostgresLookupRepository(session, PaymentMethodModel)


def get_user_repository(session: AsyncSession = Depends(get_async_session)):
    return PostgresUserRepository(session)


def get_location_repository(session: AsyncSession = Depends(get_async_session)):
    return PostgresLocationRepository(session)


def get_car_repository(session: AsyncSession = Depends(get_async_session)):
    return PostgresCarRepository(session)


def get_booking_repository(session: AsyncSession = Depends(get_async_session)):
    return PostgresBookingRepository(session)


def get_payment_repository(session: AsyncSession = Depends(get_async_session)):
    return PostgresPaymentRepository(session)


def get_refund_repository(session: AsyncSession = Depends(get_async_session)):
    return PostgresRefundRepository(session)


def get_review_repository(session: AsyncSession = Depends(get_async_session)):
    return PostgresReviewRepository(session)


def get_maintenance_repository(session: AsyncSession = Depends(get_async_session)):
    return PostgresMaintenanceRequestRepository(session)


def get_booking_issue_repository(session: AsyncSession = Depends(get_async_session)):
    return PostgresBookingIssueRepository(session)


# Services


def get_user_service(
    user_repository=Depends(get_user_repository),
    role_repository=Depends(get_role_repository),
    booking_repository=Depends(get_booking_repository),
    maintenance_repository=Depends(get_maintenance_repository),
) -> UserService:
    """Get UserService with dependencies."""
    return UserService(
        user_repository=user_repository,
        role_repository=role_repository,
        booking_repository=booking_repository,
        maintenance_repository=maintenance_repository,
    )


def get_auth_service(
    user_repository=Depends(get_user_repository),
    role_repository=Depends(get_role_repository),
    user_service: UserService = Depends(get_user_service),
) -> AuthService:
    """Get AuthService with dependencies."""
    return AuthService(
        user_repository=user_repository,
        role_repository=role_repository,
        user_service=user_service,
        jwt_handler=get_jwt_handler(),
    )


def get_location_service(
    location_repository=Depends(get_location_repository),
    booking_repository=Depends(get_booking_repository),
) -> LocationService:
    return LocationService(location_repository, booking_repository)


def get_car_service(
    car_repository=Depends(get_car_repository),
    brand_repository=Depends(get_brand_repository),
    car_status_repository=Depends(get_car_status_repository),
    booking_repository=Depends(get_booking_repository),
    booking_status_repository=Depends(get_booking_status_repository),
) -> CarService:
    """Get CarService with dependencies."""
    return CarService(
        car_repository=car_repository,
        brand_repository=brand_repository,
        car_status_repository=car_status_repository,
        booking_repository=booking_repository,
        booking_status_repository=booking_status_repository,
    )


def get_booking_service(
    booking_repository=Depends(get_booking_repository),
    car_repository=Depends(get_car_repository),
    location_repository=Depends(get_location_repository),
    booking_status_repository=Depends(get_booking_status_repository),
    car_service: CarService = Depends(get_car_service),
) -> BookingService:
    """Get BookingService with dependencies."""
    return BookingService(
        booking_repository=booking_repository,
        car_repository=car_repository,
        location_repository=location_repository,
        booking_status_repository=booking_status_repository,
        car_service=car_service,
    )


def get_payment_service(
    payment_repository=Depends(get_payment_repository),
    booking_repository=Depends(get_booking_repository),
    payment_method_repository=Depends(get_payment_method_repository),
    booking_status_repository=Depends(get_booking_status_repository),
) -> PaymentService:
    """Get PaymentService with dependencies."""
    return PaymentService(
        payment_repository=payment_repository,
        booking_repository=booking_repository,
        payment_method_repository=payment_method_repository,
        booking_status_repository=booking_status_repository,
    )


def get_refund_service(
    refund_repository=Depends(get_refund_repository),
    payment_repository=Depends(get_payment_repository),
    booking_repository=Depends(get_booking_repository),
) -> RefundService:
    """Get RefundService with dependencies."""
    return RefundService(
        refund_repository=refund_repository,
        payment_repository=payment_repository,
        booking_repository=booking_repository,
    )


def get_review_service(
    review_repository=Depends(get_review_repository),
    booking_repository=Depends(get_booking_repository),
) -> ReviewService:
    return ReviewService(review_repository, booking_repository)


def get_maintenance_service(
    maintenance_repository=Depends(get_maintenance_repository),
    car_repository=Depends(get_car_repository),
    booking_repository=Depends(get_booking_repository),
) -> MaintenanceRequestService:
    return MaintenanceRequestService(
        maintenance_repository=maintenance_repository,
        car_repository=car_repository,
        booking_repository=booking_repository,
    )


def get_booking_issue_service(
    issue_repository=Depends(get_booking_issue_repository),
    booking_repository=Depends(get_booking_repository),
) -> BookingIssueService:
    return BookingIssueService(issue_repository, booking_repository)
