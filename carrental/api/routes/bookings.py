"""Booking routes."""
import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from prometheus_client import Counter, Histogram

from carrental.domain.exceptions import DomainException
from carrental.domain.schemas import (
    BookingCreateRequest,
    BookingInfo,
    BookingStatusUpdateRequest,
    QuoteRequest,
    QuoteResponse,
)
from carrental.services.booking_service import BookingService

from ..dependencies import get_booking_service
from ..security import Principal, guard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])

# Prometheus metrics
booking_created_counter = Counter(
    "booking_created_total", "Total number of booking attempts", ["status"]
)
booking_cancelled_counter = Counter(
    "booking_cancelled_total", "Total number of cancellation attempts", ["status"]
)
booking_creation_duration = Histogram(
    "booking_creation_duration_seconds", "Time spent creating bookings"
)


@router.post("/quote", response_model=QuoteResponse)
async def quote(
    request: QuoteRequest,
    _: Principal = Depends(guard("bookings.quote")),
    service: BookingService = Depends(get_booking_service),
) -> QuoteResponse:
    return await service.quote(request)


@router.post("", response_model=BookingInfo, status_code=status.HTTP_201_CREATED)
async def create_booking(
    request: BookingCreateRequest,
    principal: Principal = Depends(guard("bookings.create")),
    service: BookingService = Depends(get_booking_service),
) -> BookingInfo:
    """Book a car. The total is computed from the car's daily rate."""
    try:
        with booking_creation_duration.time():
            booking = await service.create(principal.user_id, request)
    except DomainException as e:
        booking_created_counter.labels(status=e.code.lower()).inc()
        raise
    booking_created_counter.labels(status="success").inc()
    return booking


@router.get("/mine", response_model=List[BookingInfo])
async def my_bookings(
    principal: Principal = Depends(guard("bookings.mine")),
    service: BookingService = Depends(get_booking_service),
) -> List[BookingInfo]:
    return await service.get_mine(principal.user_id)


@router.get("", response_model=List[BookingInfo])
async def list_bookings(
    _: Principal = Depends(guard("bookings.list")),
    service: BookingService = Depends(get_booking_service),
) -> List[BookingInfo]:
    return await service.get_all()


@router.get("/{booking_id}", response_model=BookingInfo)
async def get_booking(
    booking_id: int,
    _: Principal = Depends(guard("bookings.get")),
    service: BookingService = Depends(get_booking_service),
) -> BookingInfo:
    return await service.get_by_id(booking_id)


@router.post("/{booking_id}/cancel", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_booking(
    booking_id: int,
    principal: Principal = Depends(guard("bookings.cancel")),
    service: BookingService = Depends(get_booking_service),
) -> Response:
    try:
        await service.cancel(principal.user_id, booking_id)
    except DomainException as e:
        booking_cancelled_counter.labels(status=e.code.lower()).inc()
        raise
    booking_cancelled_counter.labels(status="success").inc()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{booking_id}/status", response_model=BookingInfo)
async def update_booking_status(
    booking_id: int,
    request: BookingStatusUpdateRequest,
    _: Principal = Depends(guard("bookings.update_status")),
    service: BookingService = Depends(get_booking_service),
) -> BookingInfo:
    return await service.update_status(booking_id, request.status_name)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(
    booking_id: int,
    principal: Principal = Depends(guard("bookings.delete")),
    service: BookingService = Depends(get_booking_service),
) -> Response:
    await service.delete(booking_id)
    logger.info(f"Booking {booking_id} deleted by admin {principal.user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
