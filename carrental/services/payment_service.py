"""Payment service."""
import logging
import uuid
from typing import List

from carrental.domain.exceptions import (
    BadRequestException,
    NotFoundException,
    UnauthorizedException,
)
from carrental.domain.models import (
    TERMINAL_BOOKING_STATUSES,
    Payment,
    PaymentStatus,
    is_staff,
)
from carrental.domain.schemas import PaymentRequest
from carrental.infrastructure.repositories import (
    BookingRepository,
    LookupRepository,
    PaymentRepository,
)
from carrental.utils import utcnow

logger = logging.getLogger(__name__)


class PaymentService:
    """Service for paying bookings.

    There is no gateway: a payment that passes validation is recorded as
    Success with a random transaction id.
    """

    def __init__(
        self,
        payment_repository: PaymentRepository,
        booking_repository: BookingRepository,
        payment_method_repository: LookupRepository,
        booking_status_repository: LookupRepository,
    ):
        self.payment_repository = payment_repository
        self.booking_repository = booking_repository
        self.payment_method_repository = payment_method_repository
        self.booking_status_repository = booking_status_repository

    async def pay(self, user_id: int, role: str, request: PaymentRequest) -> Payment:
        """Pay a booking for its stored total.

        The booking row stays locked until commit so a concurrent second
        payment waits and then sees the first one.
        """
        booking = await self.booking_repository.get_for_update(request.booking_id)
        if booking is None:
            raise NotFoundException(f"Booking {request.booking_id} not found")

        if not is_staff(role) and booking.user_id != user_id:
            raise UnauthorizedException("You can only pay for your own booking.")

        if await self.payment_method_repository.get_by_id(request.method_id) is None:
            raise NotFoundException(f"PaymentMethod {request.method_id} not found")

        status = await self.booking_status_repository.get_by_id(booking.status_id)
        terminal = {s.value.lower() for s in TERMINAL_BOOKING_STATUSES}
        if status and status.name.lower() in terminal:
            raise BadRequestException(f"Cannot pay for a {status.name.lower()} booking.")

        if await self.payment_repository.has_successful_payment(booking.id):
            logger.warning(f"Duplicate payment rejected for booking {booking.id}")
            raise BadRequestException("This booking already has a successful payment.")

        payment = await self.payment_repository.add(
            Payment(
                booking_id=booking.id,
                method_id=request.method_id,
                amount=booking.total_amount,
                status=PaymentStatus.SUCCESS,
                transaction_id=uuid.uuid4().hex,
                paid_at=utcnow(),
            )
        )

        logger.info(f"Payment {payment.id} of {payment.amount} recorded for booking {booking.id}")
        return payment

    async def get_mine(self, user_id: int) -> List[Payment]:
        """Payments of the user's bookings, newest first."""
        bookings = await self.booking_repository.list_by_user(user_id)
        return await self.payment_repository.list_by_booking_ids([b.id for b in bookings])

    async def get_all(self) -> List[Payment]:
        return await self.payment_repository.list_all()

    async def get_by_id(self, payment_id: int) -> Payment:
        payment = await self.payment_repository.get_by_id(payment_id)
        if payment is None:
            raise NotFoundException(f"Payment {payment_id} not found")
        return payment
