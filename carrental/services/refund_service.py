"""Refund service.

A refund moves Pending -> Refunded or Pending -> Rejected and never leaves
those terminal states. Approval also flips the linked payment to Refunded;
both writes share the request transaction.
"""
import logging
from typing import List

from carrental.domain.exceptions import (
    BadRequestException,
    NotFoundException,
    UnauthorizedException,
)
from carrental.domain.models import PaymentStatus, Refund, RefundStatus
from carrental.domain.schemas import RefundCreateRequest
from carrental.infrastructure.repositories import (
    BookingRepository,
    PaymentRepository,
    RefundRepository,
)
from carrental.utils import utcnow

logger = logging.getLogger(__name__)


class RefundService:
    """Service for refund requests and their resolution."""

    def __init__(
        self,
        refund_repository: RefundRepository,
        payment_repository: PaymentRepository,
        booking_repository: BookingRepository,
    ):
        self.refund_repository = refund_repository
        self.payment_repository = payment_repository
        self.booking_repository = booking_repository

    async def _get_refund(self, refund_id: int) -> Refund:
        refund = await self.refund_repository.get_by_id(refund_id)
        if refund is None:
            raise NotFoundException(f"Refund {refund_id} not found")
        return refund

    async def request(self, user_id: int, request: RefundCreateRequest) -> Refund:
        """Ask for (part of) a successful payment back."""
        if request.amount <= 0:
            raise BadRequestException("Amount must be greater than 0.")

        booking = await self.booking_repository.get_by_id(request.booking_id)
        if booking is None:
            raise NotFoundException(f"Booking {request.booking_id} not found")
        if booking.user_id != user_id:
            raise UnauthorizedException("You can only request a refund for your own booking.")

        # Serializes concurrent refund requests against the same payment.
        payment = await self.payment_repository.get_for_update(request.payment_id)
        if payment is None:
            raise NotFoundException(f"Payment {request.payment_id} not found")
        if payment.booking_id != booking.id:
            raise BadRequestException("Payment does not belong to the given booking.")
        if payment.status != PaymentStatus.SUCCESS:
            raise BadRequestException("Only successful payments can be refunded.")

        if await self.refund_repository.find_open_or_completed(payment.id):
            raise BadRequestException(
                "There is already a pending or completed refund for this payment."
            )
        if request.amount > payment.amount:
            logger.warning(
                f"Refund of {request.amount} exceeds payment {payment.id} amount {payment.amount}"
            )
            raise BadRequestException("Refund amount cannot exceed the payment amount.")

        refund = await self.refund_repository.add(
            Refund(
                booking_id=booking.id,
                payment_id=payment.id,
                user_id=user_id,
                amount=request.amount,
                reason=request.reason,
                status=RefundStatus.PENDING,
                requested_at=utcnow(),
            )
        )

        logger.info(f"Refund {refund.id} requested for payment {payment.id}")
        return refund

    async def approve(self, refund_id: int) -> Refund:
        """Mark the refund and its payment as Refunded."""
        refund = await self._get_refund(refund_id)
        if refund.status != RefundStatus.PENDING:
            raise BadRequestException("Only pending refunds can be approved.")

        payment = await self.payment_repository.get_for_update(refund.payment_id)
        if payment is None:
            raise NotFoundException(f"Payment {refund.payment_id} not found")

        refund.status = RefundStatus.REFUNDED
        refund.processed_at = utcnow()
        refund = await self.refund_repository.update(refund)

        payment.status = PaymentStatus.REFUNDED
        await self.payment_repository.update(payment)

        logger.info(f"Refund {refund_id} approved, payment {payment.id} refunded")
        return refund

    async def reject(self, refund_id: int) -> Refund:
        """Reject a pending refund. The payment is left untouched."""
        refund = await self._get_refund(refund_id)
        if refund.status != RefundStatus.PENDING:
            raise BadRequestException("Only pending refunds can be rejected.")

        refund.status = RefundStatus.REJECTED
        refund.processed_at = utcnow()
        refund = await self.refund_repository.update(refund)

        logger.info(f"Refund {refund_id} rejected")
        return refund

    async def get_mine(self, user_id: int) -> List[Refund]:
        return await self.refund_repository.list_by_user(user_id)

    async def get_all(self) -> List[Refund]:
        return await self.refund_repository.list_all()

    async def get_by_id(self, refund_id: int) -> Refund:
        return await self._get_refund(refund_id)
