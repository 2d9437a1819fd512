"""Booking issue service."""
import logging
from typing import List

from carrental.domain.exceptions import (
    BadRequestException,
    NotFoundException,
    UnauthorizedException,
)
from carrental.domain.models import BookingIssue, IssueStatus
from carrental.domain.schemas import BookingIssueCreateRequest
from carrental.infrastructure.repositories import BookingIssueRepository, BookingRepository
from carrental.utils import utcnow

logger = logging.getLogger(__name__)


class BookingIssueService:
    """Service for problems customers raise about their bookings."""

    def __init__(
        self,
        issue_repository: BookingIssueRepository,
        booking_repository: BookingRepository,
    ):
        self.issue_repository = issue_repository
        self.booking_repository = booking_repository

    async def create(self, user_id: int, request: BookingIssueCreateRequest) -> BookingIssue:
        booking = await self.booking_repository.get_by_id(request.booking_id)
        if booking is None:
            raise NotFoundException(f"Booking {request.booking_id} not found")
        if booking.user_id != user_id:
            raise UnauthorizedException("You can only report issues for your own bookings.")

        issue = await self.issue_repository.add(
            BookingIssue(
                booking_id=booking.id,
                user_id=user_id,
                issue_type=request.issue_type.strip(),
                description=request.description,
                status=IssueStatus.OPEN,
                created_at=utcnow(),
            )
        )
        logger.info(f"Issue {issue.id} opened on booking {booking.id}")
        return issue

    async def get_mine(self, user_id: int) -> List[BookingIssue]:
        return await self.issue_repository.list_by_user(user_id)

    async def get_all(self) -> List[BookingIssue]:
        return await self.issue_repository.list_all()

    async def get_by_booking(self, booking_id: int) -> List[BookingIssue]:
        return await self.issue_repository.list_by_booking(booking_id)

    async def update_status(self, issue_id: int, status: str) -> BookingIssue:
        """Set any status from the closed vocabulary, matched case-insensitively."""
        new_status = IssueStatus.parse(status)
        if new_status is None:
            raise BadRequestException(
                "Invalid status. Allowed: Open, In Progress, Resolved, Closed."
            )

        issue = await self.issue_repository.get_by_id(issue_id)
        if issue is None:
            raise NotFoundException(f"Issue {issue_id} not found")

        old_status = issue.status
        issue.status = new_status
        issue = await self.issue_repository.update(issue)

        logger.info(f"Issue {issue_id} status: {old_status.value} -> {new_status.value}")
        return issue
