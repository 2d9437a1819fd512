"""Tests for BookingIssueService."""
import pytest

from carrental.domain.exceptions import (
    BadRequestException,
    NotFoundException,
    UnauthorizedException,
)
from carrental.domain.models import Booking, Car, IssueStatus, User
from carrental.domain.schemas import BookingIssueCreateRequest
from carrental.infrastructure.repositories_postgres import (
    PostgresBookingIssueRepository,
    PostgresBookingRepository,
)
from carrental.services.booking_issue_service import BookingIssueService


@pytest.fixture
def issue_service(
    issue_repository: PostgresBookingIssueRepository,
    booking_repository: PostgresBookingRepository,
) -> BookingIssueService:
    return BookingIssueService(issue_repository, booking_repository)


@pytest.fixture
async def booking(make_booking, customer: User, car: Car, future_window: tuple) -> Booking:
    return await make_booking(customer, car, *future_window)


def test_issue_status_parse() -> None:
    assert IssueStatus.parse("in progress") == IssueStatus.IN_PROGRESS
    assert IssueStatus.parse(" CLOSED ") == IssueStatus.CLOSED
    assert IssueStatus.parse("Escalated") is None
    assert IssueStatus.parse(None) is None


@pytest.mark.asyncio
async def test_create_issue(
    issue_service: BookingIssueService, customer: User, booking: Booking
) -> None:
    issue = await issue_service.create(
        customer.id,
        BookingIssueCreateRequest(booking_id=booking.id, issue_type=" Billing ", description="Charged twice"),
    )

    assert issue.status == IssueStatus.OPEN
    assert issue.issue_type == "Billing"
    assert [i.id for i in await issue_service.get_mine(customer.id)] == [issue.id]
    assert [i.id for i in await issue_service.get_by_booking(booking.id)] == [issue.id]


@pytest.mark.asyncio
async def test_create_issue_for_foreign_booking_fails(
    issue_service: BookingIssueService, other_customer: User, booking: Booking
) -> None:
    with pytest.raises(UnauthorizedException):
        await issue_service.create(
            other_customer.id,
            BookingIssueCreateRequest(booking_id=booking.id, issue_type="Vehicle"),
        )


@pytest.mark.asyncio
async def test_create_issue_missing_booking(
    issue_service: BookingIssueService, customer: User
) -> None:
    with pytest.raises(NotFoundException):
        await issue_service.create(
            customer.id, BookingIssueCreateRequest(booking_id=999, issue_type="Vehicle")
        )


@pytest.mark.asyncio
async def test_update_status_canonical_casing(
    issue_service: BookingIssueService, customer: User, booking: Booking
) -> None:
    """Test statuses match case-insensitively and are stored canonically."""
    issue = await issue_service.create(
        customer.id, BookingIssueCreateRequest(booking_id=booking.id, issue_type="Pickup")
    )

    updated = await issue_service.update_status(issue.id, "IN PROGRESS")

    assert updated.status == IssueStatus.IN_PROGRESS
    assert updated.status.value == "In Progress"
    assert len(await issue_service.get_all()) == 1


@pytest.mark.asyncio
async def test_update_status_invalid_value(
    issue_service: BookingIssueService, customer: User, booking: Booking
) -> None:
    issue = await issue_service.create(
        customer.id, BookingIssueCreateRequest(booking_id=booking.id, issue_type="Pickup")
    )

    with pytest.raises(BadRequestException) as exc_info:
        await issue_service.update_status(issue.id, "Escalated")

    assert exc_info.value.message == "Invalid status. Allowed: Open, In Progress, Resolved, Closed."


@pytest.mark.asyncio
async def test_update_status_missing_issue(issue_service: BookingIssueService) -> None:
    with pytest.raises(NotFoundException):
        await issue_service.update_status(999, "Closed")
