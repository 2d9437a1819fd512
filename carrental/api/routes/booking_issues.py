"""Booking issue routes."""
from typing import List

from fastapi import APIRouter, Depends, status

from carrental.domain.models import BookingIssue
from carrental.domain.schemas import BookingIssueCreateRequest, BookingIssueStatusUpdateRequest
from carrental.services.booking_issue_service import BookingIssueService

from ..dependencies import get_booking_issue_service
from ..security import Principal, guard

router = APIRouter(prefix="/bookingissues", tags=["booking-issues"])


@router.post("", response_model=BookingIssue, status_code=status.HTTP_201_CREATED)
async def create_issue(
    request: BookingIssueCreateRequest,
    principal: Principal = Depends(guard("issues.create")),
    service: BookingIssueService = Depends(get_booking_issue_service),
) -> BookingIssue:
    return await service.create(principal.user_id, request)


@router.get("/mine", response_model=List[BookingIssue])
async def my_issues(
    principal: Principal = Depends(guard("issues.mine")),
    service: BookingIssueService = Depends(get_booking_issue_service),
) -> List[BookingIssue]:
    return await service.get_mine(principal.user_id)


@router.get("", response_model=List[BookingIssue])
async def list_issues(
    _: Principal = Depends(guard("issues.list")),
    service: BookingIssueService = Depends(get_booking_issue_service),
) -> List[BookingIssue]:
    return await service.get_all()


@router.get("/booking/{booking_id}", response_model=List[BookingIssue])
async def issues_for_booking(
    booking_id: int,
    _: Principal = Depends(guard("issues.by_booking")),
    service: BookingIssueService = Depends(get_booking_issue_service),
) -> List[BookingIssue]:
    return await service.get_by_booking(booking_id)


@router.patch("/{issue_id}/status", response_model=BookingIssue)
async def update_issue_status(
    issue_id: int,
    request: BookingIssueStatusUpdateRequest,
    _: Principal = Depends(guard("issues.update_status")),
    service: BookingIssueService = Depends(get_booking_issue_service),
) -> BookingIssue:
    return await service.update_status(issue_id, request.status)
