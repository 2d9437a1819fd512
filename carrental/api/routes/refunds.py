"""Refund routes."""
from typing import List

from fastapi import APIRouter, Depends, status
from prometheus_client import Counter

from carrental.domain.models import Refund
from carrental.domain.schemas import RefundCreateRequest
from carrental.services.refund_service import RefundService

from ..dependencies import get_refund_service
from ..security import Principal, guard

router = APIRouter(prefix="/refunds", tags=["refunds"])

# Prometheus metrics
refund_decision_counter = Counter(
    "refund_decisions_total", "Total number of processed refunds", ["decision"]
)


@router.post("/request", response_model=Refund, status_code=status.HTTP_201_CREATED)
async def request_refund(
    request: RefundCreateRequest,
    principal: Principal = Depends(guard("refunds.request")),
    service: RefundService = Depends(get_refund_service),
) -> Refund:
    return await service.request(principal.user_id, request)


@router.get("/mine", response_model=List[Refund])
async def my_refunds(
    principal: Principal = Depends(guard("refunds.mine")),
    service: RefundService = Depends(get_refund_service),
) -> List[Refund]:
    return await service.get_mine(principal.user_id)


@router.get("", response_model=List[Refund])
async def list_refunds(
    _: Principal = Depends(guard("refunds.list")),
    service: RefundService = Depends(get_refund_service),
) -> List[Refund]:
    return await service.get_all()


@router.get("/{refund_id}", response_model=Refund)
async def get_refund(
    refund_id: int,
    _: Principal = Depends(guard("refunds.get")),
    service: RefundService = Depends(get_refund_service),
) -> Refund:
    return await service.get_by_id(refund_id)


@router.post("/{refund_id}/approve", response_model=Refund)
async def approve_refund(
    refund_id: int,
    _: Principal = Depends(guard("refunds.approve")),
    service: RefundService = Depends(get_refund_service),
) -> Refund:
    """Approve a pending refund; its payment becomes Refunded."""
    refund = await service.approve(refund_id)
    refund_decision_counter.labels(decision="approved").inc()
    return refund


@router.post("/{refund_id}/reject", response_model=Refund)
async def reject_refund(
    refund_id: int,
    _: Principal = Depends(guard("refunds.reject")),
    service: RefundService = Depends(get_refund_service),
) -> Refund:
    refund = await service.reject(refund_id)
    refund_decision_counter.labels(decision="rejected").inc()
    return refund
