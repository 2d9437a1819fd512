"""Payment routes."""
from typing import List

from fastapi import APIRouter, Depends, status
from prometheus_client import Counter

from carrental.domain.exceptions import DomainException
from carrental.domain.models import Payment
from carrental.domain.schemas import PaymentRequest
from carrental.services.payment_service import PaymentService

from ..dependencies import get_payment_service
from ..security import Principal, guard

router = APIRouter(prefix="/payments", tags=["payments"])

# Prometheus metrics
payment_counter = Counter("payment_total", "Total number of payment attempts", ["status"])


@router.post("", response_model=Payment, status_code=status.HTTP_201_CREATED)
async def pay(
    request: PaymentRequest,
    principal: Principal = Depends(guard("payments.pay")),
    service: PaymentService = Depends(get_payment_service),
) -> Payment:
    """Pay a booking; owners pay their own, staff pay any."""
    try:
        payment = await service.pay(principal.user_id, principal.role, request)
    except DomainException as e:
        payment_counter.labels(status=e.code.lower()).inc()
        raise
    payment_counter.labels(status="success").inc()
    return payment


@router.get("/mine", response_model=List[Payment])
async def my_payments(
    principal: Principal = Depends(guard("payments.mine")),
    service: PaymentService = Depends(get_payment_service),
) -> List[Payment]:
    return await service.get_mine(principal.user_id)


@router.get("", response_model=List[Payment])
async def list_payments(
    _: Principal = Depends(guard("payments.list")),
    service: PaymentService = Depends(get_payment_service),
) -> List[Payment]:
    return await service.get_all()


@router.get("/{payment_id}", response_model=Payment)
async def get_payment(
    payment_id: int,
    _: Principal = Depends(guard("payments.get")),
    service: PaymentService = Depends(get_payment_service),
) -> Payment:
    return await service.get_by_id(payment_id)
