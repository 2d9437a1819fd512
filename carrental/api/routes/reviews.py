"""Review routes."""
from typing import List

from fastapi import APIRouter, Depends, Response, status

from carrental.domain.models import Review
from carrental.domain.schemas import ReviewCreateRequest, ReviewUpdateRequest
from carrental.services.review_service import ReviewService

from ..dependencies import get_review_service
from ..security import Principal, guard

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("/car/{car_id}", response_model=List[Review])
async def reviews_for_car(
    car_id: int, service: ReviewService = Depends(get_review_service)
) -> List[Review]:
    return await service.get_by_car(car_id)


@router.get("/mine", response_model=List[Review])
async def my_reviews(
    principal: Principal = Depends(guard("reviews.mine")),
    service: ReviewService = Depends(get_review_service),
) -> List[Review]:
    return await service.get_mine(principal.user_id)


@router.post("", response_model=Review, status_code=status.HTTP_201_CREATED)
async def create_review(
    request: ReviewCreateRequest,
    principal: Principal = Depends(guard("reviews.create")),
    service: ReviewService = Depends(get_review_service),
) -> Review:
    return await service.create(principal.user_id, request)


@router.get("/{review_id}", response_model=Review)
async def get_review(
    review_id: int,
    _: Principal = Depends(guard("reviews.get")),
    service: ReviewService = Depends(get_review_service),
) -> Review:
    return await service.get_by_id(review_id)


@router.put("/{review_id}", response_model=Review)
async def update_review(
    review_id: int,
    request: ReviewUpdateRequest,
    principal: Principal = Depends(guard("reviews.update")),
    service: ReviewService = Depends(get_review_service),
) -> Review:
    return await service.update(principal.user_id, review_id, request)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: int,
    principal: Principal = Depends(guard("reviews.delete")),
    service: ReviewService = Depends(get_review_service),
) -> Response:
    await service.delete(principal.user_id, principal.role, review_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
