"""Review service."""
import logging
from typing import List

from carrental.domain.exceptions import (
    BadRequestException,
    NotFoundException,
    UnauthorizedException,
)
from carrental.domain.models import Review, is_staff
from carrental.domain.schemas import ReviewCreateRequest, ReviewUpdateRequest
from carrental.infrastructure.repositories import BookingRepository, ReviewRepository
from carrental.utils import utcnow

logger = logging.getLogger(__name__)


def validate_rating(rating: int) -> None:
    if rating < 1 or rating > 5:
        raise BadRequestException("Rating must be between 1 and 5.")


class ReviewService:
    """Service for car reviews left after a finished rental."""

    def __init__(self, review_repository: ReviewRepository, booking_repository: BookingRepository):
        self.review_repository = review_repository
        self.booking_repository = booking_repository

    async def _get_review(self, review_id: int) -> Review:
        review = await self.review_repository.get_by_id(review_id)
        if review is None:
            raise NotFoundException(f"Review {review_id} not found")
        return review

    async def create(self, user_id: int, request: ReviewCreateRequest) -> Review:
        """Review an own booking once its dropoff time has passed."""
        validate_rating(request.rating)

        booking = await self.booking_repository.get_by_id(request.booking_id)
        if booking is None:
            raise NotFoundException(f"Booking {request.booking_id} not found")
        if booking.user_id != user_id:
            raise UnauthorizedException("You can only review your own bookings.")

        if booking.dropoff_at > utcnow():
            raise BadRequestException("You can review only after the dropoff time.")

        if await self.review_repository.find_by_booking_and_user(booking.id, user_id):
            raise BadRequestException("You have already reviewed this booking.")

        review = await self.review_repository.add(
            Review(
                booking_id=booking.id,
                user_id=user_id,
                car_id=booking.car_id,
                rating=request.rating,
                comment=request.comment,
                created_at=utcnow(),
            )
        )
        logger.info(f"Review {review.id} added for car {review.car_id}")
        return review

    async def update(self, user_id: int, review_id: int, request: ReviewUpdateRequest) -> Review:
        validate_rating(request.rating)
        review = await self._get_review(review_id)
        if review.user_id != user_id:
            raise UnauthorizedException("You can only update your own review.")

        review.rating = request.rating
        review.comment = request.comment
        return await self.review_repository.update(review)

    async def delete(self, user_id: int, role: str, review_id: int) -> None:
        """Owners delete their reviews; staff delete any."""
        review = await self._get_review(review_id)
        if review.user_id != user_id and not is_staff(role):
            raise UnauthorizedException("You can only delete your own review.")

        await self.review_repository.delete(review_id)
        logger.info(f"Review {review_id} deleted by user {user_id}")

    async def get_by_car(self, car_id: int) -> List[Review]:
        return await self.review_repository.list_by_car(car_id)

    async def get_mine(self, user_id: int) -> List[Review]:
        return await self.review_repository.list_by_user(user_id)

    async def get_by_id(self, review_id: int) -> Review:
        return await self._get_review(review_id)
