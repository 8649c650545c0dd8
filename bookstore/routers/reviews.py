"""
Reviews Router

A user may review each book once. Only the author of a review may
update or delete it.

Endpoints:
- POST /reviews - Review a book
- GET /reviews/{review_id} - Get a review
- PUT /reviews/{review_id} - Update own review
- DELETE /reviews/{review_id} - Delete own review

Reviews of a given book are listed at GET /books/{book_id}/reviews.
"""

from fastapi import APIRouter, Request, status

from bookstore.config import get_settings
from bookstore.dependencies import CurrentIdentity, DbSession, OwnedReview
from bookstore.schemas import (
    MessageResponse,
    ReviewCreate,
    ReviewMessageResponse,
    ReviewResponse,
    ReviewUpdate,
)
from bookstore.services import reviews as review_service
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/reviews",
    tags=["Reviews"],
    responses={
        401: {"description": "Access denied"},
        403: {"description": "Invalid token or not the review's author"},
        404: {"description": "Review or book not found"},
    },
)


@router.post(
    "",
    response_model=ReviewMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Review a book",
    description="Rating 1-5 with an optional comment. One review per user per book.",
)
@limiter.limit(settings.rate_limit_default)
def create_review(
    request: Request,
    review_data: ReviewCreate,
    identity: CurrentIdentity,
    db: DbSession,
) -> ReviewMessageResponse:
    review = review_service.create_review(db, identity, review_data)
    return ReviewMessageResponse(
        message="Review added successfully",
        review=ReviewResponse.model_validate(review),
    )


@router.get(
    "/{review_id}",
    response_model=ReviewResponse,
    summary="Get a review by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_review(
    request: Request,
    review_id: int,
    identity: CurrentIdentity,
    db: DbSession,
) -> ReviewResponse:
    return ReviewResponse.model_validate(review_service.get_review(db, review_id))


@router.put(
    "/{review_id}",
    response_model=ReviewMessageResponse,
    summary="Update own review",
    description="Only rating and comment may change. Omitted fields are left as they are.",
)
@limiter.limit(settings.rate_limit_default)
def update_review(
    request: Request,
    review: OwnedReview,
    review_data: ReviewUpdate,
    db: DbSession,
) -> ReviewMessageResponse:
    review = review_service.update_review(db, review, review_data)
    return ReviewMessageResponse(
        message="Review updated successfully",
        review=ReviewResponse.model_validate(review),
    )


@router.delete(
    "/{review_id}",
    response_model=MessageResponse,
    summary="Delete own review",
)
@limiter.limit(settings.rate_limit_default)
def delete_review(request: Request, review: OwnedReview, db: DbSession) -> MessageResponse:
    review_service.delete_review(db, review)
    return MessageResponse(message="Review deleted successfully")
