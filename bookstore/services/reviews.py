"""
Review Service

One review per user per book. Reviews are public to read; only their
author may change or delete them (see ownership.py).
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookstore.exceptions import Conflict
from bookstore.models import Review
from bookstore.schemas.review import ReviewCreate, ReviewUpdate
from bookstore.schemas.user import Identity
from bookstore.services.books import ensure_book_exists
from bookstore.services.common import commit_or_conflict, get_or_404
from bookstore.services.ownership import touch
from bookstore.services.query_builder import ListingOptions, Page, PageRequest, paginate

logger = logging.getLogger(__name__)

DUPLICATE_REVIEW_MESSAGE = "You have already reviewed this book"

# Newest first unless ?sort=asc
REVIEW_LISTING = ListingOptions(
    sortable={
        "created_at": Review.created_at,
        "rating": Review.rating,
    },
    tiebreaker=Review.id,
    default_sort="desc",
    default_sort_by="created_at",
)


def list_reviews_for_book(db: Session, book_id: int, request: PageRequest) -> Page:
    ensure_book_exists(db, book_id)
    return paginate(db, select(Review).where(Review.book_id == book_id), REVIEW_LISTING, request)


def get_review(db: Session, review_id: int) -> Review:
    return get_or_404(db, Review, review_id, "Review")


def create_review(db: Session, identity: Identity, review_data: ReviewCreate) -> Review:
    """
    Create a review by the caller.

    Raises:
        NotFound: The book does not exist
        Conflict: The caller already reviewed this book
    """
    ensure_book_exists(db, review_data.book_id)

    existing = db.scalar(
        select(Review.id).where(
            Review.book_id == review_data.book_id,
            Review.user_id == identity.id,
        )
    )
    if existing is not None:
        raise Conflict(DUPLICATE_REVIEW_MESSAGE)

    review = Review(
        book_id=review_data.book_id,
        user_id=identity.id,
        rating=review_data.rating,
        comment=review_data.comment,
    )
    db.add(review)
    commit_or_conflict(db, DUPLICATE_REVIEW_MESSAGE)
    db.refresh(review)

    logger.info(f"Review {review.id} added by user {identity.id} for book {review.book_id}")
    return review


def update_review(db: Session, review: Review, review_data: ReviewUpdate) -> Review:
    """Apply the fields present in the request to an owned review."""
    for field, value in review_data.model_dump(exclude_unset=True).items():
        setattr(review, field, value)
    touch(review)

    db.commit()
    db.refresh(review)
    return review


def delete_review(db: Session, review: Review) -> None:
    review_id = review.id
    db.delete(review)
    db.commit()
    logger.info(f"Review {review_id} deleted")
