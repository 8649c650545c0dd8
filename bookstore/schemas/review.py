"""
Review Pydantic Schemas

Schemas for book reviews with ratings.

Schemas:
- ReviewCreate: Create a new review
- ReviewUpdate: Update an existing review
- ReviewResponse: Full review data for API responses
- ReviewMessageResponse: Create/update acknowledgement
- ReviewListResponse: Paginated list of reviews for a book

Business Rules:
- Rating must be 1-5 (validated at schema level)
- One review per user per book (enforced at database level)
- Users can only edit/delete their own reviews
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookstore.schemas.common import PageEnvelope, reject_null


class ReviewCreate(BaseModel):
    """
    Schema for creating a new review.

    Example request body:
    {
        "book_id": 42,
        "rating": 5,
        "comment": "One of the best books I've ever read..."
    }
    """

    book_id: int = Field(..., ge=1, description="ID of the book being reviewed")

    rating: int = Field(
        ...,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )

    comment: str | None = Field(
        default=None,
        max_length=5000,
        description="Review text",
        examples=["This book changed my perspective on..."],
    )

    @field_validator("comment")
    @classmethod
    def comment_must_not_be_empty_if_provided(cls, v: str | None) -> str | None:
        """Whitespace-only comments are stored as no comment."""
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v


class ReviewUpdate(BaseModel):
    """
    Schema for updating an existing review.

    Omitted fields are left unchanged. The comment may be cleared with
    null; the rating may not.
    """

    rating: int | None = Field(
        default=None,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
    )

    comment: str | None = Field(
        default=None,
        max_length=5000,
        description="Review text",
    )

    @field_validator("rating", mode="before")
    @classmethod
    def rating_not_null(cls, v):
        return reject_null(v)


class ReviewResponse(BaseModel):
    """Schema for review responses."""

    id: int = Field(..., description="Unique review identifier")
    book_id: int = Field(..., description="ID of the reviewed book")
    user_id: int = Field(..., description="ID of the user who wrote the review")
    rating: int = Field(..., description="Rating from 1 to 5 stars")
    comment: str | None = Field(default=None, description="Review text")
    created_at: datetime = Field(..., description="When the review was created")
    updated_at: datetime = Field(..., description="When the review was last updated")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "book_id": 42,
                "user_id": 7,
                "rating": 5,
                "comment": "A must-read classic!",
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": "2024-01-15T10:30:00Z",
            }
        },
    )


class ReviewMessageResponse(BaseModel):
    message: str
    review: ReviewResponse


class ReviewListResponse(PageEnvelope):
    """
    Paginated reviews of one book.

    Wire format: {page, size, total, totalReviews, reviews}
    """

    total_reviews: int = Field(..., alias="totalReviews", ge=0)
    reviews: list[ReviewResponse]
