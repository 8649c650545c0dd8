"""
Bookmark Pydantic Schemas

Business Rules:
- Page numbers start at 1
- One bookmark per user, book and page
- The note may be empty or cleared with null
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookstore.schemas.common import PageEnvelope, reject_null


class BookmarkCreate(BaseModel):
    book_id: int = Field(..., ge=1, description="ID of the bookmarked book")
    page_number: int = Field(..., ge=1, description="Bookmarked page", examples=[42])
    note: str | None = Field(
        default=None,
        max_length=2000,
        description="Optional note",
        examples=["Great quote here"],
    )


class BookmarkUpdate(BaseModel):
    """Partial bookmark update. Moving to another page re-checks uniqueness."""

    page_number: int | None = Field(default=None, ge=1, description="Bookmarked page")
    note: str | None = Field(default=None, max_length=2000, description="Optional note")

    @field_validator("page_number", mode="before")
    @classmethod
    def page_number_not_null(cls, v):
        return reject_null(v)


class BookmarkResponse(BaseModel):
    id: int
    user_id: int
    book_id: int
    page_number: int
    note: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookmarkMessageResponse(BaseModel):
    message: str
    bookmark: BookmarkResponse


class BookmarkListResponse(PageEnvelope):
    """Wire format: {page, size, total, totalBookmarks, bookmarks}"""

    total_bookmarks: int = Field(..., alias="totalBookmarks", ge=0)
    bookmarks: list[BookmarkResponse]
