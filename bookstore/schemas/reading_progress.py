"""
Reading Progress Pydantic Schemas

Progress is a percentage from 0 to 100. A record at 100 is complete
and further updates are acknowledged without being applied.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookstore.schemas.book import BookCard
from bookstore.schemas.common import PageEnvelope, reject_null


class ReadingProgressCreate(BaseModel):
    book_id: int = Field(..., ge=1, description="ID of the book being read")
    progress: int = Field(..., ge=0, le=100, description="Percentage read", examples=[35])


class ReadingProgressUpdate(BaseModel):
    progress: int | None = Field(default=None, ge=0, le=100, description="Percentage read")

    @field_validator("progress", mode="before")
    @classmethod
    def progress_not_null(cls, v):
        return reject_null(v)


class ReadingProgressResponse(BaseModel):
    """Progress record with the book's title and cover embedded."""

    id: int
    user_id: int
    book_id: int
    progress: int
    created_at: datetime
    updated_at: datetime
    book: BookCard | None = None

    model_config = ConfigDict(from_attributes=True)


class ReadingProgressMessageResponse(BaseModel):
    message: str
    reading_progress: ReadingProgressResponse = Field(..., alias="readingProgress")

    model_config = ConfigDict(populate_by_name=True)


class ReadingProgressListResponse(PageEnvelope):
    """Wire format: {page, size, total, totalRecords, readingProgressRecords}"""

    total_records: int = Field(..., alias="totalRecords", ge=0)
    reading_progress_records: list[ReadingProgressResponse] = Field(
        ..., alias="readingProgressRecords"
    )
