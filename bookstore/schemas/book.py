"""
Book Pydantic Schemas

The richest schemas, handling:
- Nested genres on the detail view
- A lighter summary shape for listings (no summary/file fields)
- Card shape for the home page
- Pagination envelope for list responses
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookstore.models.book import FileFormat
from bookstore.schemas.common import PageEnvelope, reject_null
from bookstore.schemas.genre import GenreRef


def _strip_required(v: str, field_name: str) -> str:
    if not v.strip():
        raise ValueError(f"{field_name} cannot be empty or whitespace")
    return v.strip()


class BookBase(BaseModel):
    """
    Base schema with shared book fields.

    title, author, publish_date, publisher and file_format are required;
    the rest are optional text.
    """

    model_config = ConfigDict(use_enum_values=True)

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["1984", "Pride and Prejudice"],
    )

    author: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Author name",
        examples=["George Orwell"],
    )

    publish_date: date = Field(
        ...,
        description="Date of publication",
        examples=["1949-06-08"],
    )

    publisher: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Publisher name",
        examples=["Secker & Warburg"],
    )

    cover_image: str | None = Field(
        default=None,
        max_length=2000,
        description="URL of the cover image",
        examples=["https://example.com/covers/1984.jpg"],
    )

    file_page: str | None = Field(
        default=None,
        max_length=2000,
        description="Location of the book file",
        examples=["https://example.com/files/1984.epub"],
    )

    file_format: FileFormat = Field(
        ...,
        description="File format (epub, pdf or mobi)",
    )

    summary: str | None = Field(
        default=None,
        max_length=10000,
        description="Book summary",
    )

    @field_validator("title", "author", "publisher")
    @classmethod
    def text_must_not_be_empty(cls, v: str, info) -> str:
        """Validate and normalize required text fields."""
        return _strip_required(v, info.field_name.capitalize())


class BookCreate(BookBase):
    """
    Schema for creating a new book.

    Example request body:
    {
        "title": "1984",
        "author": "George Orwell",
        "publish_date": "1949-06-08",
        "publisher": "Secker & Warburg",
        "file_format": "epub",
        "genre_ids": [1, 3]
    }
    """

    genre_ids: list[int] = Field(
        default_factory=list,
        description="List of genre IDs to associate with this book",
        examples=[[1, 3]],
    )


class BookUpdate(BaseModel):
    """
    Schema for updating an existing book.

    Omitted fields are left unchanged. Required columns may not be set
    to null; optional text fields may.
    """

    model_config = ConfigDict(use_enum_values=True)

    title: str | None = Field(default=None, min_length=1, max_length=500)
    author: str | None = Field(default=None, min_length=1, max_length=255)
    publish_date: date | None = Field(default=None)
    publisher: str | None = Field(default=None, min_length=1, max_length=255)
    cover_image: str | None = Field(default=None, max_length=2000)
    file_page: str | None = Field(default=None, max_length=2000)
    file_format: FileFormat | None = Field(default=None)
    summary: str | None = Field(default=None, max_length=10000)

    genre_ids: list[int] | None = Field(
        default=None,
        description="List of genre IDs (replaces existing)",
    )

    @field_validator(
        "title", "author", "publish_date", "publisher", "file_format", "genre_ids",
        mode="before",
    )
    @classmethod
    def required_fields_not_null(cls, v):
        return reject_null(v)

    @field_validator("title", "author", "publisher")
    @classmethod
    def text_must_not_be_empty(cls, v: str, info) -> str:
        return _strip_required(v, info.field_name.capitalize())


class BookCard(BaseModel):
    """Minimal book shape used on the home page and in embedded references."""

    id: int
    title: str
    author: str
    cover_image: str | None = None

    model_config = ConfigDict(from_attributes=True)


class BookSummary(BookCard):
    """Book as returned by listings (no summary or file fields)."""

    publish_date: date
    publisher: str
    genre_ids: list[int] = Field(default_factory=list, description="Genre IDs")
    created_at: datetime


class BookResponse(BookBase):
    """
    Schema for book detail responses.

    Includes:
    - Database fields (id, timestamps)
    - Nested genre data (name, description)
    """

    id: int = Field(..., description="Unique identifier")
    created_at: datetime = Field(..., description="When the book was created")
    updated_at: datetime = Field(..., description="When the book was last updated")

    genres: list[GenreRef] = Field(
        default_factory=list,
        description="List of genres",
    )

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "1984",
                "author": "George Orwell",
                "publish_date": "1949-06-08",
                "publisher": "Secker & Warburg",
                "cover_image": "https://example.com/covers/1984.jpg",
                "file_page": None,
                "file_format": "epub",
                "summary": "A dystopian novel about totalitarianism",
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": "2024-01-15T10:30:00Z",
                "genres": [
                    {"id": 1, "name": "Dystopian", "description": None},
                ],
            }
        },
    )


class BookListResponse(PageEnvelope):
    """
    Paginated book list.

    Wire format: {page, size, total, totalBooks, books}
    """

    total_books: int = Field(..., alias="totalBooks", ge=0)
    books: list[BookSummary]

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "page": 1,
                "size": 10,
                "total": 10,
                "totalBooks": 100,
                "books": [],
            }
        },
    )


# =============================================================================
# Home Page
# =============================================================================
class GenreShelf(BaseModel):
    """A genre with a handful of its books."""

    id: int
    name: str
    books: list[BookCard]


class HomePageResponse(BaseModel):
    latest_books: list[BookCard] = Field(..., alias="latestBooks")
    genres: list[GenreShelf]

    model_config = ConfigDict(populate_by_name=True)
