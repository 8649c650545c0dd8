"""
Genre Pydantic Schemas

Schemas for genre-related API operations.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookstore.schemas.common import reject_null


class GenreBase(BaseModel):
    """Base schema with shared genre fields."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Genre name",
        examples=["Science Fiction", "Mystery", "Romance"],
    )

    description: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Description of the genre",
        examples=["Fiction dealing with futuristic science and technology"],
    )

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        """Validate and normalize genre name."""
        if not v.strip():
            raise ValueError("Genre name cannot be empty or whitespace")
        return v.strip()


class GenreCreate(GenreBase):
    """Schema for creating a new genre."""
    pass


class GenreUpdate(BaseModel):
    """Schema for updating an existing genre. Omitted fields are left unchanged."""

    name: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=100,
        description="Genre name",
    )

    description: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Description of the genre",
    )

    @field_validator("name", mode="before")
    @classmethod
    def name_not_null(cls, v):
        return reject_null(v)

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Genre name cannot be empty or whitespace")
        return v.strip()


class GenreRef(BaseModel):
    """Genre as embedded in a book."""

    id: int
    name: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class GenreResponse(GenreBase):
    """Schema for genre responses."""

    id: int = Field(..., description="Unique identifier")
    created_at: datetime = Field(..., description="When the genre was created")
    updated_at: datetime = Field(..., description="When the genre was last updated")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Science Fiction",
                "description": "Fiction based on futuristic science and technology",
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": "2024-01-15T10:30:00Z",
            }
        },
    )
