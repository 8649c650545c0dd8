"""
Book Model

The central model of the Bookstore API.

This file also contains the book_genres association table for the
many-to-many relationship between books and genres. The relationship is
a weak reference: deleting a genre removes it from its books, deleting a
book removes its genre links, neither owns the other.
"""

from datetime import UTC, date, datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.database import Base

if TYPE_CHECKING:
    from bookstore.models.bookmark import Bookmark
    from bookstore.models.genre import Genre
    from bookstore.models.reading_progress import ReadingProgress
    from bookstore.models.review import Review
    from bookstore.models.user import User


class FileFormat(str, Enum):
    """Supported e-book file formats."""
    EPUB = "epub"
    PDF = "pdf"
    MOBI = "mobi"


# =============================================================================
# Association Tables
# =============================================================================
book_genres = Table(
    "book_genres",
    Base.metadata,
    Column(
        "book_id",
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "genre_id",
        Integer,
        ForeignKey("genres.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    comment="Association table linking books to their genres",
)


class Book(Base):
    """
    Book model representing books in the catalogue.

    Table: books

    Fields:
    - title, author, publisher: required text
    - publish_date: Date of publication
    - cover_image: URL of the cover
    - file_page: Location of the book file
    - file_format: epub, pdf or mobi
    - summary: Free-text summary

    Indexes:
    - title, author: filtered and sorted by the listing endpoint
    """

    __tablename__ = "books"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Author name"
    )

    publish_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Date of publication"
    )

    publisher: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Publisher name"
    )

    cover_image: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="URL of the cover image"
    )

    file_page: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Location of the book file"
    )

    file_format: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        comment="File format (epub, pdf, mobi)"
    )

    summary: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Book summary"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        index=True,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    genres: Mapped[list["Genre"]] = relationship(
        "Genre",
        secondary=book_genres,
        back_populates="books",
        order_by="Genre.name",
    )

    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    bookmarks: Mapped[list["Bookmark"]] = relationship(
        "Bookmark",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    reading_progress: Mapped[list["ReadingProgress"]] = relationship(
        "ReadingProgress",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    favorited_by: Mapped[list["User"]] = relationship(
        "User",
        secondary="user_favorites",
        back_populates="favorites",
    )

    __table_args__ = (
        CheckConstraint(
            "file_format IN ('epub', 'pdf', 'mobi')",
            name="ck_book_file_format",
        ),
    )

    @property
    def genre_ids(self) -> list[int]:
        return [genre.id for genre in self.genres]

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', author='{self.author}')"
