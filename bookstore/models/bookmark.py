"""
Bookmark Model

A page a user has marked in a book, with an optional note.

Business Rules:
- One bookmark per user, book and page (unique constraint)
- Page numbers start at 1
- Users can only edit/delete their own bookmarks
"""

from datetime import UTC, datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.database import Base


class Bookmark(Base):
    """Bookmark model. Owned by user_id."""

    __tablename__ = "bookmarks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    book_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    page_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Bookmarked page (1-based)",
    )
    note: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Optional note for the bookmark",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    book = relationship("Book", back_populates="bookmarks")
    user = relationship("User", back_populates="bookmarks")

    __table_args__ = (
        UniqueConstraint(
            "user_id", "book_id", "page_number", name="uq_bookmark_user_book_page"
        ),
        CheckConstraint("page_number >= 1", name="ck_bookmark_page_number"),
    )

    def __repr__(self) -> str:
        return (
            f"<Bookmark(id={self.id}, user_id={self.user_id}, "
            f"book_id={self.book_id}, page_number={self.page_number})>"
        )
