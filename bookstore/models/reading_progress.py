"""
Reading Progress Model

How far a user has read a book, as a percentage.

Business Rules:
- One progress record per user per book (unique constraint)
- Progress is 0-100; 100 means the book is finished and the record is
  no longer updated
"""

from datetime import UTC, datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookstore.database import Base

COMPLETED_PROGRESS = 100


class ReadingProgress(Base):
    """Reading progress model. Owned by user_id."""

    __tablename__ = "reading_progress"

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

    progress: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Progress percentage (0-100)",
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

    book = relationship("Book", back_populates="reading_progress")
    user = relationship("User", back_populates="reading_progress")

    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_reading_progress_user_book"),
        CheckConstraint(
            "progress >= 0 AND progress <= 100", name="ck_reading_progress_range"
        ),
    )

    @property
    def is_completed(self) -> bool:
        return self.progress == COMPLETED_PROGRESS

    def __repr__(self) -> str:
        return (
            f"<ReadingProgress(id={self.id}, user_id={self.user_id}, "
            f"book_id={self.book_id}, progress={self.progress})>"
        )
