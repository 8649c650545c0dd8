"""
Reading Progress Service

One progress record per user per book, holding a percentage. Once a
record reaches 100 it is complete and later updates are acknowledged
without being applied.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from bookstore.exceptions import Conflict
from bookstore.models import Book, ReadingProgress
from bookstore.schemas.reading_progress import ReadingProgressCreate, ReadingProgressUpdate
from bookstore.schemas.user import Identity
from bookstore.services.books import ensure_book_exists
from bookstore.services.common import commit_or_conflict
from bookstore.services.ownership import touch
from bookstore.services.query_builder import (
    ListingOptions,
    Page,
    PageRequest,
    icontains,
    paginate,
)

logger = logging.getLogger(__name__)

DUPLICATE_PROGRESS_MESSAGE = "Reading progress for this book already exists"

PROGRESS_LISTING = ListingOptions(
    sortable={
        "created_at": ReadingProgress.created_at,
        "updated_at": ReadingProgress.updated_at,
        "progress": ReadingProgress.progress,
    },
    tiebreaker=ReadingProgress.id,
    default_sort="desc",
    default_sort_by="created_at",
    filters={"title": icontains(Book.title)},
)


def list_progress(db: Session, identity: Identity, request: PageRequest) -> Page:
    """The caller's progress records, optionally filtered by book title."""
    stmt = (
        select(ReadingProgress)
        .join(ReadingProgress.book)
        .where(ReadingProgress.user_id == identity.id)
    )
    return paginate(
        db, stmt, PROGRESS_LISTING, request,
        load_options=[selectinload(ReadingProgress.book)],
    )


def list_progress_for_book(
    db: Session, identity: Identity, book_id: int, request: PageRequest
) -> Page:
    ensure_book_exists(db, book_id)
    stmt = (
        select(ReadingProgress)
        .join(ReadingProgress.book)
        .where(
            ReadingProgress.user_id == identity.id,
            ReadingProgress.book_id == book_id,
        )
    )
    return paginate(
        db, stmt, PROGRESS_LISTING, request,
        load_options=[selectinload(ReadingProgress.book)],
    )


def create_progress(
    db: Session, identity: Identity, progress_data: ReadingProgressCreate
) -> ReadingProgress:
    """
    Start tracking a book for the caller.

    Raises:
        NotFound: The book does not exist
        Conflict: The caller already tracks this book
    """
    ensure_book_exists(db, progress_data.book_id)

    existing = db.scalar(
        select(ReadingProgress.id).where(
            ReadingProgress.user_id == identity.id,
            ReadingProgress.book_id == progress_data.book_id,
        )
    )
    if existing is not None:
        raise Conflict(DUPLICATE_PROGRESS_MESSAGE)

    record = ReadingProgress(
        user_id=identity.id,
        book_id=progress_data.book_id,
        progress=progress_data.progress,
    )
    db.add(record)
    commit_or_conflict(db, DUPLICATE_PROGRESS_MESSAGE)
    db.refresh(record)

    logger.info(
        f"Reading progress {record.id} started by user {identity.id} "
        f"for book {record.book_id} at {record.progress}%"
    )
    return record


def update_progress(
    db: Session, record: ReadingProgress, progress_data: ReadingProgressUpdate
) -> bool:
    """
    Update an owned progress record.

    Returns:
        False if the record was already complete and nothing was
        changed, True otherwise
    """
    if record.is_completed:
        logger.info(f"Reading progress {record.id} already completed, update ignored")
        return False

    for field, value in progress_data.model_dump(exclude_unset=True).items():
        setattr(record, field, value)
    touch(record)

    db.commit()
    db.refresh(record)
    return True


def delete_progress(db: Session, record: ReadingProgress) -> None:
    record_id = record.id
    db.delete(record)
    db.commit()
    logger.info(f"Reading progress {record_id} deleted")
