"""
Bookmark Service

A user may bookmark any page of a book once. Bookmarks are private:
listing only ever returns the caller's own.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookstore.exceptions import Conflict
from bookstore.models import Bookmark
from bookstore.schemas.bookmark import BookmarkCreate, BookmarkUpdate
from bookstore.schemas.user import Identity
from bookstore.services.books import ensure_book_exists
from bookstore.services.common import commit_or_conflict
from bookstore.services.ownership import touch
from bookstore.services.query_builder import ListingOptions, Page, PageRequest, paginate

logger = logging.getLogger(__name__)

DUPLICATE_BOOKMARK_MESSAGE = "You have already bookmarked this page in this book"

BOOKMARK_LISTING = ListingOptions(
    sortable={
        "created_at": Bookmark.created_at,
        "page_number": Bookmark.page_number,
    },
    tiebreaker=Bookmark.id,
    default_sort="desc",
    default_sort_by="created_at",
)


def _bookmark_exists(db: Session, user_id: int, book_id: int, page_number: int) -> bool:
    stmt = select(Bookmark.id).where(
        Bookmark.user_id == user_id,
        Bookmark.book_id == book_id,
        Bookmark.page_number == page_number,
    )
    return db.scalar(stmt) is not None


def list_bookmarks_for_book(
    db: Session, identity: Identity, book_id: int, request: PageRequest
) -> Page:
    stmt = select(Bookmark).where(
        Bookmark.user_id == identity.id,
        Bookmark.book_id == book_id,
    )
    return paginate(db, stmt, BOOKMARK_LISTING, request)


def create_bookmark(db: Session, identity: Identity, bookmark_data: BookmarkCreate) -> Bookmark:
    """
    Bookmark a page for the caller.

    Raises:
        NotFound: The book does not exist
        Conflict: This page is already bookmarked by the caller
    """
    ensure_book_exists(db, bookmark_data.book_id)

    if _bookmark_exists(db, identity.id, bookmark_data.book_id, bookmark_data.page_number):
        raise Conflict(DUPLICATE_BOOKMARK_MESSAGE)

    bookmark = Bookmark(
        user_id=identity.id,
        book_id=bookmark_data.book_id,
        page_number=bookmark_data.page_number,
        note=bookmark_data.note,
    )
    db.add(bookmark)
    commit_or_conflict(db, DUPLICATE_BOOKMARK_MESSAGE)
    db.refresh(bookmark)

    logger.info(
        f"Bookmark {bookmark.id} added by user {identity.id} "
        f"for book {bookmark.book_id} page {bookmark.page_number}"
    )
    return bookmark


def update_bookmark(db: Session, bookmark: Bookmark, bookmark_data: BookmarkUpdate) -> Bookmark:
    """
    Update an owned bookmark. The note may be cleared; moving to a page
    that is already bookmarked raises Conflict.
    """
    update_data = bookmark_data.model_dump(exclude_unset=True)

    new_page = update_data.get("page_number")
    if (
        new_page is not None
        and new_page != bookmark.page_number
        and _bookmark_exists(db, bookmark.user_id, bookmark.book_id, new_page)
    ):
        raise Conflict(DUPLICATE_BOOKMARK_MESSAGE)

    for field, value in update_data.items():
        setattr(bookmark, field, value)
    touch(bookmark)

    commit_or_conflict(db, DUPLICATE_BOOKMARK_MESSAGE)
    db.refresh(bookmark)
    return bookmark


def delete_bookmark(db: Session, bookmark: Bookmark) -> None:
    bookmark_id = bookmark.id
    db.delete(bookmark)
    db.commit()
    logger.info(f"Bookmark {bookmark_id} deleted")
