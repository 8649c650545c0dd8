"""
Book Service

Catalogue reads (listing, detail, home page) and the admin-only
create/update/delete operations.

Listing parameters:
- page, limit (or size)
- sort: defaults to "title"; "-title" for descending
- author: exact match
- genre: genre id (ASCII digits) or genre name (case-insensitive)
- title: case-insensitive substring
"""

import logging

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.orm import Session, selectinload

from bookstore.config import get_settings
from bookstore.exceptions import NotFound, ValidationError
from bookstore.models import Book, Genre
from bookstore.schemas.book import BookCreate, BookUpdate
from bookstore.services.query_builder import (
    MAX_DB_INTEGER,
    ListingOptions,
    Page,
    PageRequest,
    equals,
    icontains,
    paginate,
)

logger = logging.getLogger(__name__)

LATEST_BOOKS_LIMIT = 10
HOME_GENRES_LIMIT = 5
BOOKS_PER_GENRE = 3


def genre_filter(value: str) -> ColumnElement[bool]:
    """
    Match books in a genre given by id or by name.

    Only plain ASCII digits within the id range are treated as an id;
    anything else is matched against genre names.
    """
    if value.isascii() and value.isdigit() and int(value) <= MAX_DB_INTEGER:
        return Book.genres.any(Genre.id == int(value))
    return Book.genres.any(func.lower(Genre.name) == value.lower())


BOOK_LISTING = ListingOptions(
    sortable={
        "title": Book.title,
        "author": Book.author,
        "publish_date": Book.publish_date,
        "publisher": Book.publisher,
        "created_at": Book.created_at,
    },
    tiebreaker=Book.id,
    default_sort="title",
    filters={
        "author": equals(Book.author),
        "genre": genre_filter,
        "title": icontains(Book.title),
    },
)


# =============================================================================
# Reads
# =============================================================================
def get_book(db: Session, book_id: int) -> Book:
    """
    Get a book by ID with its genres loaded.

    Raises:
        NotFound: "Book not found"
    """
    stmt = select(Book).options(selectinload(Book.genres)).where(Book.id == book_id)
    book = db.execute(stmt).scalar_one_or_none()

    if book is None:
        raise NotFound("Book not found")

    return book


def ensure_book_exists(db: Session, book_id: int) -> None:
    if db.get(Book, book_id) is None:
        raise NotFound("Book not found")


def list_books(db: Session, request: PageRequest) -> Page:
    return paginate(
        db,
        select(Book),
        BOOK_LISTING,
        request,
        load_options=[selectinload(Book.genres)],
    )


def home_page(db: Session) -> dict:
    """
    Data for the home page: the newest books, and a few genres each with
    a handful of their newest books.
    """
    latest_books = db.scalars(
        select(Book)
        .order_by(Book.created_at.desc(), Book.id.desc())
        .limit(LATEST_BOOKS_LIMIT)
    ).all()

    genres = db.scalars(select(Genre).order_by(Genre.id).limit(HOME_GENRES_LIMIT)).all()

    shelves = []
    for genre in genres:
        books = db.scalars(
            select(Book)
            .where(Book.genres.any(Genre.id == genre.id))
            .order_by(Book.created_at.desc(), Book.id.desc())
            .limit(BOOKS_PER_GENRE)
        ).all()
        shelves.append({"id": genre.id, "name": genre.name, "books": list(books)})

    return {"latest_books": list(latest_books), "genres": shelves}


# =============================================================================
# Admin Writes
# =============================================================================
def resolve_genres(db: Session, genre_ids: list[int]) -> list[Genre]:
    """
    Load genres by id, requiring every id to exist.

    Raises:
        ValidationError: Some ids are unknown
    """
    unique_ids = list(dict.fromkeys(genre_ids))
    if not unique_ids:
        return []

    genres = db.execute(select(Genre).where(Genre.id.in_(unique_ids))).scalars().all()

    if len(genres) != len(unique_ids):
        found_ids = {g.id for g in genres}
        missing = sorted(set(unique_ids) - found_ids)
        raise ValidationError(f"Genres not found: {missing}")

    return list(genres)


def create_book(db: Session, book_data: BookCreate) -> Book:
    book = Book(**book_data.model_dump(exclude={"genre_ids"}))
    book.genres = resolve_genres(db, book_data.genre_ids)

    db.add(book)
    db.commit()
    db.refresh(book)

    logger.info(f"Book created: {book.id} '{book.title}'")
    return book


def update_book(db: Session, book: Book, book_data: BookUpdate) -> Book:
    """
    Apply a partial update. genre_ids, when present, replaces the book's
    genres.
    """
    update_data = book_data.model_dump(exclude_unset=True)

    if "genre_ids" in update_data:
        book.genres = resolve_genres(db, update_data.pop("genre_ids"))

    for field, value in update_data.items():
        setattr(book, field, value)

    db.commit()
    db.refresh(book)

    logger.info(f"Book updated: {book.id}")
    return book


def delete_book(db: Session, book: Book) -> None:
    """Delete a book together with its reviews, bookmarks and progress records."""
    book_id = book.id
    db.delete(book)
    db.commit()
    logger.info(f"Book deleted: {book_id}")
