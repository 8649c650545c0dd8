"""
Books Router

Public catalogue endpoints, plus per-book views of reviews and of the
caller's own bookmarks and reading progress.

Endpoints:
- GET /books - Paginated, sortable, filterable listing
- GET /books/{book_id} - Book detail with genres
- GET /books/{book_id}/reviews - Reviews of the book (public)
- GET /books/{book_id}/bookmarks - Caller's bookmarks in the book
- GET /books/{book_id}/reading-progress - Caller's progress for the book

Book creation, update and deletion are admin operations (routers/admin.py).
"""

from fastapi import APIRouter, Request

from bookstore.config import get_settings
from bookstore.dependencies import (
    BookFilters,
    CurrentIdentity,
    DbSession,
    PageQuery,
    page_request,
)
from bookstore.schemas import (
    BookListResponse,
    BookmarkListResponse,
    BookmarkResponse,
    BookResponse,
    BookSummary,
    ReadingProgressListResponse,
    ReadingProgressResponse,
    ReviewListResponse,
    ReviewResponse,
)
from bookstore.services import bookmarks as bookmark_service
from bookstore.services import books as book_service
from bookstore.services import reading_progress as progress_service
from bookstore.services import reviews as review_service
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)


@router.get(
    "",
    response_model=BookListResponse,
    summary="List books",
    description="""
    Paginated list of books.

    - `page`, `limit` (or `size`): pagination, max 100 per page
    - `sort`: field name, `-` prefix for descending (default `title`)
    - `author`: exact author name
    - `genre`: genre id or name
    - `title`: case-insensitive substring
    """,
)
@limiter.limit(settings.rate_limit_default)
def list_books(
    request: Request,
    db: DbSession,
    pagination: PageQuery,
    filters: BookFilters,
) -> BookListResponse:
    page = book_service.list_books(db, page_request(book_service.BOOK_LISTING, pagination, filters))
    return page.envelope(
        BookListResponse,
        items_field="books",
        count_field="total_books",
        item_schema=BookSummary,
    )


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book by ID",
    description="Retrieve a book with its genres (name and description).",
)
@limiter.limit(settings.rate_limit_default)
def get_book(request: Request, book_id: int, db: DbSession) -> BookResponse:
    return BookResponse.model_validate(book_service.get_book(db, book_id))


@router.get(
    "/{book_id}/reviews",
    response_model=ReviewListResponse,
    summary="List reviews of a book",
    description="Newest first by default; `sort=asc` for oldest first.",
)
@limiter.limit(settings.rate_limit_default)
def list_book_reviews(
    request: Request,
    book_id: int,
    db: DbSession,
    pagination: PageQuery,
) -> ReviewListResponse:
    page = review_service.list_reviews_for_book(
        db, book_id, page_request(review_service.REVIEW_LISTING, pagination)
    )
    return page.envelope(
        ReviewListResponse,
        items_field="reviews",
        count_field="total_reviews",
        item_schema=ReviewResponse,
    )


@router.get(
    "/{book_id}/bookmarks",
    response_model=BookmarkListResponse,
    summary="List my bookmarks in a book",
    description="`sort=asc|desc` with `sort_by=created_at|page_number`.",
)
@limiter.limit(settings.rate_limit_default)
def list_book_bookmarks(
    request: Request,
    book_id: int,
    identity: CurrentIdentity,
    db: DbSession,
    pagination: PageQuery,
) -> BookmarkListResponse:
    page = bookmark_service.list_bookmarks_for_book(
        db, identity, book_id, page_request(bookmark_service.BOOKMARK_LISTING, pagination)
    )
    return page.envelope(
        BookmarkListResponse,
        items_field="bookmarks",
        count_field="total_bookmarks",
        item_schema=BookmarkResponse,
    )


@router.get(
    "/{book_id}/reading-progress",
    response_model=ReadingProgressListResponse,
    summary="Get my reading progress for a book",
)
@limiter.limit(settings.rate_limit_default)
def list_book_reading_progress(
    request: Request,
    book_id: int,
    identity: CurrentIdentity,
    db: DbSession,
    pagination: PageQuery,
) -> ReadingProgressListResponse:
    page = progress_service.list_progress_for_book(
        db, identity, book_id, page_request(progress_service.PROGRESS_LISTING, pagination)
    )
    return page.envelope(
        ReadingProgressListResponse,
        items_field="reading_progress_records",
        count_field="total_records",
        item_schema=ReadingProgressResponse,
    )
