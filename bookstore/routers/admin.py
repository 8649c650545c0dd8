"""
Admin Router

JSON admin surface over the admin-managed resources: users, books and
genres. Every endpoint requires a session whose role is `admin`.

Endpoints:
- GET /admin/users - Paginated users, emails partially masked
- GET /admin/users/{user_id} - One user, email masked
- POST /admin/users - Create a user (role selectable)
- PUT /admin/users/{user_id} - Update role, email, username or password
- DELETE /admin/users/{user_id} - Delete a user and their records
- POST /admin/books, PUT /admin/books/{book_id}, DELETE /admin/books/{book_id}
- POST /admin/genres, PUT /admin/genres/{genre_id}, DELETE /admin/genres/{genre_id}
"""

from fastapi import APIRouter, Depends, Request, status

from bookstore.config import get_settings
from bookstore.dependencies import (
    Credentials,
    DbSession,
    PageQuery,
    UserFilters,
    page_request,
    require_admin,
)
from bookstore.schemas import (
    AdminUserCreate,
    AdminUserUpdate,
    BookCreate,
    BookResponse,
    BookUpdate,
    GenreCreate,
    GenreResponse,
    GenreUpdate,
    MaskedUserResponse,
    MessageResponse,
    UserListResponse,
)
from bookstore.services import books as book_service
from bookstore.services import genres as genre_service
from bookstore.services import users as user_service
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
    responses={
        401: {"description": "Access denied"},
        403: {"description": "Invalid token or admin privileges required"},
    },
)


# =============================================================================
# Users
# =============================================================================
@router.get(
    "/users",
    response_model=UserListResponse,
    summary="List users",
    description="""
    - `sort`: field name (`created_at`, `username`, `email`, `role`), `-` prefix for descending
    - `role`: `user` or `admin`
    - `username`: contains (case-insensitive)
    """,
)
@limiter.limit(settings.rate_limit_default)
def list_users(
    request: Request,
    db: DbSession,
    pagination: PageQuery,
    filters: UserFilters,
) -> UserListResponse:
    page = user_service.list_users(db, page_request(user_service.USER_LISTING, pagination, filters))
    return UserListResponse(
        page=page.page,
        size=page.size,
        total=page.total_pages,
        total_users=page.total_count,
        users=[MaskedUserResponse.from_user(user) for user in page.items],
    )


@router.get(
    "/users/{user_id}",
    response_model=MaskedUserResponse,
    summary="Get a user",
    responses={404: {"description": "User not found"}},
)
@limiter.limit(settings.rate_limit_default)
def get_user(request: Request, user_id: int, db: DbSession) -> MaskedUserResponse:
    return MaskedUserResponse.from_user(user_service.get_user(db, user_id))


@router.post(
    "/users",
    response_model=MaskedUserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
)
@limiter.limit(settings.rate_limit_default)
def create_user(
    request: Request,
    user_data: AdminUserCreate,
    db: DbSession,
    credentials: Credentials,
) -> MaskedUserResponse:
    user = user_service.admin_create_user(db, credentials, user_data)
    return MaskedUserResponse.from_user(user)


@router.put(
    "/users/{user_id}",
    response_model=MaskedUserResponse,
    summary="Update a user",
    responses={404: {"description": "User not found"}},
)
@limiter.limit(settings.rate_limit_default)
def update_user(
    request: Request,
    user_id: int,
    user_data: AdminUserUpdate,
    db: DbSession,
    credentials: Credentials,
) -> MaskedUserResponse:
    user = user_service.get_user(db, user_id)
    user = user_service.admin_update_user(db, credentials, user, user_data)
    return MaskedUserResponse.from_user(user)


@router.delete(
    "/users/{user_id}",
    response_model=MessageResponse,
    summary="Delete a user",
    responses={404: {"description": "User not found"}},
)
@limiter.limit(settings.rate_limit_default)
def delete_user(request: Request, user_id: int, db: DbSession) -> MessageResponse:
    user_service.delete_user(db, user_service.get_user(db, user_id))
    return MessageResponse(message="User deleted successfully")


# =============================================================================
# Books
# =============================================================================
@router.post(
    "/books",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a book",
    responses={400: {"description": "Validation failed or unknown genre ids"}},
)
@limiter.limit(settings.rate_limit_default)
def create_book(request: Request, book_data: BookCreate, db: DbSession) -> BookResponse:
    return BookResponse.model_validate(book_service.create_book(db, book_data))


@router.put(
    "/books/{book_id}",
    response_model=BookResponse,
    summary="Update a book",
    description="Only fields present in the request change. `genre_ids` replaces the genre list.",
    responses={404: {"description": "Book not found"}},
)
@limiter.limit(settings.rate_limit_default)
def update_book(
    request: Request, book_id: int, book_data: BookUpdate, db: DbSession
) -> BookResponse:
    book = book_service.get_book(db, book_id)
    return BookResponse.model_validate(book_service.update_book(db, book, book_data))


@router.delete(
    "/books/{book_id}",
    response_model=MessageResponse,
    summary="Delete a book",
    responses={404: {"description": "Book not found"}},
)
@limiter.limit(settings.rate_limit_default)
def delete_book(request: Request, book_id: int, db: DbSession) -> MessageResponse:
    book_service.delete_book(db, book_service.get_book(db, book_id))
    return MessageResponse(message="Book deleted successfully")


# =============================================================================
# Genres
# =============================================================================
@router.post(
    "/genres",
    response_model=GenreResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a genre",
)
@limiter.limit(settings.rate_limit_default)
def create_genre(request: Request, genre_data: GenreCreate, db: DbSession) -> GenreResponse:
    return GenreResponse.model_validate(genre_service.create_genre(db, genre_data))


@router.put(
    "/genres/{genre_id}",
    response_model=GenreResponse,
    summary="Update a genre",
    responses={404: {"description": "Genre not found"}},
)
@limiter.limit(settings.rate_limit_default)
def update_genre(
    request: Request, genre_id: int, genre_data: GenreUpdate, db: DbSession
) -> GenreResponse:
    genre = genre_service.get_genre(db, genre_id)
    return GenreResponse.model_validate(genre_service.update_genre(db, genre, genre_data))


@router.delete(
    "/genres/{genre_id}",
    response_model=MessageResponse,
    summary="Delete a genre",
    description="Books in the genre are kept; only the association is removed.",
    responses={404: {"description": "Genre not found"}},
)
@limiter.limit(settings.rate_limit_default)
def delete_genre(request: Request, genre_id: int, db: DbSession) -> MessageResponse:
    genre_service.delete_genre(db, genre_service.get_genre(db, genre_id))
    return MessageResponse(message="Genre deleted successfully")
