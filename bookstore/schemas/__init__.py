"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation.

Schema Naming Convention:
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Partial update; only fields present in the request apply
- XxxResponse: Fields returned in API responses
- XxxListResponse: Pagination envelope {page, size, total, total<Entity>, <items>}
"""

from bookstore.schemas.book import (
    BookCard,
    BookCreate,
    BookListResponse,
    BookResponse,
    BookSummary,
    BookUpdate,
    HomePageResponse,
)
from bookstore.schemas.bookmark import (
    BookmarkCreate,
    BookmarkListResponse,
    BookmarkMessageResponse,
    BookmarkResponse,
    BookmarkUpdate,
)
from bookstore.schemas.common import MessageResponse, PageEnvelope
from bookstore.schemas.genre import (
    GenreCreate,
    GenreRef,
    GenreResponse,
    GenreUpdate,
)
from bookstore.schemas.reading_progress import (
    ReadingProgressCreate,
    ReadingProgressListResponse,
    ReadingProgressMessageResponse,
    ReadingProgressResponse,
    ReadingProgressUpdate,
)
from bookstore.schemas.review import (
    ReviewCreate,
    ReviewListResponse,
    ReviewMessageResponse,
    ReviewResponse,
    ReviewUpdate,
)
from bookstore.schemas.user import (
    AdminUserCreate,
    AdminUserUpdate,
    FavoriteBooksResponse,
    FavoriteRequest,
    FavoritesResponse,
    ForgotPasswordRequest,
    Identity,
    LoginRequest,
    MaskedUserResponse,
    ResetPasswordRequest,
    UserCreate,
    UserListResponse,
    UserMessageResponse,
    UserResponse,
)

__all__ = [
    # Common
    "MessageResponse",
    "PageEnvelope",
    # Book schemas
    "BookCard",
    "BookCreate",
    "BookUpdate",
    "BookSummary",
    "BookResponse",
    "BookListResponse",
    "HomePageResponse",
    # Genre schemas
    "GenreCreate",
    "GenreUpdate",
    "GenreRef",
    "GenreResponse",
    # Review schemas
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "ReviewMessageResponse",
    "ReviewListResponse",
    # Bookmark schemas
    "BookmarkCreate",
    "BookmarkUpdate",
    "BookmarkResponse",
    "BookmarkMessageResponse",
    "BookmarkListResponse",
    # Reading progress schemas
    "ReadingProgressCreate",
    "ReadingProgressUpdate",
    "ReadingProgressResponse",
    "ReadingProgressMessageResponse",
    "ReadingProgressListResponse",
    # User schemas
    "Identity",
    "UserCreate",
    "LoginRequest",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "UserResponse",
    "UserMessageResponse",
    "FavoriteRequest",
    "FavoriteBooksResponse",
    "FavoritesResponse",
    "AdminUserCreate",
    "AdminUserUpdate",
    "MaskedUserResponse",
    "UserListResponse",
]
