"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Dependency Groups:
==================
1. Database session (per-request)
2. Access guard: session cookie -> Identity
3. Admin guard on top of the access guard
4. Owned-record loaders (ownership checked before the body is validated)
5. Listing query parameters (raw strings, validated by the query builder)

Usage:
    @router.put("/{review_id}")
    def update_review(review: OwnedReview, review_data: ReviewUpdate, db: DbSession):
        ...
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Query, Request
from fastapi.security import APIKeyCookie
from sqlalchemy.orm import Session

from bookstore.config import Settings, get_settings
from bookstore.database import get_db
from bookstore.exceptions import Forbidden, InvalidCredential, Unauthenticated
from bookstore.models import Bookmark, ReadingProgress, Review, User
from bookstore.schemas.user import Identity
from bookstore.services.email import EmailProvider, get_email_provider
from bookstore.services.ownership import load_owned
from bookstore.services.query_builder import ListingOptions, PageRequest, parse_page_request
from bookstore.services.security import CredentialService, get_credential_service

logger = logging.getLogger(__name__)
settings = get_settings()

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def get_books(db: Session = Depends(get_db)):
#
# You can write:
#   def get_books(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Credentials = Annotated[CredentialService, Depends(get_credential_service)]
Mailer = Annotated[EmailProvider, Depends(get_email_provider)]


# =============================================================================
# Access Guard (Session Cookie)
# =============================================================================
# APIKeyCookie reads the cookie and documents it in Swagger UI.
# auto_error=False so a missing cookie reaches our own Unauthenticated error.

session_cookie = APIKeyCookie(
    name=settings.session_cookie_name,
    auto_error=False,
    description="Session token set by POST /api/users/login",
)


def get_current_identity(
    request: Request,
    credentials: Credentials,
    token: Optional[str] = Depends(session_cookie),
) -> Identity:
    """
    Authenticate the request from its session cookie.

    The token alone is trusted; no database lookup happens here.

    Raises:
        Unauthenticated: No cookie (401 "Access denied")
        InvalidToken: Bad signature, expired or malformed (403 "Invalid token")
    """
    if not token:
        raise Unauthenticated()

    identity = credentials.verify_token(token)
    request.state.identity = identity
    return identity


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]


def require_admin(identity: CurrentIdentity) -> Identity:
    """
    Raises:
        Forbidden: The caller is not an admin
    """
    if not identity.is_admin:
        logger.warning(f"User {identity.id} denied admin access")
        raise Forbidden("Admin privileges required")
    return identity


AdminIdentity = Annotated[Identity, Depends(require_admin)]


def get_current_user(identity: CurrentIdentity, db: DbSession) -> User:
    """
    Load the caller's account row.

    A valid token for an account that has since been deleted is treated
    as an invalid credential.
    """
    user = db.get(User, identity.id)
    if user is None:
        logger.warning(f"Session token refers to missing user {identity.id}")
        raise InvalidCredential()
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


# =============================================================================
# Owned Records
# =============================================================================
# Resolved as dependencies so NotFound/Forbidden are raised before the
# request body is validated.

def get_owned_review(review_id: int, identity: CurrentIdentity, db: DbSession) -> Review:
    return load_owned(db, Review, review_id, identity, "Review")


def get_owned_bookmark(bookmark_id: int, identity: CurrentIdentity, db: DbSession) -> Bookmark:
    return load_owned(db, Bookmark, bookmark_id, identity, "Bookmark")


def get_owned_progress(
    progress_id: int, identity: CurrentIdentity, db: DbSession
) -> ReadingProgress:
    return load_owned(db, ReadingProgress, progress_id, identity, "Reading progress")


OwnedReview = Annotated[Review, Depends(get_owned_review)]
OwnedBookmark = Annotated[Bookmark, Depends(get_owned_bookmark)]
OwnedProgress = Annotated[ReadingProgress, Depends(get_owned_progress)]


# =============================================================================
# Listing Parameters
# =============================================================================
class PageQueryParams:
    """
    Pagination and sorting parameters shared by every listing.

    Values are kept as raw strings; the query builder validates them so
    that bad input is reported as a 400 ValidationError.

    Usage:
        GET /api/books?page=2&limit=20&sort=-title
        GET /api/books/1/reviews?page=1&size=5&sort=asc
    """

    def __init__(
        self,
        page: Optional[str] = Query(
            default=None,
            description="Page number (1-indexed, default 1)",
            examples=["1", "2"],
        ),
        size: Optional[str] = Query(
            default=None,
            description="Items per page (default 10, max 100)",
            examples=["10", "25"],
        ),
        limit: Optional[str] = Query(
            default=None,
            description="Alias of size",
        ),
        sort: Optional[str] = Query(
            default=None,
            description="Field name (prefix '-' for descending) or asc/desc",
            examples=["title", "-created_at", "desc"],
        ),
        sort_by: Optional[str] = Query(
            default=None,
            description="Field used with sort=asc|desc (default created_at)",
            examples=["created_at"],
        ),
    ) -> None:
        self.page = page
        self.size = size
        self.limit = limit
        self.sort = sort
        self.sort_by = sort_by

    def as_dict(self) -> dict[str, Optional[str]]:
        return {
            "page": self.page,
            "size": self.size,
            "limit": self.limit,
            "sort": self.sort,
            "sort_by": self.sort_by,
        }


PageQuery = Annotated[PageQueryParams, Depends()]


class BookFilterParams:
    """
    Book listing filters.

    Usage:
        GET /api/books?author=George%20Orwell&genre=3&title=farm
    """

    def __init__(
        self,
        author: Optional[str] = Query(default=None, description="Exact author name"),
        genre: Optional[str] = Query(default=None, description="Genre id or name"),
        title: Optional[str] = Query(
            default=None, description="Title contains (case-insensitive)"
        ),
    ) -> None:
        self.author = author
        self.genre = genre
        self.title = title

    def as_dict(self) -> dict[str, Optional[str]]:
        return {"author": self.author, "genre": self.genre, "title": self.title}


BookFilters = Annotated[BookFilterParams, Depends()]


class TitleFilterParams:
    def __init__(
        self,
        title: Optional[str] = Query(
            default=None, description="Book title contains (case-insensitive)"
        ),
    ) -> None:
        self.title = title

    def as_dict(self) -> dict[str, Optional[str]]:
        return {"title": self.title}


TitleFilter = Annotated[TitleFilterParams, Depends()]


class UserFilterParams:
    def __init__(
        self,
        role: Optional[str] = Query(default=None, description="user or admin"),
        username: Optional[str] = Query(
            default=None, description="Username contains (case-insensitive)"
        ),
    ) -> None:
        self.role = role
        self.username = username

    def as_dict(self) -> dict[str, Optional[str]]:
        return {"role": self.role, "username": self.username}


UserFilters = Annotated[UserFilterParams, Depends()]


def page_request(options: ListingOptions, *param_sets) -> PageRequest:
    """Merge parameter groups and validate them against a listing's options."""
    params: dict[str, Optional[str]] = {}
    for param_set in param_sets:
        params.update(param_set.as_dict())

    return parse_page_request(
        options,
        params,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )
