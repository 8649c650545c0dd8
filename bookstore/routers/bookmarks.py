"""
Bookmarks Router

Private page bookmarks. A user may bookmark a given page of a book once.

Endpoints:
- POST /bookmarks - Bookmark a page
- PUT /bookmarks/{bookmark_id} - Update own bookmark (page, note)
- DELETE /bookmarks/{bookmark_id} - Delete own bookmark
"""

from fastapi import APIRouter, Request, status

from bookstore.config import get_settings
from bookstore.dependencies import CurrentIdentity, DbSession, OwnedBookmark
from bookstore.schemas import (
    BookmarkCreate,
    BookmarkMessageResponse,
    BookmarkResponse,
    BookmarkUpdate,
    MessageResponse,
)
from bookstore.services import bookmarks as bookmark_service
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/bookmarks",
    tags=["Bookmarks"],
    responses={
        401: {"description": "Access denied"},
        403: {"description": "Invalid token or not the bookmark's owner"},
        404: {"description": "Bookmark or book not found"},
    },
)


@router.post(
    "",
    response_model=BookmarkMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Bookmark a page",
)
@limiter.limit(settings.rate_limit_default)
def create_bookmark(
    request: Request,
    bookmark_data: BookmarkCreate,
    identity: CurrentIdentity,
    db: DbSession,
) -> BookmarkMessageResponse:
    bookmark = bookmark_service.create_bookmark(db, identity, bookmark_data)
    return BookmarkMessageResponse(
        message="Bookmark added successfully",
        bookmark=BookmarkResponse.model_validate(bookmark),
    )


@router.put(
    "/{bookmark_id}",
    response_model=BookmarkMessageResponse,
    summary="Update own bookmark",
    description="Send `note: null` to clear the note.",
)
@limiter.limit(settings.rate_limit_default)
def update_bookmark(
    request: Request,
    bookmark: OwnedBookmark,
    bookmark_data: BookmarkUpdate,
    db: DbSession,
) -> BookmarkMessageResponse:
    bookmark = bookmark_service.update_bookmark(db, bookmark, bookmark_data)
    return BookmarkMessageResponse(
        message="Bookmark updated successfully",
        bookmark=BookmarkResponse.model_validate(bookmark),
    )


@router.delete(
    "/{bookmark_id}",
    response_model=MessageResponse,
    summary="Delete own bookmark",
)
@limiter.limit(settings.rate_limit_default)
def delete_bookmark(request: Request, bookmark: OwnedBookmark, db: DbSession) -> MessageResponse:
    bookmark_service.delete_bookmark(db, bookmark)
    return MessageResponse(message="Bookmark deleted successfully")
