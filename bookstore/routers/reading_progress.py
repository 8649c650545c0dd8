"""
Reading Progress Router

Endpoints:
- GET /reading-progress - Caller's progress records (title filter)
- POST /reading-progress - Start tracking a book
- PUT /reading-progress/{progress_id} - Update own progress
- DELETE /reading-progress/{progress_id} - Delete own progress record

A record at 100% is complete: further updates are acknowledged with
"Reading progress is already completed" and change nothing.
"""

from fastapi import APIRouter, Request, status

from bookstore.config import get_settings
from bookstore.dependencies import (
    CurrentIdentity,
    DbSession,
    OwnedProgress,
    PageQuery,
    TitleFilter,
    page_request,
)
from bookstore.schemas import (
    MessageResponse,
    ReadingProgressCreate,
    ReadingProgressListResponse,
    ReadingProgressMessageResponse,
    ReadingProgressResponse,
    ReadingProgressUpdate,
)
from bookstore.services import reading_progress as progress_service
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/reading-progress",
    tags=["Reading Progress"],
    responses={
        401: {"description": "Access denied"},
        403: {"description": "Invalid token or not the record's owner"},
        404: {"description": "Reading progress or book not found"},
    },
)


@router.get(
    "",
    response_model=ReadingProgressListResponse,
    summary="List my reading progress",
    description="""
    The caller's progress records with the book's title and cover.

    - `sort=asc|desc` with `sort_by=created_at|updated_at|progress`
    - `title`: book title contains (case-insensitive)
    """,
)
@limiter.limit(settings.rate_limit_default)
def list_reading_progress(
    request: Request,
    identity: CurrentIdentity,
    db: DbSession,
    pagination: PageQuery,
    title_filter: TitleFilter,
) -> ReadingProgressListResponse:
    page = progress_service.list_progress(
        db, identity, page_request(progress_service.PROGRESS_LISTING, pagination, title_filter)
    )
    return page.envelope(
        ReadingProgressListResponse,
        items_field="reading_progress_records",
        count_field="total_records",
        item_schema=ReadingProgressResponse,
    )


@router.post(
    "",
    response_model=ReadingProgressMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start tracking a book",
)
@limiter.limit(settings.rate_limit_default)
def create_reading_progress(
    request: Request,
    progress_data: ReadingProgressCreate,
    identity: CurrentIdentity,
    db: DbSession,
) -> ReadingProgressMessageResponse:
    record = progress_service.create_progress(db, identity, progress_data)
    return ReadingProgressMessageResponse(
        message="Reading progress added successfully",
        reading_progress=ReadingProgressResponse.model_validate(record),
    )


@router.put(
    "/{progress_id}",
    response_model=ReadingProgressMessageResponse,
    summary="Update own reading progress",
)
@limiter.limit(settings.rate_limit_default)
def update_reading_progress(
    request: Request,
    record: OwnedProgress,
    progress_data: ReadingProgressUpdate,
    db: DbSession,
) -> ReadingProgressMessageResponse:
    if progress_service.update_progress(db, record, progress_data):
        message = "Reading progress updated successfully"
    else:
        message = "Reading progress is already completed"

    return ReadingProgressMessageResponse(
        message=message,
        reading_progress=ReadingProgressResponse.model_validate(record),
    )


@router.delete(
    "/{progress_id}",
    response_model=MessageResponse,
    summary="Delete own reading progress",
)
@limiter.limit(settings.rate_limit_default)
def delete_reading_progress(
    request: Request, record: OwnedProgress, db: DbSession
) -> MessageResponse:
    progress_service.delete_progress(db, record)
    return MessageResponse(message="Reading progress deleted successfully")
