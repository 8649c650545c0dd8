"""
Genres Router

Public read-only genre endpoints. Genres are created, updated and
deleted through the admin router.
"""

from typing import List

from fastapi import APIRouter, Request

from bookstore.config import get_settings
from bookstore.dependencies import DbSession
from bookstore.schemas import GenreResponse
from bookstore.services import genres as genre_service
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/genres",
    tags=["Genres"],
    responses={
        404: {"description": "Genre not found"},
    },
)


@router.get(
    "",
    response_model=List[GenreResponse],
    summary="List all genres",
    description="Get all genres sorted alphabetically.",
)
@limiter.limit(settings.rate_limit_default)
def list_genres(request: Request, db: DbSession) -> List[GenreResponse]:
    return [GenreResponse.model_validate(genre) for genre in genre_service.list_genres(db)]


@router.get(
    "/{genre_id}",
    response_model=GenreResponse,
    summary="Get a genre by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_genre(request: Request, genre_id: int, db: DbSession) -> GenreResponse:
    return GenreResponse.model_validate(genre_service.get_genre(db, genre_id))
