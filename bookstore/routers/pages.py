"""
Pages Router

Aggregated data for front-end pages.
"""

from fastapi import APIRouter, Request

from bookstore.config import get_settings
from bookstore.dependencies import DbSession
from bookstore.schemas import HomePageResponse
from bookstore.services import books as book_service
from bookstore.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(prefix="/page", tags=["Pages"])


@router.get(
    "/home",
    response_model=HomePageResponse,
    summary="Home page data",
    description="The 10 newest books, plus 5 genres each with up to 3 of their newest books.",
)
@limiter.limit(settings.rate_limit_default)
def home(request: Request, db: DbSession) -> HomePageResponse:
    return HomePageResponse.model_validate(book_service.home_page(db), from_attributes=True)
