"""
Authors Router

Authors are not stored separately; this lists the distinct author names
found on books.
"""

from fastapi import APIRouter, Request

from bookreviews.config import get_settings
from bookreviews.dependencies import DbSession
from bookreviews.schemas.book import AuthorResponse
from bookreviews.services import books as book_service
from bookreviews.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/authors",
    tags=["Authors"],
)


@router.get(
    "",
    response_model=list[AuthorResponse],
    summary="List all authors",
    description="Distinct author names across the catalogue, sorted A-Z.",
)
@limiter.limit(settings.rate_limit_default)
def list_authors(request: Request, db: DbSession) -> list[AuthorResponse]:
    return book_service.get_all_authors(db)
