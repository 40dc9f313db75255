"""
FastAPI Dependencies Module

Reusable components injected into route handlers:
- DbSession: one SQLAlchemy session per request
- Pagination / BookQuery / ReviewQuery: list query parameters
- CurrentUser: the identity carried by the bearer token

Route signatures stay short by using the Annotated aliases:

    @router.get("/books")
    def list_books(db: DbSession, pagination: Pagination, query: BookQuery):
        ...
"""

from typing import Annotated, Literal

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bookreviews.database import get_db
from bookreviews.exceptions import UnauthorizedError
from bookreviews.schemas.user import UserSummary
from bookreviews.services.security import decode_access_token

DbSession = Annotated[Session, Depends(get_db)]

SortOrder = Literal["asc", "desc"]
BookSortField = Literal["title", "author", "publicationYear", "averageRating"]
ReviewSortField = Literal["rating", "createdAt"]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Offset pagination shared by the list endpoints.

    GET /books?page=2&limit=20
    """

    def __init__(
        self,
        page: int = Query(
            default=1,
            ge=1,
            description="Page number (1-indexed)",
            examples=[1, 2],
        ),
        limit: int = Query(
            default=10,
            ge=1,
            le=100,
            description="Number of items per page (max 100)",
            examples=[10, 25],
        ),
    ) -> None:
        self.page = page
        self.limit = limit


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# List Filters and Sorting
# =============================================================================
class BookQueryParams:
    """
    Filters and sorting for GET /books.

    - genre: exact genre tag
    - author: case-insensitive substring of the author name
    - search: case-insensitive substring of the title or author
    - sortBy / sortOrder: default title ascending
    """

    def __init__(
        self,
        genre: str | None = Query(
            default=None,
            min_length=1,
            max_length=100,
            description="Only books tagged with this genre (exact match)",
            examples=["Science Fiction"],
        ),
        author: str | None = Query(
            default=None,
            min_length=1,
            max_length=255,
            description="Filter by author name (partial match, case-insensitive)",
            examples=["herbert"],
        ),
        search: str | None = Query(
            default=None,
            min_length=1,
            max_length=100,
            description="Filter by title or author (partial match, case-insensitive)",
            examples=["dune"],
        ),
        sort_by: BookSortField = Query(
            default="title",
            alias="sortBy",
            description="Sort field",
        ),
        sort_order: SortOrder = Query(
            default="asc",
            alias="sortOrder",
            description="Sort direction",
        ),
    ) -> None:
        self.genre = genre
        self.author = author
        self.search = search
        self.sort_by = sort_by
        self.sort_order = sort_order


BookQuery = Annotated[BookQueryParams, Depends()]


class ReviewQueryParams:
    """Sorting for a book's reviews; newest first by default."""

    def __init__(
        self,
        sort_by: ReviewSortField = Query(
            default="createdAt",
            alias="sortBy",
            description="Sort field",
        ),
        sort_order: SortOrder = Query(
            default="desc",
            alias="sortOrder",
            description="Sort direction",
        ),
    ) -> None:
        self.sort_by = sort_by
        self.sort_order = sort_order


ReviewQuery = Annotated[ReviewQueryParams, Depends()]


# =============================================================================
# JWT Authentication
# =============================================================================
# auto_error=False so a missing header goes through UnauthorizedError (401)
# instead of HTTPBearer's own 403.
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> UserSummary:
    """
    Identity of the caller, decoded from "Authorization: Bearer <token>".

    The token is trusted as issued; no database lookup is made.

    Raises:
        UnauthorizedError: If the header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Authentication required")

    return decode_access_token(credentials.credentials)


CurrentUser = Annotated[UserSummary, Depends(get_current_user)]
