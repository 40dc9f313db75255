"""
Books Router

Catalogue endpoints.

Endpoints:
- GET /books - Filtered, sorted, paginated list
- GET /books/search?query= - Relevance-ranked free-text search
- GET /books/{book_id} - One book
- POST /books - Add a book (authenticated; caller becomes the owner)
- PUT /books/{book_id} - Update (owner or admin)
- DELETE /books/{book_id} - Delete with its reviews (owner or admin)

/search is declared before /{book_id} so it is not read as an id.
"""

from fastapi import APIRouter, Query, Request, status

from bookreviews.config import get_settings
from bookreviews.dependencies import BookQuery, CurrentUser, DbSession, Pagination
from bookreviews.schemas.book import (
    BookCreate,
    BookListResponse,
    BookResponse,
    BookSearchResponse,
    BookUpdate,
)
from bookreviews.services import books as book_service
from bookreviews.services.rate_limiter import limiter

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

    - `genre`: exact genre tag
    - `author`: partial, case-insensitive author name
    - `search`: partial, case-insensitive title or author
    - `sortBy`: title, author, publicationYear or averageRating
    - `sortOrder`: asc or desc
    """,
)
@limiter.limit(settings.rate_limit_default)
def list_books(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    query: BookQuery,
) -> BookListResponse:
    return book_service.get_all_books(
        db,
        page=pagination.page,
        limit=pagination.limit,
        genre=query.genre,
        author=query.author,
        search=query.search,
        sort_by=query.sort_by,
        sort_order=query.sort_order,
    )


@router.get(
    "/search",
    response_model=BookSearchResponse,
    summary="Search books",
    description="""
    Free-text search over title and author, most relevant first.

    Each query word found in the title scores 2, each found in the author
    scores 1. The query must be at least 2 characters.
    """,
    responses={400: {"description": "Query shorter than 2 characters"}},
)
@limiter.limit(settings.rate_limit_search)
def search_books(
    request: Request,
    db: DbSession,
    query: str = Query(
        default="",
        max_length=200,
        description="Search text (at least 2 characters)",
        examples=["dune herbert"],
    ),
) -> BookSearchResponse:
    return book_service.search_books(db, query)


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book by ID",
    description="A book with its average rating, review count and owner.",
)
@limiter.limit(settings.rate_limit_default)
def get_book(
    request: Request,
    book_id: int,
    db: DbSession,
) -> BookResponse:
    return book_service.get_book_by_id(db, book_id)


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    description="Add a book to the catalogue. The caller becomes its owner.",
    responses={401: {"description": "Not authenticated"}},
)
@limiter.limit(settings.rate_limit_write)
def create_book(
    request: Request,
    book_data: BookCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> BookResponse:
    return book_service.create_book(db, book_data, current_user.id)


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    summary="Update a book",
    description="Update some or all fields of a book. Owner or admin only.",
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Not the owner"},
    },
)
@limiter.limit(settings.rate_limit_write)
def update_book(
    request: Request,
    book_id: int,
    book_data: BookUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> BookResponse:
    """
    Update an existing book.

    PUT with optional fields: only the fields present in the body change.
    """
    return book_service.update_book(
        db,
        book_id,
        book_data,
        current_user.id,
        current_user.is_admin,
    )


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a book",
    description="Delete a book and all of its reviews. Owner or admin only.",
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Not the owner"},
    },
)
@limiter.limit(settings.rate_limit_write)
def delete_book(
    request: Request,
    book_id: int,
    db: DbSession,
    current_user: CurrentUser,
) -> None:
    book_service.delete_book(db, book_id, current_user.id, current_user.is_admin)
