"""
Catalog Service

Business rules for books:
- anyone may read, list and search the catalogue
- any authenticated user may add a book and becomes its owner
- only the owner or an admin may update or delete it

Every response is assembled here: stored fields, the rating aggregated at
read time (services/ratings.py) and the resolved owner summary.
"""

import logging
import math
from collections.abc import Sequence

from sqlalchemy.orm import Session

from bookreviews.exceptions import NotFoundError, ValidationError
from bookreviews.models.book import Book
from bookreviews.repositories import books as book_repo
from bookreviews.repositories.users import resolve_user_summaries
from bookreviews.schemas.book import (
    AuthorResponse,
    BookCreate,
    BookListResponse,
    BookResponse,
    BookSearchResponse,
    BookUpdate,
)
from bookreviews.services.permissions import ensure_owner_or_admin
from bookreviews.services.ratings import EMPTY_SUMMARY, get_rating_summaries

logger = logging.getLogger(__name__)

MIN_SEARCH_QUERY_LENGTH = 2


# =============================================================================
# Response Assembly
# =============================================================================
def build_book_responses(db: Session, books: Sequence[Book]) -> list[BookResponse]:
    """
    Turn book rows into responses.

    Ratings and owners for the whole batch are fetched with one query each.
    """
    if not books:
        return []

    ratings = get_rating_summaries(db, [book.id for book in books])
    owners = resolve_user_summaries(db, [book.added_by for book in books])

    responses = []
    for book in books:
        rating = ratings.get(book.id, EMPTY_SUMMARY)
        responses.append(
            BookResponse(
                id=book.id,
                title=book.title,
                author=book.author,
                description=book.description,
                genre=list(book.genre),
                cover_image=book.cover_image,
                isbn=book.isbn,
                publication_year=book.publication_year,
                publisher=book.publisher,
                average_rating=rating.average_rating,
                review_count=rating.review_count,
                added_by=owners[book.added_by],
                created_at=book.created_at,
                updated_at=book.updated_at,
            )
        )
    return responses


def build_book_response(db: Session, book: Book) -> BookResponse:
    return build_book_responses(db, [book])[0]


def get_book_or_404(db: Session, book_id: int) -> Book:
    """
    Fetch a book row or raise NotFoundError.

    Shared with the review service, which must check the book exists
    before touching its reviews.
    """
    book = book_repo.get_book(db, book_id)
    if book is None:
        raise NotFoundError("Book not found")
    return book


# =============================================================================
# Operations
# =============================================================================
def create_book(db: Session, data: BookCreate, user_id: int) -> BookResponse:
    """
    Add a book to the catalogue, owned by user_id.

    Titles are not unique; two users may add the same book.
    """
    book = Book(**data.model_dump(), added_by=user_id)
    book = book_repo.add_book(db, book)

    logger.info(f"Book created: id={book.id} title='{book.title}' by user {user_id}")

    return build_book_response(db, book)


def get_book_by_id(db: Session, book_id: int) -> BookResponse:
    """
    Get one book with its aggregated rating and owner.

    Raises:
        NotFoundError: If the book does not exist
    """
    return build_book_response(db, get_book_or_404(db, book_id))


def get_all_books(
    db: Session,
    *,
    page: int = 1,
    limit: int = 10,
    genre: str | None = None,
    author: str | None = None,
    search: str | None = None,
    sort_by: str = "title",
    sort_order: str = "asc",
) -> BookListResponse:
    """
    List books with filters, sorting and offset pagination.

    Args:
        page: 1-based page number
        limit: Page size
        genre: Exact genre tag
        author: Case-insensitive substring of the author name
        search: Case-insensitive substring of the title or author
        sort_by: title, author, publicationYear or averageRating
        sort_order: asc or desc

    Returns:
        {data, totalCount, totalPages, currentPage}
    """
    books, total = book_repo.list_books(
        db,
        skip=(page - 1) * limit,
        limit=limit,
        genre=genre,
        author=author,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )

    return BookListResponse(
        data=build_book_responses(db, books),
        total_count=total,
        total_pages=math.ceil(total / limit) if total > 0 else 0,
        current_page=page,
    )


def update_book(
    db: Session,
    book_id: int,
    patch: BookUpdate,
    user_id: int,
    is_admin: bool,
) -> BookResponse:
    """
    Apply a partial update. Only fields present in the request change.

    Raises:
        NotFoundError: If the book does not exist
        ForbiddenError: If the caller is neither the owner nor an admin
    """
    book = get_book_or_404(db, book_id)

    ensure_owner_or_admin(
        book.added_by,
        user_id,
        is_admin,
        "Not authorized to update this book",
    )

    changes = patch.model_dump(exclude_unset=True)
    book = book_repo.update_book(db, book, changes)

    logger.info(f"Book updated: id={book.id} fields={sorted(changes)}")

    return build_book_response(db, book)


def delete_book(db: Session, book_id: int, user_id: int, is_admin: bool) -> bool:
    """
    Delete a book together with its reviews.

    Raises:
        NotFoundError: If the book does not exist
        ForbiddenError: If the caller is neither the owner nor an admin
    """
    book = get_book_or_404(db, book_id)

    ensure_owner_or_admin(
        book.added_by,
        user_id,
        is_admin,
        "Not authorized to delete this book",
    )

    deleted = book_repo.delete_book(db, book_id)
    if not deleted:
        raise NotFoundError("Book not found")

    logger.info(f"Book deleted: id={book_id} by user {user_id}")
    return True


def search_books(db: Session, query: str) -> BookSearchResponse:
    """
    Relevance-ranked search over title and author.

    Raises:
        ValidationError: If the trimmed query is shorter than 2 characters
    """
    query = (query or "").strip()
    if len(query) < MIN_SEARCH_QUERY_LENGTH:
        raise ValidationError(
            f"Search query must be at least {MIN_SEARCH_QUERY_LENGTH} characters"
        )

    books = book_repo.search_books(db, query)
    return BookSearchResponse(results=build_book_responses(db, books))


def get_all_authors(db: Session) -> list[AuthorResponse]:
    """Distinct author names across the catalogue, sorted ascending."""
    return [AuthorResponse(name=name) for name in book_repo.list_authors(db)]
