"""
Book Repository

Catalogue queries:
- get_book: lookup by id
- list_books: filtered, sorted, paginated listing
- search_books: relevance-ranked free-text search over title and author
- list_authors: distinct author names
"""

from sqlalchemy import case, func, literal, or_, select
from sqlalchemy.orm import Session

from bookreviews.models.book import Book, BookGenre
from bookreviews.repositories.reviews import rating_stats_subquery

# Public sort keys (camelCase, as sent by clients) -> columns.
# averageRating is not a column; it is handled in list_books().
BOOK_SORT_COLUMNS = {
    "title": Book.title,
    "author": Book.author,
    "publicationYear": Book.publication_year,
}

# Relevance weights for free-text search
TITLE_MATCH_SCORE = 2
AUTHOR_MATCH_SCORE = 1


def _contains_pattern(value: str) -> str:
    """Build a LIKE pattern matching value anywhere, with wildcards escaped."""
    escaped = (
        value.lower()
        .replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )
    return f"%{escaped}%"


def _icontains(column, value: str):
    return func.lower(column).like(_contains_pattern(value), escape="\\")


def get_book(db: Session, book_id: int) -> Book | None:
    return db.get(Book, book_id)


def add_book(db: Session, book: Book) -> Book:
    db.add(book)
    db.commit()
    db.refresh(book)
    return book


def update_book(db: Session, book: Book, changes: dict) -> Book:
    for field, value in changes.items():
        setattr(book, field, value)
    db.commit()
    db.refresh(book)
    return book


def delete_book(db: Session, book_id: int) -> bool:
    """
    Delete a book by id, together with its genre tags and reviews.

    Returns False if nothing was deleted.
    """
    book = db.get(Book, book_id)
    if book is None:
        return False
    db.delete(book)
    db.commit()
    return True


def apply_book_filters(
    stmt,
    *,
    genre: str | None = None,
    author: str | None = None,
    search: str | None = None,
):
    """
    Apply listing filters to a book query.

    - genre: exact match against one of the book's genre tags
    - author: case-insensitive substring of the author name
    - search: case-insensitive substring of the title or author name
    """
    if genre:
        stmt = stmt.where(Book.genre_tags.any(BookGenre.name == genre))

    if author:
        stmt = stmt.where(_icontains(Book.author, author))

    if search:
        stmt = stmt.where(
            or_(
                _icontains(Book.title, search),
                _icontains(Book.author, search),
            )
        )

    return stmt


def list_books(
    db: Session,
    *,
    skip: int,
    limit: int,
    genre: str | None = None,
    author: str | None = None,
    search: str | None = None,
    sort_by: str = "title",
    sort_order: str = "asc",
) -> tuple[list[Book], int]:
    """
    Fetch one page of books.

    Returns:
        Tuple of (books on this page, total matching books)
    """
    base_stmt = apply_book_filters(
        select(Book),
        genre=genre,
        author=author,
        search=search,
    )

    count_stmt = select(func.count()).select_from(base_stmt.subquery())
    total = db.execute(count_stmt).scalar() or 0

    stmt = base_stmt
    if sort_by == "averageRating":
        stats = rating_stats_subquery()
        stmt = stmt.outerjoin(stats, stats.c.book_id == Book.id)
        column = func.coalesce(stats.c.average_rating, 0)
    else:
        column = BOOK_SORT_COLUMNS[sort_by]

    if sort_order == "desc":
        stmt = stmt.order_by(column.desc(), Book.id.desc())
    else:
        stmt = stmt.order_by(column.asc(), Book.id.asc())

    books = list(db.execute(stmt.offset(skip).limit(limit)).scalars().all())
    return books, total


def search_books(db: Session, query: str) -> list[Book]:
    """
    Relevance-ranked free-text search over title and author.

    The query is split into lowercase terms. Every term found in the
    title adds TITLE_MATCH_SCORE, every term found in the author adds
    AUTHOR_MATCH_SCORE. Books scoring zero are excluded; ties are ordered
    by title.
    """
    terms = list(dict.fromkeys(query.lower().split()))
    if not terms:
        return []

    score = literal(0)
    for term in terms:
        score = score + case(
            (_icontains(Book.title, term), TITLE_MATCH_SCORE),
            else_=0,
        )
        score = score + case(
            (_icontains(Book.author, term), AUTHOR_MATCH_SCORE),
            else_=0,
        )

    stmt = (
        select(Book)
        .where(score > 0)
        .order_by(score.desc(), Book.title.asc(), Book.id.asc())
    )
    return list(db.execute(stmt).scalars().all())


def list_authors(db: Session) -> list[str]:
    """Distinct author names, sorted ascending."""
    stmt = select(Book.author).distinct().order_by(Book.author.asc())
    return list(db.execute(stmt).scalars().all())
