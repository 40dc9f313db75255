"""
Ratings Service

Read-time rating aggregation for books.

averageRating and reviewCount are never stored on the book row. Every
book response computes them from the reviews table at query time, so a
freshly created, updated or deleted review is reflected on the very next
read. All book read paths go through get_rating_summaries() so the mean
and count are computed identically everywhere: 0 and 0 for a book with no
reviews, never null or NaN.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookreviews.models.review import Review


@dataclass(frozen=True)
class RatingSummary:
    """Aggregated rating of one book."""

    average_rating: float = 0.0
    review_count: int = 0


EMPTY_SUMMARY = RatingSummary()


def get_rating_summaries(
    db: Session,
    book_ids: Iterable[int],
) -> dict[int, RatingSummary]:
    """
    Aggregate ratings for several books in one query.

    Args:
        db: Database session
        book_ids: Books to aggregate

    Returns:
        Mapping of every requested book id to its RatingSummary
    """
    wanted = set(book_ids)
    if not wanted:
        return {}

    stmt = (
        select(
            Review.book_id,
            func.avg(Review.rating),
            func.count(Review.id),
        )
        .where(Review.book_id.in_(wanted))
        .group_by(Review.book_id)
    )

    summaries = {
        book_id: RatingSummary(
            # PostgreSQL returns AVG() as Decimal
            average_rating=float(average) if average is not None else 0.0,
            review_count=count or 0,
        )
        for book_id, average, count in db.execute(stmt).all()
    }
    return {book_id: summaries.get(book_id, EMPTY_SUMMARY) for book_id in wanted}


def get_rating_summary(db: Session, book_id: int) -> RatingSummary:
    """Aggregate the rating of a single book."""
    return get_rating_summaries(db, [book_id])[book_id]


def get_average_rating_for_book(db: Session, book_id: int) -> float:
    """
    Arithmetic mean of all ratings for a book.

    Returns:
        The mean rating, or 0 when the book has no reviews
    """
    return get_rating_summary(db, book_id).average_rating
