"""
Review Repository

Persistence and listing for reviews. Rating aggregation lives in
services/ratings.py so every book read path shares one implementation.
"""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookreviews.models.review import Review

# Public sort keys (camelCase, as sent by clients) -> columns
REVIEW_SORT_COLUMNS = {
    "rating": Review.rating,
    "createdAt": Review.created_at,
}


def get_review(db: Session, review_id: int) -> Review | None:
    return db.get(Review, review_id)


def find_by_user_and_book(db: Session, user_id: int, book_id: int) -> Review | None:
    """
    Find the review a user wrote for a book, if any.

    This is the friendly pre-check; the uq_review_book_user constraint is
    what actually guarantees one review per (book, user).
    """
    stmt = select(Review).where(
        Review.book_id == book_id,
        Review.user_id == user_id,
    )
    return db.execute(stmt).scalar_one_or_none()


def list_reviews_for_book(
    db: Session,
    book_id: int,
    *,
    skip: int,
    limit: int,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
) -> tuple[list[Review], int]:
    """
    Fetch one page of a book's reviews.

    Returns:
        Tuple of (reviews on this page, total reviews for the book)
    """
    count_stmt = select(func.count(Review.id)).where(Review.book_id == book_id)
    total = db.execute(count_stmt).scalar() or 0

    column = REVIEW_SORT_COLUMNS[sort_by]
    if sort_order == "asc":
        ordering = (column.asc(), Review.id.asc())
    else:
        ordering = (column.desc(), Review.id.desc())

    stmt = (
        select(Review)
        .where(Review.book_id == book_id)
        .order_by(*ordering)
        .offset(skip)
        .limit(limit)
    )
    reviews = list(db.execute(stmt).scalars().all())
    return reviews, total


def add_review(db: Session, review: Review) -> Review:
    """
    Persist a new review.

    Raises:
        IntegrityError: If the (book, user) pair already has a review
    """
    db.add(review)
    db.commit()
    db.refresh(review)
    return review


def update_review(db: Session, review: Review, changes: dict) -> Review:
    for field, value in changes.items():
        setattr(review, field, value)
    db.commit()
    db.refresh(review)
    return review


def delete_review(db: Session, review_id: int) -> bool:
    """Delete a review by id. Returns False if nothing was deleted."""
    review = db.get(Review, review_id)
    if review is None:
        return False
    db.delete(review)
    db.commit()
    return True


def rating_stats_subquery():
    """
    Per-book rating aggregates as a subquery.

    Columns: book_id, average_rating, review_count. Books without reviews
    have no row; callers outer-join and coalesce to 0.
    """
    return (
        select(
            Review.book_id.label("book_id"),
            func.avg(Review.rating).label("average_rating"),
            func.count(Review.id).label("review_count"),
        )
        .group_by(Review.book_id)
        .subquery("rating_stats")
    )
