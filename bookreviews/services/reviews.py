"""
Review Service

Business rules for reviews:
- a user may review a book at most once
- ratings are whole numbers from 1 to 5 and comments cannot be blank
- only the author of a review or an admin may change or delete it

The one-review-per-user rule is checked up front for a friendly error and
guaranteed by the uq_review_book_user constraint. If two requests race
past the check, the loser's insert fails and is reported as a conflict.
"""

import logging
import math
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookreviews.exceptions import ConflictError, NotFoundError, ValidationError
from bookreviews.models.review import Review
from bookreviews.repositories import reviews as review_repo
from bookreviews.repositories.users import resolve_user_summaries
from bookreviews.schemas.review import (
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
)
from bookreviews.services.books import get_book_or_404
from bookreviews.services.permissions import ensure_owner_or_admin

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5

DUPLICATE_REVIEW = "You have already reviewed this book"

REVIEW_UNIQUE_CONSTRAINT = "uq_review_book_user"
# SQLite names the columns instead of the constraint
SQLITE_DUPLICATE_REVIEW = "UNIQUE constraint failed: reviews.book_id, reviews.user_id"


def is_duplicate_review_error(exc: IntegrityError) -> bool:
    """True when the failed insert hit the one-review-per-user constraint."""
    diag = getattr(exc.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint is not None:
        return constraint == REVIEW_UNIQUE_CONSTRAINT

    message = str(exc.orig)
    return REVIEW_UNIQUE_CONSTRAINT in message or SQLITE_DUPLICATE_REVIEW in message


def build_review_responses(
    db: Session,
    reviews: Sequence[Review],
) -> list[ReviewResponse]:
    """Attach the author's summary to each review (one user query per batch)."""
    if not reviews:
        return []

    authors = resolve_user_summaries(db, [review.user_id for review in reviews])
    return [
        ReviewResponse(
            id=review.id,
            book_id=review.book_id,
            rating=review.rating,
            comment=review.comment,
            user=authors[review.user_id],
            created_at=review.created_at,
            updated_at=review.updated_at,
        )
        for review in reviews
    ]


def build_review_response(db: Session, review: Review) -> ReviewResponse:
    return build_review_responses(db, [review])[0]


def _check_rating(rating) -> int:
    # bool is an int subclass; True is not a rating
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("Rating must be an integer between 1 and 5")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError("Rating must be an integer between 1 and 5")
    return rating


def _check_comment(comment) -> str:
    if not isinstance(comment, str) or not comment.strip():
        raise ValidationError("Comment cannot be empty")
    return comment.strip()


def get_review_or_404(db: Session, review_id: int) -> Review:
    review = review_repo.get_review(db, review_id)
    if review is None:
        raise NotFoundError("Review not found")
    return review


def create_review(
    db: Session,
    book_id: int,
    user_id: int,
    rating: int,
    comment: str,
) -> ReviewResponse:
    """
    Add a user's review to a book.

    Raises:
        NotFoundError: If the book does not exist
        ValidationError: If the rating is outside 1-5 or the comment is blank
        ConflictError: If the user already reviewed this book
        IntegrityError: If the insert breaks any other constraint
    """
    get_book_or_404(db, book_id)

    rating = _check_rating(rating)
    comment = _check_comment(comment)

    if review_repo.find_by_user_and_book(db, user_id, book_id):
        logger.warning(f"Duplicate review by user {user_id} for book {book_id}")
        raise ConflictError(DUPLICATE_REVIEW)

    review = Review(
        book_id=book_id,
        user_id=user_id,
        rating=rating,
        comment=comment,
    )

    try:
        review = review_repo.add_review(db, review)
    except IntegrityError as exc:
        db.rollback()
        if not is_duplicate_review_error(exc):
            raise
        logger.warning(
            f"Duplicate review by user {user_id} for book {book_id} "
            "rejected by the unique constraint"
        )
        raise ConflictError(DUPLICATE_REVIEW)

    logger.info(f"Review created: id={review.id} book={book_id} user={user_id}")

    return build_review_response(db, review)


def get_reviews_by_book_id(
    db: Session,
    book_id: int,
    *,
    page: int = 1,
    limit: int = 10,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
) -> ReviewListResponse:
    """
    One page of a book's reviews, newest first by default.

    Raises:
        NotFoundError: If the book does not exist
    """
    get_book_or_404(db, book_id)

    reviews, total = review_repo.list_reviews_for_book(
        db,
        book_id,
        skip=(page - 1) * limit,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )

    return ReviewListResponse(
        data=build_review_responses(db, reviews),
        total_count=total,
        total_pages=math.ceil(total / limit) if total > 0 else 0,
        current_page=page,
    )


def get_review_by_id(db: Session, review_id: int) -> ReviewResponse:
    return build_review_response(db, get_review_or_404(db, review_id))


def update_review(
    db: Session,
    review_id: int,
    user_id: int,
    is_admin: bool,
    patch: ReviewUpdate,
) -> ReviewResponse:
    """
    Change the rating and/or comment of a review.

    Raises:
        NotFoundError: If the review does not exist
        ForbiddenError: If the caller is neither the author nor an admin
        ValidationError: If a new rating or comment is invalid
    """
    review = get_review_or_404(db, review_id)

    ensure_owner_or_admin(
        review.user_id,
        user_id,
        is_admin,
        "Not authorized to update this review",
    )

    changes = patch.model_dump(exclude_unset=True)
    if "rating" in changes:
        changes["rating"] = _check_rating(changes["rating"])
    if "comment" in changes:
        changes["comment"] = _check_comment(changes["comment"])

    review = review_repo.update_review(db, review, changes)

    logger.info(f"Review updated: id={review.id} fields={sorted(changes)}")

    return build_review_response(db, review)


def delete_review(db: Session, review_id: int, user_id: int, is_admin: bool) -> bool:
    """
    Delete a review.

    Raises:
        NotFoundError: If the review does not exist
        ForbiddenError: If the caller is neither the author nor an admin
    """
    review = get_review_or_404(db, review_id)

    ensure_owner_or_admin(
        review.user_id,
        user_id,
        is_admin,
        "Not authorized to delete this review",
    )

    deleted = review_repo.delete_review(db, review_id)
    if not deleted:
        raise NotFoundError("Review not found")

    logger.info(f"Review deleted: id={review_id} by user {user_id}")
    return True
