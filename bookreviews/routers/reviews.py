"""
Reviews Router

Endpoints:
- GET /books/{book_id}/reviews - Paginated reviews of a book
- POST /books/{book_id}/reviews - Review a book (authenticated)
- GET /reviews/{review_id} - One review
- PUT /reviews/{review_id} - Update (author or admin)
- DELETE /reviews/{review_id} - Delete (author or admin)

Business Rules:
- One review per user per book (409 on a second attempt)
- Rating 1-5, comment required
"""

from fastapi import APIRouter, Request, status

from bookreviews.config import get_settings
from bookreviews.dependencies import CurrentUser, DbSession, Pagination, ReviewQuery
from bookreviews.schemas.review import (
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
)
from bookreviews.services import reviews as review_service
from bookreviews.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    tags=["Reviews"],
    responses={
        404: {"description": "Book or review not found"},
    },
)


@router.get(
    "/books/{book_id}/reviews",
    response_model=ReviewListResponse,
    summary="List reviews for a book",
    description="""
    Paginated reviews of a book.

    - `sortBy`: rating or createdAt (default createdAt)
    - `sortOrder`: asc or desc (default desc)
    """,
)
@limiter.limit(settings.rate_limit_default)
def list_book_reviews(
    request: Request,
    book_id: int,
    db: DbSession,
    pagination: Pagination,
    query: ReviewQuery,
) -> ReviewListResponse:
    return review_service.get_reviews_by_book_id(
        db,
        book_id,
        page=pagination.page,
        limit=pagination.limit,
        sort_by=query.sort_by,
        sort_order=query.sort_order,
    )


@router.post(
    "/books/{book_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a review",
    description="Review a book. Each user can review a book only once.",
    responses={
        401: {"description": "Not authenticated"},
        409: {"description": "Already reviewed this book"},
    },
)
@limiter.limit(settings.rate_limit_write)
def create_review(
    request: Request,
    book_id: int,
    review_data: ReviewCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> ReviewResponse:
    return review_service.create_review(
        db,
        book_id,
        current_user.id,
        review_data.rating,
        review_data.comment,
    )


@router.get(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Get a review by ID",
)
@limiter.limit(settings.rate_limit_default)
def get_review(
    request: Request,
    review_id: int,
    db: DbSession,
) -> ReviewResponse:
    return review_service.get_review_by_id(db, review_id)


@router.put(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Update a review",
    description="Change the rating and/or comment. Author or admin only.",
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Not the author"},
    },
)
@limiter.limit(settings.rate_limit_write)
def update_review(
    request: Request,
    review_id: int,
    review_data: ReviewUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> ReviewResponse:
    return review_service.update_review(
        db,
        review_id,
        current_user.id,
        current_user.is_admin,
        review_data,
    )


@router.delete(
    "/reviews/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a review",
    description="Author or admin only.",
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Not the author"},
    },
)
@limiter.limit(settings.rate_limit_write)
def delete_review(
    request: Request,
    review_id: int,
    db: DbSession,
    current_user: CurrentUser,
) -> None:
    review_service.delete_review(db, review_id, current_user.id, current_user.is_admin)
