"""
Review Pydantic Schemas

Schemas:
- ReviewCreate: Create a new review
- ReviewUpdate: Update an existing review
- ReviewResponse: Review with the author's summary embedded
- ReviewListResponse: Paginated list of reviews

Business Rules:
- Rating must be 1-5 (validated at schema level)
- Comment is required and cannot be blank
- One review per user per book (enforced at database level)
"""

from datetime import datetime

from pydantic import ConfigDict, Field, field_validator

from bookreviews.schemas.common import CamelModel, Page
from bookreviews.schemas.user import UserSummary


class ReviewCreate(CamelModel):
    """
    Schema for creating a new review.

    Example request body:
    {
        "rating": 5,
        "comment": "One of the best books I've ever read..."
    }
    """

    rating: int = Field(
        ...,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )

    comment: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        description="Review text",
        examples=["This book changed my perspective on..."],
    )

    @field_validator("comment")
    @classmethod
    def comment_must_not_be_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment cannot be empty or whitespace")
        return v


class ReviewUpdate(CamelModel):
    """
    Schema for updating an existing review.

    Both fields are optional; omitted fields keep their value.
    """

    rating: int | None = Field(
        default=None,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
    )

    comment: str | None = Field(
        default=None,
        min_length=1,
        max_length=5000,
        description="Review text",
    )

    @field_validator("rating")
    @classmethod
    def rating_not_null(cls, v: int | None) -> int:
        if v is None:
            raise ValueError("rating cannot be null")
        return v

    @field_validator("comment")
    @classmethod
    def comment_must_not_be_empty(cls, v: str | None) -> str:
        if v is None or not v.strip():
            raise ValueError("Comment cannot be empty or whitespace")
        return v.strip()


class ReviewResponse(CamelModel):
    """
    Schema for review responses.

    The author is embedded as a user summary; bookId identifies the book.
    """

    id: int = Field(..., description="Unique review identifier")
    book_id: int = Field(..., description="ID of the reviewed book")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5 stars")
    comment: str = Field(..., description="Review text")
    user: UserSummary = Field(..., description="User who wrote the review")
    created_at: datetime = Field(..., description="When the review was created")
    updated_at: datetime = Field(..., description="When the review was last updated")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "bookId": 42,
                "rating": 5,
                "comment": "A must-read classic!",
                "user": {
                    "id": 7,
                    "username": "booklover",
                    "email": "booklover@example.com",
                    "isAdmin": False,
                },
                "createdAt": "2024-01-15T10:30:00Z",
                "updatedAt": "2024-01-15T10:30:00Z",
            }
        },
    )


ReviewListResponse = Page[ReviewResponse]
