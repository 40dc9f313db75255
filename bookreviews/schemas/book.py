"""
Book Pydantic Schemas

Handles:
- Required text fields (title, author, description) and genre tags
- Cover image URL and publication year validation
- The book envelope with aggregated rating fields and owner summary
- Paginated and search list responses
"""

import re
from datetime import UTC, datetime

from pydantic import ConfigDict, Field, ValidationInfo, field_validator

from bookreviews.schemas.common import CamelModel, Page
from bookreviews.schemas.user import UserSummary

URL_PATTERN = re.compile(r"^https?://\S+$", re.IGNORECASE)

REQUIRED_TEXT_FIELDS = ("title", "author", "description")


def _clean_required_text(v: str | None, field_name: str) -> str:
    if v is None:
        raise ValueError(f"{field_name} cannot be null")
    v = v.strip()
    if not v:
        raise ValueError(f"{field_name} cannot be empty or whitespace")
    return v


def _clean_genres(v: list[str] | None) -> list[str]:
    if v is None:
        raise ValueError("genre cannot be null")
    cleaned = [tag.strip() for tag in v]
    if any(not tag for tag in cleaned):
        raise ValueError("Genre tags cannot be empty")
    # Tags form a set; keep the first occurrence of each
    return list(dict.fromkeys(cleaned))


def _check_cover_image(v: str | None) -> str | None:
    if v and not URL_PATTERN.match(v):
        raise ValueError("Cover image must be an http(s) URL or empty")
    return v


def _check_publication_year(v: int | None) -> int | None:
    if v is not None and v > datetime.now(UTC).year:
        raise ValueError("Publication year cannot be in the future")
    return v


class BookBase(CamelModel):
    """
    Base schema with shared book fields.

    title, author, description and genre are required; the rest is
    optional metadata.
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["Dune", "Pride and Prejudice"],
    )

    author: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Author name",
        examples=["Frank Herbert"],
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        description="Book description or summary",
    )

    genre: list[str] = Field(
        ...,
        min_length=1,
        description="Genre tags (at least one)",
        examples=[["Science Fiction", "Classic"]],
    )

    cover_image: str | None = Field(
        default=None,
        description="URL of the cover image (empty string allowed)",
        examples=["https://covers.example.com/dune.jpg"],
    )

    isbn: str | None = Field(
        default=None,
        max_length=20,
        description="ISBN-10 or ISBN-13",
        examples=["9780441172719"],
    )

    publication_year: int | None = Field(
        default=None,
        ge=1000,
        description="Year of first publication",
        examples=[1965],
    )

    publisher: str | None = Field(
        default=None,
        max_length=255,
        description="Publisher name",
    )


class BookCreate(BookBase):
    """
    Schema for creating a new book.

    The owner (addedBy) is taken from the access token, never the body.

    Example request body:
    {
        "title": "Dune",
        "author": "Frank Herbert",
        "description": "Desert planet epic.",
        "genre": ["Science Fiction"],
        "publicationYear": 1965
    }
    """

    @field_validator(*REQUIRED_TEXT_FIELDS)
    @classmethod
    def text_must_not_be_empty(cls, v: str, info: ValidationInfo) -> str:
        return _clean_required_text(v, info.field_name)

    @field_validator("genre")
    @classmethod
    def genre_tags_must_not_be_empty(cls, v: list[str]) -> list[str]:
        return _clean_genres(v)

    @field_validator("cover_image")
    @classmethod
    def cover_image_must_be_url(cls, v: str | None) -> str | None:
        return _check_cover_image(v)

    @field_validator("publication_year")
    @classmethod
    def publication_year_not_in_future(cls, v: int | None) -> int | None:
        return _check_publication_year(v)


class BookUpdate(CamelModel):
    """
    Schema for updating an existing book.

    All fields are optional for PATCH-style updates. Required fields may be
    omitted but not set to null.
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    author: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1, max_length=5000)
    genre: list[str] | None = Field(default=None, min_length=1)
    cover_image: str | None = Field(default=None)
    isbn: str | None = Field(default=None, max_length=20)
    publication_year: int | None = Field(default=None, ge=1000)
    publisher: str | None = Field(default=None, max_length=255)

    @field_validator(*REQUIRED_TEXT_FIELDS)
    @classmethod
    def text_must_not_be_empty(cls, v: str | None, info: ValidationInfo) -> str:
        return _clean_required_text(v, info.field_name)

    @field_validator("genre")
    @classmethod
    def genre_tags_must_not_be_empty(cls, v: list[str] | None) -> list[str]:
        return _clean_genres(v)

    @field_validator("cover_image")
    @classmethod
    def cover_image_must_be_url(cls, v: str | None) -> str | None:
        return _check_cover_image(v)

    @field_validator("publication_year")
    @classmethod
    def publication_year_not_in_future(cls, v: int | None) -> int | None:
        return _check_publication_year(v)


class BookResponse(BookBase):
    """
    Schema for book responses.

    averageRating and reviewCount are aggregated from the reviews at read
    time (0 and 0 for an unreviewed book). addedBy is the resolved owner.
    """

    id: int = Field(..., description="Unique identifier")
    average_rating: float = Field(
        default=0,
        ge=0,
        le=5,
        description="Mean review rating, 0 if no reviews",
    )
    review_count: int = Field(default=0, ge=0, description="Number of reviews")
    added_by: UserSummary = Field(..., description="User who added the book")
    created_at: datetime = Field(..., description="When the book was created")
    updated_at: datetime = Field(..., description="When the book was last updated")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Dune",
                "author": "Frank Herbert",
                "description": "Desert planet epic.",
                "genre": ["Science Fiction"],
                "coverImage": "",
                "isbn": "9780441172719",
                "publicationYear": 1965,
                "publisher": "Chilton Books",
                "averageRating": 4.5,
                "reviewCount": 2,
                "addedBy": {
                    "id": 1,
                    "username": "alice",
                    "email": "alice@example.com",
                    "isAdmin": False,
                },
                "createdAt": "2024-01-15T10:30:00Z",
                "updatedAt": "2024-01-15T10:30:00Z",
            }
        },
    )


BookListResponse = Page[BookResponse]


class BookSearchResponse(CamelModel):
    """Free-text search results, most relevant first."""

    results: list[BookResponse] = Field(..., description="Matching books")


class AuthorResponse(CamelModel):
    """One distinct author name from the catalogue."""

    name: str = Field(..., description="Author name", examples=["Frank Herbert"])
