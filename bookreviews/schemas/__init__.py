"""
Pydantic Schemas Package

Schemas define the shape of request bodies and responses. Attributes are
snake_case in Python and camelCase on the wire (see common.CamelModel).
"""

from bookreviews.schemas.book import (
    AuthorResponse,
    BookCreate,
    BookListResponse,
    BookResponse,
    BookSearchResponse,
    BookUpdate,
)
from bookreviews.schemas.common import CamelModel, Page
from bookreviews.schemas.review import (
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
)
from bookreviews.schemas.user import (
    LoginRequest,
    TokenResponse,
    UserCreate,
    UserResponse,
    UserSummary,
)

__all__ = [
    "CamelModel",
    "Page",
    "AuthorResponse",
    "BookCreate",
    "BookListResponse",
    "BookResponse",
    "BookSearchResponse",
    "BookUpdate",
    "ReviewCreate",
    "ReviewListResponse",
    "ReviewResponse",
    "ReviewUpdate",
    "LoginRequest",
    "TokenResponse",
    "UserCreate",
    "UserResponse",
    "UserSummary",
]
