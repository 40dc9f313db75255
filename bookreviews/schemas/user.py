"""
User Pydantic Schemas

Schemas:
- UserCreate: Registration data (username, email, password)
- LoginRequest: Credentials for POST /auth/login
- UserSummary: The {id, username, email, isAdmin} record embedded in
  book and review responses, also the identity carried by access tokens
- UserResponse: Full public profile returned by registration
- TokenResponse: Access token plus the logged-in user's summary

SECURITY: no response schema ever exposes the password hash.
"""

from datetime import datetime

from pydantic import ConfigDict, EmailStr, Field, field_validator

from bookreviews.schemas.common import CamelModel


class UserCreate(CamelModel):
    """
    Schema for user registration.

    Example request body:
    {
        "username": "alice",
        "email": "alice@example.com",
        "password": "secret123"
    }
    """

    username: str = Field(
        ...,
        min_length=3,
        max_length=30,
        description="Unique username (3-30 characters)",
        examples=["alice", "book_worm"],
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["alice@example.com"],
    )

    password: str = Field(
        ...,
        min_length=6,
        max_length=128,
        description="Password (min 6 characters)",
        examples=["secret123"],
    )

    @field_validator("username")
    @classmethod
    def username_must_not_be_blank(cls, v: str) -> str:
        """Strip surrounding whitespace; reject what is left if too short."""
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Username must be at least 3 characters")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Emails are stored lowercase so lookups are case-insensitive."""
        return v.lower()


class LoginRequest(CamelModel):
    """Schema for login with email and password."""

    email: EmailStr = Field(..., description="Registered email address")
    password: str = Field(..., min_length=1, description="Account password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserSummary(CamelModel):
    """
    Minimal user record embedded in book and review responses.

    Also used as the decoded identity of an access token.
    """

    id: int = Field(..., description="Unique user identifier")
    username: str = Field(..., description="Unique username")
    email: str = Field(..., description="User's email address")
    is_admin: bool = Field(default=False, description="Whether the user is an admin")

    model_config = ConfigDict(from_attributes=True)


class UserResponse(UserSummary):
    """Schema for the registered user returned by POST /auth/register."""

    created_at: datetime = Field(..., description="When the user registered")
    updated_at: datetime = Field(..., description="When the profile last changed")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "username": "alice",
                "email": "alice@example.com",
                "isAdmin": False,
                "createdAt": "2024-01-15T10:30:00Z",
                "updatedAt": "2024-01-15T10:30:00Z",
            }
        },
    )


class TokenResponse(CamelModel):
    """
    Schema returned by a successful login.

    Send the token back as: Authorization: Bearer <access_token>
    """

    access_token: str = Field(..., description="Signed JWT access token")
    token_type: str = Field(default="bearer", description="Always 'bearer'")
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserSummary = Field(..., description="The authenticated user")
