"""
Security Service

Password hashing and JWT access tokens.

- Passwords are hashed with bcrypt (passlib) and never stored or returned
  in plain text.
- Access tokens are HS256 JWTs carrying the user's summary, so an
  authenticated request needs no database lookup to know who is calling.

Usage:
    from bookreviews.services.security import hash_password, verify_password

    hashed = hash_password("secret123")
    verify_password("secret123", hashed)  # True
"""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from bookreviews.config import get_settings
from bookreviews.exceptions import UnauthorizedError
from bookreviews.schemas.user import UserSummary

logger = logging.getLogger(__name__)
settings = get_settings()

# -------------------------------------------------------------------------
# Password Hashing
# -------------------------------------------------------------------------
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Example:
        >>> hash_password("secret123").startswith("$2b$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------------------------------------------------------
# JWT Access Tokens
# -------------------------------------------------------------------------
ALGORITHM = "HS256"
TOKEN_TYPE = "access"


def access_token_lifetime() -> timedelta:
    return timedelta(minutes=settings.access_token_expire_minutes)


def create_access_token(
    data: dict,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed JWT access token.

    Args:
        data: Claims to encode in the token
        expires_delta: Optional custom lifetime (defaults to the configured one)

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()
    expire = datetime.now(UTC) + (expires_delta or access_token_lifetime())
    to_encode.update({"exp": expire, "type": TOKEN_TYPE})

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=ALGORITHM,
    )


def create_token_for_user(user: UserSummary, expires_delta: timedelta | None = None) -> str:
    """Issue an access token whose claims identify the given user."""
    return create_access_token(
        {
            "sub": str(user.id),
            "username": user.username,
            "email": user.email,
            "isAdmin": user.is_admin,
        },
        expires_delta=expires_delta,
    )


def decode_token(token: str) -> dict | None:
    """
    Decode and validate a JWT token.

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None


def decode_access_token(token: str) -> UserSummary:
    """
    Decode an access token into the identity it carries.

    Raises:
        UnauthorizedError: If the token is invalid, expired, of the wrong
            type or missing the identity claims
    """
    payload = decode_token(token)
    if payload is None:
        raise UnauthorizedError("Invalid or expired token")

    if payload.get("type") != TOKEN_TYPE:
        logger.warning(f"Token type mismatch: expected {TOKEN_TYPE}")
        raise UnauthorizedError("Invalid or expired token")

    try:
        return UserSummary(
            id=int(payload["sub"]),
            username=payload["username"],
            email=payload["email"],
            is_admin=bool(payload.get("isAdmin", False)),
        )
    except (KeyError, TypeError, ValueError):
        raise UnauthorizedError("Invalid or expired token")
