"""
Authentication Service

Registration and login.

- register(): rejects duplicate email/username, hashes the password, stores
  the user
- login(): checks credentials and issues an access token carrying the
  user's summary

Plain text passwords are never logged or stored.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookreviews.exceptions import ConflictError, UnauthorizedError
from bookreviews.models.user import User
from bookreviews.repositories import users as user_repo
from bookreviews.schemas.user import (
    TokenResponse,
    UserCreate,
    UserResponse,
    UserSummary,
)
from bookreviews.services.security import (
    access_token_lifetime,
    create_token_for_user,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def register(db: Session, user_data: UserCreate) -> UserResponse:
    """
    Register a new user.

    Raises:
        ConflictError: If the email or username is already taken, including
            when a concurrent registration claims it first
    """
    if user_repo.get_user_by_email(db, user_data.email):
        raise ConflictError("Email already registered")

    if user_repo.get_user_by_username(db, user_data.username):
        raise ConflictError("Username already taken")

    user = User(
        username=user_data.username,
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
        is_admin=False,
    )

    try:
        user = user_repo.add_user(db, user)
    except IntegrityError:
        db.rollback()
        logger.warning(f"Registration conflict for {user_data.email}")
        raise ConflictError("Email or username already taken")

    logger.info(f"New user registered: {user.email}")

    return UserResponse.model_validate(user)


def login(db: Session, email: str, password: str) -> TokenResponse:
    """
    Authenticate with email and password.

    Unknown email and wrong password give the same error so the response
    does not reveal which accounts exist.

    Raises:
        UnauthorizedError: On unknown email or wrong password
    """
    user = user_repo.get_user_by_email(db, email)

    if user is None:
        logger.warning(f"Login failed: user not found for {email}")
        raise UnauthorizedError(INVALID_CREDENTIALS)

    if not verify_password(password, user.hashed_password):
        logger.warning(f"Login failed: incorrect password for {email}")
        raise UnauthorizedError(INVALID_CREDENTIALS)

    summary = UserSummary.model_validate(user)
    access_token = create_token_for_user(summary)

    logger.info(f"User logged in: {user.email}")

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=int(access_token_lifetime().total_seconds()),
        user=summary,
    )
