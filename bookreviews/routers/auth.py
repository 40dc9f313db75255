"""
Authentication Router

Endpoints:
- POST /auth/register - Create an account
- POST /auth/login - Exchange email and password for an access token
- GET /auth/me - Identity of the bearer token

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or stored
- Access tokens carry {sub, username, email, isAdmin} and expire after
  ACCESS_TOKEN_EXPIRE_MINUTES
"""

from fastapi import APIRouter, Request, status

from bookreviews.config import get_settings
from bookreviews.dependencies import CurrentUser, DbSession
from bookreviews.schemas.user import (
    LoginRequest,
    TokenResponse,
    UserCreate,
    UserResponse,
    UserSummary,
)
from bookreviews.services import auth as auth_service
from bookreviews.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        401: {"description": "Unauthorized"},
        409: {"description": "Conflict (email/username already exists)"},
    },
)


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create a new user account.

    **Requirements:**
    - username: 3-30 characters, unique
    - email: valid address, unique
    - password: at least 6 characters
    """,
)
@limiter.limit(settings.rate_limit_write)
def register(
    request: Request,
    user_data: UserCreate,
    db: DbSession,
) -> UserResponse:
    return auth_service.register(db, user_data)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email and password",
    description="""
    Authenticate with a JSON body `{"email": ..., "password": ...}`.

    Include the returned token in later requests:
    ```
    Authorization: Bearer <accessToken>
    ```
    """,
)
@limiter.limit(settings.rate_limit_write)
def login(
    request: Request,
    credentials: LoginRequest,
    db: DbSession,
) -> TokenResponse:
    return auth_service.login(db, credentials.email, credentials.password)


@router.get(
    "/me",
    response_model=UserSummary,
    summary="Get current user",
    description="Return the identity carried by the bearer token.",
)
@limiter.limit(settings.rate_limit_default)
def get_me(
    request: Request,
    current_user: CurrentUser,
) -> UserSummary:
    return current_user
