"""
Application Errors

Business-rule violations raised by the services. Each error carries the
HTTP status it maps to and a human-readable message; the exception
handler registered in main.py is the only place these become responses.
"""

from fastapi import status


class AppError(Exception):
    """Base class for all application errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An internal error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed input the request schemas could not catch."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation error"


class UnauthorizedError(AppError):
    """Missing or invalid credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class ForbiddenError(AppError):
    """Caller is neither the owner of the resource nor an admin."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to perform this action"


class NotFoundError(AppError):
    """Book, review or user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    """Duplicate email, username or review."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Duplicate entry found"
