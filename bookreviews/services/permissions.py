"""
Ownership checks shared by the book and review services.

A resource may be modified by the user who created it or by an admin.
"""

import logging

from bookreviews.exceptions import ForbiddenError

logger = logging.getLogger(__name__)


def can_modify(owner_id: int, user_id: int, is_admin: bool) -> bool:
    return is_admin or owner_id == user_id


def ensure_owner_or_admin(
    owner_id: int,
    user_id: int,
    is_admin: bool,
    message: str | None = None,
) -> None:
    """
    Raise ForbiddenError unless the caller owns the resource or is an admin.
    """
    if not can_modify(owner_id, user_id, is_admin):
        logger.warning(
            f"Ownership check failed: user {user_id} is not owner {owner_id}"
        )
        raise ForbiddenError(message)
