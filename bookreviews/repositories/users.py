"""
User Repository

Lookups used by registration and login, plus the resolver that turns the
bare user ids stored on books and reviews into embedded user summaries.
"""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookreviews.models.user import User
from bookreviews.schemas.user import UserSummary

UNKNOWN_USERNAME = "Unknown"
UNKNOWN_EMAIL = "unknown@example.com"


def get_user_by_email(db: Session, email: str) -> User | None:
    stmt = select(User).where(User.email == email.lower())
    return db.execute(stmt).scalar_one_or_none()


def get_user_by_username(db: Session, username: str) -> User | None:
    stmt = select(User).where(User.username == username)
    return db.execute(stmt).scalar_one_or_none()


def add_user(db: Session, user: User) -> User:
    """
    Persist a new user.

    Raises:
        IntegrityError: If the email or username is already taken
    """
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def fallback_summary(user_id: int) -> UserSummary:
    """Summary returned for a reference that no longer resolves to a user."""
    return UserSummary(
        id=user_id,
        username=UNKNOWN_USERNAME,
        email=UNKNOWN_EMAIL,
        is_admin=False,
    )


def resolve_user_summaries(
    db: Session,
    user_ids: Iterable[int],
) -> dict[int, UserSummary]:
    """
    Resolve user ids to summaries with a single query.

    Every requested id is present in the result; ids without a matching
    user map to the fallback summary.

    Args:
        db: Database session
        user_ids: Ids referenced by books or reviews (duplicates allowed)

    Returns:
        Mapping of user id to UserSummary
    """
    wanted = set(user_ids)
    if not wanted:
        return {}

    stmt = select(User).where(User.id.in_(wanted))
    found = {
        user.id: UserSummary.model_validate(user)
        for user in db.execute(stmt).scalars()
    }
    return {
        user_id: found.get(user_id) or fallback_summary(user_id)
        for user_id in wanted
    }


def resolve_user_summary(db: Session, user_id: int) -> UserSummary:
    """Resolve one user id to its summary (or the fallback)."""
    return resolve_user_summaries(db, [user_id])[user_id]
