"""
SQLAlchemy Models Package

Model Relationships:
- User -> Book: One-to-Many (a user adds many books, Book.added_by)
- Book -> BookGenre: One-to-Many (genre tags, exposed as Book.genre)
- Book -> Review, User -> Review: One-to-Many, at most one review per
  (book, user) pair

Import all models here so Alembic discovers them for migrations.
"""

from bookreviews.models.user import User
from bookreviews.models.book import Book, BookGenre
from bookreviews.models.review import Review

__all__ = [
    "User",
    "Book",
    "BookGenre",
    "Review",
]
