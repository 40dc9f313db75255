"""
Book Model

The central model of the catalogue.

Genres are free-form tags rather than a curated lookup table, so they live
in a child table (book_genres) with one row per tag. The Book.genre
association proxy exposes them as a plain list of strings and keeps their
insertion order.

Ratings are NOT stored here: averageRating and reviewCount are aggregated
from the reviews table on every read (see services/ratings.py).
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookreviews.database import Base

if TYPE_CHECKING:
    from bookreviews.models.review import Review
    from bookreviews.models.user import User


class BookGenre(Base):
    """
    One genre tag attached to a book.

    Table: book_genres
    """

    __tablename__ = "book_genres"

    id: Mapped[int] = mapped_column(primary_key=True)
    book_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
        comment="Genre tag, matched exactly by the genre filter",
    )

    book: Mapped["Book"] = relationship("Book", back_populates="genre_tags")

    def __repr__(self) -> str:
        return f"BookGenre(book_id={self.book_id}, name='{self.name}')"


class Book(Base):
    """
    Book model representing catalogue entries.

    Table: books

    Fields:
    - title, author, description: Required text
    - cover_image, isbn, publication_year, publisher: Optional metadata
    - added_by: The user who created the entry (owner)

    Relationships:
    - owner: The creating user
    - genre_tags: Genre rows (use the genre proxy instead)
    - reviews: One-to-Many, deleted together with the book

    Example:
        book = Book(
            title="Dune",
            author="Frank Herbert",
            description="Desert planet epic.",
            genre=["Science Fiction"],
            added_by=alice.id,
        )
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Author name as displayed"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Book description or summary"
    )

    cover_image: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="URL of the cover image"
    )

    # Not unique: different editions may be entered by different users
    isbn: Mapped[str | None] = mapped_column(
        String(20),
        index=True,
        nullable=True,
        comment="International Standard Book Number"
    )

    publication_year: Mapped[int | None] = mapped_column(
        Integer,
        index=True,
        nullable=True,
        comment="Year of first publication"
    )

    publisher: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    added_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="User who added the book",
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    owner: Mapped["User"] = relationship("User", back_populates="books")

    genre_tags: Mapped[list[BookGenre]] = relationship(
        BookGenre,
        back_populates="book",
        cascade="all, delete-orphan",
        order_by=BookGenre.id,
        lazy="selectin",
    )

    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    genre: AssociationProxy[list[str]] = association_proxy(
        "genre_tags",
        "name",
        creator=lambda name: BookGenre(name=name),
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', author='{self.author}')"
