#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample users, books and reviews for
development.

USAGE:
    # From the project root, with the package installed
    python scripts/seed_data.py

Sample accounts (password "password123"):
    admin@example.com (admin), alice@example.com, bob@example.com
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from bookreviews.database import SessionLocal, create_tables
from bookreviews.models import Book, BookGenre, Review, User
from bookreviews.services.security import hash_password

SAMPLE_PASSWORD = "password123"


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    db.execute(delete(Review))
    db.execute(delete(BookGenre))
    db.execute(delete(Book))
    db.execute(delete(User))
    db.commit()
    print("Data cleared.")


def create_users(db: Session) -> dict[str, User]:
    """Create one admin and two regular users."""
    print("Creating users...")
    users_data = [
        {"username": "admin", "email": "admin@example.com", "is_admin": True},
        {"username": "alice", "email": "alice@example.com", "is_admin": False},
        {"username": "bob", "email": "bob@example.com", "is_admin": False},
    ]

    hashed = hash_password(SAMPLE_PASSWORD)
    users = {}
    for data in users_data:
        user = User(hashed_password=hashed, **data)
        db.add(user)
        users[data["username"]] = user

    db.commit()
    print(f"Created {len(users)} users.")
    return users


def create_books(db: Session, users: dict[str, User]) -> dict[str, Book]:
    """Create sample books, split between alice and bob."""
    print("Creating books...")
    books_data = [
        {
            "title": "Dune",
            "author": "Frank Herbert",
            "description": "A noble family is entrusted with the desert planet "
                           "Arrakis, the only source of the most valuable "
                           "substance in the universe.",
            "genre": ["Science Fiction", "Classic"],
            "isbn": "9780441172719",
            "publication_year": 1965,
            "publisher": "Chilton Books",
            "owner": "alice",
        },
        {
            "title": "1984",
            "author": "George Orwell",
            "description": "A dystopian novel about totalitarianism, mass "
                           "surveillance and repressive regimentation.",
            "genre": ["Dystopian", "Classic"],
            "isbn": "9780451524935",
            "publication_year": 1949,
            "publisher": "Secker & Warburg",
            "owner": "alice",
        },
        {
            "title": "Animal Farm",
            "author": "George Orwell",
            "description": "A farm is taken over by its overworked animals.",
            "genre": ["Satire", "Classic"],
            "publication_year": 1945,
            "owner": "bob",
        },
        {
            "title": "Pride and Prejudice",
            "author": "Jane Austen",
            "description": "Elizabeth Bennet deals with manners, upbringing, "
                           "morality and marriage in Georgian England.",
            "genre": ["Romance", "Classic"],
            "isbn": "9780141439518",
            "publication_year": 1813,
            "owner": "bob",
        },
        {
            "title": "The Left Hand of Darkness",
            "author": "Ursula K. Le Guin",
            "description": "An envoy visits a planet whose inhabitants have "
                           "no fixed sex.",
            "genre": ["Science Fiction"],
            "publication_year": 1969,
            "owner": "alice",
        },
        {
            "title": "The Hobbit",
            "author": "J.R.R. Tolkien",
            "description": "Bilbo Baggins is swept into a quest to reclaim a "
                           "dwarven kingdom.",
            "genre": ["Fantasy", "Adventure"],
            "isbn": "9780547928227",
            "publication_year": 1937,
            "owner": "bob",
        },
    ]

    books = {}
    for data in books_data:
        owner = users[data.pop("owner")]
        book = Book(added_by=owner.id, **data)
        db.add(book)
        books[book.title] = book

    db.commit()
    print(f"Created {len(books)} books.")
    return books


def create_reviews(
    db: Session,
    users: dict[str, User],
    books: dict[str, Book],
) -> list[Review]:
    """Create sample reviews (at most one per user per book)."""
    print("Creating reviews...")
    reviews_data = [
        ("alice", "Dune", 5, "A masterpiece of world-building."),
        ("bob", "Dune", 4, "Slow start, unforgettable ending."),
        ("admin", "Dune", 5, "Required reading."),
        ("alice", "1984", 5, "Chilling and still relevant."),
        ("bob", "Animal Farm", 4, "Short and sharp."),
        ("alice", "Pride and Prejudice", 3, "Witty, though not my genre."),
        ("bob", "The Hobbit", 5, "The perfect adventure."),
    ]

    reviews = []
    for username, title, rating, comment in reviews_data:
        review = Review(
            user_id=users[username].id,
            book_id=books[title].id,
            rating=rating,
            comment=comment,
        )
        db.add(review)
        reviews.append(review)

    db.commit()
    print(f"Created {len(reviews)} reviews.")
    return reviews


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    create_tables()

    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        users = create_users(db)
        books = create_books(db, users)
        reviews = create_reviews(db, users, books)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Users: {len(users)} (password: {SAMPLE_PASSWORD})")
        print(f"  - Books: {len(books)}")
        print(f"  - Reviews: {len(reviews)}")
        print("\nYou can now access the API at http://localhost:8001")
        print("API documentation at http://localhost:8001/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
