"""
pytest Fixtures for Book Reviews API Tests

FIXTURE SCOPES:
- engine / db_session: function scope, so every test starts from empty
  tables. Services commit (and roll back after a constraint violation),
  so an outer rolled-back transaction would not isolate tests reliably.
- client: function scope, with get_db overridden to use db_session

Users:
- alice: regular user, owns sample_book and multiple_books
- bob: regular user, author of sample_review
- admin: is_admin=True
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookreviews.database import Base, get_db
from bookreviews.main import app
from bookreviews.models import Book, Review, User
from bookreviews.schemas.user import UserSummary
from bookreviews.services.security import create_token_for_user, hash_password

TEST_PASSWORD = "secret123"

# bcrypt is slow on purpose; hash once for every fixture user
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


def auth_header(user: User) -> dict:
    """Authorization header carrying a valid token for user."""
    token = create_token_for_user(UserSummary.model_validate(user))
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture
def engine():
    """
    SQLite in-memory engine, created and dropped for each test.

    StaticPool keeps the single connection alive; without it the in-memory
    database would disappear between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Test client whose requests use the test database session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
def _make_user(db: Session, username: str, is_admin: bool = False) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        hashed_password=TEST_PASSWORD_HASH,
        is_admin=is_admin,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def alice(db_session: Session) -> User:
    return _make_user(db_session, "alice")


@pytest.fixture
def bob(db_session: Session) -> User:
    return _make_user(db_session, "bob")


@pytest.fixture
def admin(db_session: Session) -> User:
    return _make_user(db_session, "admin", is_admin=True)


@pytest.fixture
def sample_book(db_session: Session, alice: User) -> Book:
    """Dune, added by alice."""
    book = Book(
        title="Dune",
        author="Frank Herbert",
        description="A desert planet epic.",
        genre=["Science Fiction", "Classic"],
        isbn="9780441172719",
        publication_year=1965,
        publisher="Chilton Books",
        added_by=alice.id,
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def multiple_books(db_session: Session, alice: User) -> list[Book]:
    """
    15 books for pagination tests.

    Titles run "Test Book 01".."Test Book 15"; even indexes are by
    "Author Even" and tagged Fantasy, odd ones by "Author Odd" and
    tagged Mystery.
    """
    books = []
    for i in range(15):
        even = i % 2 == 0
        book = Book(
            title=f"Test Book {i + 1:02d}",
            author="Author Even" if even else "Author Odd",
            description=f"Description for book {i + 1}",
            genre=["Fantasy"] if even else ["Mystery"],
            publication_year=1950 + i,
            added_by=alice.id,
        )
        books.append(book)
        db_session.add(book)

    db_session.commit()
    for book in books:
        db_session.refresh(book)

    return books


@pytest.fixture
def sample_review(db_session: Session, sample_book: Book, bob: User) -> Review:
    """bob's 4-star review of Dune."""
    review = Review(
        book_id=sample_book.id,
        user_id=bob.id,
        rating=4,
        comment="Dense but rewarding.",
    )
    db_session.add(review)
    db_session.commit()
    db_session.refresh(review)
    return review
