"""
Tests for Books Endpoints

Tests cover:
- Listing with pagination, filters and sorting
- Reading one book with its aggregated rating and owner
- Creating, updating and deleting with ownership rules
- Free-text search and the author list
"""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bookreviews.models import Book, Review, User
from tests.conftest import auth_header

BOOKS_URL = "/api/v1/books"


def make_book(db: Session, owner: User, title: str, author: str, **extra) -> Book:
    book = Book(
        title=title,
        author=author,
        description=extra.pop("description", f"About {title}"),
        genre=extra.pop("genre", ["Fiction"]),
        added_by=owner.id,
        **extra,
    )
    db.add(book)
    db.commit()
    db.refresh(book)
    return book


def add_review(db: Session, book: Book, user: User, rating: int) -> Review:
    review = Review(book_id=book.id, user_id=user.id, rating=rating, comment="ok")
    db.add(review)
    db.commit()
    return review


# =============================================================================
# List Books
# =============================================================================
class TestListBooks:
    """Tests for GET /api/v1/books"""

    def test_list_books_empty(self, client: TestClient):
        response = client.get(BOOKS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "data": [],
            "totalCount": 0,
            "totalPages": 0,
            "currentPage": 1,
        }

    def test_list_books_default_page(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(BOOKS_URL)

        data = response.json()
        assert len(data["data"]) == 10
        assert data["totalCount"] == 15
        assert data["totalPages"] == 2
        assert data["currentPage"] == 1

    def test_list_books_second_page(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(BOOKS_URL, params={"page": 2, "limit": 10})

        data = response.json()
        assert len(data["data"]) == 5
        assert data["totalPages"] == 2
        assert data["currentPage"] == 2
        assert data["data"][0]["title"] == "Test Book 11"

    def test_list_books_page_past_end(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(BOOKS_URL, params={"page": 5})

        data = response.json()
        assert data["data"] == []
        assert data["totalCount"] == 15

    def test_list_books_limit_above_max(self, client: TestClient):
        response = client.get(BOOKS_URL, params={"limit": 101})

        assert response.status_code == 422

    def test_list_books_page_zero(self, client: TestClient):
        response = client.get(BOOKS_URL, params={"page": 0})

        assert response.status_code == 422

    def test_filter_by_genre(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(BOOKS_URL, params={"genre": "Fantasy"})

        data = response.json()
        assert data["totalCount"] == 8
        assert all("Fantasy" in book["genre"] for book in data["data"])

    def test_filter_by_genre_is_exact(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(BOOKS_URL, params={"genre": "fantasy"})

        assert response.json()["totalCount"] == 0

    def test_filter_by_author_case_insensitive(
        self, client: TestClient, multiple_books: list[Book]
    ):
        response = client.get(BOOKS_URL, params={"author": "author odd"})

        data = response.json()
        assert data["totalCount"] == 7
        assert all(book["author"] == "Author Odd" for book in data["data"])

    def test_filter_by_search(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(BOOKS_URL, params={"search": "book 1"})

        titles = [book["title"] for book in response.json()["data"]]
        assert titles == [
            "Test Book 10",
            "Test Book 11",
            "Test Book 12",
            "Test Book 13",
            "Test Book 14",
            "Test Book 15",
        ]

    def test_search_filter_treats_wildcards_literally(
        self, client: TestClient, multiple_books: list[Book]
    ):
        response = client.get(BOOKS_URL, params={"search": "%"})

        assert response.json()["totalCount"] == 0

    def test_combined_filters(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(
            BOOKS_URL,
            params={"genre": "Mystery", "author": "odd", "search": "Book 0"},
        )

        titles = [book["title"] for book in response.json()["data"]]
        assert titles == ["Test Book 02", "Test Book 04", "Test Book 06", "Test Book 08"]

    def test_sort_by_title_desc(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(BOOKS_URL, params={"sortBy": "title", "sortOrder": "desc"})

        assert response.json()["data"][0]["title"] == "Test Book 15"

    def test_sort_by_publication_year(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(
            BOOKS_URL,
            params={"sortBy": "publicationYear", "sortOrder": "desc", "limit": 3},
        )

        years = [book["publicationYear"] for book in response.json()["data"]]
        assert years == [1964, 1963, 1962]

    def test_sort_by_author(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(BOOKS_URL, params={"sortBy": "author", "limit": 100})

        authors = [book["author"] for book in response.json()["data"]]
        assert authors == sorted(authors)
        assert authors[0] == "Author Even"

    def test_sort_by_average_rating(
        self,
        client: TestClient,
        db_session: Session,
        alice: User,
        bob: User,
    ):
        unreviewed = make_book(db_session, alice, "Unreviewed", "Nobody")
        middling = make_book(db_session, alice, "Middling", "Somebody")
        favourite = make_book(db_session, alice, "Favourite", "Everybody")
        add_review(db_session, middling, alice, 1)
        add_review(db_session, middling, bob, 3)
        add_review(db_session, favourite, bob, 5)

        response = client.get(
            BOOKS_URL,
            params={"sortBy": "averageRating", "sortOrder": "desc"},
        )

        data = response.json()["data"]
        assert [book["id"] for book in data] == [favourite.id, middling.id, unreviewed.id]
        assert [book["averageRating"] for book in data] == [5, 2, 0]
        assert [book["reviewCount"] for book in data] == [1, 2, 0]

    def test_sort_invalid_field(self, client: TestClient):
        response = client.get(BOOKS_URL, params={"sortBy": "price"})

        assert response.status_code == 422


# =============================================================================
# Get Book
# =============================================================================
class TestGetBook:
    """Tests for GET /api/v1/books/{book_id}"""

    def test_get_book(self, client: TestClient, sample_book: Book, alice: User):
        response = client.get(f"{BOOKS_URL}/{sample_book.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["title"] == "Dune"
        assert data["author"] == "Frank Herbert"
        assert data["genre"] == ["Science Fiction", "Classic"]
        assert data["publicationYear"] == 1965
        assert data["averageRating"] == 0
        assert data["reviewCount"] == 0
        assert data["addedBy"] == {
            "id": alice.id,
            "username": "alice",
            "email": "alice@example.com",
            "isAdmin": False,
        }

    def test_get_book_with_reviews(
        self, client: TestClient, db_session: Session, sample_book: Book, alice: User, bob: User
    ):
        add_review(db_session, sample_book, alice, 5)
        add_review(db_session, sample_book, bob, 2)

        data = client.get(f"{BOOKS_URL}/{sample_book.id}").json()

        assert data["averageRating"] == 3.5
        assert data["reviewCount"] == 2

    def test_get_book_not_found(self, client: TestClient):
        response = client.get(f"{BOOKS_URL}/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Book not found"


# =============================================================================
# Create Book
# =============================================================================
class TestCreateBook:
    """Tests for POST /api/v1/books"""

    book_data = {
        "title": "The Dispossessed",
        "author": "Ursula K. Le Guin",
        "description": "An ambiguous utopia.",
        "genre": ["Science Fiction"],
        "coverImage": "https://covers.example.com/dispossessed.jpg",
        "isbn": "9780061054884",
        "publicationYear": 1974,
        "publisher": "Harper & Row",
    }

    def test_create_book(self, client: TestClient, alice: User):
        response = client.post(BOOKS_URL, json=self.book_data, headers=auth_header(alice))

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        for field, value in self.book_data.items():
            assert data[field] == value
        assert data["averageRating"] == 0
        assert data["reviewCount"] == 0
        assert data["addedBy"]["id"] == alice.id

    def test_create_then_fetch(self, client: TestClient, alice: User):
        created = client.post(
            BOOKS_URL, json=self.book_data, headers=auth_header(alice)
        ).json()

        fetched = client.get(f"{BOOKS_URL}/{created['id']}").json()

        assert fetched == created

    def test_create_book_minimal(self, client: TestClient, alice: User):
        response = client.post(
            BOOKS_URL,
            json={
                "title": "Minimal",
                "author": "Someone",
                "description": "Just the required fields.",
                "genre": ["Misc"],
                "coverImage": "",
            },
            headers=auth_header(alice),
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["coverImage"] == ""
        assert data["isbn"] is None
        assert data["publicationYear"] is None

    def test_create_duplicate_title_allowed(
        self, client: TestClient, sample_book: Book, bob: User
    ):
        response = client.post(
            BOOKS_URL,
            json={
                "title": "Dune",
                "author": "Frank Herbert",
                "description": "Another edition.",
                "genre": ["Science Fiction"],
            },
            headers=auth_header(bob),
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_create_book_unauthenticated(self, client: TestClient):
        response = client.post(BOOKS_URL, json=self.book_data)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_book_missing_title(self, client: TestClient, alice: User):
        data = {k: v for k, v in self.book_data.items() if k != "title"}

        response = client.post(BOOKS_URL, json=data, headers=auth_header(alice))

        assert response.status_code == 422
        assert any(error.startswith("title") for error in response.json()["errors"])

    def test_create_book_blank_description(self, client: TestClient, alice: User):
        response = client.post(
            BOOKS_URL,
            json={**self.book_data, "description": "   "},
            headers=auth_header(alice),
        )

        assert response.status_code == 422

    def test_create_book_empty_genre(self, client: TestClient, alice: User):
        response = client.post(
            BOOKS_URL,
            json={**self.book_data, "genre": []},
            headers=auth_header(alice),
        )

        assert response.status_code == 422

    def test_create_book_blank_genre_tag(self, client: TestClient, alice: User):
        response = client.post(
            BOOKS_URL,
            json={**self.book_data, "genre": ["Drama", " "]},
            headers=auth_header(alice),
        )

        assert response.status_code == 422

    def test_create_book_invalid_cover_image(self, client: TestClient, alice: User):
        response = client.post(
            BOOKS_URL,
            json={**self.book_data, "coverImage": "not a url"},
            headers=auth_header(alice),
        )

        assert response.status_code == 422

    def test_create_book_future_year(self, client: TestClient, alice: User):
        response = client.post(
            BOOKS_URL,
            json={**self.book_data, "publicationYear": 3000},
            headers=auth_header(alice),
        )

        assert response.status_code == 422

    def test_create_book_year_too_old(self, client: TestClient, alice: User):
        response = client.post(
            BOOKS_URL,
            json={**self.book_data, "publicationYear": 999},
            headers=auth_header(alice),
        )

        assert response.status_code == 422


# =============================================================================
# Update Book
# =============================================================================
class TestUpdateBook:
    """Tests for PUT /api/v1/books/{book_id}"""

    def test_owner_updates_book(self, client: TestClient, sample_book: Book, alice: User):
        response = client.put(
            f"{BOOKS_URL}/{sample_book.id}",
            json={"publisher": "Ace Books", "genre": ["Space Opera"]},
            headers=auth_header(alice),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["publisher"] == "Ace Books"
        assert data["genre"] == ["Space Opera"]
        # Untouched fields keep their values
        assert data["title"] == "Dune"
        assert data["publicationYear"] == 1965

    def test_genre_filter_sees_updated_tags(
        self, client: TestClient, sample_book: Book, alice: User
    ):
        client.put(
            f"{BOOKS_URL}/{sample_book.id}",
            json={"genre": ["Space Opera"]},
            headers=auth_header(alice),
        )

        assert client.get(BOOKS_URL, params={"genre": "Classic"}).json()["totalCount"] == 0
        assert client.get(BOOKS_URL, params={"genre": "Space Opera"}).json()["totalCount"] == 1

    def test_non_owner_cannot_update(self, client: TestClient, sample_book: Book, bob: User):
        response = client.put(
            f"{BOOKS_URL}/{sample_book.id}",
            json={"title": "Hijacked"},
            headers=auth_header(bob),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert client.get(f"{BOOKS_URL}/{sample_book.id}").json()["title"] == "Dune"

    def test_admin_updates_any_book(self, client: TestClient, sample_book: Book, admin: User):
        response = client.put(
            f"{BOOKS_URL}/{sample_book.id}",
            json={"title": "Dune (Revised)"},
            headers=auth_header(admin),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["title"] == "Dune (Revised)"
        # Ownership does not move to the admin
        assert data["addedBy"]["username"] == "alice"

    def test_update_null_title_rejected(
        self, client: TestClient, sample_book: Book, alice: User
    ):
        response = client.put(
            f"{BOOKS_URL}/{sample_book.id}",
            json={"title": None},
            headers=auth_header(alice),
        )

        assert response.status_code == 422

    def test_update_not_found(self, client: TestClient, alice: User):
        response = client.put(
            f"{BOOKS_URL}/99999",
            json={"title": "Ghost"},
            headers=auth_header(alice),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_unauthenticated(self, client: TestClient, sample_book: Book):
        response = client.put(f"{BOOKS_URL}/{sample_book.id}", json={"title": "Anon"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Delete Book
# =============================================================================
class TestDeleteBook:
    """Tests for DELETE /api/v1/books/{book_id}"""

    def test_owner_deletes_book(self, client: TestClient, sample_book: Book, alice: User):
        response = client.delete(f"{BOOKS_URL}/{sample_book.id}", headers=auth_header(alice))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert client.get(f"{BOOKS_URL}/{sample_book.id}").status_code == 404

    def test_delete_removes_reviews(
        self, client: TestClient, sample_review: Review, alice: User
    ):
        book_id = sample_review.book_id
        review_id = sample_review.id

        client.delete(f"{BOOKS_URL}/{book_id}", headers=auth_header(alice))

        assert client.get(f"/api/v1/reviews/{review_id}").status_code == 404

    def test_non_owner_cannot_delete(self, client: TestClient, sample_book: Book, bob: User):
        response = client.delete(f"{BOOKS_URL}/{sample_book.id}", headers=auth_header(bob))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert client.get(f"{BOOKS_URL}/{sample_book.id}").status_code == 200

    def test_admin_deletes_any_book(self, client: TestClient, sample_book: Book, admin: User):
        response = client.delete(f"{BOOKS_URL}/{sample_book.id}", headers=auth_header(admin))

        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_delete_not_found(self, client: TestClient, alice: User):
        response = client.delete(f"{BOOKS_URL}/99999", headers=auth_header(alice))

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Search
# =============================================================================
class TestSearchBooks:
    """Tests for GET /api/v1/books/search"""

    def test_search_query_too_short(self, client: TestClient):
        response = client.get(f"{BOOKS_URL}/search", params={"query": "a"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_search_query_trimmed_before_length_check(self, client: TestClient):
        response = client.get(f"{BOOKS_URL}/search", params={"query": "  a  "})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_search_missing_query(self, client: TestClient):
        response = client.get(f"{BOOKS_URL}/search")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_search_two_characters_ok(self, client: TestClient):
        response = client.get(f"{BOOKS_URL}/search", params={"query": "zz"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"results": []}

    def test_search_ranks_title_above_author(
        self, client: TestClient, db_session: Session, alice: User
    ):
        by_author = make_book(db_session, alice, "Nineteen Eighty-Four", "George Orwell")
        in_title = make_book(db_session, alice, "Orwell's England", "Peter Davison")
        make_book(db_session, alice, "Unrelated", "Someone Else")

        response = client.get(f"{BOOKS_URL}/search", params={"query": "orwell"})

        results = response.json()["results"]
        assert [book["id"] for book in results] == [in_title.id, by_author.id]

    def test_search_scores_every_term(
        self, client: TestClient, db_session: Session, alice: User
    ):
        author_only = make_book(db_session, alice, "Whipping Star", "Frank Herbert")
        title_only = make_book(db_session, alice, "Dune Companion", "Anonymous")
        both = make_book(db_session, alice, "Dune", "Frank Herbert")
        make_book(db_session, alice, "Foundation", "Isaac Asimov")

        response = client.get(f"{BOOKS_URL}/search", params={"query": "Dune Herbert"})

        ids = [book["id"] for book in response.json()["results"]]
        # 2 + 1, then 2, then 1
        assert ids == [both.id, title_only.id, author_only.id]

    def test_search_results_include_ratings(
        self, client: TestClient, db_session: Session, sample_book: Book, bob: User
    ):
        add_review(db_session, sample_book, bob, 4)

        results = client.get(f"{BOOKS_URL}/search", params={"query": "dune"}).json()["results"]

        assert results[0]["averageRating"] == 4
        assert results[0]["reviewCount"] == 1


# =============================================================================
# Authors
# =============================================================================
class TestListAuthors:
    """Tests for GET /api/v1/authors"""

    def test_list_authors_distinct_sorted(
        self, client: TestClient, db_session: Session, alice: User
    ):
        make_book(db_session, alice, "Emma", "Jane Austen")
        make_book(db_session, alice, "Persuasion", "Jane Austen")
        make_book(db_session, alice, "Dune", "Frank Herbert")

        response = client.get("/api/v1/authors")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == [{"name": "Frank Herbert"}, {"name": "Jane Austen"}]

    def test_list_authors_empty(self, client: TestClient):
        assert client.get("/api/v1/authors").json() == []


# =============================================================================
# Service endpoints
# =============================================================================
class TestHealth:
    """Tests for GET /health and GET /"""

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "healthy"

    def test_root_points_to_docs(self, client: TestClient):
        data = client.get("/").json()

        assert data["docs"] == "/docs"
        assert data["health"] == "/health"
