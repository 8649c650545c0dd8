"""
Tests for Book Endpoints

Public catalogue listing and detail, and the per-book views of
reviews, bookmarks and reading progress.
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bookstore.models import Book, Bookmark, Genre, ReadingProgress, Review, User
from tests.conftest import API


# =============================================================================
# List Books
# =============================================================================
class TestListBooks:
    """Tests for GET /api/books"""

    def test_list_books_empty(self, client: TestClient):
        response = client.get(f"{API}/books")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "page": 1,
            "size": 10,
            "total": 0,
            "totalBooks": 0,
            "books": [],
        }

    def test_list_books_envelope(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(f"{API}/books")

        data = response.json()
        assert data["page"] == 1
        assert data["size"] == 10
        assert data["total"] == 2
        assert data["totalBooks"] == 15
        assert len(data["books"]) == 10

    def test_default_sort_is_title(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(f"{API}/books", params={"limit": "3"})

        titles = [book["title"] for book in response.json()["books"]]
        assert titles == ["Test Book 01", "Test Book 02", "Test Book 03"]

    def test_last_page(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(f"{API}/books", params={"page": "2", "limit": "10"})

        data = response.json()
        assert len(data["books"]) == 5
        assert data["page"] * data["size"] >= data["totalBooks"]

    def test_limit_clamped(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(f"{API}/books", params={"limit": "1000"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["size"] == 100

    def test_invalid_page(self, client: TestClient):
        response = client.get(f"{API}/books", params={"page": "0"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["loc"] == ["query", "page"]

    def test_huge_page_is_400(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(f"{API}/books", params={"page": "99999999999999999999"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["loc"] == ["query", "page"]

    def test_invalid_sort_field(self, client: TestClient):
        response = client.get(f"{API}/books", params={"sort": "secret"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_filter_by_author(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(f"{API}/books", params={"author": "Aldous Huxley", "limit": "100"})

        data = response.json()
        assert data["totalBooks"] == 7
        assert all(book["author"] == "Aldous Huxley" for book in data["books"])

    def test_filter_by_genre_id(
        self, client: TestClient, multiple_books: list[Book], sample_genre: Genre
    ):
        response = client.get(f"{API}/books", params={"genre": str(sample_genre.id)})

        data = response.json()
        assert data["totalBooks"] == 5
        assert all(sample_genre.id in book["genre_ids"] for book in data["books"])

    def test_filter_by_genre_name(
        self, client: TestClient, multiple_books: list[Book], sample_genre: Genre
    ):
        response = client.get(f"{API}/books", params={"genre": "science fiction"})

        assert response.json()["totalBooks"] == 5

    @pytest.mark.parametrize("genre", ["²", "١", "99999999999999999999"])
    def test_non_ascii_or_oversized_genre_matches_nothing(
        self, client: TestClient, multiple_books: list[Book], sample_genre: Genre, genre: str
    ):
        response = client.get(f"{API}/books", params={"genre": genre})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["totalBooks"] == 0
        assert response.json()["books"] == []

    def test_filter_by_title_substring(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(f"{API}/books", params={"title": "book 1"})

        titles = {book["title"] for book in response.json()["books"]}
        assert titles == {f"Test Book {n}" for n in ("10", "11", "12", "13", "14", "15")}


# =============================================================================
# Get Book
# =============================================================================
class TestGetBook:
    """Tests for GET /api/books/{book_id}"""

    def test_get_book(self, client: TestClient, sample_book: Book, sample_genre: Genre):
        response = client.get(f"{API}/books/{sample_book.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["title"] == "1984"
        assert data["file_format"] == "epub"
        assert data["publish_date"] == "1949-06-08"
        assert data["genres"] == [
            {
                "id": sample_genre.id,
                "name": sample_genre.name,
                "description": sample_genre.description,
            }
        ]

    def test_get_book_not_found(self, client: TestClient):
        response = client.get(f"{API}/books/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"message": "Book not found"}


# =============================================================================
# Per-book Views
# =============================================================================
class TestBookReviews:
    """Tests for GET /api/books/{book_id}/reviews"""

    def test_public(self, client: TestClient, sample_review: Review):
        response = client.get(f"{API}/books/{sample_review.book_id}/reviews")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["totalReviews"] == 1
        assert data["reviews"][0]["rating"] == 4

    def test_newest_first(
        self,
        client: TestClient,
        db_session: Session,
        sample_book: Book,
        sample_user: User,
        second_user: User,
    ):
        first = Review(book_id=sample_book.id, user_id=sample_user.id, rating=2)
        db_session.add(first)
        db_session.commit()
        second = Review(book_id=sample_book.id, user_id=second_user.id, rating=5)
        db_session.add(second)
        db_session.commit()

        newest_first = client.get(f"{API}/books/{sample_book.id}/reviews").json()
        oldest_first = client.get(
            f"{API}/books/{sample_book.id}/reviews", params={"sort": "asc"}
        ).json()

        assert [r["id"] for r in newest_first["reviews"]] == [second.id, first.id]
        assert [r["id"] for r in oldest_first["reviews"]] == [first.id, second.id]

    def test_book_not_found(self, client: TestClient):
        response = client.get(f"{API}/books/99999/reviews")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestBookBookmarks:
    """Tests for GET /api/books/{book_id}/bookmarks"""

    def test_requires_auth(self, client: TestClient, sample_book: Book):
        response = client.get(f"{API}/books/{sample_book.id}/bookmarks")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_only_own_bookmarks(
        self,
        client: TestClient,
        db_session: Session,
        login_as,
        sample_book: Book,
        sample_user: User,
        second_user: User,
    ):
        db_session.add_all(
            [
                Bookmark(user_id=sample_user.id, book_id=sample_book.id, page_number=10),
                Bookmark(user_id=sample_user.id, book_id=sample_book.id, page_number=3),
                Bookmark(user_id=second_user.id, book_id=sample_book.id, page_number=7),
            ]
        )
        db_session.commit()
        login_as(sample_user)

        response = client.get(
            f"{API}/books/{sample_book.id}/bookmarks",
            params={"sort": "asc", "sort_by": "page_number"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["totalBookmarks"] == 2
        assert [b["page_number"] for b in data["bookmarks"]] == [3, 10]


class TestBookReadingProgress:
    """Tests for GET /api/books/{book_id}/reading-progress"""

    def test_own_progress(
        self,
        client: TestClient,
        db_session: Session,
        login_as,
        sample_book: Book,
        sample_user: User,
    ):
        db_session.add(ReadingProgress(user_id=sample_user.id, book_id=sample_book.id, progress=40))
        db_session.commit()
        login_as(sample_user)

        response = client.get(f"{API}/books/{sample_book.id}/reading-progress")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["totalRecords"] == 1
        record = data["readingProgressRecords"][0]
        assert record["progress"] == 40
        assert record["book"]["title"] == "1984"

    def test_book_not_found(self, client: TestClient, login_as, sample_user: User):
        login_as(sample_user)

        response = client.get(f"{API}/books/99999/reading-progress")

        assert response.status_code == status.HTTP_404_NOT_FOUND
