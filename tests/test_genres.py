"""
Tests for Genre Endpoints

Public reads at /api/genres; writes live under /api/admin/genres.
"""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bookstore.models import Book, Genre, User
from tests.conftest import API


class TestPublicGenres:
    """Tests for GET /api/genres and GET /api/genres/{genre_id}"""

    def test_list_genres_sorted_by_name(
        self, client: TestClient, sample_genre: Genre, second_genre: Genre
    ):
        response = client.get(f"{API}/genres")

        assert response.status_code == status.HTTP_200_OK
        assert [g["name"] for g in response.json()] == ["Dystopian", "Science Fiction"]

    def test_get_genre(self, client: TestClient, sample_genre: Genre):
        response = client.get(f"{API}/genres/{sample_genre.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "Science Fiction"

    def test_get_genre_not_found(self, client: TestClient):
        response = client.get(f"{API}/genres/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"message": "Genre not found"}

    def test_no_public_writes(self, client: TestClient):
        response = client.post(f"{API}/genres", json={"name": "Horror"})

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert "message" in response.json()


class TestAdminGenres:
    """Tests for /api/admin/genres"""

    def test_create_genre(self, client: TestClient, login_as, admin_user: User):
        login_as(admin_user)

        response = client.post(
            f"{API}/admin/genres", json={"name": "  Horror ", "description": "Scary stories"}
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["name"] == "Horror"

    def test_create_duplicate_genre(
        self, client: TestClient, login_as, admin_user: User, sample_genre: Genre
    ):
        login_as(admin_user)

        response = client.post(f"{API}/admin/genres", json={"name": sample_genre.name})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Genre with name 'Science Fiction' already exists"

    def test_update_genre(
        self, client: TestClient, login_as, admin_user: User, sample_genre: Genre
    ):
        login_as(admin_user)

        response = client.put(
            f"{API}/admin/genres/{sample_genre.id}", json={"description": "Updated"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "Science Fiction"
        assert response.json()["description"] == "Updated"

    def test_update_genre_name_to_null_rejected(
        self, client: TestClient, login_as, admin_user: User, sample_genre: Genre
    ):
        login_as(admin_user)

        response = client.put(f"{API}/admin/genres/{sample_genre.id}", json={"name": None})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete_genre_keeps_books(
        self,
        client: TestClient,
        db_session: Session,
        login_as,
        admin_user: User,
        sample_book: Book,
        sample_genre: Genre,
    ):
        login_as(admin_user)

        response = client.delete(f"{API}/admin/genres/{sample_genre.id}")

        assert response.status_code == status.HTTP_200_OK
        db_session.expire_all()
        book = db_session.get(Book, sample_book.id)
        assert book is not None
        assert book.genres == []

    def test_regular_user_cannot_create(self, client: TestClient, login_as, sample_user: User):
        login_as(sample_user)

        response = client.post(f"{API}/admin/genres", json={"name": "Horror"})

        assert response.status_code == status.HTTP_403_FORBIDDEN
