"""
Tests for Page Endpoints

GET /api/page/home aggregates the newest books and a few genre shelves.
"""

from datetime import date

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bookstore.models import Book, Genre
from tests.conftest import API


class TestHomePage:
    def test_empty_catalogue(self, client: TestClient):
        response = client.get(f"{API}/page/home")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"latestBooks": [], "genres": []}

    def test_latest_books_capped_at_ten(self, client: TestClient, multiple_books: list[Book]):
        response = client.get(f"{API}/page/home")

        latest = response.json()["latestBooks"]
        assert len(latest) == 10
        assert latest[0]["id"] == multiple_books[-1].id
        assert set(latest[0]) == {"id", "title", "author", "cover_image"}

    def test_genre_shelves(self, client: TestClient, db_session: Session):
        genres = [Genre(name=f"Genre {i}") for i in range(6)]
        db_session.add_all(genres)
        db_session.commit()

        for i in range(4):
            db_session.add(
                Book(
                    title=f"Shelf Book {i}",
                    author="Someone",
                    publish_date=date(2000, 1, 1),
                    publisher="Press",
                    file_format="epub",
                    genres=[genres[0]],
                )
            )
        db_session.commit()

        response = client.get(f"{API}/page/home")

        shelves = response.json()["genres"]
        assert len(shelves) == 5
        assert shelves[0]["name"] == "Genre 0"
        assert len(shelves[0]["books"]) == 3
        assert all(shelf["books"] == [] for shelf in shelves[1:])
