"""
Tests for Reviews

Business Rules:
- One review per user per book
- Only the review's author can update or delete it
- Ownership is checked before the request body is validated
"""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from bookstore.models import Book, Review, User
from tests.conftest import API


class TestCreateReview:
    """Tests for POST /api/reviews"""

    def test_create_review(
        self, client: TestClient, login_as, sample_user: User, sample_book: Book
    ):
        login_as(sample_user)

        response = client.post(
            f"{API}/reviews",
            json={"book_id": sample_book.id, "rating": 5, "comment": "Brilliant"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["message"] == "Review added successfully"
        assert data["review"]["rating"] == 5
        assert data["review"]["comment"] == "Brilliant"
        assert data["review"]["user_id"] == sample_user.id

    def test_requires_auth(self, client: TestClient, sample_book: Book):
        response = client.post(f"{API}/reviews", json={"book_id": sample_book.id, "rating": 5})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_one_review_per_user_per_book(
        self,
        client: TestClient,
        db_session: Session,
        login_as,
        sample_user: User,
        second_user: User,
        sample_book: Book,
    ):
        payload = {"book_id": sample_book.id, "rating": 4}

        login_as(sample_user)
        assert client.post(f"{API}/reviews", json=payload).status_code == 201

        duplicate = client.post(f"{API}/reviews", json=payload)
        assert duplicate.status_code == status.HTTP_400_BAD_REQUEST
        assert duplicate.json()["message"] == "You have already reviewed this book"

        login_as(second_user)
        assert client.post(f"{API}/reviews", json=payload).status_code == 201

        count = db_session.scalar(select(func.count()).select_from(Review))
        assert count == 2

    def test_book_not_found(self, client: TestClient, login_as, sample_user: User):
        login_as(sample_user)

        response = client.post(f"{API}/reviews", json={"book_id": 99999, "rating": 3})

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_rating_out_of_range(
        self, client: TestClient, login_as, sample_user: User, sample_book: Book
    ):
        login_as(sample_user)

        response = client.post(f"{API}/reviews", json={"book_id": sample_book.id, "rating": 6})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert any(error["loc"][-1] == "rating" for error in response.json()["errors"])


class TestGetReview:
    def test_get_review(self, client: TestClient, login_as, second_user: User, sample_review: Review):
        login_as(second_user)

        response = client.get(f"{API}/reviews/{sample_review.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == sample_review.id

    def test_not_found(self, client: TestClient, login_as, sample_user: User):
        login_as(sample_user)

        response = client.get(f"{API}/reviews/99999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"message": "Review not found"}


class TestUpdateReview:
    """Tests for PUT /api/reviews/{review_id}"""

    def test_owner_updates(
        self, client: TestClient, login_as, sample_user: User, sample_review: Review
    ):
        login_as(sample_user)

        response = client.put(f"{API}/reviews/{sample_review.id}", json={"rating": 2})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "Review updated successfully"
        assert data["review"]["rating"] == 2
        assert data["review"]["comment"] == "I really enjoyed reading this book."

    def test_comment_can_be_cleared(
        self, client: TestClient, login_as, sample_user: User, sample_review: Review
    ):
        login_as(sample_user)

        response = client.put(f"{API}/reviews/{sample_review.id}", json={"comment": None})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["review"]["comment"] is None
        assert response.json()["review"]["rating"] == 4

    def test_rating_cannot_be_null(
        self, client: TestClient, login_as, sample_user: User, sample_review: Review
    ):
        login_as(sample_user)

        response = client.put(f"{API}/reviews/{sample_review.id}", json={"rating": None})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_non_owner_forbidden(
        self,
        client: TestClient,
        db_session: Session,
        login_as,
        second_user: User,
        sample_review: Review,
    ):
        login_as(second_user)

        response = client.put(f"{API}/reviews/{sample_review.id}", json={"rating": 1})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["message"] == "Unauthorized to modify this review"
        db_session.expire_all()
        assert db_session.get(Review, sample_review.id).rating == 4

    def test_non_owner_forbidden_even_with_invalid_payload(
        self, client: TestClient, login_as, second_user: User, sample_review: Review
    ):
        login_as(second_user)

        response = client.put(f"{API}/reviews/{sample_review.id}", json={"rating": 99})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_not_found(self, client: TestClient, login_as, sample_user: User):
        login_as(sample_user)

        response = client.put(f"{API}/reviews/99999", json={"rating": 3})

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDeleteReview:
    def test_owner_deletes(
        self,
        client: TestClient,
        db_session: Session,
        login_as,
        sample_user: User,
        sample_review: Review,
    ):
        login_as(sample_user)

        response = client.delete(f"{API}/reviews/{sample_review.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "Review deleted successfully"}
        db_session.expire_all()
        assert db_session.get(Review, sample_review.id) is None

    def test_non_owner_forbidden(
        self, client: TestClient, login_as, second_user: User, sample_review: Review
    ):
        login_as(second_user)

        response = client.delete(f"{API}/reviews/{sample_review.id}")

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_is_not_owner(
        self, client: TestClient, login_as, admin_user: User, sample_review: Review
    ):
        login_as(admin_user)

        response = client.delete(f"{API}/reviews/{sample_review.id}")

        assert response.status_code == status.HTTP_403_FORBIDDEN
