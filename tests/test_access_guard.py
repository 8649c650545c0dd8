"""
Tests for the Access Guard

The session cookie is the only credential. Missing cookie -> 401,
bad or expired token -> 403, non-admin on admin routes -> 403.
"""

from datetime import UTC, datetime, timedelta

from fastapi import status
from fastapi.testclient import TestClient

from bookstore.config import get_settings
from bookstore.models import User
from bookstore.services.security import CredentialService
from tests.conftest import API

COOKIE = get_settings().session_cookie_name


class TestSessionCookie:
    def test_missing_cookie_is_401(self, client: TestClient):
        response = client.get(f"{API}/users/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"message": "Access denied"}

    def test_garbage_token_is_403(self, client: TestClient):
        client.cookies.set(COOKIE, "garbage")

        response = client.get(f"{API}/users/me")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"message": "Invalid token"}

    def test_token_expired_one_second_ago_is_403(
        self, client: TestClient, credentials: CredentialService, sample_user: User
    ):
        issued_at = datetime.now(UTC) - credentials.token_ttl - timedelta(seconds=1)
        token = credentials.issue_token(
            {"id": sample_user.id, "username": sample_user.username, "role": "user"},
            now=issued_at,
        )
        client.cookies.set(COOKIE, token)

        response = client.get(f"{API}/users/me")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["message"] == "Invalid token"

    def test_valid_cookie_authenticates(self, client: TestClient, login_as, sample_user: User):
        login_as(sample_user)

        response = client.get(f"{API}/users/me")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == sample_user.id

    def test_token_for_deleted_user_is_403(
        self, client: TestClient, credentials: CredentialService
    ):
        token = credentials.issue_token({"id": 9999, "username": "ghost", "role": "user"})
        client.cookies.set(COOKIE, token)

        response = client.get(f"{API}/users/me")

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_bearer_header_is_not_accepted(
        self, client: TestClient, credentials: CredentialService, sample_user: User
    ):
        token = credentials.issue_token(
            {"id": sample_user.id, "username": sample_user.username, "role": "user"}
        )

        response = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestAdminGuard:
    def test_regular_user_is_forbidden(self, client: TestClient, login_as, sample_user: User):
        login_as(sample_user)

        response = client.get(f"{API}/admin/users")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["message"] == "Admin privileges required"

    def test_anonymous_is_401(self, client: TestClient):
        response = client.get(f"{API}/admin/users")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_admin_is_allowed(self, client: TestClient, login_as, admin_user: User):
        login_as(admin_user)

        response = client.get(f"{API}/admin/users")

        assert response.status_code == status.HTTP_200_OK


class TestErrorShape:
    def test_unknown_route_is_message_404(self, client: TestClient):
        response = client.get(f"{API}/does-not-exist")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "message" in response.json()

    def test_validation_error_is_400_with_errors(self, client: TestClient):
        response = client.post(f"{API}/users/register", json={"username": "x"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["message"] == "Validation failed"
        assert isinstance(body["errors"], list)
        assert all({"loc", "msg", "type"} <= set(error) for error in body["errors"])


class TestOperationalEndpoints:
    """/health and / are public and live outside the /api prefix."""

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["rate_limiting"]["enabled"] is False

    def test_root(self, client: TestClient):
        response = client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["api"] == API
