"""
Tests for the Credential Service

Covers password hashing, session token issue/verify, and reset tokens.
These are unit tests; no HTTP client is involved.
"""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from bookstore.exceptions import InvalidCredential, InvalidToken
from bookstore.models import Role
from bookstore.schemas import Identity
from bookstore.services.security import (
    CredentialService,
    generate_reset_token,
    hash_reset_token,
    reset_token_matches,
)

SECRET = "unit-test-secret-key-that-is-long-enough-0123456789"


@pytest.fixture
def service() -> CredentialService:
    return CredentialService(secret_key=SECRET, bcrypt_rounds=4)


class TestPasswordHashing:
    def test_hash_is_not_plaintext(self, service: CredentialService):
        digest = service.hash_password("SecurePass123")

        assert digest != "SecurePass123"
        assert digest.startswith("$2b$")

    def test_verify_correct_password(self, service: CredentialService):
        digest = service.hash_password("SecurePass123")

        assert service.verify_password("SecurePass123", digest) is True

    def test_verify_wrong_password(self, service: CredentialService):
        digest = service.hash_password("SecurePass123")

        assert service.verify_password("WrongPass123", digest) is False

    def test_same_password_different_salts(self, service: CredentialService):
        """bcrypt salts every hash, so two digests of one password differ."""
        assert service.hash_password("SecurePass123") != service.hash_password("SecurePass123")

    def test_unrecognized_hash_is_rejected(self, service: CredentialService):
        assert service.verify_password("SecurePass123", "not-a-bcrypt-hash") is False


class TestSessionTokens:
    def test_round_trip_claims(self, service: CredentialService):
        token = service.issue_token({"id": 7, "username": "jane", "role": "admin"})

        identity = service.verify_token(token)

        assert identity == Identity(id=7, username="jane", role=Role.ADMIN)
        assert identity.is_admin

    def test_token_expires_after_one_hour(self, service: CredentialService):
        issued_at = datetime.now(UTC)
        token = service.issue_token({"id": 1, "username": "jane", "role": "user"}, now=issued_at)

        payload = jwt.decode(token, SECRET, algorithms=["HS256"])

        assert payload["exp"] - payload["iat"] == 3600

    def test_expired_token_rejected(self, service: CredentialService):
        issued_at = datetime.now(UTC) - timedelta(hours=1, seconds=1)
        token = service.issue_token({"id": 1, "username": "jane", "role": "user"}, now=issued_at)

        with pytest.raises(InvalidToken) as exc_info:
            service.verify_token(token)

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Invalid token"

    def test_wrong_secret_rejected(self, service: CredentialService):
        other = CredentialService(secret_key="another-secret-key-that-is-long-enough-xyz")
        token = other.issue_token({"id": 1, "username": "jane", "role": "user"})

        with pytest.raises(InvalidCredential):
            service.verify_token(token)

    def test_malformed_token_rejected(self, service: CredentialService):
        with pytest.raises(InvalidToken):
            service.verify_token("not.a.jwt")

    def test_missing_claims_rejected(self, service: CredentialService):
        token = jwt.encode({"id": 1}, SECRET, algorithm="HS256")

        with pytest.raises(InvalidToken):
            service.verify_token(token)

    def test_unknown_role_rejected(self, service: CredentialService):
        token = jwt.encode({"id": 1, "username": "jane", "role": "root"}, SECRET, algorithm="HS256")

        with pytest.raises(InvalidToken):
            service.verify_token(token)


class TestResetTokens:
    def test_generated_token_matches_its_hash(self):
        token, token_hash = generate_reset_token()

        assert token != token_hash
        assert token_hash == hash_reset_token(token)
        assert reset_token_matches(token, token_hash)

    def test_other_token_does_not_match(self):
        _, token_hash = generate_reset_token()

        assert not reset_token_matches("guessed-token", token_hash)

    def test_no_pending_reset(self):
        assert not reset_token_matches("anything", None)
