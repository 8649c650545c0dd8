"""
Security Service (Credential Service)

Handles password hashing and session token operations.

Security Features:
==================
1. Password hashing with bcrypt (passlib), cost factor from settings
2. Verification through bcrypt's own constant-time verify, never by
   comparing digests
3. Session tokens are HS256 JWTs carrying {id, username, role}, valid
   for one hour
4. Password reset tokens are random, emailed once, and stored only as a
   SHA-256 hash

The service is built from an explicit Settings object so tests (and any
second application instance) can run with their own secret and cost
factor.

Usage:
    from bookstore.services.security import get_credential_service

    credentials = get_credential_service()
    digest = credentials.hash_password("SecurePass123")
    credentials.verify_password("SecurePass123", digest)  # True

    token = credentials.issue_token({"id": 1, "username": "jane", "role": "user"})
    identity = credentials.verify_token(token)
"""

import hashlib
import logging
import secrets
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any, Mapping, Tuple

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError

from bookstore.config import Settings, get_settings
from bookstore.exceptions import InvalidToken
from bookstore.schemas.user import Identity

logger = logging.getLogger(__name__)

SESSION_TOKEN_TTL = timedelta(hours=1)


class CredentialService:
    """
    Password hashing and session token issuance/verification.

    Args:
        secret_key: Shared secret for signing tokens
        algorithm: Symmetric JWT algorithm
        token_ttl: Lifetime of issued session tokens
        bcrypt_rounds: bcrypt cost factor
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        token_ttl: timedelta = SESSION_TOKEN_TTL,
        bcrypt_rounds: int = 10,
    ) -> None:
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.token_ttl = token_ttl
        # CryptContext handles salting; "auto" upgrades deprecated schemes
        self._pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=bcrypt_rounds,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialService":
        return cls(
            secret_key=settings.secret_key,
            algorithm=settings.jwt_algorithm,
            token_ttl=timedelta(minutes=settings.access_token_expire_minutes),
            bcrypt_rounds=settings.bcrypt_rounds,
        )

    # -------------------------------------------------------------------------
    # Passwords
    # -------------------------------------------------------------------------
    def hash_password(self, password: str) -> str:
        """
        Hash a plain text password using bcrypt.

        Example:
            >>> credentials.hash_password("SecurePass123").startswith("$2b$")
            True
        """
        return self._pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a plain password against a stored bcrypt hash.

        Returns False (instead of raising) when the stored value is not a
        recognizable hash.
        """
        try:
            return self._pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            logger.warning("Stored password hash could not be identified")
            return False

    # -------------------------------------------------------------------------
    # Session Tokens
    # -------------------------------------------------------------------------
    def issue_token(
        self,
        claims: Mapping[str, Any] | Identity,
        now: datetime | None = None,
    ) -> str:
        """
        Create a signed session token.

        Args:
            claims: {id, username, role} of the authenticated user
            now: Issue time (defaults to the current time)

        Returns:
            Encoded JWT string
        """
        if isinstance(claims, Identity):
            to_encode = claims.model_dump(mode="json")
        else:
            to_encode = Identity.model_validate(claims).model_dump(mode="json")

        issued_at = now or datetime.now(UTC)
        to_encode.update({"iat": issued_at, "exp": issued_at + self.token_ttl})

        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Identity:
        """
        Decode and validate a session token.

        Raises:
            InvalidToken: Bad signature, expired, malformed, or missing claims
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.info("Rejected expired session token")
            raise InvalidToken()
        except JWTError as e:
            logger.warning(f"JWT decode error: {e}")
            raise InvalidToken()

        try:
            return Identity.model_validate(payload)
        except PydanticValidationError:
            logger.warning("Session token is missing required claims")
            raise InvalidToken()


@lru_cache
def get_credential_service() -> CredentialService:
    """Credential service built from the application settings (cached)."""
    return CredentialService.from_settings(get_settings())


# -------------------------------------------------------------------------
# Password Reset Tokens
# -------------------------------------------------------------------------
def generate_reset_token() -> Tuple[str, str]:
    """
    Generate a password reset token.

    Returns:
        Tuple of (token, token_hash)
        - token: Sent to the user by email, never stored
        - token_hash: SHA-256 hash stored on the user row
    """
    token = secrets.token_urlsafe(32)
    return token, hash_reset_token(token)


def hash_reset_token(token: str) -> str:
    """SHA-256 hex digest of a reset token."""
    return hashlib.sha256(token.encode()).hexdigest()


def reset_token_matches(token: str, token_hash: str | None) -> bool:
    if not token_hash:
        return False
    return secrets.compare_digest(hash_reset_token(token), token_hash)
