"""
Application Error Taxonomy

Every failure a handler can report maps to one of these classes. Services
and dependencies raise them; the exception handlers registered in
bookstore.main turn them into a JSON body of the form {"message": ...}
with the matching status code.

| Error              | Status | When                                       |
|--------------------|--------|--------------------------------------------|
| Unauthenticated    | 401    | No session cookie                          |
| InvalidCredential  | 403    | Bad/expired token (400 for a bad login)    |
| Forbidden          | 403    | Ownership or role check failed             |
| NotFound           | 404    | Missing id                                 |
| Conflict           | 400    | Uniqueness violation                       |
| ValidationError    | 400    | Field or query-parameter constraint broken |
| InternalError      | 500    | Unexpected or database failure             |
"""

from typing import Any, Optional

from fastapi import status


class BookstoreError(Exception):
    """
    Base class for errors reported to API clients.

    Subclasses set status_code and default_message. Both can be
    overridden per instance, e.g. a failed login is an
    InvalidCredential reported with 400 instead of 403.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An internal error occurred."

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
    ) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(self.message)

    def to_content(self) -> dict:
        """JSON body sent to the client."""
        content: dict = {"message": self.message}
        if self.details is not None:
            content["errors"] = self.details
        return content


class Unauthenticated(BookstoreError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Access denied"


class InvalidCredential(BookstoreError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid token"


class InvalidToken(InvalidCredential):
    """Raised by the credential service when a session token fails verification."""


class Forbidden(BookstoreError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(BookstoreError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(BookstoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists"


class ValidationError(BookstoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class InternalError(BookstoreError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An internal error occurred."
