"""
User Pydantic Schemas

These schemas define the shape of data for User-related API operations.

Schemas:
- Identity: Claims carried by a session token {id, username, role}
- UserCreate: Registration data (username, email, password)
- LoginRequest: Email/password login
- ForgotPasswordRequest / ResetPasswordRequest: Password reset flow
- FavoriteRequest: Add/remove a favorite book
- UserResponse: Public user summary (never exposes password)
- AdminUserCreate / AdminUserUpdate: Admin account management
- MaskedUserResponse / UserListResponse: Admin listings with masked emails

Pydantic v2 Features Used:
- model_config: Configure model behavior
- Field(): Define constraints and metadata
- field_validator: Validate and transform field values
- EmailStr: Built-in email validation
"""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from bookstore.models.user import Role
from bookstore.schemas.book import BookSummary
from bookstore.schemas.common import PageEnvelope, reject_null
from bookstore.utils.masking import mask_email

# bcrypt only looks at the first 72 bytes of a password
PASSWORD_MAX_LENGTH = 72


def check_username(v: str) -> str:
    """
    Validate username format.

    Rules:
    - 3-50 characters (enforced by Field)
    - Only alphanumeric and underscores
    - Must start with a letter
    """
    if not re.match(r"^[a-zA-Z][a-zA-Z0-9_]*$", v):
        raise ValueError(
            "Username must start with a letter and contain only "
            "letters, numbers, and underscores"
        )
    return v.lower()  # Normalize to lowercase


def check_password_strength(v: str) -> str:
    """
    Validate password strength.

    Requirements:
    - At least 8 characters (enforced by min_length)
    - At least 1 uppercase letter
    - At least 1 lowercase letter
    - At least 1 number
    """
    if not re.search(r"[A-Z]", v):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", v):
        raise ValueError("Password must contain at least one lowercase letter")
    if not re.search(r"\d", v):
        raise ValueError("Password must contain at least one number")
    return v


# =============================================================================
# Session Identity
# =============================================================================
class Identity(BaseModel):
    """
    The authenticated caller, as decoded from the session token.

    Extra token claims (iat, exp) are ignored.
    """

    id: int = Field(..., description="User id")
    username: str = Field(..., description="Username at the time of login")
    role: Role = Field(..., description="Account role")

    model_config = ConfigDict(frozen=True)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


# =============================================================================
# Registration & Login
# =============================================================================
class UserCreate(BaseModel):
    """
    Schema for user registration.

    Requires username, email, and password with strength validation.
    """

    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        description="Unique username (3-50 characters, alphanumeric and underscores)",
        examples=["johndoe", "jane_doe123"],
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["john@example.com"],
    )

    password: str = Field(
        ...,
        min_length=8,
        max_length=PASSWORD_MAX_LENGTH,
        description="Password (min 8 chars, must include uppercase and number)",
        examples=["SecurePass123"],
    )

    @field_validator("username")
    @classmethod
    def username_must_be_valid(cls, v: str) -> str:
        return check_username(v)

    @field_validator("email")
    @classmethod
    def email_to_lowercase(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def password_must_be_strong(cls, v: str) -> str:
        return check_password_strength(v)


class LoginRequest(BaseModel):
    """Email/password login. The email is matched case-insensitively."""

    email: str = Field(..., min_length=1, max_length=255, examples=["john@example.com"])
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("email")
    @classmethod
    def email_to_lowercase(cls, v: str) -> str:
        return v.strip().lower()


class ForgotPasswordRequest(BaseModel):
    email: EmailStr = Field(..., examples=["john@example.com"])

    @field_validator("email")
    @classmethod
    def email_to_lowercase(cls, v: str) -> str:
        return v.lower()


class ResetPasswordRequest(BaseModel):
    """Completes a password reset with the emailed token."""

    email: EmailStr = Field(..., examples=["john@example.com"])
    token: str = Field(..., min_length=1, max_length=256, description="Token from the reset email")
    password: str = Field(
        ...,
        min_length=8,
        max_length=PASSWORD_MAX_LENGTH,
        description="New password",
    )

    @field_validator("email")
    @classmethod
    def email_to_lowercase(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def password_must_be_strong(cls, v: str) -> str:
        return check_password_strength(v)


# =============================================================================
# Responses
# =============================================================================
class UserResponse(BaseModel):
    """
    Schema for user responses (what the API returns).

    SECURITY: Never includes the password digest or reset token.
    """

    id: int = Field(..., description="Unique user identifier", examples=[1, 42])
    username: str = Field(..., description="Unique username")
    email: str = Field(..., description="User's email address")
    role: Role = Field(..., description="Account role")
    created_at: datetime = Field(..., description="When the user registered")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "username": "johndoe",
                "email": "john@example.com",
                "role": "user",
                "created_at": "2024-01-15T10:30:00Z",
            }
        },
    )


class UserMessageResponse(BaseModel):
    """Register/login acknowledgement carrying the user summary."""

    message: str
    user: UserResponse


# =============================================================================
# Favorites
# =============================================================================
class FavoriteRequest(BaseModel):
    book_id: int = Field(..., ge=1, description="Book to add or remove")


class FavoritesResponse(BaseModel):
    """Favorites after an add/remove, as book ids."""

    message: str
    favorites: list[int] = Field(default_factory=list)


class FavoriteBooksResponse(BaseModel):
    favorites: list[BookSummary]


# =============================================================================
# Admin
# =============================================================================
class AdminUserCreate(UserCreate):
    """Admin-created account; the role may be chosen."""

    role: Role = Field(default=Role.USER, description="Account role")


class AdminUserUpdate(BaseModel):
    """
    Partial update of an account by an admin.

    Only fields present in the request are applied; none may be null.
    A new password is hashed before it is stored.
    """

    username: str | None = Field(default=None, min_length=3, max_length=50)
    email: EmailStr | None = Field(default=None)
    password: str | None = Field(
        default=None, min_length=8, max_length=PASSWORD_MAX_LENGTH
    )
    role: Role | None = Field(default=None)

    @field_validator("username", "email", "password", "role", mode="before")
    @classmethod
    def fields_not_null(cls, v):
        return reject_null(v)

    @field_validator("username")
    @classmethod
    def username_must_be_valid(cls, v: str) -> str:
        return check_username(v)

    @field_validator("email")
    @classmethod
    def email_to_lowercase(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def password_must_be_strong(cls, v: str) -> str:
        return check_password_strength(v)


class MaskedUserResponse(BaseModel):
    """User as shown on admin listings, with a partially masked email."""

    id: int
    username: str
    email: str = Field(..., examples=["j***e@example.com"])
    role: Role
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user) -> "MaskedUserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=mask_email(user.email),
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserListResponse(PageEnvelope):
    total_users: int = Field(..., alias="totalUsers", ge=0)
    users: list[MaskedUserResponse]
