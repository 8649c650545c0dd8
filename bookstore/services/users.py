"""
User Service

Accounts, authentication, favorites and password resets, plus the
admin-side account management.

Authentication Flow:
====================
1. Register: username/email must be unique; the password is hashed once
2. Login: email lookup (lowercased) + bcrypt verify -> session token
3. The token travels in an HTTP-only cookie (see routers/users.py)

Password Reset Flow:
====================
1. forgot-password: a random token is generated, its SHA-256 hash and
   expiry are stored, and the token itself is emailed
2. reset-password: email + token + new password; the token must match
   the stored hash and be unexpired; it is cleared on success
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from bookstore.exceptions import Conflict, InvalidCredential, InvalidToken, NotFound
from bookstore.models import Book, Role, User
from bookstore.schemas.user import (
    AdminUserCreate,
    AdminUserUpdate,
    LoginRequest,
    ResetPasswordRequest,
    UserCreate,
)
from bookstore.services.common import commit_or_conflict, get_or_404
from bookstore.services.query_builder import (
    ListingOptions,
    Page,
    PageRequest,
    equals,
    icontains,
    paginate,
)
from bookstore.services.security import (
    CredentialService,
    generate_reset_token,
    reset_token_matches,
)

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "Username or email already exists"
INVALID_LOGIN_MESSAGE = "Invalid email or password"
INVALID_RESET_TOKEN_MESSAGE = "Invalid or expired password reset token"

USER_LISTING = ListingOptions(
    sortable={
        "created_at": User.created_at,
        "username": User.username,
        "email": User.email,
        "role": User.role,
    },
    tiebreaker=User.id,
    default_sort="desc",
    default_sort_by="created_at",
    filters={
        "role": equals(User.role),
        "username": icontains(User.username),
    },
)


def _identity_taken(
    db: Session,
    username: Optional[str],
    email: Optional[str],
    exclude_id: Optional[int] = None,
) -> bool:
    conditions = []
    if username is not None:
        conditions.append(User.username == username)
    if email is not None:
        conditions.append(User.email == email)
    if not conditions:
        return False

    stmt = select(User.id).where(or_(*conditions))
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    return db.scalar(stmt) is not None


def get_user(db: Session, user_id: int) -> User:
    return get_or_404(db, User, user_id, "User")


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalar(select(User).where(User.email == email.lower()))


# =============================================================================
# Registration & Login
# =============================================================================
def register_user(db: Session, credentials: CredentialService, user_data: UserCreate) -> User:
    """
    Create a regular account.

    Raises:
        Conflict: Username or email already registered
    """
    if _identity_taken(db, user_data.username, user_data.email):
        raise Conflict(DUPLICATE_USER_MESSAGE)

    user = User(
        username=user_data.username,
        email=user_data.email,
        hashed_password=credentials.hash_password(user_data.password),
        role=Role.USER.value,
    )
    db.add(user)
    commit_or_conflict(db, DUPLICATE_USER_MESSAGE)
    db.refresh(user)

    logger.info(f"New user registered: {user.username} (id={user.id})")
    return user


def authenticate(db: Session, credentials: CredentialService, login_data: LoginRequest) -> User:
    """
    Check an email/password pair.

    Raises:
        InvalidCredential: Unknown email or wrong password (reported as 400,
            with the same message in both cases)
    """
    user = get_user_by_email(db, login_data.email)

    if user is None or not credentials.verify_password(login_data.password, user.hashed_password):
        logger.warning(f"Failed login attempt for email: {login_data.email}")
        raise InvalidCredential(INVALID_LOGIN_MESSAGE, status_code=400)

    logger.info(f"User logged in: {user.username}")
    return user


def issue_session_token(credentials: CredentialService, user: User) -> str:
    return credentials.issue_token(
        {"id": user.id, "username": user.username, "role": user.role}
    )


# =============================================================================
# Favorites
# =============================================================================
def favorite_ids(user: User) -> list[int]:
    return [book.id for book in user.favorites]


def add_favorite(db: Session, user: User, book_id: int) -> list[int]:
    """
    Raises:
        NotFound: The book does not exist
        Conflict: The book is already a favorite
    """
    book = get_or_404(db, Book, book_id, "Book")

    if book in user.favorites:
        raise Conflict("Book is already in favorites")

    user.favorites.append(book)
    commit_or_conflict(db, "Book is already in favorites")
    db.refresh(user)

    logger.info(f"User {user.id} added book {book_id} to favorites")
    return favorite_ids(user)


def remove_favorite(db: Session, user: User, book_id: int) -> list[int]:
    """
    Raises:
        NotFound: The book does not exist or is not a favorite
    """
    book = get_or_404(db, Book, book_id, "Book")

    if book not in user.favorites:
        raise NotFound("Book is not in favorites")

    user.favorites.remove(book)
    db.commit()
    db.refresh(user)

    logger.info(f"User {user.id} removed book {book_id} from favorites")
    return favorite_ids(user)


# =============================================================================
# Password Reset
# =============================================================================
def request_password_reset(db: Session, email: str, expire_minutes: int) -> tuple[User, str]:
    """
    Start a password reset.

    Returns:
        (user, token): the plain token is to be emailed, only its hash
        is stored

    Raises:
        NotFound: No account with this email
    """
    user = get_user_by_email(db, email)
    if user is None:
        raise NotFound("User not found")

    token, token_hash = generate_reset_token()
    user.password_reset_token_hash = token_hash
    user.password_reset_expires_at = datetime.now(UTC) + timedelta(minutes=expire_minutes)
    db.commit()
    db.refresh(user)

    logger.info(f"Password reset requested for user {user.id}")
    return user, token


def _reset_token_expired(user: User) -> bool:
    expires_at = user.password_reset_expires_at
    if expires_at is None:
        return True
    # SQLite hands back naive datetimes
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    return expires_at <= datetime.now(UTC)


def reset_password(
    db: Session, credentials: CredentialService, reset_data: ResetPasswordRequest
) -> User:
    """
    Complete a password reset.

    Raises:
        NotFound: No account with this email
        InvalidToken: Token does not match or has expired (reported as 400)
    """
    user = get_user_by_email(db, reset_data.email)
    if user is None:
        raise NotFound("User not found")

    if _reset_token_expired(user) or not reset_token_matches(
        reset_data.token, user.password_reset_token_hash
    ):
        logger.warning(f"Rejected password reset token for user {user.id}")
        raise InvalidToken(INVALID_RESET_TOKEN_MESSAGE, status_code=400)

    user.hashed_password = credentials.hash_password(reset_data.password)
    user.password_reset_token_hash = None
    user.password_reset_expires_at = None
    db.commit()
    db.refresh(user)

    logger.info(f"Password reset completed for user {user.id}")
    return user


# =============================================================================
# Admin
# =============================================================================
def list_users(db: Session, request: PageRequest) -> Page:
    return paginate(db, select(User), USER_LISTING, request)


def admin_create_user(
    db: Session, credentials: CredentialService, user_data: AdminUserCreate
) -> User:
    if _identity_taken(db, user_data.username, user_data.email):
        raise Conflict(DUPLICATE_USER_MESSAGE)

    user = User(
        username=user_data.username,
        email=user_data.email,
        hashed_password=credentials.hash_password(user_data.password),
        role=Role(user_data.role).value,
    )
    db.add(user)
    commit_or_conflict(db, DUPLICATE_USER_MESSAGE)
    db.refresh(user)

    logger.info(f"Admin created user {user.id} with role {user.role}")
    return user


def admin_update_user(
    db: Session, credentials: CredentialService, user: User, user_data: AdminUserUpdate
) -> User:
    """
    Apply an admin's partial update. A new password is hashed here and
    nowhere else.
    """
    update_data = user_data.model_dump(exclude_unset=True)

    if _identity_taken(
        db, update_data.get("username"), update_data.get("email"), exclude_id=user.id
    ):
        raise Conflict(DUPLICATE_USER_MESSAGE)

    if "password" in update_data:
        user.hashed_password = credentials.hash_password(update_data.pop("password"))
    if "role" in update_data:
        user.role = Role(update_data.pop("role")).value

    for field, value in update_data.items():
        setattr(user, field, value)

    commit_or_conflict(db, DUPLICATE_USER_MESSAGE)
    db.refresh(user)

    logger.info(f"Admin updated user {user.id}")
    return user


def delete_user(db: Session, user: User) -> None:
    """Delete an account along with its reviews, bookmarks and progress."""
    user_id = user.id
    db.delete(user)
    db.commit()
    logger.info(f"User {user_id} deleted")
