"""
Users Router

Account and session endpoints.

Endpoints:
- POST /users/register - Create an account
- POST /users/login - Email/password login, sets the session cookie
- POST /users/logout - Clears the session cookie
- POST /users/forgot-password - Email a password reset token
- PUT  /users/reset-password - Set a new password with the emailed token
- GET  /users/me - Current user's summary
- GET  /users/favorites - Current user's favorite books
- PUT  /users/favorite/add - Add a favorite
- PUT  /users/favorite/remove - Remove a favorite

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or stored
- The session token is an HS256 JWT in an HTTP-only, SameSite=strict
  cookie (Secure in production), valid for one hour
- Logout is client-side only: the cookie is cleared, the token is not
  revoked
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Request, Response, status

from bookstore.config import Settings, get_settings
from bookstore.dependencies import (
    AppSettings,
    Credentials,
    CurrentUser,
    DbSession,
    Mailer,
)
from bookstore.schemas import (
    BookSummary,
    FavoriteBooksResponse,
    FavoriteRequest,
    FavoritesResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    ResetPasswordRequest,
    UserCreate,
    UserMessageResponse,
    UserResponse,
)
from bookstore.services import users as user_service
from bookstore.services.email import send_password_reset_email
from bookstore.services.rate_limiter import limiter

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        400: {"description": "Validation failed or conflict"},
        401: {"description": "Access denied (no session cookie)"},
        403: {"description": "Invalid token"},
    },
)


def set_session_cookie(response: Response, token: str, config: Settings) -> None:
    response.set_cookie(
        key=config.session_cookie_name,
        value=token,
        httponly=True,  # Not accessible via JavaScript
        secure=config.is_production,  # HTTPS only in production
        samesite="strict",  # CSRF protection
        max_age=config.access_token_expire_minutes * 60,
    )


def clear_session_cookie(response: Response, config: Settings) -> None:
    response.delete_cookie(
        key=config.session_cookie_name,
        httponly=True,
        secure=config.is_production,
        samesite="strict",
    )


# -------------------------------------------------------------------------
# Registration & Login
# -------------------------------------------------------------------------
@router.post(
    "/register",
    response_model=UserMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create a new account with username, email and password.

    **Password Requirements:**
    - 8-72 characters
    - At least 1 uppercase letter
    - At least 1 lowercase letter
    - At least 1 number

    **Username Requirements:**
    - 3-50 characters
    - Must start with a letter
    - Only letters, numbers, and underscores
    """,
)
@limiter.limit(settings.rate_limit_auth)
def register(
    request: Request,
    user_data: UserCreate,
    db: DbSession,
    credentials: Credentials,
) -> UserMessageResponse:
    user = user_service.register_user(db, credentials, user_data)
    return UserMessageResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/login",
    response_model=UserMessageResponse,
    summary="Login with email and password",
    description="""
    Authenticate with email and password.

    On success the session token is set as an HTTP-only cookie; browsers
    send it back automatically on later requests.
    """,
)
@limiter.limit(settings.rate_limit_auth)
def login(
    request: Request,
    response: Response,
    login_data: LoginRequest,
    db: DbSession,
    credentials: Credentials,
    app_settings: AppSettings,
) -> UserMessageResponse:
    user = user_service.authenticate(db, credentials, login_data)
    token = user_service.issue_session_token(credentials, user)
    set_session_cookie(response, token, app_settings)

    return UserMessageResponse(
        message="Login successful",
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Logout",
    description="Clear the session cookie.",
)
@limiter.limit(settings.rate_limit_default)
def logout(
    request: Request,
    response: Response,
    app_settings: AppSettings,
) -> MessageResponse:
    clear_session_cookie(response, app_settings)
    logger.info("Session cookie cleared")
    return MessageResponse(message="Logout successful")


# -------------------------------------------------------------------------
# Password Reset
# -------------------------------------------------------------------------
@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Request a password reset",
    description="Email a one-time reset token to the account's address. Tokens expire after an hour.",
    responses={404: {"description": "User not found"}},
)
@limiter.limit(settings.rate_limit_auth)
def forgot_password(
    request: Request,
    reset_request: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: DbSession,
    mailer: Mailer,
    app_settings: AppSettings,
) -> MessageResponse:
    user, token = user_service.request_password_reset(
        db, reset_request.email, app_settings.password_reset_expire_minutes
    )

    background_tasks.add_task(
        send_password_reset_email,
        mailer,
        user.email,
        user.username,
        token,
        user.password_reset_expires_at,
        app_settings.frontend_url,
    )

    return MessageResponse(message="Password reset email sent")


@router.put(
    "/reset-password",
    response_model=MessageResponse,
    summary="Reset password",
    description="Set a new password using the token from the reset email.",
    responses={404: {"description": "User not found"}},
)
@limiter.limit(settings.rate_limit_auth)
def reset_password(
    request: Request,
    reset_data: ResetPasswordRequest,
    db: DbSession,
    credentials: Credentials,
) -> MessageResponse:
    user_service.reset_password(db, credentials, reset_data)
    return MessageResponse(message="Password has been reset successfully")


# -------------------------------------------------------------------------
# Current User
# -------------------------------------------------------------------------
@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
@limiter.limit(settings.rate_limit_default)
def get_me(request: Request, current_user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.get(
    "/favorites",
    response_model=FavoriteBooksResponse,
    summary="List favorite books",
)
@limiter.limit(settings.rate_limit_default)
def list_favorites(request: Request, current_user: CurrentUser) -> FavoriteBooksResponse:
    return FavoriteBooksResponse(
        favorites=[BookSummary.model_validate(book) for book in current_user.favorites]
    )


@router.put(
    "/favorite/add",
    response_model=FavoritesResponse,
    summary="Add a favorite book",
    responses={404: {"description": "Book not found"}},
)
@limiter.limit(settings.rate_limit_default)
def add_favorite(
    request: Request,
    favorite: FavoriteRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> FavoritesResponse:
    favorites = user_service.add_favorite(db, current_user, favorite.book_id)
    return FavoritesResponse(
        message="Book added to favorites successfully",
        favorites=favorites,
    )


@router.put(
    "/favorite/remove",
    response_model=FavoritesResponse,
    summary="Remove a favorite book",
    responses={404: {"description": "Book not found or not a favorite"}},
)
@limiter.limit(settings.rate_limit_default)
def remove_favorite(
    request: Request,
    favorite: FavoriteRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> FavoritesResponse:
    favorites = user_service.remove_favorite(db, current_user, favorite.book_id)
    return FavoritesResponse(
        message="Book removed from favorites successfully",
        favorites=favorites,
    )
