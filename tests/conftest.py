"""
pytest Fixtures for Bookstore API Tests

This file contains shared fixtures used across all test files.

HOW FIXTURES WORK:
1. pytest discovers fixtures by the @pytest.fixture decorator
2. Tests request fixtures by including them as parameters
3. pytest calls the fixture, provides the return value to the test
4. After the test, cleanup code after yield runs

For database tests, every test function gets its own SQLite in-memory
engine, so uniqueness conflicts and rollbacks in one test never leak
into another.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# This disables rate limiting, sets a test secret key and a cheap bcrypt cost
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["EMAIL_BACKEND"] = "console"
os.environ["ENVIRONMENT"] = "development"

from collections.abc import Callable, Generator
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookstore.config import get_settings
from bookstore.database import Base, get_db
from bookstore.main import app
from bookstore.models import Book, Genre, ReadingProgress, Review, Role, User
from bookstore.services.email import EmailProvider, get_email_provider
from bookstore.services.security import CredentialService, get_credential_service

API = get_settings().api_prefix

USER_PASSWORD = "SecurePass123"
SECOND_USER_PASSWORD = "SecurePass456"
ADMIN_PASSWORD = "AdminPass123"


class RecordingEmailProvider(EmailProvider):
    """Keeps sent messages in memory instead of delivering them."""

    name = "recording"

    def __init__(self) -> None:
        super().__init__(sender="no-reply@test.local")
        self.outbox: list[dict] = []

    def send_email(self, recipient: str, subject: str, html_body: str, text_body: str) -> None:
        self.outbox.append(
            {
                "recipient": recipient,
                "subject": subject,
                "html_body": html_body,
                "text_body": text_body,
            }
        )


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture(scope="function")
def engine():
    """
    SQLite in-memory engine with all tables created.

    StaticPool keeps a single connection alive; without it the in-memory
    database would disappear between connections.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Session used by fixtures and by tests to inspect the database."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def outbox() -> RecordingEmailProvider:
    return RecordingEmailProvider()


@pytest.fixture(scope="function")
def client(
    session_factory: sessionmaker, outbox: RecordingEmailProvider
) -> Generator[TestClient, None, None]:
    """
    Test client wired to the test database and the recording mailer.

    Each request gets its own session, as it would in production.
    """

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_provider] = lambda: outbox

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# AUTH HELPERS
# =============================================================================
@pytest.fixture
def credentials() -> CredentialService:
    return get_credential_service()


@pytest.fixture
def login_as(client: TestClient, credentials: CredentialService) -> Callable[[User], str]:
    """
    Return a helper that makes the client act as the given user by
    setting the session cookie directly.
    """

    def _login(user: User) -> str:
        token = credentials.issue_token(
            {"id": user.id, "username": user.username, "role": user.role}
        )
        client.cookies.clear()
        client.cookies.set(get_settings().session_cookie_name, token)
        return token

    return _login


def _make_user(
    db: Session,
    credentials: CredentialService,
    username: str,
    email: str,
    password: str,
    role: Role = Role.USER,
) -> User:
    user = User(
        username=username,
        email=email,
        hashed_password=credentials.hash_password(password),
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def sample_user(db_session: Session, credentials: CredentialService) -> User:
    return _make_user(db_session, credentials, "testuser", "testuser@example.com", USER_PASSWORD)


@pytest.fixture
def second_user(db_session: Session, credentials: CredentialService) -> User:
    """Create a second user for testing ownership scenarios."""
    return _make_user(
        db_session, credentials, "seconduser", "seconduser@example.com", SECOND_USER_PASSWORD
    )


@pytest.fixture
def admin_user(db_session: Session, credentials: CredentialService) -> User:
    return _make_user(
        db_session, credentials, "admin", "admin@example.com", ADMIN_PASSWORD, Role.ADMIN
    )


@pytest.fixture
def sample_genre(db_session: Session) -> Genre:
    genre = Genre(
        name="Science Fiction",
        description="Fiction based on futuristic science and technology.",
    )
    db_session.add(genre)
    db_session.commit()
    db_session.refresh(genre)
    return genre


@pytest.fixture
def second_genre(db_session: Session) -> Genre:
    genre = Genre(name="Dystopian", description="Dark, oppressive future societies.")
    db_session.add(genre)
    db_session.commit()
    db_session.refresh(genre)
    return genre


@pytest.fixture
def sample_book(db_session: Session, sample_genre: Genre) -> Book:
    """Create a sample book in the sample genre."""
    book = Book(
        title="1984",
        author="George Orwell",
        publish_date=date(1949, 6, 8),
        publisher="Secker & Warburg",
        file_format="epub",
        summary="A dystopian novel set in a totalitarian society.",
        genres=[sample_genre],
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def multiple_books(db_session: Session, sample_genre: Genre) -> list[Book]:
    """Create 15 books (more than the default page size)."""
    books = []
    for i in range(15):
        book = Book(
            title=f"Test Book {i + 1:02d}",
            author="George Orwell" if i % 2 == 0 else "Aldous Huxley",
            publish_date=date(1950 + i, 1, 1),
            publisher="Test Press",
            file_format="pdf",
        )
        if i % 3 == 0:
            book.genres = [sample_genre]
        books.append(book)
        db_session.add(book)

    db_session.commit()
    for book in books:
        db_session.refresh(book)

    return books


@pytest.fixture
def sample_review(db_session: Session, sample_book: Book, sample_user: User) -> Review:
    review = Review(
        book_id=sample_book.id,
        user_id=sample_user.id,
        rating=4,
        comment="I really enjoyed reading this book.",
    )
    db_session.add(review)
    db_session.commit()
    db_session.refresh(review)
    return review


@pytest.fixture
def completed_progress(
    db_session: Session, sample_book: Book, sample_user: User
) -> ReadingProgress:
    record = ReadingProgress(user_id=sample_user.id, book_id=sample_book.id, progress=100)
    db_session.add(record)
    db_session.commit()
    db_session.refresh(record)
    return record
