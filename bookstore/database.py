"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 for the Bookstore API.

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request arrives -> create a new session
2. Use session for all database operations in that request
3. Commit on success, rollback on failure
4. Close session when request ends

This is implemented using FastAPI's dependency injection (get_db).

Integrity
=========
Every uniqueness rule of the domain (one review per user and book, one
bookmark per user/book/page, one reading-progress row per user and book,
unique usernames, emails and genre names) is declared as a constraint
on the tables, so the database is the final arbiter when two requests
race past the application-level existence checks.
"""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from bookstore.config import Settings, get_settings

settings = get_settings()


# =============================================================================
# Database Engine
# =============================================================================
# Key parameters:
# - pool_size / max_overflow: connection pool bounds (server databases only)
# - pool_pre_ping: Test connection health before using
# - echo: Log all SQL statements in debug mode

def build_engine(config: Settings) -> Engine:
    """
    Create the SQLAlchemy engine described by the given settings.

    SQLite (used for local development and tests) needs
    check_same_thread=False because FastAPI runs sync handlers in a
    threadpool, and does not accept the pool sizing arguments.
    """
    if config.is_sqlite:
        return create_engine(
            config.database_url,
            connect_args={"check_same_thread": False},
            echo=config.debug,
        )

    return create_engine(
        config.database_url,
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        pool_pre_ping=True,
        echo=config.debug,
    )


engine = build_engine(settings)


# =============================================================================
# Session Factory
# =============================================================================
# - autocommit=False: We control when to commit
# - autoflush=False: Don't auto-flush before queries

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic uses Base.metadata to discover tables for migrations.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Code before yield creates the session, the route handler uses it,
    and the finally block closes it even if the handler raised.

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables() -> None:
    """
    Create all database tables.

    Development and seeding helper. In production, use Alembic migrations.
    """
    # Import models so every table is registered on Base.metadata
    import bookstore.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Only use in development and tests.
    """
    import bookstore.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
