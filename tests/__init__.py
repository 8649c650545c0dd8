"""
Test Suite for the Bookstore API

Test Organization:
- conftest.py: Shared fixtures (in-memory database, client, sample data, login helper)
- test_security.py: Password hashing and session tokens
- test_access_guard.py: Authentication and admin checks on protected routes
- test_query_builder.py: Pagination, sorting and filter parsing
- test_users.py: Registration, login/logout, password reset, favorites
- test_books.py / test_genres.py / test_pages.py: Catalogue reads
- test_reviews.py / test_bookmarks.py / test_reading_progress.py: User-owned records
- test_admin.py: Admin user and book management
- test_email.py: Email provider interface and selection
- test_migrations.py: Alembic migration chain against an empty database

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_books.py

    # Run with verbose output
    pytest -v
"""
