"""
Services Package

This package contains business logic services that are:
- Separate from HTTP handling (routers)
- Reusable across different parts of the application
- Easier to test in isolation

Current services:
- security.py: Password hashing, session tokens, reset tokens
- query_builder.py: Pagination, sorting and filtering for listings
- common.py / ownership.py: Lookup, commit and ownership helpers
- users.py: Accounts, login, password reset, favorites, admin user management
- books.py / genres.py: Catalogue reads, home page, admin writes
- reviews.py / bookmarks.py / reading_progress.py: Per-user records
- email.py: Email providers (console, SMTP) and reset emails
- rate_limiter.py: Rate limiting with slowapi
"""
