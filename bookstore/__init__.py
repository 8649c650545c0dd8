"""
Bookstore API Application Package

Backend for a bookstore content-management system: books, genres,
reviews, bookmarks, reading progress and users, with cookie-based JWT
sessions and an admin surface.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine, session factory and declarative base
- exceptions.py: Error taxonomy mapped to HTTP responses
- main.py: FastAPI application factory and exception handlers
- dependencies.py: Access guard, ownership checks, shared dependencies
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (credentials, query building, resources, email)
- utils/: Helper functions (masking)
"""

__version__ = "1.0.0"
