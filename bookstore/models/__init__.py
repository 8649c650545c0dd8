"""
SQLAlchemy Models Package

This package contains all database models for the Bookstore API.

Model Relationships:
- Genre <-> Book: Many-to-Many (a book can belong to multiple genres)
- User <-> Book: Many-to-Many favorites
- User -> Review / Bookmark / ReadingProgress: One-to-Many, owned by the
  user through user_id (deleted with the user)
- Book -> Review / Bookmark / ReadingProgress: One-to-Many

Import all models here to:
1. Make them available as: from bookstore.models import Book, Genre
2. Ensure Alembic discovers them for migrations
"""

# The order matters for SQLAlchemy to resolve relationships
from bookstore.models.genre import Genre
from bookstore.models.book import Book, book_genres
from bookstore.models.user import Role, User, user_favorites
from bookstore.models.review import Review
from bookstore.models.bookmark import Bookmark
from bookstore.models.reading_progress import ReadingProgress

__all__ = [
    "Genre",
    "Book",
    "book_genres",
    "Role",
    "User",
    "user_favorites",
    "Review",
    "Bookmark",
    "ReadingProgress",
]
