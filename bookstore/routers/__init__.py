"""
API Routers Package

This package contains FastAPI routers that handle API endpoints.

Router Structure:
- users.py: /api/users/* (registration, login, password reset, favorites)
- books.py: /api/books/* (catalogue, per-book reviews/bookmarks/progress)
- genres.py: /api/genres/* (public genre reads)
- reviews.py: /api/reviews/*
- bookmarks.py: /api/bookmarks/*
- reading_progress.py: /api/reading-progress/*
- pages.py: /api/page/* (aggregated page data)
- admin.py: /api/admin/* (admin-managed users, books, genres)

Each router is imported and registered in main.py.
"""

from bookstore.routers.admin import router as admin_router
from bookstore.routers.bookmarks import router as bookmarks_router
from bookstore.routers.books import router as books_router
from bookstore.routers.genres import router as genres_router
from bookstore.routers.pages import router as pages_router
from bookstore.routers.reading_progress import router as reading_progress_router
from bookstore.routers.reviews import router as reviews_router
from bookstore.routers.users import router as users_router

__all__ = [
    "admin_router",
    "bookmarks_router",
    "books_router",
    "genres_router",
    "pages_router",
    "reading_progress_router",
    "reviews_router",
    "users_router",
]
