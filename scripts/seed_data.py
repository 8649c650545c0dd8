#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample data for development and testing.

USAGE:
    # Make sure you're in the project root with venv activated
    python scripts/seed_data.py

    # Admin account credentials can be overridden
    SEED_ADMIN_EMAIL=me@example.com SEED_ADMIN_PASSWORD=S3curePass python scripts/seed_data.py

This script:
1. Connects to the database using app settings
2. Clears existing data (optional)
3. Creates sample genres and books
4. Creates an admin account
"""

import os
import sys
from datetime import date
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from bookstore.config import get_settings
from bookstore.database import SessionLocal, create_tables
from bookstore.models import (
    Book,
    Bookmark,
    Genre,
    ReadingProgress,
    Review,
    Role,
    User,
    book_genres,
    user_favorites,
)
from bookstore.services.security import CredentialService

ADMIN_USERNAME = os.getenv("SEED_ADMIN_USERNAME", "admin")
ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@bookstore.local")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "ChangeMe123")


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    for table in (Review, Bookmark, ReadingProgress):
        db.execute(delete(table))
    db.execute(delete(user_favorites))
    db.execute(delete(book_genres))
    db.execute(delete(Book))
    db.execute(delete(Genre))
    db.execute(delete(User))
    db.commit()
    print("Data cleared.")


def create_genres(db: Session) -> dict[str, Genre]:
    """Create sample genres."""
    print("Creating genres...")
    genres_data = [
        {
            "name": "Science Fiction",
            "description": "Fiction based on imagined future scientific or technological advances.",
        },
        {
            "name": "Fantasy",
            "description": "Fiction with supernatural or magical elements.",
        },
        {
            "name": "Mystery",
            "description": "Fiction dealing with the solution of a crime or puzzle.",
        },
        {
            "name": "Classic Literature",
            "description": "Timeless works of literary fiction.",
        },
        {
            "name": "Dystopian",
            "description": "Fiction depicting a dark, oppressive future society.",
        },
        {
            "name": "Romance",
            "description": "Fiction focused on romantic relationships.",
        },
    ]

    genres = {}
    for data in genres_data:
        genre = Genre(**data)
        db.add(genre)
        genres[data["name"]] = genre

    db.commit()
    for genre in genres.values():
        db.refresh(genre)

    print(f"Created {len(genres)} genres.")
    return genres


def create_books(db: Session, genres: dict[str, Genre]) -> list[Book]:
    """Create sample books with their genres."""
    print("Creating books...")

    books_data = [
        {
            "title": "1984",
            "author": "George Orwell",
            "publish_date": date(1949, 6, 8),
            "publisher": "Secker & Warburg",
            "file_format": "epub",
            "summary": "A dystopian novel set in a totalitarian society under constant surveillance.",
            "genres": ["Dystopian", "Classic Literature", "Science Fiction"],
        },
        {
            "title": "Animal Farm",
            "author": "George Orwell",
            "publish_date": date(1945, 8, 17),
            "publisher": "Secker & Warburg",
            "file_format": "pdf",
            "summary": "An allegorical novella about farm animals who rebel against their farmer.",
            "genres": ["Classic Literature", "Dystopian"],
        },
        {
            "title": "Pride and Prejudice",
            "author": "Jane Austen",
            "publish_date": date(1813, 1, 28),
            "publisher": "T. Egerton",
            "file_format": "epub",
            "summary": "A romantic novel following Elizabeth Bennet and Mr. Darcy.",
            "genres": ["Classic Literature", "Romance"],
        },
        {
            "title": "Murder on the Orient Express",
            "author": "Agatha Christie",
            "publish_date": date(1934, 1, 1),
            "publisher": "Collins Crime Club",
            "file_format": "mobi",
            "summary": "Hercule Poirot investigates a murder aboard a snowbound train.",
            "genres": ["Mystery", "Classic Literature"],
        },
        {
            "title": "Foundation",
            "author": "Isaac Asimov",
            "publish_date": date(1951, 6, 1),
            "publisher": "Gnome Press",
            "file_format": "epub",
            "summary": "A mathematician foresees the fall of the Galactic Empire.",
            "genres": ["Science Fiction"],
        },
        {
            "title": "The Hobbit",
            "author": "J.R.R. Tolkien",
            "publish_date": date(1937, 9, 21),
            "publisher": "George Allen & Unwin",
            "file_format": "pdf",
            "summary": "Bilbo Baggins is swept into a quest to reclaim a dwarven kingdom.",
            "genres": ["Fantasy", "Classic Literature"],
        },
    ]

    books = []
    for data in books_data:
        genre_names = data.pop("genres")

        book = Book(**data)
        book.genres = [genres[name] for name in genre_names]

        db.add(book)
        books.append(book)

    db.commit()
    for book in books:
        db.refresh(book)

    print(f"Created {len(books)} books.")
    return books


def create_admin(db: Session) -> User:
    """Create the admin account."""
    print("Creating admin account...")
    credentials = CredentialService.from_settings(get_settings())

    admin = User(
        username=ADMIN_USERNAME,
        email=ADMIN_EMAIL.lower(),
        hashed_password=credentials.hash_password(ADMIN_PASSWORD),
        role=Role.ADMIN.value,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)

    print(f"Created admin '{admin.username}' <{admin.email}>.")
    return admin


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    # Create tables if they don't exist
    create_tables()

    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        genres = create_genres(db)
        books = create_books(db, genres)
        create_admin(db)

        settings = get_settings()
        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Genres: {len(genres)}")
        print(f"  - Books: {len(books)}")
        print("  - Admin users: 1")
        print(f"\nYou can now access the API at http://localhost:{settings.port}{settings.api_prefix}")
        print(f"API documentation at http://localhost:{settings.port}/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
