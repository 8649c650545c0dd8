"""
Genre Service

Genres are public to read and admin-managed. Names are unique.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookstore.exceptions import Conflict
from bookstore.models import Genre
from bookstore.schemas.genre import GenreCreate, GenreUpdate
from bookstore.services.common import commit_or_conflict, get_or_404

logger = logging.getLogger(__name__)


def _name_taken(db: Session, name: str, exclude_id: Optional[int] = None) -> bool:
    stmt = select(Genre.id).where(Genre.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Genre.id != exclude_id)
    return db.scalar(stmt) is not None


def list_genres(db: Session) -> list[Genre]:
    return list(db.scalars(select(Genre).order_by(Genre.name)).all())


def get_genre(db: Session, genre_id: int) -> Genre:
    return get_or_404(db, Genre, genre_id, "Genre")


def create_genre(db: Session, genre_data: GenreCreate) -> Genre:
    """
    Create a new genre.

    Raises:
        Conflict: A genre with the same name exists
    """
    message = f"Genre with name '{genre_data.name}' already exists"
    if _name_taken(db, genre_data.name):
        raise Conflict(message)

    genre = Genre(name=genre_data.name, description=genre_data.description)
    db.add(genre)
    commit_or_conflict(db, message)
    db.refresh(genre)

    logger.info(f"Genre created: {genre.id} '{genre.name}'")
    return genre


def update_genre(db: Session, genre: Genre, genre_data: GenreUpdate) -> Genre:
    update_data = genre_data.model_dump(exclude_unset=True)

    message = f"Genre with name '{update_data.get('name')}' already exists"
    if "name" in update_data and _name_taken(db, update_data["name"], exclude_id=genre.id):
        raise Conflict(message)

    for field, value in update_data.items():
        setattr(genre, field, value)

    commit_or_conflict(db, message)
    db.refresh(genre)

    logger.info(f"Genre updated: {genre.id}")
    return genre


def delete_genre(db: Session, genre: Genre) -> None:
    """Delete a genre; books keep existing and simply lose the link."""
    genre_id = genre.id
    db.delete(genre)
    db.commit()
    logger.info(f"Genre deleted: {genre_id}")
