"""
Shared persistence helpers for the resource services.
"""

import logging
from typing import Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookstore.exceptions import Conflict, NotFound

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def get_or_404(db: Session, model: Type[ModelT], record_id: int, label: str) -> ModelT:
    """
    Load a row by primary key.

    Raises:
        NotFound: "<label> not found"
    """
    record = db.get(model, record_id)
    if record is None:
        raise NotFound(f"{label} not found")
    return record


def commit_or_conflict(db: Session, message: str) -> None:
    """
    Commit the session, turning a unique-constraint violation into Conflict.

    The application-level duplicate checks are read-then-write and can
    race; the database constraint decides.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info(f"Integrity error on commit, reported as conflict: {e.orig}")
        raise Conflict(message)
