"""
Ownership Policy

Reviews, bookmarks and reading-progress records belong to the user in
their user_id column. Only that user may update or delete them; admins
get no exemption here.

Order of checks for every owned-record mutation:
1. Load by id, missing -> NotFound
2. user_id differs from the caller -> Forbidden
3. Apply the mutation and touch updated_at

Routers run steps 1-2 as dependencies, so they complete before the
request body is validated.
"""

import logging
from datetime import UTC, datetime
from typing import Type, TypeVar

from sqlalchemy.orm import Session

from bookstore.exceptions import Forbidden
from bookstore.schemas.user import Identity
from bookstore.services.common import get_or_404

logger = logging.getLogger(__name__)

OwnedT = TypeVar("OwnedT")


def load_owned(
    db: Session,
    model: Type[OwnedT],
    record_id: int,
    identity: Identity,
    label: str,
) -> OwnedT:
    """
    Load a record the caller must own.

    Args:
        db: Database session
        model: Model class with a user_id column
        record_id: Primary key
        identity: Authenticated caller
        label: Human name used in messages ("Review", "Bookmark", ...)

    Raises:
        NotFound: No such record
        Forbidden: The record belongs to another user
    """
    record = get_or_404(db, model, record_id, label)

    if record.user_id != identity.id:
        logger.warning(
            f"User {identity.id} denied access to {label.lower()} {record_id} "
            f"owned by user {record.user_id}"
        )
        raise Forbidden(f"Unauthorized to modify this {label.lower()}")

    return record


def touch(record) -> None:
    """Stamp updated_at on a mutated record."""
    record.updated_at = datetime.now(UTC)
