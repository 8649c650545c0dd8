"""
Shared Pydantic Schemas

Response shapes reused across resources:
- MessageResponse: plain {message} acknowledgement
- PageEnvelope: base of every paginated list response

Paginated responses keep the public wire names clients already use
(totalBooks, readingProgressRecords, ...). Each envelope subclass declares
its count and items fields with a camelCase alias; populate_by_name lets
the server build them with snake_case keyword arguments.
"""

from pydantic import BaseModel, ConfigDict, Field


class MessageResponse(BaseModel):
    """Simple acknowledgement body."""

    message: str = Field(..., examples=["Review deleted successfully"])


class PageEnvelope(BaseModel):
    """
    Common pagination fields.

    Attributes:
        page: Current page (1-indexed)
        size: Page size actually used (after clamping)
        total: Total number of pages
    """

    page: int = Field(..., ge=1, description="Current page number")
    size: int = Field(..., ge=1, description="Items per page")
    total: int = Field(..., ge=0, description="Total number of pages")

    model_config = ConfigDict(populate_by_name=True)


def reject_null(value):
    """
    Validator body for partial-update fields that may be omitted but not
    set to null.
    """
    if value is None:
        raise ValueError("Field may not be null")
    return value
