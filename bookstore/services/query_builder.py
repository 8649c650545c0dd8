"""
Query Builder Service

Turns raw listing query parameters into a filtered, sorted, paginated
SQLAlchemy query, and the result into a pagination envelope.

Supported Parameters:
=====================
- page: 1-indexed page number (default 1)
- size / limit: page size (default 10, clamped to max_page_size)
- sort: a field name ("title" ascending, "-title" descending) or a
  direction token ("asc" / "desc") applied to sort_by
- sort_by: field used together with a direction token
- filters: per-listing equality or case-insensitive substring filters;
  absent or empty values add no constraint

Invalid input (non-numeric, zero or negative page/size, a page whose
offset exceeds MAX_DB_INTEGER, unknown sort field) raises ValidationError
instead of falling back silently.

Usage:
    BOOK_LISTING = ListingOptions(
        sortable={"title": Book.title, "created_at": Book.created_at},
        tiebreaker=Book.id,
        default_sort="title",
        filters={"author": equals(Book.author), "title": icontains(Book.title)},
    )

    request = parse_page_request(BOOK_LISTING, {"page": "2", "sort": "-title"})
    page = paginate(db, select(Book), BOOK_LISTING, request)
    return page.envelope(BookListResponse, items_field="books",
                         count_field="total_books", item_schema=BookSummary)
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Mapping, Optional, Sequence, TypeVar

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.orm import Session

from bookstore.exceptions import ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

FilterFactory = Callable[[str], ColumnElement[bool]]

SORT_DIRECTIONS = ("asc", "desc")
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# Largest integer every supported database accepts as a bound parameter
MAX_DB_INTEGER = 2**31 - 1


# =============================================================================
# Filters
# =============================================================================
def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def equals(column) -> FilterFactory:
    """Exact-match filter on a column."""
    def build(value: str) -> ColumnElement[bool]:
        return column == value
    return build


def icontains(column) -> FilterFactory:
    """Case-insensitive substring filter on a column."""
    def build(value: str) -> ColumnElement[bool]:
        return column.ilike(f"%{escape_like(value)}%", escape="\\")
    return build


# =============================================================================
# Options & Requests
# =============================================================================
@dataclass(frozen=True)
class ListingOptions:
    """
    Per-endpoint listing configuration.

    Attributes:
        sortable: Public field name -> column that may be sorted on
        tiebreaker: Column appended to every ORDER BY for a stable order
        default_sort: sort value used when none is given
        default_sort_by: field used with a bare direction token
        filters: Query parameter name -> filter factory
    """

    sortable: Mapping[str, Any]
    tiebreaker: Any
    default_sort: str = "desc"
    default_sort_by: str = "created_at"
    filters: Mapping[str, FilterFactory] = field(default_factory=dict)


@dataclass(frozen=True)
class PageRequest:
    """Validated listing parameters."""

    page: int = 1
    size: int = DEFAULT_PAGE_SIZE
    sort_field: str = "created_at"
    descending: bool = True
    filters: Mapping[str, str] = field(default_factory=dict)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


def _clean(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def _invalid(param: str, message: str) -> ValidationError:
    return ValidationError(
        message,
        details=[{"loc": ["query", param], "msg": message, "type": "value_error"}],
    )


def _positive_int(param: str, raw: Optional[str], default: int) -> int:
    raw = _clean(raw)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise _invalid(param, f"'{param}' must be a positive integer")
    if value < 1:
        raise _invalid(param, f"'{param}' must be a positive integer")
    return value


def _resolve_sort(
    options: ListingOptions,
    sort: Optional[str],
    sort_by: Optional[str],
) -> tuple[str, bool]:
    """Return (field, descending) for the sort/sort_by pair."""
    sort = sort or options.default_sort

    if sort.lower() in SORT_DIRECTIONS:
        field_name = sort_by or options.default_sort_by
        descending = sort.lower() == "desc"
    elif sort.startswith("-"):
        field_name = sort[1:]
        descending = True
    else:
        field_name = sort
        descending = False

    if field_name not in options.sortable:
        allowed = ", ".join(sorted(options.sortable))
        raise _invalid(
            "sort_by" if sort.lower() in SORT_DIRECTIONS else "sort",
            f"Cannot sort by '{field_name}'. Allowed fields: {allowed}",
        )

    return field_name, descending


def parse_page_request(
    options: ListingOptions,
    params: Mapping[str, Optional[str]],
    *,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int = MAX_PAGE_SIZE,
) -> PageRequest:
    """
    Validate raw query parameters against a listing's options.

    Args:
        options: The listing's configuration
        params: Raw parameter values (strings or None)
        default_page_size: Size used when neither size nor limit is given
        max_page_size: Upper bound applied to the requested size

    Raises:
        ValidationError: Bad page/size value or unknown sort field
    """
    page = _positive_int("page", params.get("page"), 1)

    size_param = "size" if _clean(params.get("size")) is not None else "limit"
    size = _positive_int(size_param, params.get(size_param), default_page_size)
    size = min(size, max_page_size)

    if (page - 1) * size > MAX_DB_INTEGER:
        raise _invalid("page", f"'page' is too large for a page size of {size}")

    sort_field, descending = _resolve_sort(
        options, _clean(params.get("sort")), _clean(params.get("sort_by"))
    )

    filters = {}
    for name in options.filters:
        value = _clean(params.get(name))
        if value is not None:
            filters[name] = value

    return PageRequest(
        page=page,
        size=size,
        sort_field=sort_field,
        descending=descending,
        filters=filters,
    )


# =============================================================================
# Execution
# =============================================================================
@dataclass
class Page(Generic[T]):
    """One page of results plus the counts needed for the envelope."""

    items: list[T]
    page: int
    size: int
    total_count: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.size)

    def envelope(self, response_model, *, items_field: str, count_field: str, item_schema):
        """
        Build a pagination envelope.

        Example:
            page.envelope(ReviewListResponse, items_field="reviews",
                          count_field="total_reviews", item_schema=ReviewResponse)
        """
        return response_model(
            page=self.page,
            size=self.size,
            total=self.total_pages,
            **{
                count_field: self.total_count,
                items_field: [item_schema.model_validate(item) for item in self.items],
            },
        )


def apply_filters(stmt: Select, options: ListingOptions, request: PageRequest) -> Select:
    for name, value in request.filters.items():
        stmt = stmt.where(options.filters[name](value))
    return stmt


def apply_ordering(stmt: Select, options: ListingOptions, request: PageRequest) -> Select:
    column = options.sortable[request.sort_field]
    if request.descending:
        return stmt.order_by(column.desc(), options.tiebreaker.desc())
    return stmt.order_by(column.asc(), options.tiebreaker.asc())


def paginate(
    db: Session,
    stmt: Select,
    options: ListingOptions,
    request: PageRequest,
    load_options: Sequence[Any] = (),
) -> Page:
    """
    Run a listing query.

    The count is taken over the filtered, unpaginated statement; loader
    options are attached only to the page query.
    """
    stmt = apply_filters(stmt, options, request)

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total_count = db.scalar(count_stmt) or 0

    stmt = apply_ordering(stmt, options, request)
    stmt = stmt.offset(request.offset).limit(request.size)
    if load_options:
        stmt = stmt.options(*load_options)

    items = list(db.scalars(stmt).all())

    logger.debug(
        f"Listing page={request.page} size={request.size} "
        f"sort={request.sort_field} desc={request.descending} "
        f"filters={dict(request.filters)} -> {len(items)}/{total_count}"
    )

    return Page(items=items, page=request.page, size=request.size, total_count=total_count)
