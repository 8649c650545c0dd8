"""
Tests for the Query Builder

Parameter validation and clamping, sort resolution, filters, and the
page/count arithmetic of paginate().
"""

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from bookstore.exceptions import ValidationError
from bookstore.models import Book
from bookstore.services.books import BOOK_LISTING
from bookstore.services.query_builder import (
    Page,
    escape_like,
    paginate,
    parse_page_request,
)
from bookstore.services.reviews import REVIEW_LISTING


class TestParsePageRequest:
    def test_defaults(self):
        request = parse_page_request(BOOK_LISTING, {})

        assert request.page == 1
        assert request.size == 10
        assert request.sort_field == "title"
        assert request.descending is False
        assert request.filters == {}

    def test_size_clamped_to_maximum(self):
        request = parse_page_request(BOOK_LISTING, {"size": "500"})

        assert request.size == 100

    def test_limit_is_alias_of_size(self):
        request = parse_page_request(BOOK_LISTING, {"limit": "25"})

        assert request.size == 25

    def test_size_wins_over_limit(self):
        request = parse_page_request(BOOK_LISTING, {"size": "5", "limit": "25"})

        assert request.size == 5

    @pytest.mark.parametrize("raw", ["0", "-1", "abc", "1.5"])
    def test_bad_page_rejected(self, raw: str):
        with pytest.raises(ValidationError) as exc_info:
            parse_page_request(BOOK_LISTING, {"page": raw})

        assert exc_info.value.status_code == 400
        assert exc_info.value.details[0]["loc"] == ["query", "page"]

    def test_page_beyond_offset_range_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_page_request(BOOK_LISTING, {"page": "99999999999999999999"})

        assert exc_info.value.details[0]["loc"] == ["query", "page"]

    def test_last_page_within_offset_range_accepted(self):
        request = parse_page_request(BOOK_LISTING, {"page": str(2**31 // 10), "size": "10"})

        assert request.offset <= 2**31 - 1

    def test_bad_limit_reports_limit(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_page_request(BOOK_LISTING, {"limit": "zero"})

        assert exc_info.value.details[0]["loc"] == ["query", "limit"]

    def test_blank_values_fall_back_to_defaults(self):
        request = parse_page_request(BOOK_LISTING, {"page": " ", "size": "", "sort": ""})

        assert request.page == 1
        assert request.size == 10
        assert request.sort_field == "title"

    def test_descending_prefix(self):
        request = parse_page_request(BOOK_LISTING, {"sort": "-publish_date"})

        assert request.sort_field == "publish_date"
        assert request.descending is True

    def test_direction_token_uses_sort_by(self):
        request = parse_page_request(REVIEW_LISTING, {"sort": "asc", "sort_by": "rating"})

        assert request.sort_field == "rating"
        assert request.descending is False

    def test_direction_token_default_field(self):
        request = parse_page_request(REVIEW_LISTING, {})

        assert request.sort_field == "created_at"
        assert request.descending is True

    def test_unknown_sort_field_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_page_request(BOOK_LISTING, {"sort": "hashed_password"})

        assert "Cannot sort by 'hashed_password'" in exc_info.value.message

    def test_unknown_sort_by_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_page_request(REVIEW_LISTING, {"sort": "desc", "sort_by": "user_id"})

        assert exc_info.value.details[0]["loc"] == ["query", "sort_by"]

    def test_only_declared_filters_kept(self):
        request = parse_page_request(
            BOOK_LISTING, {"author": "George Orwell", "title": "  ", "isbn": "123"}
        )

        assert request.filters == {"author": "George Orwell"}


class TestPageArithmetic:
    def test_total_pages_rounds_up(self):
        assert Page(items=[], page=1, size=10, total_count=15).total_pages == 2

    def test_total_pages_exact(self):
        assert Page(items=[], page=1, size=5, total_count=15).total_pages == 3

    def test_total_pages_empty(self):
        assert Page(items=[], page=1, size=10, total_count=0).total_pages == 0


class TestEscapeLike:
    def test_wildcards_escaped(self):
        assert escape_like("100%_done") == "100\\%\\_done"


class TestPaginate:
    def test_pages_cover_all_rows(self, db_session: Session, multiple_books: list[Book]):
        seen = []
        for page_number in (1, 2):
            request = parse_page_request(BOOK_LISTING, {"page": str(page_number), "size": "10"})
            page = paginate(db_session, select(Book), BOOK_LISTING, request)

            assert len(page.items) <= page.size
            assert page.total_count == 15
            seen.extend(book.id for book in page.items)

        assert page.page * page.size >= page.total_count
        assert sorted(seen) == sorted(book.id for book in multiple_books)

    def test_page_past_the_end_is_empty(self, db_session: Session, multiple_books: list[Book]):
        request = parse_page_request(BOOK_LISTING, {"page": "5"})

        page = paginate(db_session, select(Book), BOOK_LISTING, request)

        assert page.items == []
        assert page.total_count == 15

    def test_filters_apply_to_count(self, db_session: Session, multiple_books: list[Book]):
        request = parse_page_request(BOOK_LISTING, {"author": "Aldous Huxley", "size": "3"})

        page = paginate(db_session, select(Book), BOOK_LISTING, request)

        assert page.total_count == 7
        assert len(page.items) == 3
        assert all(book.author == "Aldous Huxley" for book in page.items)

    def test_substring_filter_treats_wildcards_literally(
        self, db_session: Session, multiple_books: list[Book]
    ):
        request = parse_page_request(BOOK_LISTING, {"title": "%"})

        page = paginate(db_session, select(Book), BOOK_LISTING, request)

        assert page.total_count == 0

    def test_sorting_descending(self, db_session: Session, multiple_books: list[Book]):
        request = parse_page_request(BOOK_LISTING, {"sort": "-title", "size": "3"})

        page = paginate(db_session, select(Book), BOOK_LISTING, request)

        assert [book.title for book in page.items] == [
            "Test Book 15",
            "Test Book 14",
            "Test Book 13",
        ]
