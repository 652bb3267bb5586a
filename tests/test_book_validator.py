"""
tests/test_book_validator.py

Coercion and validation rules applied to canonical book rows.
"""

from __future__ import annotations

import time

import pytest

from app.validators.book_validator import BookRowValidator
from db.models.book import MAX_PUBLISHED_COUNT


@pytest.fixture()
def validator() -> BookRowValidator:
    return BookRowValidator()


def _row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {"title": "Dune", "author": "Frank Herbert"}
    row.update(overrides)
    return row


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------


class TestCoercion:
    def test_minimal_row_gets_defaults(self, validator: BookRowValidator) -> None:
        result = validator.validate([_row()])

        assert result.invalid == []
        book = result.valid[0]
        assert book.published_count == 0
        assert book.status == "Available"
        assert book.genre == ""
        assert book.height == ""
        assert book.publisher == ""
        assert book.location == ""

    def test_strings_are_trimmed(self, validator: BookRowValidator) -> None:
        book = validator.validate([_row(title="  Dune ", author=" Frank Herbert", genre=" SF ")]).valid[0]

        assert (book.title, book.author, book.genre) == ("Dune", "Frank Herbert", "SF")

    @pytest.mark.parametrize(
        "raw, expected",
        [("3", 3), (7, 7), ("2.0", 2), (4.0, 4), ("", 0), ("  ", 0), (None, 0)],
    )
    def test_published_count_accepts_whole_numbers(
        self, validator: BookRowValidator, raw: object, expected: int
    ) -> None:
        result = validator.validate([_row(publishedCount=raw)])

        assert result.valid[0].published_count == expected

    def test_non_string_values_are_stringified(self, validator: BookRowValidator) -> None:
        book = validator.validate([_row(title=1984, author="Orwell", height=24.5)]).valid[0]

        assert book.title == "1984"
        assert book.height == "24.5"

    @pytest.mark.parametrize("raw", [None, "", 0, False])
    def test_falsy_height_becomes_empty(self, validator: BookRowValidator, raw: object) -> None:
        assert validator.validate([_row(height=raw)]).valid[0].height == ""

    def test_blank_status_defaults_to_available(self, validator: BookRowValidator) -> None:
        assert validator.validate([_row(status="   ")]).valid[0].status == "Available"


# ---------------------------------------------------------------------------
# Rejection
# ---------------------------------------------------------------------------


class TestRejection:
    def test_missing_title_and_author_are_both_reported(self, validator: BookRowValidator) -> None:
        result = validator.validate([{"title": "  ", "genre": "Poetry"}])

        assert result.valid == []
        invalid = result.invalid[0]
        assert invalid.errors == ("title is required.", "author is required.")
        assert invalid.genre == "Poetry"

    @pytest.mark.parametrize("raw", ["abc", "2.5", 1.5, True, "NaN", "inf"])
    def test_published_count_rejects_non_whole_numbers(
        self, validator: BookRowValidator, raw: object
    ) -> None:
        invalid = validator.validate([_row(publishedCount=raw)]).invalid[0]

        assert invalid.published_count is None
        assert "publishedCount must be a whole number." in invalid.errors

    def test_negative_published_count_is_rejected(self, validator: BookRowValidator) -> None:
        invalid = validator.validate([_row(publishedCount="-1")]).invalid[0]

        assert invalid.published_count == -1
        assert invalid.errors == ("publishedCount must not be negative.",)

    @pytest.mark.parametrize("raw", [MAX_PUBLISHED_COUNT + 1, "3000000000", "2147483648.0", 10**40])
    def test_published_count_above_column_range_is_rejected(
        self, validator: BookRowValidator, raw: object
    ) -> None:
        invalid = validator.validate([_row(publishedCount=raw)]).invalid[0]

        assert invalid.errors == ("publishedCount is too large.",)

    def test_published_count_at_column_limit_is_accepted(self, validator: BookRowValidator) -> None:
        book = validator.validate([_row(publishedCount=str(MAX_PUBLISHED_COUNT))]).valid[0]

        assert book.published_count == MAX_PUBLISHED_COUNT

    @pytest.mark.parametrize(
        "raw, error",
        [
            ("1e5000000", "publishedCount is too large."),
            ("9" * 100_000, "publishedCount is too large."),
            ("-1e5000000", "publishedCount must not be negative."),
            ("1.5e-5000000", "publishedCount must be a whole number."),
        ],
    )
    def test_huge_exponents_are_rejected_without_expanding(
        self, validator: BookRowValidator, raw: str, error: str
    ) -> None:
        started = time.perf_counter()
        invalid = validator.validate([_row(publishedCount=raw)]).invalid[0]
        elapsed = time.perf_counter() - started

        assert invalid.published_count is None
        assert invalid.errors == (error,)
        assert elapsed < 1.0

    @pytest.mark.parametrize("raw", ["Lost", "available", "BORROWED"])
    def test_status_must_match_exactly(self, validator: BookRowValidator, raw: str) -> None:
        invalid = validator.validate([_row(status=raw)]).invalid[0]

        assert invalid.status == raw
        assert invalid.errors == ("Unsupported status. Allowed values: Available, Borrowed.",)

    def test_non_mapping_row_is_invalid(self, validator: BookRowValidator) -> None:
        result = validator.validate(["not a book"])

        assert result.valid == []
        assert result.invalid[0].errors == ("title is required.", "author is required.")


# ---------------------------------------------------------------------------
# Ordering and row numbers
# ---------------------------------------------------------------------------


def test_row_numbers_account_for_header_line(validator: BookRowValidator) -> None:
    rows = [_row(), {"author": "Nobody"}, _row(title="Emma"), {"title": "Orphan"}]

    result = validator.validate(rows)

    assert [book.title for book in result.valid] == ["Dune", "Emma"]
    assert [invalid.row for invalid in result.invalid] == [3, 5]


def test_empty_input_yields_empty_result(validator: BookRowValidator) -> None:
    result = validator.validate([])

    assert result.valid == []
    assert result.invalid == []
