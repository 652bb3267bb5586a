"""
app/validators/book_validator.py

Row-level coercion and validation for bulk book import.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from app.domain.book_import import (
    HEADER_ROW_OFFSET,
    CanonicalBookInput,
    InvalidBookRow,
    ValidationResult,
)
from db.models.book import BOOK_STATUSES, MAX_PUBLISHED_COUNT, BookStatus

_NOT_WHOLE = "publishedCount must be a whole number."
_NEGATIVE = "publishedCount must not be negative."
_TOO_LARGE = "publishedCount is too large."
_MAX_COUNT_DIGITS = len(str(MAX_PUBLISHED_COUNT))


class BookRowValidator:
    """
    Splits canonical rows into valid books and diagnosable rejects.
    """

    def validate(self, rows: Sequence[Any]) -> ValidationResult:
        """
        Validate rows in submission order.

        Row numbers are ``index + HEADER_ROW_OFFSET`` so they line up with
        the spreadsheet line a user sees.
        """

        result = ValidationResult()
        for index, row in enumerate(rows):
            parsed, invalid = self.validate_row(
                row if isinstance(row, Mapping) else {},
                row_number=index + HEADER_ROW_OFFSET,
            )
            if invalid is not None:
                result.invalid.append(invalid)
            elif parsed is not None:
                result.valid.append(parsed)
        return result

    def validate_row(
        self,
        row: Mapping[str, Any],
        *,
        row_number: int,
    ) -> tuple[CanonicalBookInput | None, InvalidBookRow | None]:
        title = self._parse_string(row.get("title"))
        author = self._parse_string(row.get("author"))
        genre = self._parse_string(row.get("genre"))
        published_count, count_error = self._parse_count(row.get("publishedCount"))
        status = self._parse_status(row.get("status"))
        height = self._parse_height(row.get("height"))
        publisher = self._parse_string(row.get("publisher"))
        location = self._parse_string(row.get("location"))

        errors: list[str] = []
        if not title:
            errors.append("title is required.")
        if not author:
            errors.append("author is required.")
        if count_error is not None:
            errors.append(count_error)
        if status not in BOOK_STATUSES:
            allowed = ", ".join(BOOK_STATUSES)
            errors.append(f"Unsupported status. Allowed values: {allowed}.")

        if errors:
            return None, InvalidBookRow(
                row=row_number,
                title=title,
                author=author,
                genre=genre,
                published_count=published_count,
                status=status,
                height=height,
                publisher=publisher,
                location=location,
                errors=tuple(errors),
            )

        return (
            CanonicalBookInput(
                title=title,
                author=author,
                genre=genre,
                published_count=published_count,
                status=status,
                height=height,
                publisher=publisher,
                location=location,
            ),
            None,
        )

    @staticmethod
    def _parse_string(value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    def _parse_status(self, value: Any) -> str:
        status = self._parse_string(value)
        return status or BookStatus.AVAILABLE

    @staticmethod
    def _parse_height(value: Any) -> str:
        if not value:
            return ""
        return str(value)

    @staticmethod
    def _parse_count(value: Any) -> tuple[int | None, str | None]:
        """
        Coerce publishedCount into ``(value, error)``.

        Absent or blank values count as 0. Fractional, non-finite and
        boolean values are rejected. Magnitudes beyond the column range are
        rejected before any integer is built from the text, so an exponent
        like ``1e5000000`` costs nothing.
        """

        if value is None:
            return 0, None
        if isinstance(value, bool):
            return None, _NOT_WHOLE
        if isinstance(value, int):
            return value, _range_error(value)

        raw = str(value).strip()
        if raw == "":
            return 0, None
        try:
            parsed = Decimal(raw)
        except (InvalidOperation, ValueError):
            return None, _NOT_WHOLE
        if not parsed.is_finite():
            return None, _NOT_WHOLE
        if parsed.adjusted() >= _MAX_COUNT_DIGITS:
            return None, _NEGATIVE if parsed < 0 else _TOO_LARGE
        if parsed != parsed.to_integral_value():
            return None, _NOT_WHOLE
        count = int(parsed)
        return count, _range_error(count)


def _range_error(count: int) -> str | None:
    if count < 0:
        return _NEGATIVE
    if count > MAX_PUBLISHED_COUNT:
        return _TOO_LARGE
    return None
