"""
app/mappers/column_normalizer.py

Header alias matching for uploaded book rows.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

CANONICAL_BOOK_FIELDS: tuple[str, ...] = (
    "title",
    "author",
    "genre",
    "publishedCount",
    "status",
    "height",
    "publisher",
    "location",
)

DEFAULT_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "title": ("title", "Title"),
    "author": ("author", "Author"),
    "genre": ("genre", "Genre"),
    "publishedCount": ("publishedcount", "published_count", "Publication_Count", "publishedCount"),
    "status": ("status", "Status"),
    "height": ("height", "Height"),
    "publisher": ("publisher", "Publisher"),
    "location": ("location", "Location", "Library_Location"),
}


def normalize_header(header: str) -> str:
    """
    Drop every non-alphanumeric ASCII character and lowercase the rest.
    """

    return "".join(ch for ch in header if ch.isascii() and ch.isalnum()).lower()


class ColumnNormalizer:
    """
    Maps raw rows with arbitrary headers onto canonical book fields.
    """

    def __init__(self, *, aliases: Mapping[str, Sequence[str]] | None = None) -> None:
        self._aliases: dict[str, tuple[str, ...]] = {
            canonical: tuple(normalize_header(alias) for alias in values)
            for canonical, values in (aliases or DEFAULT_COLUMN_ALIASES).items()
        }

    def normalize(self, row: Mapping[Any, Any]) -> dict[str, Any]:
        """
        Return the canonical view of one raw row.

        Canonical fields without a matching column are left out, and
        unrecognized columns are dropped. When several columns match one
        field the last match wins: aliases are scanned in order and, for
        each alias, every column in row order.
        """

        headers = [key for key in row.keys() if isinstance(key, str)]
        mapped: dict[str, Any] = {}
        for canonical_field, aliases in self._aliases.items():
            found: str | None = None
            for alias in aliases:
                for header in headers:
                    if normalize_header(header) == alias:
                        found = header
            if found is not None:
                mapped[canonical_field] = row[found]
        return mapped
