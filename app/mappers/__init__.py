"""
app/mappers package marker.
"""

from app.mappers.column_normalizer import (
    CANONICAL_BOOK_FIELDS,
    DEFAULT_COLUMN_ALIASES,
    ColumnNormalizer,
    normalize_header,
)

__all__ = [
    "CANONICAL_BOOK_FIELDS",
    "DEFAULT_COLUMN_ALIASES",
    "ColumnNormalizer",
    "normalize_header",
]
