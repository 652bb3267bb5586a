"""
app/domain package marker.
"""

from app.domain.book_import import (
    HEADER_ROW_OFFSET,
    CanonicalBookInput,
    ImportReport,
    InsertedBook,
    InvalidBookRow,
    ValidationResult,
    duplicate_key,
)
from app.domain.errors import (
    AllDuplicateError,
    AllInvalidError,
    BookImportError,
    BookImportRejected,
    BookPersistenceError,
    FileParseError,
    NoDataError,
    UnsupportedFileTypeError,
)

__all__ = [
    "HEADER_ROW_OFFSET",
    "AllDuplicateError",
    "AllInvalidError",
    "BookImportError",
    "BookImportRejected",
    "BookPersistenceError",
    "CanonicalBookInput",
    "FileParseError",
    "ImportReport",
    "InsertedBook",
    "InvalidBookRow",
    "NoDataError",
    "UnsupportedFileTypeError",
    "ValidationResult",
    "duplicate_key",
]
