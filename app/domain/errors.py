"""
Import pipeline exceptions.
"""

from __future__ import annotations

from app.domain.book_import import ImportReport


class BookImportError(Exception):
    """Base exception for bulk book import failures."""


class UnsupportedFileTypeError(BookImportError):
    """Raised when an uploaded file has an extension no reader handles."""

    def __init__(self, extension: str) -> None:
        super().__init__("Unsupported file type")
        self.extension = extension


class NoDataError(BookImportError):
    """Raised when a parsed upload yields no rows."""

    def __init__(self) -> None:
        super().__init__("No data found in file")


class BookImportRejected(BookImportError):
    """Raised when nothing is left to insert; carries the diagnostic report."""

    def __init__(self, report: ImportReport) -> None:
        super().__init__(report.message)
        self.report = report


class AllInvalidError(BookImportRejected):
    """Every submitted row failed validation."""


class AllDuplicateError(BookImportRejected):
    """Every valid row already exists in the catalog."""


class BookPersistenceError(RuntimeError):
    """Raised when the duplicate check or the batched insert fails."""


class FileParseError(BookImportError):
    """Raised when a supported file cannot be read."""
