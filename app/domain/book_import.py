"""
app/domain/book_import.py

Domain models used by the bulk book import flow.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

# Row numbers reported to users are 1-based and skip the header line.
HEADER_ROW_OFFSET = 2


@dataclass(frozen=True)
class CanonicalBookInput:
    """
    Typed, validated book prepared for persistence.
    """

    title: str
    author: str
    genre: str
    published_count: int
    status: str
    height: str
    publisher: str
    location: str

    @property
    def duplicate_key(self) -> str:
        return duplicate_key(self.title, self.author)


@dataclass(frozen=True)
class InvalidBookRow:
    """
    One rejected row with its partially coerced values.
    """

    row: int
    title: str
    author: str
    genre: str
    published_count: int | None
    status: str
    height: str
    publisher: str
    location: str
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class ValidationResult:
    """
    Order-preserving split of submitted rows.
    """

    valid: list[CanonicalBookInput] = field(default_factory=list)
    invalid: list[InvalidBookRow] = field(default_factory=list)


@dataclass(frozen=True)
class InsertedBook:
    """
    Summary of one persisted catalog book.
    """

    id: uuid.UUID
    title: str
    author: str
    genre: str
    status: str
    location: str
    publisher: str
    height: str
    published_count: int


@dataclass(frozen=True)
class ImportReport:
    """
    End-of-run import report.
    """

    message: str
    total_submitted: int
    inserted_count: int = 0
    duplicate_count: int = 0
    invalid_count: int = 0
    invalid_books: list[InvalidBookRow] = field(default_factory=list)
    inserted_books: list[InsertedBook] = field(default_factory=list)


def duplicate_key(title: str, author: str) -> str:
    """
    Case-insensitive identity of a catalog book.
    """

    return f"{title.lower()}-{author.lower()}"
