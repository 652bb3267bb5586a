"""
tests/conftest.py

In-memory stand-ins for the database session and book repository so the
import pipeline and routers can be exercised without PostgreSQL.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from pathlib import Path

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.domain.book_import import CanonicalBookInput, duplicate_key
from app.services.book_import_service import BookImportService
from db.models.book import Book, BookFormat


class FakeSession:
    """Records commit / rollback / close calls."""

    def __init__(self, *, fail_commit: bool = False) -> None:
        self.fail_commit = fail_commit
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def commit(self) -> None:
        if self.fail_commit:
            raise SQLAlchemyError("commit failed")
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1

    def close(self) -> None:
        self.closed = True


class FakeBookRepository:
    """
    Dict-backed catalog keyed like the case-insensitive unique index.
    """

    def __init__(self, existing: Sequence[tuple[str, str]] = ()) -> None:
        self.books: dict[str, Book] = {}
        self.insert_calls = 0
        self.lookup_calls = 0
        self.fail_lookup = False
        self.fail_insert = False
        for title, author in existing:
            self.books[duplicate_key(title, author)] = _book(title, author)

    def find_existing_keys(self, books: Sequence[CanonicalBookInput], *, batch_size: int) -> set[str]:
        self.lookup_calls += 1
        if self.fail_lookup:
            raise SQLAlchemyError("lookup failed")
        return {book.duplicate_key for book in books if book.duplicate_key in self.books}

    def insert_many_unordered(self, books: Sequence[CanonicalBookInput], *, batch_size: int) -> list[Book]:
        self.insert_calls += 1
        if self.fail_insert:
            raise SQLAlchemyError("insert failed")
        inserted: list[Book] = []
        for book in books:
            if book.duplicate_key in self.books:
                continue
            row = Book(
                id=uuid.uuid4(),
                title=book.title,
                author=book.author,
                genre=book.genre,
                published_count=book.published_count,
                status=book.status,
                height=book.height,
                publisher=book.publisher,
                location=book.location,
                borrower="",
                format=BookFormat.EBOOK,
            )
            self.books[book.duplicate_key] = row
            inserted.append(row)
        return inserted


def _book(title: str, author: str) -> Book:
    return Book(
        id=uuid.uuid4(),
        title=title,
        author=author,
        genre="",
        published_count=0,
        status="Available",
        height="",
        publisher="",
        location="",
        borrower="",
        format=BookFormat.EBOOK,
    )


@pytest.fixture()
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def fake_repository() -> FakeBookRepository:
    return FakeBookRepository(existing=[("Dune", "Frank Herbert")])


@pytest.fixture()
def upload_dir(tmp_path: Path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture()
def import_service(fake_repository: FakeBookRepository, upload_dir: Path) -> BookImportService:
    return BookImportService(
        batch_size=2,
        max_invalid_rows=50,
        log_invalid_rows=True,
        upload_dir=upload_dir,
        repository_factory=lambda db: fake_repository,
    )
