"""
app/repositories/book_repository.py

Persistence layer for catalog books.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from typing import Any

from sqlalchemy import String, and_, column, delete, func, select, values
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session

from app.domain.book_import import CanonicalBookInput, duplicate_key
from db.models.book import Book, BookFormat

logger = logging.getLogger(__name__)

_DEFAULT_BATCH_SIZE = 1000


class BookRepository:
    """
    Repository for catalog lookups and batched book inserts.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_books(self) -> list[Book]:
        stmt = select(Book).order_by(Book.created_at, Book.title)
        return list(self._session.execute(stmt).scalars().all())

    def get(self, book_id: uuid.UUID) -> Book | None:
        return self._session.get(Book, book_id)

    def add(self, book: Book) -> Book:
        self._session.add(book)
        self._session.flush()
        return book

    def delete(self, book: Book) -> None:
        self._session.delete(book)
        self._session.flush()

    def delete_many(self, book_ids: Sequence[uuid.UUID]) -> int:
        if not book_ids:
            return 0
        result = self._session.execute(delete(Book).where(Book.id.in_(list(book_ids))))
        return result.rowcount or 0

    def find_existing_keys(
        self,
        books: Sequence[CanonicalBookInput],
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> set[str]:
        """
        Return duplicate keys of catalog books matching any submitted pair.

        Submitted pairs travel as a VALUES list and both sides are lowered
        by PostgreSQL, so matching follows the database's ``lower()`` like
        the unique index does. Keys are built from the submitted text, never
        from the stored text, so they line up with ``duplicate_key`` of the
        submitted books.
        """

        pairs = list(dict.fromkeys((book.title, book.author) for book in books))
        size = max(1, batch_size)
        existing: set[str] = set()

        for start in range(0, len(pairs), size):
            submitted = values(
                column("title", String),
                column("author", String),
                name="submitted",
            ).data(pairs[start : start + size])
            stmt = (
                select(submitted.c.title, submitted.c.author)
                .select_from(submitted)
                .join(
                    Book,
                    and_(
                        func.lower(Book.title) == func.lower(submitted.c.title),
                        func.lower(Book.author) == func.lower(submitted.c.author),
                    ),
                )
                .distinct()
            )
            for title, author in self._session.execute(stmt).all():
                existing.add(duplicate_key(title, author))

        return existing

    def insert_many_unordered(
        self,
        books: Sequence[CanonicalBookInput],
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> list[Book]:
        """
        Insert books so that one bad row never blocks the others.

        Rows that collide with the title/author unique index are skipped by
        ``ON CONFLICT DO NOTHING``. A chunk that fails for any other data
        reason is retried row by row, each inside its own savepoint.
        Returns the rows that were written, in submission order.
        """

        if not books:
            return []

        payloads = [self._payload(book) for book in books]
        size = max(1, batch_size)
        inserted: list[Book] = []

        for start in range(0, len(payloads), size):
            inserted.extend(self._insert_chunk(payloads[start : start + size]))

        return inserted

    def _insert_chunk(self, chunk: Sequence[dict[str, Any]]) -> list[Book]:
        try:
            with self._session.begin_nested():
                return list(self._session.scalars(self._insert_statement(chunk)).all())
        except (IntegrityError, DataError) as exc:
            logger.warning(
                "Batched book insert failed; retrying row by row rows=%d error=%s",
                len(chunk),
                exc.orig if exc.orig is not None else exc,
            )

        inserted: list[Book] = []
        for payload in chunk:
            try:
                with self._session.begin_nested():
                    inserted.extend(self._session.scalars(self._insert_statement([payload])).all())
            except (IntegrityError, DataError) as exc:
                logger.warning(
                    "Skipped book insert title=%r author=%r error=%s",
                    payload["title"],
                    payload["author"],
                    exc.orig if exc.orig is not None else exc,
                )
        return inserted

    @staticmethod
    def _insert_statement(chunk: Sequence[dict[str, Any]]) -> Any:
        return (
            insert(Book)
            .values(list(chunk))
            .on_conflict_do_nothing()
            .returning(Book)
        )

    @staticmethod
    def _payload(book: CanonicalBookInput) -> dict[str, Any]:
        return {
            "id": uuid.uuid4(),
            "title": book.title,
            "author": book.author,
            "genre": book.genre,
            "published_count": book.published_count,
            "status": book.status,
            "height": book.height,
            "publisher": book.publisher,
            "location": book.location,
            "borrower": "",
            "format": BookFormat.EBOOK,
        }
