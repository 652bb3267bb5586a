"""
app/services/book_import_service.py

Service layer for bulk book import.

Both entry points (file upload and JSON array) share one pipeline:

    1. normalize: uploaded rows only; map raw headers onto canonical fields
    2. validate: coerce and split rows into valid / invalid
    3. filter: drop rows whose (title, author) pair already exists
    4. insert: one unordered batched insert of what is left

Nothing is written when no valid or no new rows remain; the caller gets a
``BookImportRejected`` carrying the diagnostic report instead.
"""

from __future__ import annotations

import logging
import shutil
import uuid
from collections.abc import Callable, Sequence
from functools import lru_cache
from pathlib import Path
from typing import Any

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_book_import_settings
from app.domain.book_import import CanonicalBookInput, ImportReport, InsertedBook, InvalidBookRow
from app.domain.errors import AllDuplicateError, AllInvalidError, BookPersistenceError, NoDataError
from app.mappers.column_normalizer import ColumnNormalizer
from app.parsers.book_file_parser import file_extension, parse_book_file
from app.repositories.book_repository import BookRepository
from app.validators.book_validator import BookRowValidator
from db.models.book import Book

logger = logging.getLogger(__name__)


def filter_new_books(
    valid: Sequence[CanonicalBookInput],
    existing_keys: set[str],
) -> list[CanonicalBookInput]:
    """
    Keep rows whose duplicate key is neither in the catalog nor repeated
    earlier in the same submission.
    """

    seen = set(existing_keys)
    new_books: list[CanonicalBookInput] = []
    for book in valid:
        key = book.duplicate_key
        if key in seen:
            continue
        seen.add(key)
        new_books.append(book)
    return new_books


class BookImportService:
    """
    Coordinates parsing, normalization, validation, deduplication and insert.
    """

    def __init__(
        self,
        *,
        batch_size: int,
        max_invalid_rows: int,
        log_invalid_rows: bool,
        upload_dir: Path,
        normalizer: ColumnNormalizer | None = None,
        validator: BookRowValidator | None = None,
        repository_factory: Callable[[Session], BookRepository] = BookRepository,
    ) -> None:
        self._batch_size = max(1, batch_size)
        self._max_invalid_rows = max(1, max_invalid_rows)
        self._log_invalid_rows = log_invalid_rows
        self._upload_dir = upload_dir
        self._normalizer = normalizer or ColumnNormalizer()
        self._validator = validator or BookRowValidator()
        self._repository_factory = repository_factory

    def import_upload(self, *, upload_file: UploadFile, db: Session) -> ImportReport:
        """
        Import books from an uploaded CSV or Excel file.

        The upload is written to ``upload_dir`` for parsing and removed
        again on every exit path.
        """

        extension = file_extension(upload_file.filename)
        stored_path = self._store_upload(upload_file, extension=extension)
        try:
            raw_rows = parse_book_file(stored_path, extension)
        finally:
            stored_path.unlink(missing_ok=True)

        if not raw_rows:
            raise NoDataError()

        records = [self._normalizer.normalize(row) for row in raw_rows]
        return self.import_records(records=records, db=db)

    def import_records(self, *, records: Sequence[Any], db: Session) -> ImportReport:
        """
        Validate, deduplicate and persist already-shaped book records.
        """

        total_submitted = len(records)
        validation = self._validator.validate(records)
        for invalid in validation.invalid:
            self._log_invalid(invalid)

        logger.info(
            "Book import validated total=%d valid=%d invalid=%d",
            total_submitted,
            len(validation.valid),
            len(validation.invalid),
        )

        invalid_count = len(validation.invalid)
        invalid_books = validation.invalid[: self._max_invalid_rows]

        if not validation.valid:
            raise AllInvalidError(
                ImportReport(
                    message="No valid book entries to insert.",
                    total_submitted=total_submitted,
                    invalid_count=invalid_count,
                    invalid_books=invalid_books,
                )
            )

        repository = self._repository_factory(db)
        try:
            existing_keys = repository.find_existing_keys(validation.valid, batch_size=self._batch_size)
        except SQLAlchemyError as exc:
            db.rollback()
            raise BookPersistenceError("Failed to check existing books.") from exc

        new_books = filter_new_books(validation.valid, existing_keys)
        duplicate_count = len(validation.valid) - len(new_books)

        if not new_books:
            raise AllDuplicateError(
                ImportReport(
                    message="All submitted books already exist.",
                    total_submitted=total_submitted,
                    duplicate_count=duplicate_count,
                    invalid_count=invalid_count,
                    invalid_books=invalid_books,
                )
            )

        inserted = self._persist(repository=repository, db=db, books=new_books)
        skipped = len(new_books) - len(inserted)
        logger.info(
            "Book import completed total=%d inserted=%d duplicates=%d invalid=%d skipped=%d",
            total_submitted,
            len(inserted),
            duplicate_count,
            invalid_count,
            skipped,
        )

        return ImportReport(
            message="Bulk insert completed",
            total_submitted=total_submitted,
            inserted_count=len(inserted),
            duplicate_count=duplicate_count,
            invalid_count=invalid_count,
            invalid_books=invalid_books,
            inserted_books=[_summarize(book) for book in inserted],
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _persist(
        self,
        *,
        repository: BookRepository,
        db: Session,
        books: list[CanonicalBookInput],
    ) -> list[Book]:
        try:
            inserted = repository.insert_many_unordered(books, batch_size=self._batch_size)
            db.commit()
            return inserted
        except SQLAlchemyError as exc:
            db.rollback()
            raise BookPersistenceError("Failed to persist imported books.") from exc

    def _store_upload(self, upload_file: UploadFile, *, extension: str) -> Path:
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        suffix = f".{extension}" if extension else ""
        stored_path = self._upload_dir / f"{uuid.uuid4().hex}{suffix}"
        try:
            upload_file.file.seek(0)
            with stored_path.open("wb") as handle:
                shutil.copyfileobj(upload_file.file, handle)
        except BaseException:
            stored_path.unlink(missing_ok=True)
            raise
        return stored_path

    def _log_invalid(self, invalid: InvalidBookRow) -> None:
        if not self._log_invalid_rows:
            return
        logger.warning(
            "Book import invalid row=%s title=%r author=%r errors=%s",
            invalid.row,
            invalid.title,
            invalid.author,
            "; ".join(invalid.errors),
        )


def _summarize(book: Book) -> InsertedBook:
    return InsertedBook(
        id=book.id,
        title=book.title,
        author=book.author,
        genre=book.genre,
        status=book.status,
        location=book.location,
        publisher=book.publisher,
        height=book.height,
        published_count=book.published_count,
    )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_book_import_service() -> BookImportService:
    """
    Build and cache the import service with env-driven settings.
    """

    settings = get_book_import_settings()
    return BookImportService(
        batch_size=settings.batch_size,
        max_invalid_rows=settings.max_invalid_rows,
        log_invalid_rows=settings.log_invalid_rows,
        upload_dir=settings.upload_dir,
    )
