"""
tests/test_book_import_service.py

Pipeline tests for BookImportService against an in-memory repository.

Coverage
--------
- Mixed batch: invalid, duplicate and new rows in one submission
- Repeated submission inside one batch
- Idempotent re-import
- All-invalid and all-duplicate rejections
- Storage failures during lookup and insert
- File uploads: header normalization, unsupported type, empty file, cleanup
  (including an upload stream that fails mid-copy)
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from fastapi import UploadFile

from app.domain.errors import (
    AllDuplicateError,
    AllInvalidError,
    BookPersistenceError,
    NoDataError,
    UnsupportedFileTypeError,
)
from app.services.book_import_service import BookImportService, filter_new_books
from app.validators.book_validator import BookRowValidator


def _upload(filename: str, content: bytes) -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=filename)


# ---------------------------------------------------------------------------
# filter_new_books
# ---------------------------------------------------------------------------


def test_filter_new_books_drops_catalog_and_in_batch_repeats() -> None:
    valid = BookRowValidator().validate(
        [
            {"title": "Dune", "author": "Frank Herbert"},
            {"title": "Emma", "author": "Jane Austen"},
            {"title": "EMMA", "author": "jane austen"},
        ]
    ).valid

    kept = filter_new_books(valid, {"dune-frank herbert"})

    assert [book.title for book in kept] == ["Emma"]


# ---------------------------------------------------------------------------
# import_records
# ---------------------------------------------------------------------------


class TestImportRecords:
    def test_mixed_batch_reports_every_category(self, import_service, fake_repository, fake_session) -> None:
        records = [
            {"title": "Emma", "author": "Jane Austen", "publishedCount": "2"},
            {"title": "", "author": "Anonymous"},
            {"title": "dune", "author": "FRANK HERBERT"},
            {"title": "Ulysses", "author": "James Joyce", "publishedCount": -4},
            {"title": "Beloved", "author": "Toni Morrison", "status": "Borrowed"},
        ]

        report = import_service.import_records(records=records, db=fake_session)

        assert report.message == "Bulk insert completed"
        assert report.total_submitted == 5
        assert report.inserted_count == 2
        assert report.duplicate_count == 1
        assert report.invalid_count == 2
        assert [invalid.row for invalid in report.invalid_books] == [3, 5]
        assert [book.title for book in report.inserted_books] == ["Emma", "Beloved"]
        assert report.inserted_books[1].status == "Borrowed"
        assert fake_session.commits == 1

    def test_counts_add_up_to_total_submitted(self, import_service, fake_session) -> None:
        records = [{"title": f"Book {i}", "author": "A"} for i in range(5)] + [{"author": "B"}]

        report = import_service.import_records(records=records, db=fake_session)

        assert report.inserted_count + report.duplicate_count + report.invalid_count == report.total_submitted

    def test_repeats_inside_one_submission_are_inserted_once(self, import_service, fake_session) -> None:
        records = [
            {"title": "Emma", "author": "Jane Austen"},
            {"title": "emma", "author": "jane austen"},
        ]

        report = import_service.import_records(records=records, db=fake_session)

        assert report.inserted_count == 1
        assert report.duplicate_count == 1

    def test_reimport_is_rejected_as_all_duplicate(self, import_service, fake_repository, fake_session) -> None:
        records = [
            {"title": "Emma", "author": "Jane Austen"},
            {"title": "Beloved", "author": "Toni Morrison"},
        ]
        import_service.import_records(records=records, db=fake_session)
        stored_before = len(fake_repository.books)

        with pytest.raises(AllDuplicateError) as exc_info:
            import_service.import_records(records=records, db=fake_session)

        report = exc_info.value.report
        assert report.message == "All submitted books already exist."
        assert report.duplicate_count == 2
        assert report.inserted_count == 0
        assert len(fake_repository.books) == stored_before

    def test_all_invalid_rows_are_rejected_without_lookup(
        self, import_service, fake_repository, fake_session
    ) -> None:
        with pytest.raises(AllInvalidError) as exc_info:
            import_service.import_records(
                records=[{"title": "Orphan"}, {"author": "Nobody", "status": "Lost"}],
                db=fake_session,
            )

        report = exc_info.value.report
        assert report.message == "No valid book entries to insert."
        assert report.invalid_count == 2
        assert report.total_submitted == 2
        assert fake_repository.lookup_calls == 0
        assert fake_repository.insert_calls == 0

    def test_invalid_details_are_capped_but_counted(self, fake_repository, upload_dir, fake_session) -> None:
        service = BookImportService(
            batch_size=10,
            max_invalid_rows=2,
            log_invalid_rows=False,
            upload_dir=upload_dir,
            repository_factory=lambda db: fake_repository,
        )

        report = service.import_records(
            records=[{"title": "Emma", "author": "Jane Austen"}] + [{"title": "x"}] * 4,
            db=fake_session,
        )

        assert report.invalid_count == 4
        assert len(report.invalid_books) == 2

    def test_lookup_failure_raises_persistence_error(self, import_service, fake_repository, fake_session) -> None:
        fake_repository.fail_lookup = True

        with pytest.raises(BookPersistenceError):
            import_service.import_records(records=[{"title": "Emma", "author": "Jane Austen"}], db=fake_session)

        assert fake_session.rollbacks == 1
        assert fake_repository.insert_calls == 0

    def test_insert_failure_rolls_back(self, import_service, fake_repository, fake_session) -> None:
        fake_repository.fail_insert = True

        with pytest.raises(BookPersistenceError):
            import_service.import_records(records=[{"title": "Emma", "author": "Jane Austen"}], db=fake_session)

        assert fake_session.rollbacks == 1
        assert fake_session.commits == 0

    def test_json_rows_are_not_header_normalized(self, import_service, fake_session) -> None:
        report = import_service.import_records(
            records=[{"title": "Emma", "author": "Jane Austen", "Publication_Count": "9"}],
            db=fake_session,
        )

        assert report.inserted_books[0].published_count == 0


# ---------------------------------------------------------------------------
# import_upload
# ---------------------------------------------------------------------------


class TestImportUpload:
    def test_csv_headers_are_normalized(self, import_service, upload_dir: Path, fake_session) -> None:
        content = (
            "Title,Author,Genre,Publication_Count,Status,Height,Publisher,Library_Location\n"
            "Emma,Jane Austen,Novel,3,Available,20cm,Penguin,Shelf B\n"
            "Dune,Frank Herbert,SF,1,Borrowed,,Chilton,Shelf A\n"
        ).encode("utf-8")

        report = import_service.import_upload(upload_file=_upload("books.csv", content), db=fake_session)

        assert report.inserted_count == 1
        assert report.duplicate_count == 1
        inserted = report.inserted_books[0]
        assert (inserted.title, inserted.published_count, inserted.location) == ("Emma", 3, "Shelf B")
        assert list(upload_dir.iterdir()) == []

    def test_unsupported_extension_leaves_no_file_behind(self, import_service, upload_dir: Path, fake_session) -> None:
        with pytest.raises(UnsupportedFileTypeError):
            import_service.import_upload(upload_file=_upload("books.txt", b"title\nEmma\n"), db=fake_session)

        assert list(upload_dir.iterdir()) == []

    def test_header_only_file_has_no_data(self, import_service, upload_dir: Path, fake_session) -> None:
        with pytest.raises(NoDataError):
            import_service.import_upload(upload_file=_upload("books.csv", b"Title,Author\n"), db=fake_session)

        assert list(upload_dir.iterdir()) == []

    def test_interrupted_copy_leaves_no_partial_file(self, import_service, upload_dir: Path, fake_session) -> None:
        class _BrokenStream(io.BytesIO):
            def read(self, *args, **kwargs) -> bytes:
                if self.tell() > 0:
                    raise OSError("connection reset")
                return super().read(8)

        stream = _BrokenStream(b"Title,Author\nEmma,Jane Austen\n")

        with pytest.raises(OSError, match="connection reset"):
            import_service.import_upload(upload_file=UploadFile(file=stream, filename="books.csv"), db=fake_session)

        assert list(upload_dir.iterdir()) == []
