"""
app/api/routers/books.py

Catalog book endpoints, including both bulk import entry points.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.dependencies import get_book_upload, require_api_key
from app.domain.errors import (
    BookImportRejected,
    BookPersistenceError,
    FileParseError,
    NoDataError,
    UnsupportedFileTypeError,
)
from app.repositories.book_repository import BookRepository
from app.schemas.base import BulkDeleteRequest, MessageResponse
from app.schemas.book_import import BookImportReportResponse
from app.schemas.books import (
    BookCreateRequest,
    BookDeleteResponse,
    BookSummaryResponse,
    BookUpdateRequest,
    DeletedBookResponse,
)
from app.services.book_import_service import BookImportService, get_book_import_service
from db.models.book import Book
from db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/books", tags=["books"], dependencies=[Depends(require_api_key)])


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _report_response(status_code: int, response: BookImportReportResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(by_alias=True, mode="json"),
    )


def _get_book_or_404(repository: BookRepository, book_id: uuid.UUID) -> Book:
    book = repository.get(book_id)
    if book is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")
    return book


# ---------------------------------------------------------------------------
# Bulk import
# ---------------------------------------------------------------------------


@router.post(
    "/upload",
    status_code=status.HTTP_201_CREATED,
    response_model=BookImportReportResponse,
)
def upload_books(
    file: UploadFile = Depends(get_book_upload),
    db: Session = Depends(get_db),
    import_service: BookImportService = Depends(get_book_import_service),
) -> Any:
    """
    Import books from one CSV or Excel (.xlsx / .xlsm) file.
    """

    try:
        report = import_service.import_upload(upload_file=file, db=db)
    except UnsupportedFileTypeError as exc:
        return _message(status.HTTP_400_BAD_REQUEST, str(exc))
    except NoDataError as exc:
        return _message(status.HTTP_400_BAD_REQUEST, str(exc))
    except BookImportRejected as exc:
        return _report_response(
            status.HTTP_400_BAD_REQUEST,
            BookImportReportResponse.from_report(exc.report),
        )
    except (FileParseError, BookPersistenceError) as exc:
        logger.error("POST /api/books/upload failed filename=%r: %s", file.filename, exc)
        return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to upload books")
    finally:
        file.file.close()

    return BookImportReportResponse.from_report(report)


@router.post(
    "/bulk",
    status_code=status.HTTP_201_CREATED,
    response_model=BookImportReportResponse,
)
def bulk_create_books(
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    import_service: BookImportService = Depends(get_book_import_service),
) -> Any:
    """
    Import a JSON array of book objects through the same pipeline as uploads.
    """

    if not isinstance(payload, list) or not payload:
        return _message(
            status.HTTP_400_BAD_REQUEST,
            "Request body must be a non-empty array of books",
        )

    try:
        report = import_service.import_records(records=payload, db=db)
    except BookImportRejected as exc:
        return _report_response(
            status.HTTP_400_BAD_REQUEST,
            BookImportReportResponse.from_report(exc.report),
        )
    except BookPersistenceError as exc:
        logger.error("POST /api/books/bulk failed rows=%d: %s", len(payload), exc)
        return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to bulk insert books")

    return BookImportReportResponse.from_report(report)


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


@router.get("", response_model=list[BookSummaryResponse])
def list_books(db: Session = Depends(get_db)) -> list[BookSummaryResponse]:
    return [BookSummaryResponse.from_model(book) for book in BookRepository(db).list_books()]


@router.get("/bulk", response_model=list[BookSummaryResponse])
def list_books_bulk(db: Session = Depends(get_db)) -> list[BookSummaryResponse]:
    """
    Same projection as ``GET /api/books``; kept for existing clients.
    """

    return [BookSummaryResponse.from_model(book) for book in BookRepository(db).list_books()]


@router.post("", response_model=BookSummaryResponse, status_code=status.HTTP_201_CREATED)
def create_book(body: BookCreateRequest, db: Session = Depends(get_db)) -> BookSummaryResponse:
    """
    Create one book.

    Raises HTTP 409 if a book with the same title and author already exists.
    """

    book = Book(**body.model_dump())
    try:
        BookRepository(db).add(book)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A book titled {body.title!r} by {body.author!r} already exists.",
        )
    return BookSummaryResponse.from_model(book)


@router.put("/{book_id}", response_model=BookSummaryResponse)
def update_book(
    book_id: uuid.UUID,
    body: BookUpdateRequest,
    db: Session = Depends(get_db),
) -> BookSummaryResponse:
    book = _get_book_or_404(BookRepository(db), book_id)
    for field_name, value in body.model_dump(exclude_unset=True).items():
        setattr(book, field_name, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Another book with the same title and author already exists.",
        )
    return BookSummaryResponse.from_model(book)


@router.delete("/{book_id}", response_model=BookDeleteResponse)
def delete_book(book_id: uuid.UUID, db: Session = Depends(get_db)) -> BookDeleteResponse:
    repository = BookRepository(db)
    book = _get_book_or_404(repository, book_id)
    deleted = DeletedBookResponse(id=book.id, title=book.title, author=book.author)
    repository.delete(book)
    db.commit()
    return BookDeleteResponse(message="Book deleted successfully", deleted_book=deleted)


@router.post("/bulk-delete", response_model=MessageResponse)
def bulk_delete_books(body: BulkDeleteRequest, db: Session = Depends(get_db)) -> Any:
    if not body.ids:
        return _message(
            status.HTTP_400_BAD_REQUEST,
            "Please provide an array of book IDs to delete",
        )
    deleted = BookRepository(db).delete_many(body.ids)
    db.commit()
    logger.info("Bulk deleted books requested=%d deleted=%d", len(body.ids), deleted)
    return MessageResponse(message="Books deleted successfully")
