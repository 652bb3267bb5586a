"""
app/schemas/book_import.py

Response schema shared by both bulk import endpoints.
"""

from __future__ import annotations

import uuid

from pydantic import Field

from app.domain.book_import import ImportReport
from app.schemas.base import CamelModel


class InvalidBookResponse(CamelModel):
    """
    One rejected row, echoed back with its coerced values.
    """

    row: int = Field(..., ge=1)
    title: str
    author: str
    genre: str
    published_count: int | None
    status: str
    height: str
    publisher: str
    location: str
    errors: list[str] = Field(default_factory=list)


class InsertedBookResponse(CamelModel):
    id: uuid.UUID = Field(..., alias="_id")
    title: str
    author: str
    genre: str
    status: str
    location: str
    publisher: str
    height: str
    published_count: int


class BookImportReportResponse(CamelModel):
    """
    API response model for a bulk import run.
    """

    message: str
    total_submitted: int = Field(..., ge=0)
    inserted_count: int = Field(default=0, ge=0)
    duplicate_count: int = Field(default=0, ge=0)
    invalid_count: int = Field(default=0, ge=0)
    invalid_books: list[InvalidBookResponse] = Field(default_factory=list)
    inserted_books: list[InsertedBookResponse] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: ImportReport) -> "BookImportReportResponse":
        return cls(
            message=report.message,
            total_submitted=report.total_submitted,
            inserted_count=report.inserted_count,
            duplicate_count=report.duplicate_count,
            invalid_count=report.invalid_count,
            invalid_books=[
                InvalidBookResponse(
                    row=invalid.row,
                    title=invalid.title,
                    author=invalid.author,
                    genre=invalid.genre,
                    published_count=invalid.published_count,
                    status=invalid.status,
                    height=invalid.height,
                    publisher=invalid.publisher,
                    location=invalid.location,
                    errors=list(invalid.errors),
                )
                for invalid in report.invalid_books
            ],
            inserted_books=[
                InsertedBookResponse(
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
                for book in report.inserted_books
            ],
        )
