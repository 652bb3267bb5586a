"""
app/schemas/books.py

Request and response schemas for catalog book endpoints.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import Field

from app.schemas.base import CamelModel
from db.models.book import Book

BookStatusLiteral = Literal["Available", "Borrowed"]
BookFormatLiteral = Literal["eBook", "Audiobook"]


class BookCreateRequest(CamelModel):
    title: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    genre: str = ""
    published_count: int = Field(default=0, ge=0)
    status: BookStatusLiteral = "Available"
    height: str = ""
    publisher: str = ""
    location: str = ""
    isbn: str | None = None
    borrower: str = ""
    due_date: datetime | None = None
    format: BookFormatLiteral = "eBook"


class BookUpdateRequest(CamelModel):
    """
    Partial update; only fields present in the body are written.
    """

    title: str | None = Field(default=None, min_length=1)
    author: str | None = Field(default=None, min_length=1)
    genre: str | None = None
    published_count: int | None = Field(default=None, ge=0)
    status: BookStatusLiteral | None = None
    height: str | None = None
    publisher: str | None = None
    location: str | None = None
    isbn: str | None = None
    borrower: str | None = None
    due_date: datetime | None = None
    format: BookFormatLiteral | None = None


class BookSummaryResponse(CamelModel):
    id: uuid.UUID = Field(..., alias="_id")
    title: str
    author: str
    genre: str
    status: str
    location: str
    publisher: str
    height: str
    published_count: int

    @classmethod
    def from_model(cls, book: Book) -> "BookSummaryResponse":
        return cls(
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


class DeletedBookResponse(CamelModel):
    id: uuid.UUID = Field(..., alias="_id")
    title: str
    author: str


class BookDeleteResponse(CamelModel):
    message: str
    deleted_book: DeletedBookResponse
