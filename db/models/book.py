"""
db/models/book.py

Catalog book model.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class BookStatus:
    AVAILABLE = "Available"
    BORROWED = "Borrowed"


class BookFormat:
    EBOOK = "eBook"
    AUDIOBOOK = "Audiobook"


BOOK_STATUSES: tuple[str, ...] = (BookStatus.AVAILABLE, BookStatus.BORROWED)
BOOK_FORMATS: tuple[str, ...] = (BookFormat.EBOOK, BookFormat.AUDIOBOOK)

# Upper bound of the 32-bit published_count column.
MAX_PUBLISHED_COUNT = 2_147_483_647


class Book(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """
    One catalog entry.

    Identity for import deduplication is the case-insensitive
    (title, author) pair, enforced by ``uq_books_title_author_ci``.
    """

    __tablename__ = "books"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    genre: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    published_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Number of published copies",
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=BookStatus.AVAILABLE,
        comment="Available, Borrowed",
    )
    height: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        default="",
        comment="Free-text shelf height as supplied by the source",
    )
    publisher: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    location: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    isbn: Mapped[str | None] = mapped_column(String(32), nullable=True)
    borrower: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    format: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=BookFormat.EBOOK,
        comment="eBook, Audiobook",
    )

    __table_args__ = (
        Index("ix_books_status", "status"),
        Index("ix_books_genre", "genre"),
    )

    def __repr__(self) -> str:
        return f"<Book id={self.id} title={self.title!r} author={self.author!r}>"


Index(
    "uq_books_title_author_ci",
    func.lower(Book.title),
    func.lower(Book.author),
    unique=True,
)
