"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.book import Book
from db.models.borrow_record import BorrowRecord
from db.models.student import Student

__all__ = [
    "Book",
    "BorrowRecord",
    "Student",
]
