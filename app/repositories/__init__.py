"""
app/repositories package marker.
"""

from app.repositories.book_repository import BookRepository
from app.repositories.borrow_record_repository import BorrowRecordPage, BorrowRecordRepository

__all__ = [
    "BookRepository",
    "BorrowRecordPage",
    "BorrowRecordRepository",
]
