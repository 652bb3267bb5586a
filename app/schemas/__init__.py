"""
app/schemas package marker.
"""

from app.schemas.base import BulkDeleteRequest, CamelModel, MessageResponse
from app.schemas.book_import import BookImportReportResponse, InsertedBookResponse, InvalidBookResponse
from app.schemas.books import (
    BookCreateRequest,
    BookDeleteResponse,
    BookSummaryResponse,
    BookUpdateRequest,
    DeletedBookResponse,
)
from app.schemas.borrow_records import (
    BorrowRecordCreateRequest,
    BorrowRecordPageResponse,
    BorrowRecordResponse,
    BorrowRecordUpdateRequest,
)
from app.schemas.google_books import GoogleBooksSearchRequest
from app.schemas.students import StudentCreateRequest, StudentResponse, StudentUpdateRequest

__all__ = [
    "BookCreateRequest",
    "BookDeleteResponse",
    "BookImportReportResponse",
    "BookSummaryResponse",
    "BookUpdateRequest",
    "BorrowRecordCreateRequest",
    "BorrowRecordPageResponse",
    "BorrowRecordResponse",
    "BorrowRecordUpdateRequest",
    "BulkDeleteRequest",
    "CamelModel",
    "DeletedBookResponse",
    "GoogleBooksSearchRequest",
    "InsertedBookResponse",
    "InvalidBookResponse",
    "MessageResponse",
    "StudentCreateRequest",
    "StudentResponse",
    "StudentUpdateRequest",
]
