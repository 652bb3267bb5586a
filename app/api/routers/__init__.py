"""
app/api/routers package marker.
"""

from app.api.routers.books import router as books_router
from app.api.routers.borrow_records import router as borrow_records_router
from app.api.routers.google_books import router as google_books_router
from app.api.routers.students import router as students_router

__all__ = [
    "books_router",
    "borrow_records_router",
    "google_books_router",
    "students_router",
]
