"""
app/services package marker.
"""

from app.services.book_import_service import BookImportService, get_book_import_service
from app.services.notification_service import NotificationService, build_notification_service
from app.services.overdue_service import OverdueSweepService, SweepSummary

__all__ = [
    "BookImportService",
    "get_book_import_service",
    "NotificationService",
    "build_notification_service",
    "OverdueSweepService",
    "SweepSummary",
]
