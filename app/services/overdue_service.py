"""
app/services/overdue_service.py

Overdue detection for borrow records.
"""

from __future__ import annotations

import logging
import smtplib
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.repositories.borrow_record_repository import BorrowRecordRepository
from app.services.notification_service import NotificationService
from db.models.borrow_record import BorrowRecord, ReturnStatus

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def is_overdue(record: BorrowRecord, now: datetime) -> bool:
    """
    True when the record is not returned and its due date has passed.
    """

    if record.return_status == ReturnStatus.RETURNED:
        return False
    due_date = record.due_date
    if due_date.tzinfo is None:
        due_date = due_date.replace(tzinfo=timezone.utc)
    return due_date < now


def display_status(record: BorrowRecord, now: datetime) -> str:
    """
    Status as shown to readers; overdue loans read as Overdue before the sweep runs.
    """

    return ReturnStatus.OVERDUE if is_overdue(record, now) else record.return_status


@dataclass(frozen=True)
class SweepSummary:
    checked: int = 0
    marked_overdue: int = 0
    emails_sent: int = 0
    sms_sent: int = 0
    failures: int = 0


class OverdueSweepService:
    """
    Flips past-due loans to Overdue and sends reminders, one record at a time.
    """

    def __init__(
        self,
        *,
        notifier: NotificationService,
        clock: Callable[[], datetime] = _utc_now,
        repository_factory: Callable[[Session], BorrowRecordRepository] = BorrowRecordRepository,
    ) -> None:
        self._notifier = notifier
        self._clock = clock
        self._repository_factory = repository_factory

    def run(self, db: Session) -> SweepSummary:
        """
        Sweep every borrow record.

        A failure on one record (status write or reminder) is logged and the
        sweep moves on. Records already Overdue are reminded again.
        """

        now = self._clock()
        records = self._repository_factory(db).list_all()

        marked = emails = sms = failures = 0
        for record in records:
            if not is_overdue(record, now):
                continue

            try:
                record.return_status = ReturnStatus.OVERDUE
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                failures += 1
                logger.warning("Overdue sweep: status update failed record_id=%s: %s", record.id, exc)
                continue
            marked += 1
            logger.info(
                "Overdue sweep: marked overdue record_id=%s student_id=%r book_title=%r",
                record.id,
                record.student_id,
                record.book_title,
            )

            try:
                if self._notifier.send_overdue_email(record):
                    emails += 1
            except (smtplib.SMTPException, OSError) as exc:
                failures += 1
                logger.warning("Overdue sweep: email failed record_id=%s: %s", record.id, exc)

            try:
                if self._notifier.send_overdue_sms(record):
                    sms += 1
            except OSError as exc:
                failures += 1
                logger.warning("Overdue sweep: sms failed record_id=%s: %s", record.id, exc)

        return SweepSummary(
            checked=len(records),
            marked_overdue=marked,
            emails_sent=emails,
            sms_sent=sms,
            failures=failures,
        )
