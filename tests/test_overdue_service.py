"""
tests/test_overdue_service.py

Overdue detection and the reminder sweep, with SMTP replaced by a recorder.
"""

from __future__ import annotations

import smtplib
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from app.services.notification_service import (
    OVERDUE_EMAIL_SUBJECT,
    EmailSender,
    NotificationService,
    SmsSender,
)
from app.services.overdue_service import OverdueSweepService, display_status, is_overdue
from db.models.borrow_record import BorrowRecord, ReturnStatus

NOW = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


class RecordingSMTP:
    sent: list = []

    def __init__(self, host: str, port: int, timeout: float) -> None:
        self.host = host
        self.port = port

    def __enter__(self) -> "RecordingSMTP":
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None

    def starttls(self) -> None:
        return None

    def login(self, username: str, password: str) -> None:
        return None

    def send_message(self, message) -> None:
        RecordingSMTP.sent.append(message)


def _failing_smtp(*args: object, **kwargs: object):
    raise smtplib.SMTPConnectError(421, "service not available")


class FakeRecordRepository:
    def __init__(self, records: list[BorrowRecord]) -> None:
        self._records = records

    def list_all(self) -> list[BorrowRecord]:
        return list(self._records)


class FakeSession:
    def __init__(self, fail_commit: bool = False) -> None:
        self.fail_commit = fail_commit
        self.commits = 0
        self.rollbacks = 0

    def commit(self) -> None:
        if self.fail_commit:
            raise OperationalError("UPDATE borrow_records", {}, Exception("connection lost"))
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


def _record(
    *,
    due: datetime,
    status: str = ReturnStatus.NOT_RETURNED,
    email: str | None = "reader@example.com",
    phone: str | None = "+15550100",
) -> BorrowRecord:
    return BorrowRecord(
        id=uuid.uuid4(),
        student_name="Ada",
        student_id="CS-042",
        book_title="Dune",
        borrow_date=due - timedelta(days=14),
        due_date=due,
        return_status=status,
        student_email=email,
        student_phone=phone,
    )


def _notifier(smtp_factory=RecordingSMTP, email_enabled: bool = True) -> NotificationService:
    return NotificationService(
        email_sender=EmailSender(
            enabled=email_enabled,
            host="smtp.example.com",
            port=587,
            username="library@example.com",
            password="secret",
            from_email="library@example.com",
            smtp_factory=smtp_factory,
        ),
        sms_sender=SmsSender(enabled=True),
    )


@pytest.fixture(autouse=True)
def _reset_outbox() -> None:
    RecordingSMTP.sent = []


# ---------------------------------------------------------------------------
# is_overdue / display_status
# ---------------------------------------------------------------------------


class TestIsOverdue:
    def test_past_due_and_not_returned(self) -> None:
        assert is_overdue(_record(due=NOW - timedelta(minutes=1)), NOW)

    def test_due_in_future(self) -> None:
        assert not is_overdue(_record(due=NOW + timedelta(days=1)), NOW)

    def test_returned_is_never_overdue(self) -> None:
        assert not is_overdue(_record(due=NOW - timedelta(days=30), status=ReturnStatus.RETURNED), NOW)

    def test_naive_due_date_is_treated_as_utc(self) -> None:
        record = _record(due=datetime(2026, 10, 17, 9, 0))

        assert is_overdue(record, NOW)

    def test_display_status_reads_overdue_before_sweep(self) -> None:
        late = _record(due=NOW - timedelta(days=2))
        on_time = _record(due=NOW + timedelta(days=2))

        assert display_status(late, NOW) == ReturnStatus.OVERDUE
        assert display_status(on_time, NOW) == ReturnStatus.NOT_RETURNED
        assert late.return_status == ReturnStatus.NOT_RETURNED


# ---------------------------------------------------------------------------
# OverdueSweepService
# ---------------------------------------------------------------------------


def _sweep(records: list[BorrowRecord], notifier: NotificationService) -> OverdueSweepService:
    return OverdueSweepService(
        notifier=notifier,
        clock=lambda: NOW,
        repository_factory=lambda db: FakeRecordRepository(records),
    )


class TestOverdueSweep:
    def test_marks_late_records_and_sends_reminders(self) -> None:
        late = _record(due=NOW - timedelta(days=3))
        returned = _record(due=NOW - timedelta(days=3), status=ReturnStatus.RETURNED)
        upcoming = _record(due=NOW + timedelta(days=3))
        session = FakeSession()

        summary = _sweep([late, returned, upcoming], _notifier()).run(session)

        assert summary.checked == 3
        assert summary.marked_overdue == 1
        assert summary.emails_sent == 1
        assert summary.sms_sent == 1
        assert summary.failures == 0
        assert late.return_status == ReturnStatus.OVERDUE
        assert returned.return_status == ReturnStatus.RETURNED
        assert upcoming.return_status == ReturnStatus.NOT_RETURNED
        assert session.commits == 1

        message = RecordingSMTP.sent[0]
        assert message["To"] == "reader@example.com"
        assert message["Subject"] == OVERDUE_EMAIL_SUBJECT
        assert "Dune" in message.get_content()

    def test_record_without_contacts_is_still_marked(self) -> None:
        late = _record(due=NOW - timedelta(days=1), email=None, phone=None)

        summary = _sweep([late], _notifier()).run(FakeSession())

        assert late.return_status == ReturnStatus.OVERDUE
        assert (summary.emails_sent, summary.sms_sent) == (0, 0)

    def test_email_failure_does_not_stop_sms_or_next_record(self) -> None:
        first = _record(due=NOW - timedelta(days=1))
        second = _record(due=NOW - timedelta(days=2))

        summary = _sweep([first, second], _notifier(smtp_factory=_failing_smtp)).run(FakeSession())

        assert summary.marked_overdue == 2
        assert summary.emails_sent == 0
        assert summary.sms_sent == 2
        assert summary.failures == 2

    def test_disabled_email_is_not_a_failure(self) -> None:
        late = _record(due=NOW - timedelta(days=1))

        summary = _sweep([late], _notifier(email_enabled=False)).run(FakeSession())

        assert summary.emails_sent == 0
        assert summary.failures == 0
        assert RecordingSMTP.sent == []

    def test_status_write_failure_skips_reminders(self) -> None:
        late = _record(due=NOW - timedelta(days=1))
        session = FakeSession(fail_commit=True)

        summary = _sweep([late], _notifier()).run(session)

        assert summary.marked_overdue == 0
        assert summary.failures == 1
        assert session.rollbacks == 1
        assert RecordingSMTP.sent == []

    def test_already_overdue_records_are_reminded_again(self) -> None:
        late = _record(due=NOW - timedelta(days=5), status=ReturnStatus.OVERDUE)

        summary = _sweep([late], _notifier()).run(FakeSession())

        assert summary.marked_overdue == 1
        assert summary.emails_sent == 1
