"""
app/services/notification_service.py

Email and SMS delivery for borrower reminders.

The service is built explicitly from ``NotificationSettings`` and handed to
whoever needs it; nothing here connects to a mail server at import time.
"""

from __future__ import annotations

import logging
import smtplib
from collections.abc import Callable
from email.message import EmailMessage

from app.config import NotificationSettings
from db.models.borrow_record import BorrowRecord

logger = logging.getLogger(__name__)

OVERDUE_EMAIL_SUBJECT = "Overdue Book Reminder"


class EmailSender:
    """
    Sends plain-text mail over SMTP with STARTTLS.
    """

    def __init__(
        self,
        *,
        enabled: bool,
        host: str,
        port: int,
        username: str | None,
        password: str | None,
        from_email: str | None,
        timeout_seconds: float = 30.0,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
    ) -> None:
        self._enabled = enabled
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._from_email = from_email or username
        self._timeout_seconds = timeout_seconds
        self._smtp_factory = smtp_factory

    @property
    def enabled(self) -> bool:
        return self._enabled

    def send(self, *, to: str, subject: str, body: str) -> bool:
        """
        Deliver one message. Returns False when email is disabled.

        SMTP and socket errors propagate to the caller.
        """

        if not self._enabled:
            logger.info("Email disabled; not sending to=%s subject=%r", to, subject)
            return False

        message = EmailMessage()
        message["From"] = self._from_email or ""
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)

        with self._smtp_factory(self._host, self._port, timeout=self._timeout_seconds) as smtp:
            smtp.starttls()
            if self._username and self._password:
                smtp.login(self._username, self._password)
            smtp.send_message(message)

        logger.info("Email sent to=%s subject=%r", to, subject)
        return True


class SmsSender:
    """
    SMS stub: logs the message instead of calling a gateway.
    """

    def __init__(self, *, enabled: bool) -> None:
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def send(self, *, to: str, message: str) -> bool:
        if not self._enabled:
            logger.info("SMS disabled; not sending to=%s", to)
            return False
        logger.info("SMS to=%s message=%r", to, message)
        return True


class NotificationService:
    """
    Formats and dispatches overdue reminders.
    """

    def __init__(self, *, email_sender: EmailSender, sms_sender: SmsSender) -> None:
        self._email_sender = email_sender
        self._sms_sender = sms_sender

    def send_overdue_email(self, record: BorrowRecord) -> bool:
        if not record.student_email:
            return False
        body = (
            f"Dear {record.student_name},\n"
            f'Your borrowed book "{record.book_title}" is overdue. Please return it immediately.'
        )
        return self._email_sender.send(
            to=record.student_email,
            subject=OVERDUE_EMAIL_SUBJECT,
            body=body,
        )

    def send_overdue_sms(self, record: BorrowRecord) -> bool:
        if not record.student_phone:
            return False
        return self._sms_sender.send(
            to=record.student_phone,
            message=f'Reminder: "{record.book_title}" is overdue. Please return it.',
        )


def build_notification_service(settings: NotificationSettings) -> NotificationService:
    """
    Wire senders from settings.
    """

    return NotificationService(
        email_sender=EmailSender(
            enabled=settings.email_enabled,
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            from_email=settings.from_email,
        ),
        sms_sender=SmsSender(enabled=settings.sms_enabled),
    )
