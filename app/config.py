"""
app/config.py

Environment-driven settings for the library API.

Every getter is cached; tests call ``cache_clear()`` after patching the
environment.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from db.config import load_env_files

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    load_env_files()


def _env(name: str) -> str | None:
    """Stripped value of ``name``; blank counts as unset."""
    _load_env_once()
    value = (os.getenv(name) or "").strip()
    return value or None


def _env_bool(name: str, default: bool) -> bool:
    value = _env(name)
    return default if value is None else value.lower() in _TRUE_VALUES


def _env_int(name: str, default: int, *, low: int | None = None, high: int | None = None) -> int:
    """
    Integer setting clamped to ``[low, high]``; unparseable values fall back to ``default``.
    """

    value = _env(name)
    try:
        number = default if value is None else int(value)
    except ValueError:
        number = default
    if low is not None:
        number = max(low, number)
    if high is not None:
        number = min(high, number)
    return number


def _env_float(name: str, default: float, *, low: float) -> float:
    value = _env(name)
    try:
        number = default if value is None else float(value)
    except ValueError:
        number = default
    return max(low, number)


@dataclass(frozen=True)
class BookImportSettings:
    """
    Runtime settings for bulk book import.
    """

    batch_size: int = 1000
    max_invalid_rows: int = 500
    log_invalid_rows: bool = True
    upload_dir: Path = Path(tempfile.gettempdir()) / "library_uploads"


@dataclass(frozen=True)
class AuthSettings:
    """
    Shared-secret API key accepted by the request gate.
    """

    api_key: str | None = None


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior settings for external connectors.
    """

    timeout_seconds: float = 15.0
    max_retries: int = 3
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    rate_limit_per_second: float = 5.0


@dataclass(frozen=True)
class GoogleBooksSettings:
    """
    Google Books volume search settings.
    """

    base_url: str = "https://www.googleapis.com/books/v1/volumes"
    api_key: str | None = None
    default_max_results: int = 20


@dataclass(frozen=True)
class NotificationSettings:
    """
    Overdue reminder delivery settings.
    """

    email_enabled: bool = False
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    from_email: str | None = None
    sms_enabled: bool = True


@dataclass(frozen=True)
class OverdueSweepSettings:
    """
    Schedule of the daily overdue sweep (UTC).
    """

    enabled: bool = True
    hour: int = 9
    minute: int = 0



_DEFAULT_UPLOAD_DIR = Path(tempfile.gettempdir()) / "library_uploads"


@lru_cache(maxsize=1)
def get_book_import_settings() -> BookImportSettings:
    upload_dir = _env("BOOK_UPLOAD_DIR")
    return BookImportSettings(
        batch_size=_env_int("BOOK_IMPORT_BATCH_SIZE", 1000, low=1),
        max_invalid_rows=_env_int("BOOK_IMPORT_MAX_INVALID_ROWS", 500, low=1),
        log_invalid_rows=_env_bool("BOOK_IMPORT_LOG_INVALID_ROWS", True),
        upload_dir=Path(upload_dir) if upload_dir else _DEFAULT_UPLOAD_DIR,
    )


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    return AuthSettings(api_key=_env("LIBRARY_API_KEY"))


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Outbound HTTP behaviour shared by connectors (EXTERNAL_HTTP_*).
    """

    return ExternalHTTPSettings(
        timeout_seconds=_env_float("EXTERNAL_HTTP_TIMEOUT_SECONDS", 15.0, low=1.0),
        max_retries=_env_int("EXTERNAL_HTTP_MAX_RETRIES", 3, low=0),
        backoff_initial_seconds=_env_float("EXTERNAL_HTTP_BACKOFF_INITIAL_SECONDS", 0.5, low=0.1),
        backoff_multiplier=_env_float("EXTERNAL_HTTP_BACKOFF_MULTIPLIER", 2.0, low=1.0),
        rate_limit_per_second=_env_float("EXTERNAL_HTTP_RATE_LIMIT_PER_SECOND", 5.0, low=0.1),
    )


@lru_cache(maxsize=1)
def get_google_books_settings() -> GoogleBooksSettings:
    return GoogleBooksSettings(
        base_url=_env("GOOGLE_BOOKS_BASE_URL") or GoogleBooksSettings.base_url,
        api_key=_env("GOOGLE_BOOKS_API_KEY"),
        default_max_results=_env_int("GOOGLE_BOOKS_DEFAULT_MAX_RESULTS", 20, low=1, high=40),
    )


@lru_cache(maxsize=1)
def get_notification_settings() -> NotificationSettings:
    """
    SMTP and SMS switches for overdue reminders. The sender address defaults
    to the SMTP login.
    """

    smtp_username = _env("SMTP_USERNAME")
    return NotificationSettings(
        email_enabled=_env_bool("NOTIFY_EMAIL_ENABLED", False),
        smtp_host=_env("SMTP_HOST") or NotificationSettings.smtp_host,
        smtp_port=_env_int("SMTP_PORT", 587, low=1, high=65535),
        smtp_username=smtp_username,
        smtp_password=_env("SMTP_PASSWORD"),
        from_email=_env("NOTIFY_FROM_EMAIL") or smtp_username,
        sms_enabled=_env_bool("NOTIFY_SMS_ENABLED", True),
    )


@lru_cache(maxsize=1)
def get_overdue_sweep_settings() -> OverdueSweepSettings:
    return OverdueSweepSettings(
        enabled=_env_bool("OVERDUE_SWEEP_ENABLED", True),
        hour=_env_int("OVERDUE_SWEEP_HOUR", 9, low=0, high=23),
        minute=_env_int("OVERDUE_SWEEP_MINUTE", 0, low=0, high=59),
    )
