"""
app/main.py

FastAPI entrypoint for the library API.
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def _missing_settings() -> list[str]:
    """
    Collect every required setting that is absent, so one restart fixes all of them.
    """

    problems: list[str] = []

    if not any(
        os.getenv(name, "").strip()
        for name in ("DATABASE_URL", "CLOUD_DATABASE_URL", "LOCAL_DATABASE_URL")
    ):
        problems.append(
            "No database URL configured. Set DATABASE_URL, CLOUD_DATABASE_URL "
            "or LOCAL_DATABASE_URL."
        )

    if not os.getenv("LIBRARY_API_KEY", "").strip():
        problems.append("LIBRARY_API_KEY is not set. Every /api route except search requires it.")

    if os.getenv("NOTIFY_EMAIL_ENABLED", "false").strip().lower() in _TRUTHY:
        problems.extend(
            f"{name} is required while NOTIFY_EMAIL_ENABLED is true."
            for name in ("SMTP_USERNAME", "SMTP_PASSWORD")
            if not os.getenv(name, "").strip()
        )

    return problems


def _validate_env() -> None:
    from db.config import load_env_files

    load_env_files()
    problems = _missing_settings()
    if problems:
        raise RuntimeError(
            "Startup validation failed:\n" + "\n".join(f"  - {problem}" for problem in problems)
        )


def _configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _verify_database() -> None:
    """
    Fail startup unless the database answers and every mapped table exists.

    Migrations are never applied here; run ``alembic upgrade head`` first.
    """

    from sqlalchemy import inspect as sa_inspect
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    import db.models  # noqa: F401  registers books, students and borrow_records
    from db.base import Base
    from db.session import get_engine

    try:
        with get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
            present = set(sa_inspect(connection).get_table_names())
    except SQLAlchemyError as exc:
        raise RuntimeError("Database unavailable.") from exc

    missing = sorted(set(Base.metadata.tables) - present)
    if missing:
        logger.critical("Missing tables=%s; run 'alembic upgrade head' and restart", ",".join(missing))
        raise RuntimeError(f"Database schema is missing tables: {', '.join(missing)}")

    logger.info("Database verified tables=%d", len(present))


def _build_overdue_scheduler() -> BackgroundScheduler:
    from app.config import get_notification_settings, get_overdue_sweep_settings
    from app.scheduler.jobs import build_scheduler
    from app.services.notification_service import build_notification_service
    from app.services.overdue_service import OverdueSweepService

    sweep_service = OverdueSweepService(
        notifier=build_notification_service(get_notification_settings()),
    )
    return build_scheduler(sweep_service, get_overdue_sweep_settings())


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    _verify_database()

    from app.config import get_book_import_settings

    get_book_import_settings().upload_dir.mkdir(parents=True, exist_ok=True)

    scheduler = _build_overdue_scheduler()
    scheduler.start()
    logger.info("Scheduler started jobs=%d", len(scheduler.get_jobs()))
    try:
        yield
    finally:
        scheduler.shutdown(wait=True)
        logger.info("Scheduler shut down")


def create_app() -> FastAPI:
    """
    Validate configuration, then assemble routers and the health probe.
    """

    _validate_env()
    _configure_logging()

    from app.api.routers import (
        books_router,
        borrow_records_router,
        google_books_router,
        students_router,
    )

    application = FastAPI(title="Athenaeum Library API", version="1.0.0", lifespan=_lifespan)
    for router in (books_router, students_router, borrow_records_router, google_books_router):
        application.include_router(router)

    @application.get("/health", tags=["health"])
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
