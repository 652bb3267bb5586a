"""
app/scheduler/jobs.py

APScheduler-based scheduler for the daily overdue sweep.

Lifecycle
----------
Call ``build_scheduler()`` once with an already-constructed
``OverdueSweepService`` to get a configured ``BackgroundScheduler``.
Start it on app boot; shut it down gracefully on app shutdown.
The scheduler is wired into FastAPI via the ``lifespan`` context in main.py.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy.orm import Session

from app.config import OverdueSweepSettings
from app.services.overdue_service import OverdueSweepService, SweepSummary
from db.session import SessionLocal, session_scope

logger = logging.getLogger(__name__)

OVERDUE_SWEEP_JOB_ID = "overdue_sweep"


def run_overdue_sweep(
    sweep_service: OverdueSweepService,
    session_factory: Callable[[], Session] = SessionLocal,
) -> SweepSummary | None:
    """
    Job body: run one sweep in its own session. Never raises.
    """
    logger.info("Scheduler: overdue_sweep starting")
    try:
        with session_scope(session_factory) as db:
            summary = sweep_service.run(db)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Scheduler: overdue_sweep failed: %s", exc)
        return None

    logger.info(
        "Scheduler: overdue_sweep complete checked=%d marked_overdue=%d "
        "emails_sent=%d sms_sent=%d failures=%d",
        summary.checked,
        summary.marked_overdue,
        summary.emails_sent,
        summary.sms_sent,
        summary.failures,
    )
    return summary


def build_scheduler(
    sweep_service: OverdueSweepService,
    settings: OverdueSweepSettings,
) -> BackgroundScheduler:
    """
    Build the scheduler and register the overdue sweep.

    Returns a configured but *not yet started* ``BackgroundScheduler``.
    The caller must call ``.start()`` and ``.shutdown(wait=True)`` at the
    appropriate lifecycle points. No job is registered when the sweep is
    disabled.
    """
    scheduler = BackgroundScheduler(timezone="UTC")

    if settings.enabled:
        scheduler.add_job(
            run_overdue_sweep,
            trigger="cron",
            hour=settings.hour,
            minute=settings.minute,
            args=[sweep_service],
            id=OVERDUE_SWEEP_JOB_ID,
            name="Daily overdue sweep",
            replace_existing=True,
            misfire_grace_time=3600,
        )

    return scheduler
