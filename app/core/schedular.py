import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings
from app.core.database import SessionLocal
from app.core.decorator import AppException
from app.services.test_attempt import TestAttemptService

logger = logging.getLogger(__name__)


def auto_submit_expired_sections() -> int:
    """
    Scheduled task that submits every section whose time ran out.
    The student's draft answers are scored exactly like a manual submission.
    """
    db = SessionLocal()
    try:
        submitted = TestAttemptService(db).auto_submit_expired()
        if submitted:
            logger.info(f"Auto-submitted {submitted} expired section(s)")
        return submitted
    except AppException as e:
        db.rollback()
        logger.error(f"Error during auto-submit sweep: {e.message}")
        return 0
    finally:
        db.close()


def start_scheduler():
    """
    Initialize and start the APScheduler for the expiry sweep.
    """
    scheduler = AsyncIOScheduler()

    scheduler.add_job(
        auto_submit_expired_sections,
        trigger=IntervalTrigger(seconds=settings.auto_submit_interval_seconds),
        id="auto_submit_expired_sections",
        name="Submit sections whose timer expired",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    scheduler.start()
    logger.info(
        f"Attempt scheduler started. Expiry sweep every "
        f"{settings.auto_submit_interval_seconds}s."
    )

    return scheduler


def shutdown_scheduler(scheduler: AsyncIOScheduler):
    """
    Gracefully shutdown the scheduler.
    """
    if scheduler:
        scheduler.shutdown()
        logger.info("Attempt scheduler shut down.")
