"""Background job scheduler for event reminders."""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from tennismate.config import settings
from tennismate.database import SessionLocal
from tennismate.services.reminder_service import send_event_reminders

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


def reminder_job():
    """Background reminder job."""
    db = SessionLocal()
    try:
        stats = send_event_reminders(db)
        logger.info("Reminder run completed: %s", stats)
    except Exception:
        db.rollback()
        logger.exception("Reminder run failed")
    finally:
        db.close()


def start_scheduler():
    scheduler.add_job(
        reminder_job,
        trigger=IntervalTrigger(minutes=settings.REMINDER_INTERVAL_MINUTES),
        id="event_reminders",
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Scheduler started, reminders every %d minutes", settings.REMINDER_INTERVAL_MINUTES)


def shutdown_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler shut down")
