"""Background job scheduler for session housekeeping."""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from unalon.core.config import settings
from unalon.services.sessions import SessionStore

logger = logging.getLogger(__name__)


def purge_sessions_job(sessions: SessionStore):
    """Drop expired login sessions."""
    try:
        purged = sessions.purge_expired()
        if purged:
            logger.info(f"Purged {purged} expired sessions")
    except Exception as e:
        logger.error(f"Session purge failed: {e}")


def start_scheduler(sessions: SessionStore) -> AsyncIOScheduler:
    """Start the background scheduler."""
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        purge_sessions_job,
        trigger=IntervalTrigger(minutes=settings.session_sweep_minutes),
        args=[sessions],
        id="session_purge",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started, purging sessions every {settings.session_sweep_minutes} minutes"
    )
    return scheduler


def shutdown_scheduler(scheduler: AsyncIOScheduler):
    """Graceful shutdown."""
    scheduler.shutdown(wait=False)
    logger.info("Scheduler shut down")
