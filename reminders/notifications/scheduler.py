"""
APScheduler-based in-process trigger for the reminder cycle.

Production normally triggers POST /api/reminders/check from an external cron
service. Setting REMINDER_SCHEDULER_ENABLED runs the same cycle from inside
the process instead. Jobs are kept in memory only; every run reads fresh data.
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from reminders.config import ConfigurationError, get_interval_minutes

logger = logging.getLogger(__name__)


_scheduler: AsyncIOScheduler | None = None

REMINDER_JOB_ID = "class_reminder_cycle"


def init_scheduler() -> AsyncIOScheduler | None:
    """
    Initialize and start the APScheduler.

    Call this during app startup (in FastAPI lifespan).
    """
    global _scheduler

    if _scheduler is not None:
        return _scheduler

    _scheduler = AsyncIOScheduler(
        job_defaults={
            "coalesce": True,  # Combine missed runs into one
            "max_instances": 1,
            "misfire_grace_time": 300,
        },
    )

    interval = get_interval_minutes()
    _scheduler.add_job(
        _execute_reminder_cycle,
        trigger="interval",
        minutes=interval,
        id=REMINDER_JOB_ID,
        replace_existing=True,
    )
    _scheduler.start()
    logger.info(f"Reminder scheduler started (every {interval} minutes)")

    return _scheduler


def shutdown_scheduler() -> None:
    """
    Shutdown the scheduler gracefully.

    Call this during app shutdown.
    """
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=True)
        _scheduler = None
        logger.info("Reminder scheduler stopped")


async def _execute_reminder_cycle() -> None:
    """Run one reminder cycle. Called by APScheduler."""
    # Import here to avoid circular imports
    from reminders.notifications.context import CycleContext
    from reminders.notifications.dispatcher import run_reminder_cycle

    try:
        context = CycleContext.create()
    except ConfigurationError as e:
        logger.error(f"Skipping scheduled reminder cycle: {e}")
        return

    result = await run_reminder_cycle(context)
    logger.info(
        f"Scheduled reminder cycle finished: {result.sent_count} sent, "
        f"{result.skipped_count} skipped"
    )
