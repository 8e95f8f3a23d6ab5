"""
Background scheduler for recurring calendar jobs.

Uses APScheduler's AsyncIOScheduler, started and stopped by the FastAPI
lifespan. Currently hosts the current-time indicator refresh.
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from eotis_hub.background.now_indicator import NowIndicator
from eotis_hub.config import get_settings

logger = logging.getLogger(__name__)

# Singleton scheduler instance
scheduler = AsyncIOScheduler()


def init_scheduler() -> NowIndicator:
    """Start the scheduler and register the now-indicator job.

    Called during FastAPI lifespan startup.
    """
    settings = get_settings()
    indicator = NowIndicator(
        scheduler,
        interval_seconds=settings.NOW_INDICATOR_INTERVAL_SECONDS,
        tz=settings.tz,
    )
    indicator.start()
    if not scheduler.running:
        scheduler.start()

    jobs = scheduler.get_jobs()
    logger.info(f"📅 Scheduler started with {len(jobs)} job(s):")
    for job in jobs:
        logger.info(f"   - {job.id}: next run at {job.next_run_time}")
    return indicator


def shutdown_scheduler(indicator: NowIndicator | None = None):
    """Stop the indicator job, then shut the scheduler down."""
    if indicator is not None:
        indicator.stop()
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("📅 Scheduler shut down.")
