"""
Background refresh worker using APScheduler.
Periodically checks the price dataset and swaps in a new snapshot when it changed.
"""
import logging
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .config import settings
from .market_data import get_store

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler: Optional[BackgroundScheduler] = None


def refresh_dataset() -> bool:
    """
    Reload the dataset if its file changed.
    Called periodically by the scheduler.
    """
    try:
        store = get_store()
        changed = store.refresh_if_changed()
        if changed:
            snapshot = store.snapshot()
            logger.info(f"Dataset refreshed: {snapshot.record_count} records from {snapshot.source}")
        return changed
    except Exception as e:
        logger.error(f"Error refreshing dataset: {e}")
        return False


def start_scheduler():
    """Start the background scheduler."""
    global scheduler

    if scheduler is not None:
        logger.warning("Scheduler already running")
        return

    if settings.REFRESH_MINUTES <= 0:
        logger.info("Dataset refresh disabled (PRICE_REFRESH_MINUTES=0)")
        return

    scheduler = BackgroundScheduler()

    # Dataset change check
    scheduler.add_job(
        refresh_dataset,
        IntervalTrigger(minutes=settings.REFRESH_MINUTES),
        id="dataset_refresh",
        name="Refresh price dataset",
        replace_existing=True
    )

    scheduler.start()
    logger.info(f"Background scheduler started (dataset check every {settings.REFRESH_MINUTES} min)")


def stop_scheduler():
    """Stop the background scheduler."""
    global scheduler

    if scheduler is not None:
        scheduler.shutdown(wait=False)
        scheduler = None
        logger.info("Background scheduler stopped")


def get_scheduler_status() -> dict:
    """Get scheduler status."""
    if scheduler is None:
        return {"running": False, "jobs": []}

    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run": str(job.next_run_time) if job.next_run_time else None
        })

    return {"running": scheduler.running, "jobs": jobs}


def init_worker():
    """Initialize the worker (call from FastAPI startup)."""
    start_scheduler()
