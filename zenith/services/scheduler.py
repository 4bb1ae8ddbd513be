"""
Background scheduler for the daily cleanup job.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from zenith.core.config import settings
from zenith.services.cleanup import run_cleanup_job

logger = logging.getLogger(__name__)


def seconds_until_next_run(now: datetime, run_hour: int) -> float:
    """Seconds from ``now`` until the next ``run_hour``:00 UTC."""
    now = now.astimezone(timezone.utc)
    next_run = now.replace(hour=run_hour, minute=0, second=0, microsecond=0)
    if next_run <= now:
        next_run += timedelta(days=1)
    return (next_run - now).total_seconds()


class CleanupScheduler:
    """
    Runs ``run_cleanup_job`` once a day on the event loop's default executor.

    The job does blocking database work, so each run is handed to a worker
    thread and request handling is never blocked by it.
    """

    def __init__(self, job: Callable[[], Any] = run_cleanup_job, run_hour: Optional[int] = None):
        self.job = job
        self.run_hour = settings.CLEANUP_RUN_HOUR if run_hour is None else run_hour
        self.is_running = False
        self.scheduler_task: Optional[asyncio.Task] = None
        self.last_run_at: Optional[datetime] = None
        self.last_result: Any = None

    async def start(self):
        """Start the background scheduling task."""
        if self.is_running:
            logger.warning("Cleanup scheduler is already running")
            return

        self.is_running = True
        self.scheduler_task = asyncio.create_task(self._scheduler_loop())
        logger.info(f"Started cleanup scheduler, daily at {self.run_hour:02d}:00 UTC")

    async def stop(self):
        """Stop the background scheduling task."""
        if not self.is_running:
            return

        self.is_running = False
        if self.scheduler_task:
            self.scheduler_task.cancel()
            try:
                await self.scheduler_task
            except asyncio.CancelledError:
                pass

        logger.info("Stopped cleanup scheduler")

    async def run_once(self):
        """Run the job now in a worker thread."""
        self.last_result = await asyncio.to_thread(self.job)
        self.last_run_at = datetime.now(timezone.utc)
        return self.last_result

    async def _scheduler_loop(self):
        while self.is_running:
            try:
                delay = seconds_until_next_run(datetime.now(timezone.utc), self.run_hour)
                await asyncio.sleep(delay)
                await self.run_once()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in cleanup scheduler loop: {e}")
                await asyncio.sleep(60)

    def get_status(self) -> Dict[str, Any]:
        return {
            "is_running": self.is_running,
            "run_hour_utc": self.run_hour,
            "last_run_at": self.last_run_at.isoformat() if self.last_run_at else None,
        }


# Global scheduler instance
_cleanup_scheduler: Optional[CleanupScheduler] = None


def get_cleanup_scheduler() -> CleanupScheduler:
    global _cleanup_scheduler
    if _cleanup_scheduler is None:
        _cleanup_scheduler = CleanupScheduler()
    return _cleanup_scheduler


async def start_cleanup_scheduler():
    await get_cleanup_scheduler().start()


async def stop_cleanup_scheduler():
    if _cleanup_scheduler is not None:
        await _cleanup_scheduler.stop()
