"""
Daily generation trigger.

Runs generate_for_date(today) for every user once per day at
settings.SCHEDULER_RUN_AT (wall clock in settings.TIMEZONE). Started and
stopped by the FastAPI lifespan when SCHEDULER_ENABLED is true; the CLI
(`python -m app.cli generate`) is the alternative for OS-level cron.

A failed tick is logged and the loop carries on; the next tick or a manual
call re-runs the date, and generation is idempotent.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional

from sqlalchemy.orm import Session

from app.core.errors import GenerationError
from app.services.generator import GenerationResult, generate_for_date
from app.services.periods import Calendar

logger = logging.getLogger(__name__)


def seconds_until(run_at: time, now: datetime) -> float:
    """Seconds from `now` to the next occurrence of wall-clock `run_at`."""
    target = datetime.combine(now.date(), run_at)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


class DailyGenerationScheduler:
    """In-process once-a-day ticker around generate_for_date."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        calendar: Calendar,
        run_at: time,
    ) -> None:
        self._session_factory = session_factory
        self._calendar = calendar
        self._run_at = run_at
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self, day: Optional[date] = None) -> GenerationResult:
        """Generate for `day` (default: today) across all users."""
        target = day or self._calendar.today()
        db = self._session_factory()
        try:
            return generate_for_date(db, target)
        finally:
            db.close()

    async def _loop(self) -> None:
        while True:
            delay = seconds_until(self._run_at, self._calendar.now())
            logger.info("Next activity log generation in %.0fs", delay)
            await asyncio.sleep(delay)
            try:
                result = await asyncio.to_thread(self.run_once)
            except GenerationError as exc:
                logger.error("Scheduled generation failed: %s", exc.message)
                continue
            except Exception:
                logger.exception("Scheduled generation crashed")
                continue
            logger.info(
                "Scheduled generation for %s created %d logs (%s)",
                result.target_date, result.created, ",".join(result.frequency_names),
            )

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._loop(), name="daily-activity-log-generation"
        )
        logger.info("Daily generation scheduler started (run at %s)", self._run_at)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Daily generation scheduler stopped")
