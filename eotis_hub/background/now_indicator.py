"""
Current-time indicator refreshed by a recurring APScheduler job.

The indicator caches "now" once per interval (60 s by default) so every
layout request within the same minute draws the line at the same place.
It owns exactly one job on the shared scheduler and removes it on stop();
a tick that fires after stop() does nothing.
"""

import logging
from datetime import datetime, tzinfo
from typing import Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler

from eotis_hub.features.calendar.layout import current_time_position
from eotis_hub.features.calendar.models import NowPosition, ViewWindow
from eotis_hub.features.calendar.timegrid import HOUR_HEIGHT

logger = logging.getLogger(__name__)

NOW_INDICATOR_JOB_ID = "calendar_now_indicator"
DEFAULT_INTERVAL_SECONDS = 60


class NowIndicator:
    """Cancellable recurring refresh of the current instant."""

    def __init__(
        self,
        scheduler: BaseScheduler,
        interval_seconds: int = DEFAULT_INTERVAL_SECONDS,
        tz: tzinfo | None = None,
        clock: Callable[[], datetime] | None = None,
        job_id: str = NOW_INDICATOR_JOB_ID,
    ):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self.scheduler = scheduler
        self.interval_seconds = interval_seconds
        self.job_id = job_id
        self._clock = clock or (lambda: datetime.now(tz))
        self._now: datetime = self._clock()
        self._running = False
        self._listeners: list[Callable[[datetime], None]] = []

    @property
    def running(self) -> bool:
        return self._running

    @property
    def now(self) -> datetime:
        """Instant captured by the last tick."""
        return self._now

    def subscribe(self, listener: Callable[[datetime], None]) -> None:
        """Call `listener(now)` after every tick."""
        self._listeners.append(listener)

    def start(self) -> None:
        """Register the recurring job. Calling start() twice keeps one job."""
        self._now = self._clock()
        self.scheduler.add_job(
            self.tick,
            "interval",
            seconds=self.interval_seconds,
            id=self.job_id,
            replace_existing=True,
        )
        self._running = True
        logger.info(f"🕒 Now indicator started (every {self.interval_seconds}s)")

    def stop(self) -> None:
        """Cancel the recurring job. Safe to call more than once."""
        if not self._running:
            return
        self._running = False
        try:
            self.scheduler.remove_job(self.job_id)
        except JobLookupError:
            pass  # Job already gone (scheduler shut down first)
        logger.info("🕒 Now indicator stopped.")

    def tick(self) -> None:
        """Scheduler callback. No-op once stopped."""
        if not self._running:
            return
        self._now = self._clock()
        for listener in list(self._listeners):
            try:
                listener(self._now)
            except Exception as e:
                logger.error(f"Now indicator listener failed: {e}")

    def position(self, window: ViewWindow, hour_height: float = HOUR_HEIGHT) -> NowPosition | None:
        """Indicator position for `window` at the last ticked instant."""
        return current_time_position(window, hour_height, now=self._now)
