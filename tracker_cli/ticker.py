"""APScheduler-backed tick source for the rest timer."""

from __future__ import annotations

import logging
import uuid
from typing import Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler

from workout_engine.models.enums import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class SchedulerTickHandle:
    """Removes its interval job on cancel. Cancelling twice is harmless."""

    def __init__(self, scheduler: BackgroundScheduler, job_id: str) -> None:
        self._scheduler = scheduler
        self.job_id = job_id
        self._cancelled = False

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        try:
            self._scheduler.remove_job(self.job_id)
        except JobLookupError:
            logger.debug("Tick job %s already removed", self.job_id)


class SchedulerTickSource:
    """Schedules a once-per-second callback on a background scheduler.

    The scheduler is started lazily on the first :meth:`schedule` call and
    stopped by :meth:`shutdown`. Pass a scheduler in to share one with
    other jobs (or to substitute a mock in tests).
    """

    def __init__(
        self,
        scheduler: BackgroundScheduler | None = None,
        interval_s: int = TICK_INTERVAL_SECONDS,
    ) -> None:
        self._scheduler = scheduler if scheduler is not None else BackgroundScheduler()
        self._interval = interval_s

    @property
    def scheduler(self) -> BackgroundScheduler:
        return self._scheduler

    def schedule(self, callback: Callable[[], None]) -> SchedulerTickHandle:
        if not self._scheduler.running:
            self._scheduler.start()
        job_id = f"rest_tick_{uuid.uuid4().hex[:8]}"
        self._scheduler.add_job(
            callback,
            "interval",
            seconds=self._interval,
            id=job_id,
            max_instances=1,
            coalesce=True,
        )
        return SchedulerTickHandle(self._scheduler, job_id)

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
