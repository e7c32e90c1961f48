from __future__ import annotations

from typing import Callable
import logging

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)

TICK_JOB_ID = "practice-tick"


class PracticeTimer:
    """One recurring trigger at a time, owned by a practice session."""

    def __init__(self, timezone: str = "UTC", interval_seconds: int = 1) -> None:
        self.scheduler = BackgroundScheduler(timezone=timezone)
        self.interval_seconds = interval_seconds

    @property
    def armed(self) -> bool:
        return self.scheduler.running and self.scheduler.get_job(TICK_JOB_ID) is not None

    def arm(self, job: Callable[[], None]) -> None:
        if not self.scheduler.running:
            self.scheduler.start()
        # fixed id + replace_existing keeps a single trigger across re-arms
        self.scheduler.add_job(
            job,
            "interval",
            seconds=self.interval_seconds,
            id=TICK_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.debug("Practice timer armed")

    def disarm(self) -> None:
        if not self.scheduler.running:
            return
        try:
            self.scheduler.remove_job(TICK_JOB_ID)
        except JobLookupError:
            return
        logger.debug("Practice timer disarmed")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
