"""Repeating background jobs with an explicit next-fire computation.

A Schedule decides when a job fires, the job's action decides what runs.
Clock and sleep are injectable so tests can drive time by hand.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime, timedelta

from uptime_server.utils.time import Time

logger = logging.getLogger(__name__)

Action = Callable[[], Awaitable[object]]
Clock = Callable[[], datetime]
Sleep = Callable[[float], Awaitable[None]]


class Schedule(ABC):
    """Computes when a job should fire next."""

    @abstractmethod
    def next_fire(self, now: datetime, *, first: bool) -> datetime:
        """Return the next fire time.

        Args:
            now: Current instant.
            first: True before the job has ever run.
        """


class IntervalSchedule(Schedule):
    """Fixed delay between the end of one run and the start of the next."""

    def __init__(self, every: timedelta, *, immediate: bool = True) -> None:
        self.every = every
        self.immediate = immediate

    def next_fire(self, now: datetime, *, first: bool) -> datetime:
        if first and self.immediate:
            return now
        return now + self.every


class AlignedSchedule(Schedule):
    """Fires on wall-clock multiples of ``step_minutes``, synchronized across restarts."""

    def __init__(self, step_minutes: int) -> None:
        self.step_minutes = step_minutes

    def next_fire(self, now: datetime, *, first: bool) -> datetime:
        return Time.next_aligned(now, self.step_minutes)


class RepeatingJob:
    """One background job. Not re-entrant: a single task owns the loop."""

    def __init__(
        self,
        name: str,
        action: Action,
        schedule: Schedule,
        *,
        clock: Clock = Time.utcnow,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.name = name
        self._action = action
        self._schedule = schedule
        self._clock = clock
        self._sleep = sleep
        self.runs = 0
        self.last_success_at: datetime | None = None
        self.last_failure_at: datetime | None = None
        self.last_error: str | None = None
        self.last_result: object = None

    async def run_once(self) -> bool:
        """Run the action once. Returns True on success.

        Failures are logged and recorded; the next scheduled tick retries.
        Cancellation is not caught.
        """
        logger.info("execute task: %s", self.name)
        self.runs += 1
        try:
            self.last_result = await self._action()
        except Exception as error:
            self.last_failure_at = self._clock()
            self.last_error = str(error) or type(error).__name__
            logger.exception("task fail: name=%s", self.name)
            return False
        self.last_success_at = self._clock()
        self.last_error = None
        logger.info("task success: name=%s, result=%s", self.name, self.last_result)
        return True

    async def run_forever(self) -> None:
        """Sleep until the next fire time, run, repeat until cancelled.

        The next fire is computed from the later of now and the previous
        fire time, so a sleep that wakes early never fires one tick twice.
        """
        last_fire: datetime | None = None
        while True:
            now = self._clock()
            anchor = now if last_fire is None else max(now, last_fire)
            fire_at = self._schedule.next_fire(anchor, first=last_fire is None)
            delay = (fire_at - now).total_seconds()
            if delay > 0:
                await self._sleep(delay)
            last_fire = fire_at
            await self.run_once()

    def describe(self) -> dict[str, object]:
        """Latest outcome, JSON-safe."""
        healthy: bool | None = None
        if self.last_success_at is not None or self.last_failure_at is not None:
            healthy = self.last_error is None
        return {
            "runs": self.runs,
            "healthy": healthy,
            "last_success_at": (
                Time.canonical(self.last_success_at) if self.last_success_at else None
            ),
            "last_failure_at": (
                Time.canonical(self.last_failure_at) if self.last_failure_at else None
            ),
            "last_error": self.last_error,
        }


class JobRunner:
    """Owns one asyncio task per job for the lifetime of the app."""

    def __init__(self, jobs: Sequence[RepeatingJob]) -> None:
        self.jobs = list(jobs)
        self._tasks: list[asyncio.Task[None]] = []

    @property
    def running(self) -> bool:
        """True while job tasks are alive."""
        return any(not task.done() for task in self._tasks)

    def start(self) -> None:
        """Spawn the job loops. Calling twice does not duplicate them."""
        if self.running:
            return
        self._tasks = [
            asyncio.create_task(job.run_forever(), name=f"job:{job.name}")
            for job in self.jobs
        ]
        logger.info("started %d background jobs", len(self._tasks))

    async def stop(self) -> None:
        """Cancel every job loop and wait for them to unwind."""
        for task in self._tasks:
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        logger.info("background jobs stopped")

    def describe(self) -> dict[str, dict[str, object]]:
        """Latest outcome of each job keyed by job name."""
        return {job.name: job.describe() for job in self.jobs}
