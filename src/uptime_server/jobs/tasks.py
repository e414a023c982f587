"""The three background jobs: aggregate, poll containers, sweep."""

from __future__ import annotations

from datetime import timedelta

from uptime_server.config import Settings
from uptime_server.jobs.scheduler import (
    AlignedSchedule,
    IntervalSchedule,
    RepeatingJob,
)
from uptime_server.resources.heartbeat import HeartbeatResource
from uptime_server.resources.retention import RetentionResource
from uptime_server.resources.status import StatusResource


class RetentionSweepError(Exception):
    """Raised when at least one retention step failed."""


class JobFactory:
    """Builds the background jobs from pre-wired resources. All methods are static."""

    @staticmethod
    def collect_status(settings: Settings, status: StatusResource) -> RepeatingJob:
        """Aggregator: recompute hourly snapshots on a fixed interval."""
        return RepeatingJob(
            "collect status",
            status.collect,
            IntervalSchedule(timedelta(seconds=settings.aggregate_interval_seconds)),
        )

    @staticmethod
    def check_containers(
        settings: Settings, heartbeat: HeartbeatResource,
    ) -> RepeatingJob:
        """Poll producer: container states on aligned wall-clock ticks."""
        return RepeatingJob(
            "check containers",
            heartbeat.poll_containers,
            AlignedSchedule(settings.poll_step_minutes),
        )

    @staticmethod
    def clean_database(
        settings: Settings, retention: RetentionResource,
    ) -> RepeatingJob:
        """Retention sweeper: evict stale rows from both tables."""

        async def sweep() -> dict[str, int | None]:
            result = await retention.sweep()
            failed = sorted(step for step, count in result.items() if count is None)
            if failed:
                raise RetentionSweepError(f"cleanup failed for: {', '.join(failed)}")
            return result

        return RepeatingJob(
            "clean database",
            sweep,
            IntervalSchedule(timedelta(seconds=settings.sweep_interval_seconds)),
        )
