"""Status resource — hourly aggregation and the rolling-window view."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

from uptime_server.config.services import ServiceRegistry
from uptime_server.services.heartbeat_service import HeartbeatService
from uptime_server.services.status_service import StatusService
from uptime_server.utils.buckets import WINDOW_HOURS, Buckets
from uptime_server.utils.time import Time

LOOKBACK = timedelta(hours=3)
VIEW_SPAN = timedelta(days=2)


class StatusResource:
    """Turns raw heartbeats into snapshots and snapshots into a status view.

    Built once at startup with all dependencies pre-wired.
    """

    def __init__(
        self,
        *,
        registry: ServiceRegistry,
        heartbeat_service: HeartbeatService,
        status_service: StatusService,
        clock: Callable[[], datetime] = Time.utcnow,
    ) -> None:
        self._registry = registry
        self._heartbeats = heartbeat_service
        self._status = status_service
        self._clock = clock

    async def collect(self) -> int:
        """Recompute current- and previous-hour counts for every service.

        Every configured service gets a row for both buckets, 0 when it
        sent nothing. Counts are full recomputes from raw heartbeats, so
        repeated runs never lower a count on partial data. Returns the
        number of snapshots written.
        """
        now = self._clock()
        events = await self._heartbeats.list_recent(now - LOOKBACK)
        grouped = Buckets.group_counts(events)
        rows = Buckets.snapshot_counts(
            self._registry.names(), grouped, Buckets.target_buckets(now),
        )
        return await self._status.save_counts(rows)

    async def snapshot(self) -> dict[str, object]:
        """Last 48 hours of hourly counts per configured service.

        Returns:
            Dict with ``pivot`` (current hour bucket) and ``services``, each
            with ``name``, ``description`` and newest-first ``samples``
            where ``None`` marks an hour without a snapshot.
        """
        now = self._clock()
        pivot = Time.truncate_hour(now)
        counts = await self._status.counts_since(Time.canonical(now - VIEW_SPAN))
        services = [
            {
                "name": service.display_name(),
                "description": service.description,
                "samples": Buckets.window(
                    counts.get(service.service_name, {}), pivot, WINDOW_HOURS,
                ),
            }
            for service in self._registry
        ]
        return {"pivot": Time.canonical(pivot), "services": services}
