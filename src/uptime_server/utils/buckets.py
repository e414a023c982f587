"""Pure hour-bucket aggregation and rolling-window helpers.

Nothing in here touches a store. The aggregator and the status view feed
plain sequences in and get plain mappings or lists back.
"""

from __future__ import annotations

import heapq
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timedelta

from uptime_server.utils.time import Time

# Most recent buckets retained per service when grouping raw heartbeats.
DEFAULT_KEEP = 3
WINDOW_HOURS = 48


class Buckets:
    """Static helpers turning heartbeat streams into hourly counts."""

    @staticmethod
    def group_counts(
        events: Iterable[tuple[str, datetime]], keep: int = DEFAULT_KEEP,
    ) -> dict[str, dict[str, int]]:
        """Count heartbeats per service per hour bucket.

        Only the ``keep`` most recent bucket keys survive for each service.
        Keys are canonical UTC strings, so ordering them lexically orders
        them in time.
        """
        grouped: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        for service_name, event_time in events:
            grouped[service_name][Time.hour_bucket(event_time)] += 1

        result: dict[str, dict[str, int]] = {}
        for service_name, counts in grouped.items():
            latest = heapq.nlargest(keep, counts)
            result[service_name] = {bucket: counts[bucket] for bucket in latest}
        return result

    @staticmethod
    def target_buckets(now: datetime) -> list[str]:
        """The current and the previous hour bucket, newest first."""
        return [
            Time.hour_bucket(now),
            Time.hour_bucket(now - timedelta(hours=1)),
        ]

    @staticmethod
    def snapshot_counts(
        service_names: Iterable[str],
        grouped: Mapping[str, Mapping[str, int]],
        buckets: Sequence[str],
    ) -> list[tuple[str, str, int]]:
        """Expand grouped counts to every (service, bucket) pair.

        Pairs without observed heartbeats get a count of 0.
        """
        rows: list[tuple[str, str, int]] = []
        for service_name in service_names:
            counts = grouped.get(service_name, {})
            for bucket in buckets:
                rows.append((service_name, bucket, counts.get(bucket, 0)))
        return rows

    @staticmethod
    def window(
        counts: Mapping[str, int],
        pivot: datetime,
        hours: int = WINDOW_HOURS,
    ) -> list[int | None]:
        """Dense newest-first sample list aligned to ``pivot``.

        Slot ``i`` holds the count for ``pivot - i hours`` or ``None`` when
        no snapshot exists. Trailing ``None`` slots (the oldest end) are
        dropped; interior gaps are kept.
        """
        pivot = Time.truncate_hour(pivot)
        samples = [
            counts.get(Time.hour_bucket(pivot - timedelta(hours=offset)))
            for offset in range(hours)
        ]
        while samples and samples[-1] is None:
            samples.pop()
        return samples
