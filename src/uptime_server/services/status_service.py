"""Business logic for hourly status snapshots."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from uptime_server.dao.status_dao import StatusDAO


class StatusService:
    """Built once at startup with its DAO pre-wired.

    Snapshots are written as full recomputes, so re-running with the same
    input leaves every stored count unchanged.
    """

    def __init__(self, status_dao: StatusDAO) -> None:
        self._dao = status_dao

    async def save_counts(self, rows: Iterable[tuple[str, str, int]]) -> int:
        """Upsert ``(service_name, hour_bucket, count)`` rows.

        Read-check-then-insert-or-update per row, committed as one unit of
        work: a failure part-way writes nothing. Returns rows written.
        """
        written = 0
        async with self._dao.transaction():
            for service_name, hour_bucket, count in rows:
                snapshot = await self._dao.find_snapshot(service_name, hour_bucket)
                if snapshot is None:
                    await self._dao.create_snapshot(
                        service_name=service_name,
                        hour_bucket=hour_bucket,
                        count=count,
                    )
                else:
                    snapshot.count = count
                written += 1
            await self._dao.commit()
        return written

    async def find_count(self, service_name: str, hour_bucket: str) -> int | None:
        """Stored count for one (service, bucket) pair, or None."""
        async with self._dao.transaction():
            snapshot = await self._dao.find_snapshot(service_name, hour_bucket)
        return None if snapshot is None else snapshot.count

    async def counts_since(self, since: str) -> dict[str, dict[str, int]]:
        """Stored counts grouped as ``{service_name: {hour_bucket: count}}``."""
        async with self._dao.transaction():
            rows = await self._dao.list_snapshots(since)
        grouped: dict[str, dict[str, int]] = defaultdict(dict)
        for row in rows:
            grouped[row.service_name][row.hour_bucket] = row.count
        return dict(grouped)

    async def purge_before(self, cutoff: str) -> int:
        """Delete snapshots with a bucket before ``cutoff``. Returns count."""
        async with self._dao.transaction():
            count = await self._dao.delete_snapshots(cutoff)
            await self._dao.commit()
        return count
