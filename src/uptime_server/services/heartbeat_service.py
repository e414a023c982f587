"""Business logic for raw heartbeat ingestion and retention."""

from __future__ import annotations

from datetime import datetime

from uptime_server.dao.heartbeat_dao import HeartbeatDAO


class HeartbeatService:
    """Built once at startup with its DAO pre-wired."""

    def __init__(self, heartbeat_dao: HeartbeatDAO) -> None:
        self._dao = heartbeat_dao

    async def record_heartbeat(
        self, service_name: str, event_time: datetime,
    ) -> None:
        """Append one heartbeat. Every call is a distinct liveness signal."""
        async with self._dao.transaction():
            await self._dao.create_heartbeat(
                service_name=service_name, event_time=event_time,
            )
            await self._dao.commit()

    async def list_recent(self, since: datetime) -> list[tuple[str, datetime]]:
        """Return ``(service_name, event_time)`` pairs at or after ``since``."""
        async with self._dao.transaction():
            rows = await self._dao.list_heartbeats(since)
        return [(row.service_name, row.event_time) for row in rows]

    async def purge_before(self, cutoff: datetime) -> int:
        """Delete heartbeats older than ``cutoff``. Returns count deleted."""
        async with self._dao.transaction():
            count = await self._dao.delete_heartbeats(cutoff)
            await self._dao.commit()
        return count
