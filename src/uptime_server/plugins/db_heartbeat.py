"""Database heartbeat plugin — append heartbeats to the heartbeats table."""

from __future__ import annotations

from datetime import datetime

from uptime_server.plugins.contracts.heartbeat import HeartbeatPlugin
from uptime_server.services.heartbeat_service import HeartbeatService


class DbHeartbeatPlugin(HeartbeatPlugin):
    """Insert one row into the heartbeats table per call.

    No deduplication — each call is a distinct liveness signal.
    """

    def __init__(self, heartbeat_service: HeartbeatService) -> None:
        self._service = heartbeat_service

    async def handle(self, service_name: str, event_time: datetime) -> None:
        """Append the heartbeat."""
        await self._service.record_heartbeat(service_name, event_time)
