"""Heartbeat controller — thin HTTP adapter for push ingest."""

from __future__ import annotations

from litestar import Controller, post
from litestar.exceptions import NotFoundException

from uptime_server.resources.heartbeat import HeartbeatResource, ServiceNotFoundError


class HeartbeatController(Controller):
    """HTTP adapter for token-authenticated push heartbeats."""

    path = "/api/heartbeat"

    @post("/{token:str}", status_code=204)
    async def heartbeat(
        self, token: str, heartbeat_resource: HeartbeatResource,
    ) -> None:
        """Record a heartbeat for the service owning the token."""
        try:
            await heartbeat_resource.ingest(token)
        except ServiceNotFoundError as error:
            raise NotFoundException(detail=str(error)) from error
