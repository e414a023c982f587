"""Status controller — thin HTTP adapter for the rolling-window view."""

from __future__ import annotations

from litestar import Controller, get

from uptime_server.resources.status import StatusResource


class StatusController(Controller):
    """HTTP adapter for the status page data."""

    path = "/api"

    # Expiry comes from ResponseCacheConfig.default_expiration.
    @get("/status", cache=True)
    async def status(self, status_resource: StatusResource) -> dict[str, object]:
        """Return the last 48 hours of hourly counts per service."""
        return await status_resource.snapshot()
