"""Retention resource — evict heartbeats and snapshots past the horizon."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from uptime_server.services.heartbeat_service import HeartbeatService
from uptime_server.services.status_service import StatusService
from uptime_server.utils.time import Time

logger = logging.getLogger(__name__)

RETENTION = timedelta(days=3)


class RetentionResource:
    """Bulk-deletes everything older than the retention horizon."""

    def __init__(
        self,
        *,
        heartbeat_service: HeartbeatService,
        status_service: StatusService,
        clock: Callable[[], datetime] = Time.utcnow,
    ) -> None:
        self._heartbeats = heartbeat_service
        self._status = status_service
        self._clock = clock

    async def sweep(self) -> dict[str, int | None]:
        """Delete stale heartbeats, then stale snapshots.

        The two deletes are independent: a store failure in one is logged
        and the other still runs. A failed step reports ``None``.
        """
        cutoff = self._clock() - RETENTION
        result: dict[str, int | None] = {"heartbeats": None, "status": None}

        try:
            result["heartbeats"] = await self._heartbeats.purge_before(cutoff)
            logger.debug("heartbeats cleaned: count=%d", result["heartbeats"])
        except SQLAlchemyError:
            logger.exception("heartbeat cleanup failed")

        try:
            result["status"] = await self._status.purge_before(Time.canonical(cutoff))
            logger.debug("status cleaned: count=%d", result["status"])
        except SQLAlchemyError:
            logger.exception("status cleanup failed")

        return result
