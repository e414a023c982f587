"""Data access for Heartbeat model."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import datetime
from typing import Any, cast

from sqlalchemy import CursorResult, delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from uptime_server.models.heartbeat import Heartbeat

_active_conn: ContextVar[AsyncSession] = ContextVar("_heartbeat_dao_conn")


class HeartbeatDAO:
    """Append-only heartbeat store.

    Use transaction() to wrap a group of operations in one unit of work.
    """

    def __init__(self, pool: async_sessionmaker[AsyncSession]) -> None:
        self._pool = pool

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Open a unit of work. All DAO calls inside share one connection."""
        async with self._pool() as connection:
            context_token = _active_conn.set(connection)
            try:
                yield
            finally:
                _active_conn.reset(context_token)

    def _conn(self) -> AsyncSession:
        """Return the current unit-of-work connection."""
        return _active_conn.get()

    async def create_heartbeat(
        self, *, service_name: str, event_time: datetime,
    ) -> Heartbeat:
        """Insert a single heartbeat event."""
        heartbeat = Heartbeat(service_name=service_name, event_time=event_time)
        self._conn().add(heartbeat)
        await self._conn().flush()
        return heartbeat

    async def list_heartbeats(
        self, since: datetime, until: datetime | None = None,
    ) -> list[Heartbeat]:
        """Return heartbeats with ``since <= event_time`` (and ``< until``)."""
        query = select(Heartbeat).where(Heartbeat.event_time >= since)
        if until is not None:
            query = query.where(Heartbeat.event_time < until)
        result = await self._conn().execute(query.order_by(Heartbeat.event_time))
        return list(result.scalars().all())

    async def delete_heartbeats(self, before: datetime) -> int:
        """Delete heartbeats older than ``before``. Returns count deleted."""
        result = await self._conn().execute(
            delete(Heartbeat).where(Heartbeat.event_time < before)
        )
        return cast(CursorResult[Any], result).rowcount

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self._conn().commit()
