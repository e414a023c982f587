"""Data access for StatusSnapshot model."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any, cast

from sqlalchemy import CursorResult, delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from uptime_server.models.status import StatusSnapshot

_active_conn: ContextVar[AsyncSession] = ContextVar("_status_dao_conn")


class StatusDAO:
    """Keyed, time-range-queryable snapshot store.

    Hour buckets are canonical UTC strings, so range filters compare
    them lexically. Use transaction() to wrap a group of operations in
    one unit of work.
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

    async def find_snapshot(
        self, service_name: str, hour_bucket: str,
    ) -> StatusSnapshot | None:
        """Find the snapshot for one (service, bucket) pair."""
        result = await self._conn().execute(
            select(StatusSnapshot).where(
                StatusSnapshot.service_name == service_name,
                StatusSnapshot.hour_bucket == hour_bucket,
            )
        )
        return result.scalars().first()

    async def create_snapshot(
        self, *, service_name: str, hour_bucket: str, count: int,
    ) -> StatusSnapshot:
        """Insert a new snapshot row."""
        snapshot = StatusSnapshot(
            service_name=service_name,
            hour_bucket=hour_bucket,
            count=count,
        )
        self._conn().add(snapshot)
        await self._conn().flush()
        return snapshot

    async def list_snapshots(self, since: str) -> list[StatusSnapshot]:
        """Return snapshots whose bucket is at or after ``since``."""
        result = await self._conn().execute(
            select(StatusSnapshot)
            .where(StatusSnapshot.hour_bucket >= since)
            .order_by(StatusSnapshot.hour_bucket)
        )
        return list(result.scalars().all())

    async def delete_snapshots(self, before: str) -> int:
        """Delete snapshots whose bucket is before ``before``. Returns count."""
        result = await self._conn().execute(
            delete(StatusSnapshot).where(StatusSnapshot.hour_bucket < before)
        )
        return cast(CursorResult[Any], result).rowcount

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self._conn().commit()
