"""Async engine for the heartbeat and snapshot tables."""

from __future__ import annotations

from typing import Any, ClassVar

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    """Declarative base for the heartbeat and snapshot models."""


class Database:
    """Process-wide engine and session factory, held as class-level state.

    Database.init() runs once in the app factory; DAOs receive the
    returned session factory. In-memory SQLite shares one connection,
    otherwise each session would see its own empty database.
    """

    _engine: ClassVar[AsyncEngine | None] = None
    _pool: ClassVar[async_sessionmaker[AsyncSession] | None] = None

    @staticmethod
    def is_memory_url(database_url: str) -> bool:
        """True for ``sqlite+aiosqlite://`` and ``sqlite+aiosqlite:///:memory:``."""
        url = make_url(database_url)
        return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")

    @staticmethod
    def init(database_url: str) -> async_sessionmaker[AsyncSession]:
        """Create the engine and session factory. Returns the factory."""
        kwargs: dict[str, Any] = {"echo": False}
        if Database.is_memory_url(database_url):
            kwargs["poolclass"] = StaticPool
            kwargs["connect_args"] = {"check_same_thread": False}
        Database._engine = create_async_engine(database_url, **kwargs)
        Database._pool = async_sessionmaker(Database._engine, expire_on_commit=False)
        return Database._pool

    @staticmethod
    def get_pool() -> async_sessionmaker[AsyncSession]:
        """Return the session factory built by Database.init()."""
        assert Database._pool is not None, "call Database.init() first"
        return Database._pool

    @staticmethod
    async def create_tables() -> None:
        """Create ``heartbeats`` and ``status_snapshots`` if missing."""
        import uptime_server.models

        _ = uptime_server.models  # registers both tables on Base.metadata
        assert Database._engine is not None, "call Database.init() first"
        async with Database._engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)

    @staticmethod
    async def close() -> None:
        """Dispose the engine. Safe to call when nothing was initialised."""
        if Database._engine is None:
            return
        await Database._engine.dispose()
        Database._engine = None
        Database._pool = None
