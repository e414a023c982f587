"""Shared fixtures for uptime_server tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from uptime_server.app import create_app
from uptime_server.config import ServiceRegistry, Settings
from uptime_server.dao.heartbeat_dao import HeartbeatDAO
from uptime_server.dao.status_dao import StatusDAO
from uptime_server.services.heartbeat_service import HeartbeatService
from uptime_server.services.status_service import StatusService
from uptime_server.utils.db import Database

SERVICES = [
    {"type": "push", "name": "backup", "description": "Nightly backup", "token": "tok-backup"},
    {"type": "poll", "name": "web", "description": "Web container", "container": "web"},
    {"type": "push", "name": "mailer", "description": "Mail relay", "token": "tok-mailer"},
]


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        """Move the clock forward by a timedelta built from kwargs."""
        self.now = self.now + timedelta(**kwargs)


def at(hour: int, minute: int = 0, second: int = 0, day: int = 19) -> datetime:
    """UTC instant on 2026-10-<day>."""
    return datetime(2026, 10, day, hour, minute, second, tzinfo=timezone.utc)


@pytest.fixture()
def settings() -> Settings:
    """Test settings with in-memory SQLite and background jobs disabled."""
    return Settings(
        database_url="sqlite+aiosqlite://",
        jobs_enabled=False,
        services=SERVICES,
    )


@pytest.fixture()
def registry(settings: Settings) -> ServiceRegistry:
    """Registry over the test services."""
    return ServiceRegistry(settings.services)


@pytest.fixture()
async def pool() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Fresh in-memory database with tables created."""
    session_pool = Database.init("sqlite+aiosqlite://")
    await Database.create_tables()
    yield session_pool
    await Database.close()


@pytest.fixture()
def heartbeat_service(pool: async_sessionmaker[AsyncSession]) -> HeartbeatService:
    """HeartbeatService bound to the test database."""
    return HeartbeatService(HeartbeatDAO(pool))


@pytest.fixture()
def status_service(pool: async_sessionmaker[AsyncSession]) -> StatusService:
    """StatusService bound to the test database."""
    return StatusService(StatusDAO(pool))


@pytest.fixture()
async def client(settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    """Async HTTP client wired to the test app.

    The ASGI transport does not run the lifespan, so tables are created
    here and jobs never start.
    """
    app = create_app(settings)
    await Database.create_tables()
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    await Database.close()


def app_services() -> tuple[HeartbeatService, StatusService]:
    """Services bound to whatever pool the app under test initialised."""
    pool = Database.get_pool()
    return HeartbeatService(HeartbeatDAO(pool)), StatusService(StatusDAO(pool))
