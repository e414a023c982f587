"""Tests for the status endpoint and the shared-secret guard."""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import timedelta

import httpx
import pytest
from sqlalchemy.exc import OperationalError

from uptime_server.app import create_app
from uptime_server.config import ServiceRegistry, Settings
from uptime_server.dao.status_dao import StatusDAO
from uptime_server.resources.status import StatusResource
from uptime_server.utils.db import Database
from uptime_server.utils.time import Time
from tests.conftest import SERVICES, app_services


@pytest.fixture()
async def secured_client() -> AsyncIterator[httpx.AsyncClient]:
    """Client for an app configured with a shared secret."""
    app = create_app(Settings(
        database_url="sqlite+aiosqlite://",
        jobs_enabled=False,
        secret="hunter2",
        services=SERVICES,
    ))
    await Database.create_tables()
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test",
    ) as ac:
        yield ac
    await Database.close()


@pytest.mark.asyncio
async def test_status_empty(client: httpx.AsyncClient) -> None:
    """With no snapshots every service is listed with no samples."""
    resp = await client.get("/api/status")
    assert resp.status_code == 200
    data = resp.json()
    assert data["pivot"].endswith(":00:00+00:00")
    assert data["pivot"] <= Time.hour_bucket(Time.utcnow())
    assert data["services"] == [
        {"name": "push:backup", "description": "Nightly backup", "samples": []},
        {"name": "poll:web", "description": "Web container", "samples": []},
        {"name": "push:mailer", "description": "Mail relay", "samples": []},
    ]


@pytest.mark.asyncio
async def test_status_after_aggregation(
    client: httpx.AsyncClient, settings: Settings,
) -> None:
    """Pushed heartbeats show up in the current hour once aggregated."""
    for _ in range(2):
        assert (await client.post("/api/heartbeat/tok-backup")).status_code == 204
    heartbeat_service, status_service = app_services()
    await StatusResource(
        registry=ServiceRegistry(settings.services),
        heartbeat_service=heartbeat_service,
        status_service=status_service,
    ).collect()

    data = (await client.get("/api/status")).json()

    by_name = {s["name"]: s["samples"] for s in data["services"]}
    assert by_name["push:backup"][0] == 2
    assert by_name["poll:web"][:2] == [0, 0]
    assert by_name["push:mailer"][:2] == [0, 0]


@pytest.mark.asyncio
async def test_status_interior_gap_is_null(client: httpx.AsyncClient) -> None:
    """Missing hours between stored ones come back as JSON null."""
    _, status_service = app_services()
    pivot = Time.truncate_hour(Time.utcnow())
    await status_service.save_counts([
        ("poll:web", Time.hour_bucket(pivot), 12),
        ("poll:web", Time.hour_bucket(pivot - timedelta(hours=2)), 10),
    ])

    data = (await client.get("/api/status")).json()

    assert data["pivot"] == Time.canonical(pivot)
    assert data["services"][1]["samples"] == [12, None, 10]


@pytest.mark.asyncio
async def test_status_is_cached_briefly(client: httpx.AsyncClient) -> None:
    """A second request inside the cache expiry gets the cached body."""
    first = (await client.get("/api/status")).json()
    _, status_service = app_services()
    await status_service.save_counts([
        ("push:backup", Time.hour_bucket(Time.utcnow()), 5),
    ])

    second = (await client.get("/api/status")).json()

    assert second == first


@pytest.mark.asyncio
async def test_store_failure_is_generic_500(
    client: httpx.AsyncClient, monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A store error on the request path surfaces as a plain 500."""

    async def broken_list(self: StatusDAO, since: str) -> list[object]:
        raise OperationalError("SELECT status_snapshots", {}, Exception("database is locked"))

    monkeypatch.setattr(StatusDAO, "list_snapshots", broken_list)

    resp = await client.get("/api/status")

    assert resp.status_code == 500
    assert "database is locked" not in resp.text


@pytest.mark.asyncio
async def test_guard_rejects_missing_secret(secured_client: httpx.AsyncClient) -> None:
    """Without the Authorization header every route is 401."""
    assert (await secured_client.get("/api/status")).status_code == 401
    assert (await secured_client.post("/api/heartbeat/tok-backup")).status_code == 401
    assert (await secured_client.get("/api/health")).status_code == 401


@pytest.mark.asyncio
async def test_guard_rejects_wrong_secret(secured_client: httpx.AsyncClient) -> None:
    """A wrong header value is 401 and writes nothing."""
    resp = await secured_client.post(
        "/api/heartbeat/tok-backup", headers={"Authorization": "Bearer hunter2"},
    )
    assert resp.status_code == 401
    heartbeats, _ = app_services()
    assert await heartbeats.list_recent(Time.utcnow() - timedelta(minutes=5)) == []


@pytest.mark.asyncio
async def test_guard_accepts_exact_secret(secured_client: httpx.AsyncClient) -> None:
    """The exact secret in Authorization passes."""
    headers = {"Authorization": "hunter2"}
    assert (await secured_client.post("/api/heartbeat/tok-backup", headers=headers)).status_code == 204
    assert (await secured_client.get("/api/status", headers=headers)).status_code == 200
