"""Timezone and hour-bucket helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


class Time:
    """Static helpers for datetime normalization and bucketing.

    Every instant is normalized to UTC before it is truncated or
    rendered, so canonical strings sort in temporal order.
    """

    @staticmethod
    def utcnow() -> datetime:
        """Return timezone-aware UTC now."""
        return datetime.now(timezone.utc)

    @staticmethod
    def ensure_utc(dt: datetime) -> datetime:
        """Ensure a datetime is UTC-aware. SQLite may strip timezone info."""
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    @staticmethod
    def canonical(dt: datetime) -> str:
        """Render an instant as a second-precision UTC ISO 8601 string."""
        return Time.ensure_utc(dt).isoformat(timespec="seconds")

    @staticmethod
    def truncate_hour(dt: datetime) -> datetime:
        """Zero the minutes, seconds and microseconds of a UTC instant."""
        return Time.ensure_utc(dt).replace(minute=0, second=0, microsecond=0)

    @staticmethod
    def hour_bucket(dt: datetime) -> str:
        """Canonical hour bucket key, e.g. ``2026-10-19T09:00:00+00:00``."""
        return Time.canonical(Time.truncate_hour(dt))

    @staticmethod
    def next_aligned(now: datetime, step_minutes: int) -> datetime:
        """Next wall-clock boundary that is a multiple of ``step_minutes``.

        The result is strictly after ``now``: an instant already sitting
        on a boundary yields the following one.
        """
        now = Time.ensure_utc(now)
        floored = now.replace(
            minute=now.minute // step_minutes * step_minutes,
            second=0,
            microsecond=0,
        )
        return floored + timedelta(minutes=step_minutes)
