"""Hourly status snapshot model."""

from __future__ import annotations

import uuid

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from uptime_server.utils.db import Base


class StatusSnapshot(Base):
    """Heartbeat count for one service in one hour bucket.

    At most one row per (service_name, hour_bucket); the aggregator keeps
    that true by upserting, not through a table constraint.
    """

    __tablename__ = "status_snapshots"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: uuid.uuid4().hex
    )
    service_name: Mapped[str] = mapped_column(String(255), index=True)
    hour_bucket: Mapped[str] = mapped_column(String(32), index=True)  # canonical UTC hour
    count: Mapped[int] = mapped_column(Integer, default=0)
