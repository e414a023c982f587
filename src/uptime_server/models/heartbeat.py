"""Raw heartbeat event model."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from uptime_server.utils.db import Base


class Heartbeat(Base):
    """One liveness signal for a namespaced service. Immutable once written."""

    __tablename__ = "heartbeats"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: uuid.uuid4().hex
    )
    service_name: Mapped[str] = mapped_column(String(255), index=True)
    event_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        index=True,
        default=lambda: datetime.now(timezone.utc),
    )
