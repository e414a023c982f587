"""Heartbeat plugin contract — where accepted liveness signals go."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime


class HeartbeatPlugin(ABC):
    """Processes accepted heartbeats from both producers.

    Implementations decide what to do with a heartbeat — append it to the
    heartbeat store, forward it elsewhere, or both.
    """

    @abstractmethod
    async def handle(self, service_name: str, event_time: datetime) -> None:
        """Process one heartbeat.

        Args:
            service_name: Namespaced service name (``push:`` / ``poll:``).
            event_time: When the liveness signal was observed (UTC).
        """
