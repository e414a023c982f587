"""Configuration package — re-exports for convenience."""

from uptime_server.config.loader import ConfigLoader
from uptime_server.config.services import (
    PollService,
    PushService,
    ServiceRegistry,
)
from uptime_server.config.settings import Settings

__all__ = [
    "ConfigLoader",
    "PollService",
    "PushService",
    "ServiceRegistry",
    "Settings",
]
