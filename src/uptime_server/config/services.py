"""Monitored service configuration — push (token) and poll (container) entries."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

PUSH_PREFIX = "push:"
POLL_PREFIX = "poll:"


class PushService(BaseModel):
    """A target that proves liveness by calling in with a secret token."""

    type: Literal["push"] = "push"
    name: str
    description: str = ""
    token: str

    @property
    def service_name(self) -> str:
        """Namespaced name used as the heartbeat and snapshot key."""
        return f"{PUSH_PREFIX}{self.name}"

    def display_name(self) -> str:
        """Name shown on the status page."""
        return self.service_name


class PollService(BaseModel):
    """A container whose runtime state is polled periodically."""

    type: Literal["poll"] = "poll"
    name: str
    description: str = ""
    container: str

    @property
    def service_name(self) -> str:
        """Namespaced name used as the heartbeat and snapshot key."""
        return f"{POLL_PREFIX}{self.name}"

    def display_name(self) -> str:
        """Name shown on the status page."""
        return self.service_name


ServiceConfig = Annotated[Union[PushService, PollService], Field(discriminator="type")]


class ServiceRegistry:
    """Read-only, ordered view over the configured services."""

    def __init__(self, services: Sequence[PushService | PollService]) -> None:
        self._services = list(services)
        self._by_token = {
            s.token: s for s in self._services if isinstance(s, PushService)
        }
        self._by_container = {
            self.normalize_container(s.container): s
            for s in self._services
            if isinstance(s, PollService)
        }

    def __iter__(self) -> Iterator[PushService | PollService]:
        return iter(self._services)

    def __len__(self) -> int:
        return len(self._services)

    @staticmethod
    def normalize_container(container: str) -> str:
        """Strip the leading ``/`` the Docker API puts on container names."""
        return container.lstrip("/")

    def find_by_token(self, token: str) -> PushService | None:
        """Resolve a push token to its service, or None."""
        return self._by_token.get(token)

    def find_by_container(self, container: str) -> PollService | None:
        """Resolve a container name to its poll service, or None."""
        return self._by_container.get(self.normalize_container(container))

    def names(self) -> list[str]:
        """Namespaced service names in configuration order."""
        return [s.service_name for s in self._services]

    def has_poll_services(self) -> bool:
        """True when at least one container is configured."""
        return bool(self._by_container)
