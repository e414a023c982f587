"""Heartbeat resource — push ingest and container polling."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from uptime_server.clients.docker_client import DockerClient
from uptime_server.config.services import ServiceRegistry
from uptime_server.plugins.contracts.heartbeat import HeartbeatPlugin
from uptime_server.utils.time import Time

logger = logging.getLogger(__name__)

RUNNING = "running"


class ServiceNotFoundError(Exception):
    """Raised when no configured push service matches a token."""


class HeartbeatResource:
    """Both heartbeat producers.

    Built once at startup with all dependencies pre-wired. The two
    producers share nothing but the heartbeat plugin.
    """

    def __init__(
        self,
        *,
        registry: ServiceRegistry,
        heartbeat_plugin: HeartbeatPlugin,
        docker_client: DockerClient | None = None,
        clock: Callable[[], datetime] = Time.utcnow,
    ) -> None:
        self._registry = registry
        self._plugin = heartbeat_plugin
        self._docker = docker_client
        self._clock = clock

    async def ingest(self, token: str) -> str:
        """Record a push heartbeat for the service owning ``token``.

        Returns:
            The namespaced service name that was recorded.

        Raises:
            ServiceNotFoundError: If no push service has this token.
        """
        service = self._registry.find_by_token(token)
        if service is None:
            logger.info("heartbeat rejected: unknown token")
            raise ServiceNotFoundError("No service configured for this token")
        await self._plugin.handle(service.service_name, self._clock())
        return service.service_name

    async def poll_containers(self) -> int:
        """Record one heartbeat per configured container that is running.

        Containers without a name or state, unconfigured containers and
        containers in any other state are skipped. Returns the number of
        heartbeats recorded.
        """
        if self._docker is None:
            return 0
        containers = await self._docker.list_containers()
        recorded = 0
        for container in containers:
            name = container.primary_name
            if not name or not container.state:
                continue
            service = self._registry.find_by_container(name)
            if service is None:
                logger.debug("container not monitored: name=%s", name)
                continue
            if container.state != RUNNING:
                logger.debug(
                    "container down: name=%s, state=%s",
                    service.name, container.state,
                )
                continue
            await self._plugin.handle(service.service_name, self._clock())
            recorded += 1
        return recorded
