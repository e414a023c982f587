"""Settings model — pydantic-settings with env var support."""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings

from uptime_server.config.services import (
    PollService,
    PushService,
    ServiceConfig,
    ServiceRegistry,
)

ENV_PREFIX = "UPTIME_"


class Settings(BaseSettings):
    """Server settings.

    Use ``ConfigLoader.load_settings()`` to build with YAML + env var layering.
    Direct construction (e.g. in tests) skips YAML loading.
    """

    database_url: str = "sqlite+aiosqlite:///uptime.db"
    secret: str | None = None
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    docker_socket: str = "/var/run/docker.sock"
    docker_url: str | None = None
    static_dir: str | None = None
    status_cache_seconds: int = 60
    jobs_enabled: bool = True
    aggregate_interval_seconds: int = 240
    poll_step_minutes: int = 5
    sweep_interval_seconds: int = 86400
    services: list[ServiceConfig] = []

    model_config = {"env_prefix": ENV_PREFIX}

    @field_validator("services")
    @classmethod
    def _check_unique_identifiers(
        cls, services: list[PushService | PollService],
    ) -> list[PushService | PollService]:
        """Tokens must be unique across push entries, containers across poll entries."""
        tokens: set[str] = set()
        containers: set[str] = set()
        for service in services:
            if isinstance(service, PushService):
                if service.token in tokens:
                    raise ValueError(f"token `{service.token}` duplicated")
                tokens.add(service.token)
            else:
                container = ServiceRegistry.normalize_container(service.container)
                if container in containers:
                    raise ValueError(f"container `{service.container}` duplicated")
                containers.add(container)
        return services
