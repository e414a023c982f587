"""Container runtime client — Docker Engine API over httpx."""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx


class DockerClientError(Exception):
    """Raised when the Docker Engine API answers with an error status."""


@dataclass
class ContainerState:
    """Names and state of one container as reported by the runtime."""

    names: list[str] = field(default_factory=list)
    state: str | None = None

    @property
    def primary_name(self) -> str | None:
        """First reported name, or None when the container is unnamed."""
        return self.names[0] if self.names else None


class DockerClient:
    """Docker Engine API client. Built once at startup, reused for every tick.

    Connects over the local Unix socket unless ``base_url`` names a TCP
    endpoint. ``transport`` lets tests substitute an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        *,
        socket_path: str = "/var/run/docker.sock",
        base_url: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._socket_path = socket_path
        self._base_url = base_url or "http://docker"
        self._use_socket = base_url is None
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        """Open a short-lived HTTP client bound to the daemon."""
        transport = self._transport
        if transport is None and self._use_socket:
            transport = httpx.AsyncHTTPTransport(uds=self._socket_path)
        return httpx.AsyncClient(
            base_url=self._base_url, transport=transport, timeout=self._timeout,
        )

    async def list_containers(self) -> list[ContainerState]:
        """List every container, running or not.

        Raises:
            DockerClientError: If the daemon returns a non-200 status.
            httpx.HTTPError: If the daemon is unreachable.
        """
        async with self._client() as http_client:
            response = await http_client.get(
                "/containers/json", params={"all": "true"},
            )
        if response.status_code != 200:
            raise DockerClientError(
                f"Docker container list failed: {response.status_code} {response.text}"
            )
        return [
            ContainerState(
                names=list(item.get("Names") or []),
                state=item.get("State"),
            )
            for item in response.json()
        ]

    async def ping(self) -> bool:
        """True if the daemon answers ``/_ping`` with 200."""
        try:
            async with self._client() as http_client:
                response = await http_client.get("/_ping")
        except httpx.HTTPError:
            return False
        return response.status_code == 200
