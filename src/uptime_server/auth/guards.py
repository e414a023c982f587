"""Shared-secret guard applied to every route."""

from __future__ import annotations

import hmac

from litestar.connection import ASGIConnection
from litestar.exceptions import NotAuthorizedException
from litestar.handlers.base import BaseRouteHandler


class SharedSecretGuard:
    """Litestar guard comparing the Authorization header to the configured secret.

    When no secret is configured every request passes.
    """

    @staticmethod
    def check(
        connection: ASGIConnection[object, object, object, object],
        _: BaseRouteHandler,
    ) -> None:
        """Reject the request unless the header equals the secret exactly."""
        secret: str | None = connection.app.state.secret
        if not secret:
            return
        header = connection.headers.get("Authorization")
        if header is None or not hmac.compare_digest(header, secret):
            raise NotAuthorizedException(detail="Missing or invalid Authorization header")
