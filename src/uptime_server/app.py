"""Litestar application factory and CLI entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from litestar import Litestar
from litestar.config.compression import CompressionConfig
from litestar.config.response_cache import ResponseCacheConfig
from litestar.datastructures import State
from litestar.di import Provide
from litestar.logging import LoggingConfig
from litestar.static_files import create_static_files_router
from litestar.types import ControllerRouterHandler
from pydantic import ValidationError

from uptime_server.auth.guards import SharedSecretGuard
from uptime_server.clients.docker_client import DockerClient
from uptime_server.config import ConfigLoader, ServiceRegistry, Settings
from uptime_server.controllers.health import HealthController
from uptime_server.controllers.heartbeat import HeartbeatController
from uptime_server.controllers.status import StatusController
from uptime_server.dao.heartbeat_dao import HeartbeatDAO
from uptime_server.dao.status_dao import StatusDAO
from uptime_server.jobs.scheduler import JobRunner, RepeatingJob
from uptime_server.jobs.tasks import JobFactory
from uptime_server.plugins.db_heartbeat import DbHeartbeatPlugin
from uptime_server.resources.health import HealthResource
from uptime_server.resources.heartbeat import HeartbeatResource
from uptime_server.resources.retention import RetentionResource
from uptime_server.resources.status import StatusResource
from uptime_server.services.heartbeat_service import HeartbeatService
from uptime_server.services.status_service import StatusService
from uptime_server.utils.db import Database

logger = logging.getLogger(__name__)


class AppFactory:
    """Builds and configures the Litestar application. All methods are static."""

    @staticmethod
    def _build(settings: Settings) -> State:
        """Construct the full object graph once.

        pool → heartbeat_dao → heartbeat_service → DbHeartbeatPlugin ─┐
        settings.services → ServiceRegistry ─────────────────────────├→ HeartbeatResource
        DockerClient (only when containers are configured) ──────────┘
        pool → status_dao → status_service ─┬→ StatusResource
                                            └→ RetentionResource
        resources → JobFactory → JobRunner → HealthResource
        """
        pool = Database.init(settings.database_url)
        registry = ServiceRegistry(settings.services)
        logger.debug("configured services: %s", registry.names())

        heartbeat_service = HeartbeatService(HeartbeatDAO(pool))
        status_service = StatusService(StatusDAO(pool))
        docker_client = None
        if registry.has_poll_services():
            docker_client = DockerClient(
                socket_path=settings.docker_socket,
                base_url=settings.docker_url,
            )

        heartbeat_resource = HeartbeatResource(
            registry=registry,
            heartbeat_plugin=DbHeartbeatPlugin(heartbeat_service),
            docker_client=docker_client,
        )
        status_resource = StatusResource(
            registry=registry,
            heartbeat_service=heartbeat_service,
            status_service=status_service,
        )
        retention_resource = RetentionResource(
            heartbeat_service=heartbeat_service,
            status_service=status_service,
        )

        jobs: list[RepeatingJob] = [
            JobFactory.collect_status(settings, status_resource),
            JobFactory.clean_database(settings, retention_resource),
        ]
        if docker_client is not None:
            jobs.append(JobFactory.check_containers(settings, heartbeat_resource))
        job_runner = JobRunner(jobs)

        return State({
            "secret": settings.secret,
            "jobs_enabled": settings.jobs_enabled,
            "jobs": job_runner,
            "health": HealthResource(job_runner),
            "heartbeat": heartbeat_resource,
            "status": status_resource,
            "retention": retention_resource,
        })

    @staticmethod
    @asynccontextmanager
    async def _lifespan(app: Litestar) -> AsyncIterator[None]:
        """Create tables and start jobs on startup; stop jobs and dispose on shutdown."""
        await Database.create_tables()
        job_runner: JobRunner = app.state.jobs
        if app.state.jobs_enabled:
            job_runner.start()
        try:
            yield
        finally:
            await job_runner.stop()
            await Database.close()

    @staticmethod
    def provide_health(state: State) -> HealthResource:
        """Provide the pre-built HealthResource from app state."""
        health_resource: HealthResource = state.health
        return health_resource

    @staticmethod
    def provide_heartbeat(state: State) -> HeartbeatResource:
        """Provide the pre-built HeartbeatResource from app state."""
        heartbeat_resource: HeartbeatResource = state.heartbeat
        return heartbeat_resource

    @staticmethod
    def provide_status(state: State) -> StatusResource:
        """Provide the pre-built StatusResource from app state."""
        status_resource: StatusResource = state.status
        return status_resource

    @staticmethod
    def _logging_config(settings: Settings) -> LoggingConfig:
        """Route application loggers through Litestar's queue handler."""
        return LoggingConfig(
            root={"level": settings.log_level.upper(), "handlers": ["queue_listener"]},
            formatters={
                "standard": {
                    "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
                },
            },
        )

    @staticmethod
    def create_app(settings: Settings | None = None) -> Litestar:
        """Create and configure the Litestar application."""
        if settings is None:
            settings = ConfigLoader.load_settings()
        route_handlers: list[ControllerRouterHandler] = [
            HealthController, HeartbeatController, StatusController,
        ]
        if settings.static_dir:
            route_handlers.append(
                create_static_files_router(
                    path="/", directories=[settings.static_dir], html_mode=True,
                )
            )
        return Litestar(
            route_handlers=route_handlers,
            state=AppFactory._build(settings),
            lifespan=[AppFactory._lifespan],
            guards=[SharedSecretGuard.check],
            compression_config=CompressionConfig(backend="gzip"),
            response_cache_config=ResponseCacheConfig(
                default_expiration=settings.status_cache_seconds,
            ),
            logging_config=AppFactory._logging_config(settings),
            dependencies={
                "health_resource": Provide(AppFactory.provide_health, sync_to_thread=False),
                "heartbeat_resource": Provide(
                    AppFactory.provide_heartbeat, sync_to_thread=False,
                ),
                "status_resource": Provide(AppFactory.provide_status, sync_to_thread=False),
            },
        )


# Public alias so tests / uvicorn can call create_app() without knowing AppFactory.
create_app = AppFactory.create_app


class CLI:
    """Command-line interface for uptime-server."""

    @staticmethod
    def _build_parser() -> argparse.ArgumentParser:
        """Build the CLI argument parser."""
        parser = argparse.ArgumentParser(
            prog="uptime-server", description="Uptime Server CLI",
        )
        subparsers = parser.add_subparsers(dest="command")

        run_parser = subparsers.add_parser("run", help="Start the server")
        run_parser.add_argument("--host", default=None, help="Defaults to settings.host")
        run_parser.add_argument(
            "--port", type=int, default=None, help="Defaults to settings.port",
        )
        run_parser.add_argument("--reload", action="store_true", help="Auto-reload on file changes")

        subparsers.add_parser(
            "check-config", help="Validate configuration and list services",
        )

        return parser

    @staticmethod
    def _check_config() -> None:
        """Load settings and print each configured service name."""
        try:
            settings = ConfigLoader.load_settings()
        except ValidationError as error:
            print(f"Invalid configuration: {error}", file=sys.stderr)
            sys.exit(1)
        for name in ServiceRegistry(settings.services).names():
            print(name)

    @staticmethod
    def main(argv: list[str] | None = None) -> None:
        """CLI entry point. Catches all exceptions and exits cleanly."""
        parser = CLI._build_parser()
        args = parser.parse_args(argv)

        if args.command is None:
            parser.print_help()
            sys.exit(1)

        try:
            if args.command == "check-config":
                CLI._check_config()
            elif args.command == "run":
                import uvicorn

                settings = ConfigLoader.load_settings()
                uvicorn.run(
                    "uptime_server.app:create_app",
                    factory=True,
                    host=args.host or settings.host,
                    port=args.port or settings.port,
                    reload=args.reload,
                )
        except KeyboardInterrupt:
            pass
        except Exception as error:
            print(f"Error: {error}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    CLI.main()
