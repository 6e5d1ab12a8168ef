"""Command line entry point for the palletflow service."""

from __future__ import annotations

import argparse
import asyncio
from typing import Optional, Sequence

import structlog

from palletflow.enterprise.config.settings import AppSettings, get_settings
from palletflow.observability import bind_global_context, configure_logging, configure_tracer
from palletflow.persistence import create_schema, dispose_engine, init_engine, seed_store
from palletflow.server.dependencies import get_repository_context
from palletflow.server.grpc import start_grpc_server

logger = structlog.get_logger(__name__)


async def init_db(settings: AppSettings) -> None:
    """Create the schema and load seed data into an empty database."""

    engine = init_engine(settings)
    try:
        await create_schema(engine)
        async with get_repository_context() as repo:
            seeded = await seed_store(repo, settings.seed)
        logger.info("database_initialised", url=settings.database.url, seeded=seeded)
    finally:
        await dispose_engine()


async def serve_grpc(settings: AppSettings) -> None:
    bind_global_context(service="palletflow-grpc", environment=settings.environment)
    if settings.database.enabled:
        engine = init_engine(settings)
        if settings.database.create_schema:
            await create_schema(engine)
    async with get_repository_context() as repo:
        await seed_store(repo, settings.seed)

    server = await start_grpc_server(port=settings.grpc.port, host=settings.grpc.host)
    logger.info("grpc_server_started", host=settings.grpc.host, port=settings.grpc.port)
    try:
        await server.wait_for_termination()
    finally:
        await server.stop(grace=5)
        await dispose_engine()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Warehouse package induction and pallet stowing service.")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="Create tables and seed an empty database.")

    serve = commands.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    commands.add_parser("serve-grpc", help="Run the gRPC gateway.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.logging)

    if args.command == "init-db":
        if not settings.database.enabled:
            raise SystemExit("Set PF_DATABASE__ENABLED=true to initialise a database.")
        asyncio.run(init_db(settings))
    elif args.command == "serve":
        import uvicorn

        uvicorn.run("palletflow.server.app:app", host=args.host, port=args.port)
    elif args.command == "serve-grpc":
        configure_tracer("palletflow-grpc", settings.telemetry.otlp_endpoint)
        asyncio.run(serve_grpc(settings))


if __name__ == "__main__":
    main()
