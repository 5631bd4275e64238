"""Campusgate command line: run the server or create the tables."""

from __future__ import annotations

import argparse
import asyncio

import structlog
import uvicorn

from campusgate.config.logging import setup_logging
from campusgate.config.settings import get_settings
from campusgate.storage.database import init_db

logger = structlog.get_logger(__name__)


def cli(argv: list[str] | None = None) -> None:
    """CLI entrypoint."""
    parser = argparse.ArgumentParser(prog="campusgate")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("serve", help="Run the HTTP server (default)")
    sub.add_parser("init-db", help="Create database tables (development only)")
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.command == "init-db":
        setup_logging(settings)
        asyncio.run(init_db())
        logger.info("database_initialized", database_url=settings.database_url.split("@")[-1])
        return

    uvicorn.run(
        "campusgate.web.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.is_dev,
    )


if __name__ == "__main__":
    cli()
