"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from campusgate.config.settings import Settings

# Per-request chatter that duplicates the bootstrap_decision events
_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "aiosqlite")


def _deployment_fields(mode: str, environment: str) -> structlog.types.Processor:
    def add_fields(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("deployment_mode", mode)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_fields


def setup_logging(settings: Settings) -> None:
    """Configure structlog from settings.

    Every event carries the request id bound by the request middleware plus
    the deployment mode, so decisions from self-hosted and hosted instances
    can share one log sink. Debug builds render to the console, everything
    else emits JSON lines.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        _deployment_fields(settings.deployment_mode.value, settings.environment),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    if settings.debug and sys.stderr.isatty():
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
