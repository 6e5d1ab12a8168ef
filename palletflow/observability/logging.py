"""Structured logging configuration for the palletflow service."""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict

import structlog

from palletflow.enterprise.config.settings import LoggingSettings

# Third-party loggers that flood INFO with per-statement or per-request lines.
_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "grpc")


def _build_processors(json_output: bool) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def configure_logging(settings: LoggingSettings) -> None:
    """Route stdlib and structlog output through one stdout handler."""

    level = getattr(logging, settings.level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    structlog.configure(
        processors=_build_processors(settings.json),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def bind_global_context(**context: Any) -> Dict[str, Any]:
    """Bind context vars that should be included in all subsequent logs."""

    structlog.contextvars.bind_contextvars(**context)
    return context
