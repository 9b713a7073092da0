"""
log.py

Structured logging for the scenario expression engine.

Usage::

    from scenario_expression.log import configure_logging, get_logger

    configure_logging()  # once, by whoever drives the simulation
    logger = get_logger(__name__)
    logger.warning("deprecated_shape", keyword="All", hint="use a sequence")

The engine itself never calls configure_logging(); library code only asks for
loggers, so an embedding driver keeps full control over handlers.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog

from .config import EngineConfig

_configured = False


def configure_logging(
    *,
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
) -> None:
    """Configure structlog and stdlib logging.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
            Defaults to SCENARIO_EXPRESSION_LOG_LEVEL or INFO.
        json_output: If True, emit JSON lines; otherwise human-readable
            console output. Defaults to SCENARIO_EXPRESSION_LOG_FORMAT == "json".
    """
    global _configured
    if _configured:
        return

    config = EngineConfig.from_env()
    level_name = (level or config.log_level).upper()
    if json_output is None:
        json_output = config.log_format == "json"

    log_level = getattr(logging, level_name, logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)

    _configured = True


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to the given name."""
    return structlog.get_logger(name)
