"""Structured logging configuration using structlog.

This module sets up structured logging for the entire application.
Logs are output in JSON format in production for easy parsing and analysis.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from easynews.core.config import get_config


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add application context to log events.

    Args:
        logger: Logger instance
        method_name: Name of the logging method
        event_dict: Event dictionary

    Returns:
        Updated event dictionary with app context
    """
    config = get_config()
    event_dict["app"] = config.app_name
    event_dict["env"] = config.app_env
    return event_dict


def setup_logging() -> None:
    """Configure structured logging for the application.

    This function sets up structlog with:
    - JSON output for production
    - Console output for development
    - Log level taken from the environment
    - Standard library integration

    Example:
        >>> setup_logging()
        >>> logger = structlog.get_logger()
        >>> logger.info("Run started", feeds=4)
    """
    config = get_config()

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, config.log_level),
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]

    if config.is_production:
        processors.extend(
            [
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(ensure_ascii=False),
            ]
        )
    else:
        processors.extend(
            [
                structlog.processors.format_exc_info,
                structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
            ]
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Logger name (defaults to calling module)

    Returns:
        Configured structlog logger

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Feed collected", feed="ERT News", items=20)
    """
    return structlog.get_logger(name)
