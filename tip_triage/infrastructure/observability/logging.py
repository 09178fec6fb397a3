"""Structured logging configuration with structlog.

Production emits one JSON object per line for log aggregation;
development renders colored console output. Both include an ISO 8601
timestamp, the log level, the service name and the correlation ID.

Log Entry Format:
    {
        "timestamp": "2024-01-01T00:00:00.000000Z",
        "level": "info",
        "event": "tip_classified",
        "service": "tip-triage",
        "correlation_id": "uuid",
        ...additional context
    }

Usage:
    # At application startup
    from tip_triage.infrastructure.observability import configure_structlog

    configure_structlog(environment="production")

    # Then use structlog normally
    from structlog import get_logger
    logger = get_logger(__name__)
    logger.info("event_name", key="value")
"""

import logging
import os
from typing import Any, cast

import structlog
from structlog.typing import Processor

from tip_triage.infrastructure.observability.correlation import (
    correlation_id_processor,
)

# Environment variable for log level (default: INFO)
LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

SERVICE_NAME = "tip-triage"


def _get_log_level(level_name: str | None = None) -> int:
    """Resolve a level name (or LOG_LEVEL) to a logging level integer."""
    name = (level_name or os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).upper()
    level = getattr(logging, name, logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def _add_service_name(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_structlog(
    environment: str = "production",
    log_level: str | None = None,
) -> None:
    """Configure structlog for the application.

    Should be called once at application startup.

    Args:
        environment: 'production' for JSON output, anything else for
            console output. Defaults to 'production'.
        log_level: Level name; falls back to LOG_LEVEL, then INFO.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        cast(Processor, _add_service_name),
        cast(Processor, correlation_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processors: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        final_processors = [structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=shared_processors + final_processors,
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
