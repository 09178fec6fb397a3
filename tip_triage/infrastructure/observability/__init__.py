"""Observability infrastructure for structured logging and correlation.

- Structured logging with structlog (JSON in production)
- Correlation ID management for requests and background sweeps

Usage:
    from tip_triage.infrastructure.observability import (
        configure_structlog,
        correlation_scope,
    )

    configure_structlog(environment="production")
"""

from tip_triage.infrastructure.observability.correlation import (
    CORRELATION_HEADER,
    correlation_id_processor,
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from tip_triage.infrastructure.observability.logging import configure_structlog

__all__: list[str] = [
    "CORRELATION_HEADER",
    "configure_structlog",
    "correlation_id_processor",
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
]
