"""Correlation ID management for request and background-task tracing.

Correlation IDs live in a ContextVar so they follow a request across
await points and into the tasks it spawns. HTTP requests take theirs from
the X-Correlation-ID header; each background sweep (SLA monitor, claim
expiry, lead dispatch) opens its own scope.

Usage:
    # In middleware (request start)
    set_correlation_id(request.headers.get(CORRELATION_HEADER) or generate_correlation_id())

    # In a background loop
    with correlation_scope():
        await self.sweep()

    # In structlog configuration
    processors = [..., correlation_id_processor, ...]
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

CORRELATION_HEADER = "X-Correlation-ID"

# Empty string when unset to avoid None checks in processors
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """Generate a new correlation ID (UUID4 string)."""
    return str(uuid4())


def get_correlation_id() -> str:
    """Current correlation ID, or empty string if none was set."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context."""
    _correlation_id.set(correlation_id)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Run a block under its own correlation ID, restoring the previous one.

    Args:
        correlation_id: ID to use; a fresh one is generated if omitted.

    Yields:
        The correlation ID in effect inside the block.
    """
    value = correlation_id or generate_correlation_id()
    token = _correlation_id.set(value)
    try:
        yield value
    finally:
        _correlation_id.reset(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding correlation_id to every log entry.

    An explicitly bound correlation_id wins over the context value.
    """
    correlation_id = get_correlation_id()
    if correlation_id and not event_dict.get("correlation_id"):
        event_dict["correlation_id"] = correlation_id
    return event_dict
