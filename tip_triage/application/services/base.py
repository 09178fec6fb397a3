"""Structured logging shared by the triage services.

Each service binds its class name and a component tag once, then derives
an operation logger per call carrying the request's correlation id:

    class ReviewQueueService(LoggingMixin):
        def __init__(self, ...) -> None:
            self._init_logger(component="queue")

        async def claim(self, item_id: UUID, reviewer_id: str) -> QueueItem:
            log = self._log_operation("claim", queue_item_id=str(item_id))
            log.info("queue_item_claimed", reviewer_id=reviewer_id)
"""

import structlog

from tip_triage.infrastructure.observability.correlation import get_correlation_id


class LoggingMixin:
    """Gives a service a bound structlog logger.

    Components in use: intake, queue, reputation, review, leads, stats,
    monitor.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str) -> None:
        self._log = structlog.get_logger().bind(
            service=type(self).__name__,
            component=component,
        )

    def _log_operation(self, operation: str, **context: object) -> structlog.BoundLogger:
        """Logger for one operation, bound to the current correlation id."""
        return self._log.bind(
            operation=operation,
            correlation_id=get_correlation_id(),
            **context,
        )
