"""Request logging with X-Correlation-ID propagation.

The caller's X-Correlation-ID (or a fresh one) is installed for the
duration of the request, so every service log line and every lead
dispatch task spawned by it carries the same id. The id is echoed back
on the response.
"""

import time
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from tip_triage.infrastructure.observability.correlation import (
    CORRELATION_HEADER,
    correlation_scope,
)

logger = structlog.get_logger()


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        with correlation_scope(request.headers.get(CORRELATION_HEADER)) as correlation_id:
            log = logger.bind(
                correlation_id=correlation_id,
                method=request.method,
                path=request.url.path,
            )
            started = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception as exc:
                log.exception(
                    "request_failed",
                    duration_ms=_elapsed_ms(started),
                    error_type=type(exc).__name__,
                )
                raise

            log.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(started),
            )
            response.headers[CORRELATION_HEADER] = correlation_id
            return response
