"""API middleware components."""

from tip_triage.api.middleware.logging_middleware import LoggingMiddleware

__all__: list[str] = ["LoggingMiddleware"]
