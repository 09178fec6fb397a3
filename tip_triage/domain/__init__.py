"""
Domain layer - Pure triage logic for the tip triage engine.

This layer contains:
- Domain models (Tip, TipVerification, QueueItem, TipsterProfile, ...)
- Domain services (signal extractors, aggregator, detectors, classifier,
  reputation rules)
- Domain errors

CRITICAL: This layer must NOT import from application, infrastructure, or api.
Only stdlib and typing imports are allowed.
"""

from tip_triage.domain.errors import (
    ConflictError,
    DownstreamUnavailableError,
    NotFoundError,
    ValidationError,
)
from tip_triage.domain.exceptions import TipTriageError

__all__: list[str] = [
    "TipTriageError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "DownstreamUnavailableError",
]
