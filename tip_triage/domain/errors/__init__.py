"""Domain errors for Tip Triage.

Provides the typed error taxonomy returned by every engine entry point.
All exceptions inherit from TipTriageError.
"""

from tip_triage.domain.errors.conflict import (
    ConflictError,
    ItemAlreadyClaimedError,
    ItemNotClaimableError,
    NotClaimantError,
)
from tip_triage.domain.errors.downstream import DownstreamUnavailableError
from tip_triage.domain.errors.not_found import (
    NotFoundError,
    QueueItemNotFoundError,
    TipNotFoundError,
    TipsterNotFoundError,
    VerificationNotFoundError,
)
from tip_triage.domain.errors.validation import ValidationError

__all__: list[str] = [
    "ConflictError",
    "DownstreamUnavailableError",
    "ItemAlreadyClaimedError",
    "ItemNotClaimableError",
    "NotClaimantError",
    "NotFoundError",
    "QueueItemNotFoundError",
    "TipNotFoundError",
    "TipsterNotFoundError",
    "ValidationError",
    "VerificationNotFoundError",
]
