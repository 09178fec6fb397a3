"""API adapters for transforming between domain and API models."""

from tip_triage.api.adapters.triage import (
    QueueEntryAdapter,
    ReviewDecisionAdapter,
    StatsAdapter,
    TipsterProfileAdapter,
    TipSubmissionAdapter,
    VerificationAdapter,
)

__all__: list[str] = [
    "QueueEntryAdapter",
    "ReviewDecisionAdapter",
    "StatsAdapter",
    "TipSubmissionAdapter",
    "TipsterProfileAdapter",
    "VerificationAdapter",
]
