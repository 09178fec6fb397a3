"""Domain models for the tip triage engine.

Contains the immutable value objects and records that flow through
scoring, queueing and reputation. These models contain no
infrastructure dependencies.
"""

from tip_triage.domain.models.case_context import (
    CaseEvidence,
    CaseRiskProfile,
    KnownLead,
)
from tip_triage.domain.models.queue_item import QueueItem, QueueStatus, QueueType
from tip_triage.domain.models.review_decision import (
    LeadRequest,
    ReviewDecision,
    ReviewOutcome,
)
from tip_triage.domain.models.scam_pattern import ScamPattern
from tip_triage.domain.models.tip import (
    GeoPoint,
    IdentityKind,
    PhotoEvidence,
    Tip,
    TipLocation,
    TipsterIdentity,
    TipSource,
)
from tip_triage.domain.models.tip_verification import (
    CREDIBILITY_FIELD,
    HoaxIndicator,
    PriorityBucket,
    ScoreOverride,
    SignalName,
    SubScores,
    TipVerification,
)
from tip_triage.domain.models.tipster_profile import (
    RecentTip,
    ReliabilityTier,
    TipsterAction,
    TipsterProfile,
)

__all__: list[str] = [
    "CREDIBILITY_FIELD",
    "CaseEvidence",
    "CaseRiskProfile",
    "GeoPoint",
    "HoaxIndicator",
    "IdentityKind",
    "KnownLead",
    "LeadRequest",
    "PhotoEvidence",
    "PriorityBucket",
    "QueueItem",
    "QueueStatus",
    "QueueType",
    "RecentTip",
    "ReliabilityTier",
    "ReviewDecision",
    "ReviewOutcome",
    "ScamPattern",
    "ScoreOverride",
    "SignalName",
    "SubScores",
    "Tip",
    "TipLocation",
    "TipSource",
    "TipVerification",
    "TipsterAction",
    "TipsterIdentity",
    "TipsterProfile",
]
