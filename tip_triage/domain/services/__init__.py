"""Domain services for the tip triage engine.

Domain services contain the scoring, classification and reputation logic.
They are pure: no I/O, no clock reads, no infrastructure dependencies.

Available services:
- EXTRACTORS / ExtractionContext: the six signal extractors
- CredibilityAggregator: weighted, renormalizing aggregation
- DuplicateDetector: near-duplicate detection per case
- HoaxDetector: rule-based hoax and spam indicators
- PriorityClassifier: queue, SLA deadline and review priority
- ReputationRules: tipster score and tier transitions
"""

from tip_triage.domain.services.credibility_aggregator import CredibilityAggregator
from tip_triage.domain.services.duplicate_detector import (
    DuplicateDetector,
    DuplicateResult,
)
from tip_triage.domain.services.hoax_detector import HoaxDetector, HoaxResult
from tip_triage.domain.services.priority_classifier import (
    Classification,
    ClassificationInput,
    PriorityClassifier,
)
from tip_triage.domain.services.reputation_rules import ReputationRules
from tip_triage.domain.services.signal_extractors import (
    EXTRACTORS,
    ExtractionContext,
    SignalResult,
)

__all__ = [
    "Classification",
    "ClassificationInput",
    "CredibilityAggregator",
    "DuplicateDetector",
    "DuplicateResult",
    "EXTRACTORS",
    "ExtractionContext",
    "HoaxDetector",
    "HoaxResult",
    "PriorityClassifier",
    "ReputationRules",
    "SignalResult",
]
