"""In-memory stub implementations of the application ports.

These back the development API when no case service is configured and
are used throughout the test suite.
"""

from tip_triage.infrastructure.stubs.case_collaborator_stubs import (
    DEFAULT_SCAM_PATTERNS,
    CaseEvidenceLookupStub,
    CaseRiskLookupStub,
    CreatedLead,
    LeadSinkStub,
    ScamPatternSourceStub,
)
from tip_triage.infrastructure.stubs.queue_repository_stub import QueueRepositoryStub
from tip_triage.infrastructure.stubs.review_decision_repository_stub import (
    ReviewDecisionRepositoryStub,
)
from tip_triage.infrastructure.stubs.tip_repository_stub import (
    TipRepositoryStub,
    VerificationRepositoryStub,
)
from tip_triage.infrastructure.stubs.tipster_repository_stub import (
    TipsterRepositoryStub,
)

__all__ = [
    "DEFAULT_SCAM_PATTERNS",
    "CaseEvidenceLookupStub",
    "CaseRiskLookupStub",
    "CreatedLead",
    "LeadSinkStub",
    "QueueRepositoryStub",
    "ReviewDecisionRepositoryStub",
    "ScamPatternSourceStub",
    "TipRepositoryStub",
    "TipsterRepositoryStub",
    "VerificationRepositoryStub",
]
