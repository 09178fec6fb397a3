"""Application ports - Abstract interfaces for infrastructure adapters.

This module defines the contracts that infrastructure adapters must implement.
Ports enable dependency inversion and make the application layer testable.

Available ports:
- TimeAuthorityProtocol: UTC clock
- TipRepositoryProtocol / VerificationRepositoryProtocol: tips and scores
- QueueRepositoryProtocol: indexed review queue with compare-and-swap
- TipsterRepositoryProtocol: reputation profiles (TipsterFilter narrows listings)
- ReviewDecisionRepositoryProtocol: recorded review outcomes
- CaseRiskLookupProtocol / CaseEvidenceLookupProtocol / LeadSinkProtocol:
  the case-management collaborator
- ScamPatternSourceProtocol: configured scam patterns
"""

from tip_triage.application.ports.case_collaborators import (
    CaseEvidenceLookupProtocol,
    CaseRiskLookupProtocol,
    LeadSinkProtocol,
    ScamPatternSourceProtocol,
)
from tip_triage.application.ports.queue_repository import QueueRepositoryProtocol
from tip_triage.application.ports.review_decision_repository import (
    ReviewDecisionRepositoryProtocol,
)
from tip_triage.application.ports.time_authority import TimeAuthorityProtocol
from tip_triage.application.ports.tip_repository import (
    TipRepositoryProtocol,
    VerificationRepositoryProtocol,
)
from tip_triage.application.ports.tipster_repository import (
    TipsterFilter,
    TipsterRepositoryProtocol,
)

__all__: list[str] = [
    "CaseEvidenceLookupProtocol",
    "CaseRiskLookupProtocol",
    "LeadSinkProtocol",
    "QueueRepositoryProtocol",
    "ReviewDecisionRepositoryProtocol",
    "ScamPatternSourceProtocol",
    "TimeAuthorityProtocol",
    "TipRepositoryProtocol",
    "TipsterFilter",
    "TipsterRepositoryProtocol",
    "VerificationRepositoryProtocol",
]
