"""In-memory stubs for the case-management collaborator ports.

- CaseRiskLookupStub: CaseRiskLookupProtocol
- CaseEvidenceLookupStub: CaseEvidenceLookupProtocol
- LeadSinkStub: LeadSinkProtocol, recording every lead and able to fail
  a configurable number of times
- ScamPatternSourceStub: ScamPatternSourceProtocol, seeded with common
  missing-person scam patterns

Used for development wiring when no case service URL is configured, and
throughout the test suite.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4

from tip_triage.domain.errors import DownstreamUnavailableError
from tip_triage.domain.models.case_context import CaseEvidence, CaseRiskProfile
from tip_triage.domain.models.scam_pattern import ScamPattern

DEFAULT_SCAM_PATTERNS: tuple[ScamPattern, ...] = (
    ScamPattern(
        name="ransom_demand",
        terms=("ransom", "pay", "unharmed", "no police"),
        min_matches=2,
    ),
    ScamPattern(
        name="reward_advance_fee",
        terms=("reward", "processing fee", "advance", "release the information"),
        min_matches=2,
    ),
    ScamPattern(
        name="psychic_reading",
        terms=("psychic", "vision", "spirit", "reading fee"),
        min_matches=2,
    ),
)


class CaseRiskLookupStub:
    """In-memory implementation of CaseRiskLookupProtocol."""

    def __init__(self) -> None:
        """Initialize the stub with no known cases."""
        self._profiles: dict[UUID, CaseRiskProfile] = {}
        self.unavailable = False

    def set_profile(self, profile: CaseRiskProfile) -> None:
        """Register risk attributes for a case. For testing only."""
        self._profiles[profile.case_id] = profile

    async def get_case_risk_profile(self, case_id: UUID) -> CaseRiskProfile:
        if self.unavailable:
            raise DownstreamUnavailableError(
                "case_risk_lookup", "get_case_risk_profile", "stub set unavailable"
            )
        return self._profiles.get(case_id) or CaseRiskProfile.unknown(case_id)

    def clear(self) -> None:
        """Forget all cases. For testing only."""
        self._profiles.clear()
        self.unavailable = False


class CaseEvidenceLookupStub:
    """In-memory implementation of CaseEvidenceLookupProtocol."""

    def __init__(self) -> None:
        """Initialize the stub with no known evidence."""
        self._evidence: dict[UUID, CaseEvidence] = {}

    def set_evidence(self, evidence: CaseEvidence) -> None:
        """Register evidence for a case. For testing only."""
        self._evidence[evidence.case_id] = evidence

    async def get_case_evidence(self, case_id: UUID) -> CaseEvidence:
        return self._evidence.get(case_id) or CaseEvidence.empty(case_id)

    def clear(self) -> None:
        """Forget all evidence. For testing only."""
        self._evidence.clear()


@dataclass(frozen=True)
class CreatedLead:
    """A lead recorded by LeadSinkStub."""

    lead_id: str
    case_id: UUID
    title: str
    description: str


class LeadSinkStub:
    """In-memory implementation of LeadSinkProtocol.

    Attributes:
        leads: Every lead created, in order.
        attempts: Every create_lead call, including failed ones.
        fail_times: Number of upcoming calls that raise
            DownstreamUnavailableError before calls start succeeding.
    """

    def __init__(self, fail_times: int = 0) -> None:
        self.leads: list[CreatedLead] = []
        self.attempts = 0
        self.fail_times = fail_times

    async def create_lead(self, case_id: UUID, title: str, description: str) -> str:
        self.attempts += 1
        if self.fail_times > 0:
            self.fail_times -= 1
            raise DownstreamUnavailableError("lead_sink", "create_lead", "stub failure")
        lead = CreatedLead(
            lead_id=f"lead-{uuid4().hex[:12]}",
            case_id=case_id,
            title=title,
            description=description,
        )
        self.leads.append(lead)
        return lead.lead_id

    def clear(self) -> None:
        """Forget recorded leads. For testing only."""
        self.leads.clear()
        self.attempts = 0
        self.fail_times = 0

    def count(self) -> int:
        """Number of leads created. For testing only."""
        return len(self.leads)


class ScamPatternSourceStub:
    """In-memory implementation of ScamPatternSourceProtocol."""

    def __init__(self, patterns: tuple[ScamPattern, ...] = DEFAULT_SCAM_PATTERNS) -> None:
        self._patterns: list[ScamPattern] = list(patterns)

    def add(self, pattern: ScamPattern) -> None:
        """Register an extra pattern. For testing only."""
        self._patterns.append(pattern)

    async def list_active(self) -> list[ScamPattern]:
        return [p for p in self._patterns if p.is_active]

    def clear(self) -> None:
        """Remove every pattern. For testing only."""
        self._patterns.clear()
