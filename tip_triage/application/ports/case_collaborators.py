"""Ports for the case-management collaborator.

The engine never owns case data. It reads risk attributes and last-seen
evidence, and asks case management to open leads for verified tips.
Implementations raise DownstreamUnavailableError when the collaborator
cannot be reached.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uuid import UUID

    from tip_triage.domain.models.case_context import CaseEvidence, CaseRiskProfile
    from tip_triage.domain.models.scam_pattern import ScamPattern


class CaseRiskLookupProtocol(Protocol):
    """Read-only lookup of case risk attributes."""

    @abstractmethod
    async def get_case_risk_profile(self, case_id: UUID) -> CaseRiskProfile:
        """Risk attributes of a case.

        Unknown cases yield CaseRiskProfile.unknown(case_id).

        Raises:
            DownstreamUnavailableError: Case management is unreachable.
        """
        ...


class CaseEvidenceLookupProtocol(Protocol):
    """Read-only lookup of last-seen facts and existing leads."""

    @abstractmethod
    async def get_case_evidence(self, case_id: UUID) -> CaseEvidence:
        """Evidence for a case; CaseEvidence.empty(case_id) if none.

        Raises:
            DownstreamUnavailableError: Case management is unreachable.
        """
        ...


class LeadSinkProtocol(Protocol):
    """Creates leads in case management."""

    @abstractmethod
    async def create_lead(self, case_id: UUID, title: str, description: str) -> str:
        """Open a lead and return its id.

        Raises:
            DownstreamUnavailableError: The lead could not be created.
        """
        ...


class ScamPatternSourceProtocol(Protocol):
    """Source of the scam patterns matched during hoax detection."""

    @abstractmethod
    async def list_active(self) -> list[ScamPattern]:
        """Currently active scam patterns."""
        ...
