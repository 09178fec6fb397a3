"""Case context supplied by the case-management collaborator.

- CaseRiskProfile: read-only risk input to priority classification
- KnownLead / CaseEvidence: last-seen facts and existing leads used by
  the location, time and cross-reference extractors

The engine never owns case data; these are snapshots fetched per tip.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import UUID

from tip_triage.domain.models.tip import GeoPoint

CRITICAL_RESPONSE_WINDOW: timedelta = timedelta(hours=24)
"""A case whose response window fits inside this is treated as high risk."""


@dataclass(frozen=True)
class CaseRiskProfile:
    """Risk attributes of a case.

    Attributes:
        case_id: The case these attributes describe.
        is_minor: The missing person is a minor.
        suspected_abduction: Investigators suspect abduction.
        response_window: How quickly the case needs action, if it is
            time-boxed (e.g. first 24h after disappearance).
        short_window_threshold: Windows at or below this length count as a
            short response window for SLA urgency discounts.
    """

    case_id: UUID
    is_minor: bool = False
    suspected_abduction: bool = False
    response_window: timedelta | None = None
    short_window_threshold: timedelta = field(
        default=CRITICAL_RESPONSE_WINDOW, repr=False
    )

    def __post_init__(self) -> None:
        if self.response_window is not None and self.response_window <= timedelta(0):
            raise ValueError("response_window must be positive")

    @property
    def has_short_response_window(self) -> bool:
        """True if the case carries a short-response-window flag."""
        return (
            self.response_window is not None
            and self.response_window <= self.short_window_threshold
        )

    @property
    def is_high_risk(self) -> bool:
        """True for minors, suspected abductions, or 24h-critical windows."""
        return (
            self.is_minor
            or self.suspected_abduction
            or (
                self.response_window is not None
                and self.response_window <= CRITICAL_RESPONSE_WINDOW
            )
        )

    @classmethod
    def unknown(cls, case_id: UUID) -> CaseRiskProfile:
        """Profile used when the case has no recorded risk attributes."""
        return cls(case_id=case_id)


@dataclass(frozen=True)
class KnownLead:
    """An existing lead on the case, used for cross-referencing.

    Attributes:
        lead_id: Lead identifier in case management.
        point: Lead coordinates, if known.
        location_text: Free-text lead location, if known.
    """

    lead_id: str
    point: GeoPoint | None = None
    location_text: str | None = None


@dataclass(frozen=True)
class CaseEvidence:
    """What the case file knows about the disappearance.

    Attributes:
        case_id: The case.
        last_seen_point: Last confirmed coordinates, if known.
        last_seen_at: Last confirmed sighting time (UTC), if known.
        leads: Existing leads for cross-reference.
    """

    case_id: UUID
    last_seen_point: GeoPoint | None = None
    last_seen_at: datetime | None = None
    leads: tuple[KnownLead, ...] = ()

    def __post_init__(self) -> None:
        if self.last_seen_at is not None and self.last_seen_at.tzinfo is None:
            raise ValueError("last_seen_at must be timezone-aware (UTC)")

    @classmethod
    def empty(cls, case_id: UUID) -> CaseEvidence:
        return cls(case_id=case_id)
