"""Review decision domain models.

- ReviewOutcome: what the reviewer concluded
- LeadRequest: optional request to open a lead in case management
- ReviewDecision: immutable record of one review

A decision is written once per queue item and never edited. Replaying the
same review returns the stored decision.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class ReviewOutcome(str, Enum):
    """Reviewer verdict on a tip."""

    VERIFIED = "verified"
    REJECTED = "rejected"
    NEEDS_MORE_INFO = "needs_more_info"
    ESCALATED = "escalated"


@dataclass(frozen=True)
class LeadRequest:
    """A lead the reviewer wants created from a verified tip."""

    title: str
    description: str

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError("lead title must not be empty")


@dataclass(frozen=True, eq=True)
class ReviewDecision:
    """The recorded outcome of reviewing one queue item.

    Attributes:
        decision_id: Unique identifier for this decision.
        queue_item_id: The resolved queue item.
        tip_id: The reviewed tip.
        reviewer_id: Reviewer who decided.
        outcome: The verdict.
        decided_at: When the decision was recorded (UTC).
        notes: Free-text reviewer notes.
        override_score: Reviewer's replacement credibility score, if any.
        lead_request: Lead to create, only honoured for VERIFIED.
        partial: The tip was only partially verified.
        escalate_to: Reviewer who receives an escalated follow-up item.
        follow_up_item_id: The follow-up queue item opened by escalation.
    """

    decision_id: UUID
    queue_item_id: UUID
    tip_id: UUID
    reviewer_id: str
    outcome: ReviewOutcome
    decided_at: datetime
    notes: str | None = field(default=None)
    override_score: int | None = field(default=None)
    lead_request: LeadRequest | None = field(default=None)
    partial: bool = field(default=False)
    escalate_to: str | None = field(default=None)
    follow_up_item_id: UUID | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate decision fields after initialization.

        Raises:
            ValueError: If any field validation fails.
        """
        if not self.reviewer_id:
            raise ValueError("reviewer_id must not be empty")
        if self.decided_at.tzinfo is None:
            raise ValueError("decided_at must be timezone-aware (UTC)")
        if self.override_score is not None and not 0 <= self.override_score <= 100:
            raise ValueError(
                f"override_score must be within [0, 100], got {self.override_score}"
            )
        if self.partial and self.outcome != ReviewOutcome.VERIFIED:
            raise ValueError("partial applies only to VERIFIED outcomes")
        if self.escalate_to is not None and self.outcome != ReviewOutcome.ESCALATED:
            raise ValueError("escalate_to applies only to ESCALATED outcomes")

    @property
    def wants_lead(self) -> bool:
        """A lead should be dispatched for this decision."""
        return self.outcome == ReviewOutcome.VERIFIED and self.lead_request is not None
