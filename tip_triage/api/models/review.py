"""Review decision API request/response models."""

from uuid import UUID

from pydantic import Field

from tip_triage.api.models.common import CamelModel, DateTimeWithZ


class ReviewRequest(CamelModel):
    """A reviewer's decision on a claimed queue item.

    Attributes:
        queue_item_id: The claimed item.
        reviewer_id: Reviewer holding the claim.
        outcome: verified, rejected, needs_more_info or escalated.
        notes: Free-text notes.
        override_score: Replacement credibility score.
        create_lead: Ask case management to open a lead (verified only).
        lead_title: Lead title, required with create_lead.
        lead_description: Lead description.
        partial: The tip was only partially verified.
        escalate_to: Reviewer who receives the escalated follow-up.
    """

    queue_item_id: UUID
    reviewer_id: str = Field(..., min_length=1, max_length=200)
    outcome: str = Field(..., description="verified | rejected | needs_more_info | escalated")
    notes: str | None = Field(default=None, max_length=10_000)
    override_score: int | None = Field(default=None, ge=0, le=100)
    create_lead: bool = False
    lead_title: str | None = Field(default=None, max_length=500)
    lead_description: str | None = Field(default=None, max_length=10_000)
    partial: bool = False
    escalate_to: str | None = Field(default=None, max_length=200)


class LeadRequestResponse(CamelModel):
    title: str
    description: str


class ReviewDecisionResponse(CamelModel):
    """The recorded decision."""

    decision_id: UUID
    queue_item_id: UUID
    tip_id: UUID
    reviewer_id: str
    outcome: str
    decided_at: DateTimeWithZ
    notes: str | None = None
    override_score: int | None = None
    partial: bool = False
    lead_request: LeadRequestResponse | None = None
    escalate_to: str | None = None
    follow_up_item_id: UUID | None = None
