"""Review queue API request/response models."""

from uuid import UUID

from pydantic import Field

from tip_triage.api.models.common import CamelModel, DateTimeWithZ


class ClaimRequest(CamelModel):
    """Request to claim (or release) a queue item.

    Attributes:
        queue_item_id: Item to act on.
        reviewer_id: Reviewer performing the action.
    """

    queue_item_id: UUID = Field(..., description="Queue item to act on")
    reviewer_id: str = Field(
        ..., min_length=1, max_length=200, description="Reviewer performing the action"
    )


class ReleaseRequest(ClaimRequest):
    """Request to release a claimed queue item."""


class QueueItemResponse(CamelModel):
    """A queue item with its derived SLA state."""

    queue_item_id: UUID
    tip_id: UUID
    case_id: UUID
    queue_type: str
    status: str
    review_priority: int
    sla_deadline: DateTimeWithZ
    enqueued_at: DateTimeWithZ
    sla_breached: bool = Field(..., description="Deadline passed while unresolved")
    time_remaining_seconds: int = Field(
        ..., description="Seconds until the deadline (negative once breached)"
    )
    claimed_by: str | None = None
    claimed_at: DateTimeWithZ | None = None
    resolved_at: DateTimeWithZ | None = None
    breach_flagged_at: DateTimeWithZ | None = None


class QueueListResponse(CamelModel):
    """Ordered queue listing, most urgent first."""

    items: list[QueueItemResponse]
    count: int
    offset: int = 0


class AssignRequest(CamelModel):
    """Supervisor request to hand a queue item to a reviewer.

    Attributes:
        queue_item_id: Item to assign.
        assign_to: Reviewer who receives the item.
        assigned_by: Supervisor making the assignment.
    """

    queue_item_id: UUID = Field(..., description="Queue item to assign")
    assign_to: str = Field(..., min_length=1, max_length=200)
    assigned_by: str = Field(..., min_length=1, max_length=200)
