"""Dashboard statistics response model."""

from pydantic import Field

from tip_triage.api.models.common import CamelModel


class HoaxIndicatorCount(CamelModel):
    indicator: str
    count: int


class StatsResponse(CamelModel):
    """Point-in-time triage statistics."""

    total_tips: int
    total_pending: int
    total_in_review: int
    pending_by_queue: dict[str, int] = Field(..., description="Pending items per queue type")
    in_review_by_queue: dict[str, int]
    breached: int = Field(..., description="Unresolved items past their SLA deadline")
    tier_counts: dict[str, int]
    blocked_tipsters: int
    outcome_counts: dict[str, int]
    top_hoax_indicators: list[HoaxIndicatorCount]
