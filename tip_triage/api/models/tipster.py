"""Tipster reputation API request/response models."""

from uuid import UUID

from pydantic import Field

from tip_triage.api.models.common import CamelModel, DateTimeWithZ


class TipsterProfileResponse(CamelModel):
    """A tipster's reputation profile."""

    tipster_id: UUID
    identity_kind: str
    identity: str
    reliability_score: int
    reliability_tier: str
    total_tips: int
    verified_tips: int
    partially_verified_tips: int
    false_tips: int
    spam_tips: int
    tips_leading_to_resolution: int
    provides_photos: bool
    provides_detailed_info: bool
    reports_coordinates: bool
    is_blocked: bool
    blocked_reason: str | None = None
    blocked_by: str | None = None
    blocked_at: DateTimeWithZ | None = None
    first_tip_at: DateTimeWithZ | None = None
    last_tip_at: DateTimeWithZ | None = None
    unresolved_hoax_flags: int = 0
    created_at: DateTimeWithZ


class TipsterListResponse(CamelModel):
    """Ranked tipster profiles."""

    tipsters: list[TipsterProfileResponse]
    count: int
    offset: int = 0


class TipsterActionRequest(CamelModel):
    """Administrative action on a tipster profile.

    Attributes:
        action: block, unblock, upgrade_tier, downgrade_tier or set_tier.
        reason: Optional note stored with a block.
        performed_by: Moderator taking the action.
        new_tier: Target tier, required for set_tier.
    """

    action: str = Field(
        ..., description="block | unblock | upgrade_tier | downgrade_tier | set_tier"
    )
    reason: str | None = Field(default=None, max_length=2000)
    performed_by: str = Field(default="moderator", min_length=1, max_length=200)
    new_tier: str | None = Field(default=None, description="Target tier for set_tier")
