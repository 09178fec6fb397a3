"""Tipster reputation domain models.

This module defines the per-tipster reputation record:
- ReliabilityTier: ordered reputation tiers
- TipsterAction: administrative actions on a profile
- RecentTip: entry in the sliding window of a tipster's latest tips
- TipsterProfile: counts, score, tier and blocking state

Constraints:
- Profiles are never deleted
- Blocking is sticky: only an explicit unblock clears it
- verified_source requires zero unresolved hoax flags in the recent window
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from uuid import UUID

from tip_triage.domain.models.review_decision import ReviewOutcome
from tip_triage.domain.models.tip import TipsterIdentity

DEFAULT_RELIABILITY_SCORE: int = 50
"""Score a profile starts with before any review."""


class ReliabilityTier(str, Enum):
    """Reputation tiers, declared lowest first."""

    NEW = "new"
    """No reviewed tips yet."""

    UNRATED = "unrated"
    """Reviewed, but not enough reviews to rate."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERIFIED_SOURCE = "verified_source"

    @property
    def rank(self) -> int:
        return list(ReliabilityTier).index(self)

    @property
    def is_rated(self) -> bool:
        return self not in (ReliabilityTier.NEW, ReliabilityTier.UNRATED)

    def step_up(self) -> ReliabilityTier:
        """The next tier up (VERIFIED_SOURCE stays put)."""
        tiers = list(ReliabilityTier)
        return tiers[min(self.rank + 1, len(tiers) - 1)]

    def step_down(self) -> ReliabilityTier:
        """The next tier down (NEW stays put)."""
        tiers = list(ReliabilityTier)
        return tiers[max(self.rank - 1, 0)]


class TipsterAction(str, Enum):
    """Administrative actions a moderator may take on a profile."""

    BLOCK = "block"
    UNBLOCK = "unblock"
    UPGRADE_TIER = "upgrade_tier"
    DOWNGRADE_TIER = "downgrade_tier"
    SET_TIER = "set_tier"


@dataclass(frozen=True)
class RecentTip:
    """One entry in a tipster's recent-tip window.

    Attributes:
        tip_id: The tip.
        submitted_at: When it was submitted (UTC).
        hoax_flagged: Scoring raised at least one hoax indicator.
        outcome: Review verdict once reviewed.
    """

    tip_id: UUID
    submitted_at: datetime
    hoax_flagged: bool = False
    outcome: ReviewOutcome | None = None

    @property
    def has_unresolved_hoax_flag(self) -> bool:
        """A hoax flag stays unresolved until a reviewer verifies the tip."""
        return self.hoax_flagged and self.outcome != ReviewOutcome.VERIFIED


@dataclass(frozen=True, eq=True)
class TipsterProfile:
    """Reputation record for one tipster identity.

    Attributes:
        tipster_id: Unique identifier for this profile.
        identity: The identity tips are submitted under.
        created_at: When the profile was created (UTC).
        total_tips: Tips submitted.
        verified_tips: Tips reviewers fully verified.
        partially_verified_tips: Tips reviewers partially verified.
        false_tips: Tips reviewers rejected.
        spam_tips: Tips classified as spam at intake.
        tips_leading_to_resolution: Tips credited with resolving a case.
        reliability_score: 0-100 reputation score.
        reliability_tier: Current tier.
        provides_photos: Has attached photos to a tip.
        provides_detailed_info: Has submitted detailed descriptions.
        reports_coordinates: Has submitted coordinates with a tip.
        is_blocked: Tips from this identity are routed as spam.
        blocked_reason: Why the profile was blocked.
        blocked_by: Moderator who blocked it.
        blocked_at: When it was blocked (UTC).
        first_tip_at: First submission (UTC).
        last_tip_at: Latest submission (UTC).
        recent_tips: Window of the latest tips, oldest first.
        version: Incremented on every change.
    """

    tipster_id: UUID
    identity: TipsterIdentity
    created_at: datetime
    total_tips: int = field(default=0)
    verified_tips: int = field(default=0)
    partially_verified_tips: int = field(default=0)
    false_tips: int = field(default=0)
    spam_tips: int = field(default=0)
    tips_leading_to_resolution: int = field(default=0)
    reliability_score: int = field(default=DEFAULT_RELIABILITY_SCORE)
    reliability_tier: ReliabilityTier = field(default=ReliabilityTier.NEW)
    provides_photos: bool = field(default=False)
    provides_detailed_info: bool = field(default=False)
    reports_coordinates: bool = field(default=False)
    is_blocked: bool = field(default=False)
    blocked_reason: str | None = field(default=None)
    blocked_by: str | None = field(default=None)
    blocked_at: datetime | None = field(default=None)
    first_tip_at: datetime | None = field(default=None)
    last_tip_at: datetime | None = field(default=None)
    recent_tips: tuple[RecentTip, ...] = field(default_factory=tuple)
    version: int = field(default=0)

    def __post_init__(self) -> None:
        """Validate profile fields after initialization.

        Raises:
            ValueError: If any field validation fails.
        """
        if not 0 <= self.reliability_score <= 100:
            raise ValueError(
                f"reliability_score must be within [0, 100], got {self.reliability_score}"
            )
        for name in (
            "total_tips",
            "verified_tips",
            "partially_verified_tips",
            "false_tips",
            "spam_tips",
            "tips_leading_to_resolution",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.created_at.tzinfo is None:
            raise ValueError("created_at must be timezone-aware (UTC)")
        if self.is_blocked and self.blocked_at is None:
            raise ValueError("blocked profile requires blocked_at")

    @property
    def reviewed_tips(self) -> int:
        """Tips that received a verdict-bearing review."""
        return self.verified_tips + self.partially_verified_tips + self.false_tips

    @property
    def false_tip_rate(self) -> float:
        if self.reviewed_tips == 0:
            return 0.0
        return self.false_tips / self.reviewed_tips

    @property
    def unresolved_hoax_flags(self) -> int:
        return sum(1 for tip in self.recent_tips if tip.has_unresolved_hoax_flag)

    def with_changes(self, **changes: object) -> TipsterProfile:
        """Copy with the given fields replaced and version bumped."""
        return replace(self, version=self.version + 1, **changes)  # type: ignore[arg-type]

    def with_recent_tip_outcome(
        self, tip_id: UUID, outcome: ReviewOutcome
    ) -> tuple[RecentTip, ...]:
        """Recent-tip window with the outcome recorded against tip_id."""
        return tuple(
            replace(tip, outcome=outcome) if tip.tip_id == tip_id else tip
            for tip in self.recent_tips
        )
