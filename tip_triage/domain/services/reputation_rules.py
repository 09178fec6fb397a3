"""Tipster reputation rules.

Pure functions from (profile, event) to a new profile. The ledger service
persists the result under a per-tipster lock.

Scoring-driven updates come only from review outcomes:
- verified: + increment x severity multiplier, bounded by max_step
- partially verified: half of the verified change
- rejected: - decrement x severity multiplier, bounded by max_step
- needs_more_info / escalated: score unchanged

Tier rules:
- new until the first verdict-bearing review
- unrated until min_reviews_for_rating verdicts
- then monotonic thresholds over the score; upgrades apply at once,
  downgrades only once the score falls more than hysteresis_buffer below
  the current tier's lower boundary, and never more than one tier per
  outcome
- verified_source is lost as soon as the score drops below its threshold
  or an unresolved hoax flag appears in the recent window, again by one
  tier only

Administrative actions (block, unblock and the three tier moves)
bypass the scoring path. Tier moves re-anchor the score to the middle of
the new tier's band so the next outcome does not immediately undo them.

Note: This is pure domain logic with no infrastructure dependencies.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from tip_triage.domain.errors import ValidationError
from tip_triage.domain.models.review_decision import ReviewOutcome
from tip_triage.domain.models.tip import Tip
from tip_triage.domain.models.tipster_profile import (
    DEFAULT_RELIABILITY_SCORE,
    RecentTip,
    ReliabilityTier,
    TipsterProfile,
)
from tip_triage.domain.services.geo import round_half_up

if TYPE_CHECKING:
    from tip_triage.config.triage_config import ReputationConfig

DETAILED_CONTENT_LENGTH = 100


class ReputationRules:
    """Computes reputation changes under a ReputationConfig."""

    def __init__(self, config: ReputationConfig) -> None:
        self._config = config

    # ------------------------------------------------------------------
    # Tier arithmetic
    # ------------------------------------------------------------------

    def lower_boundary(self, tier: ReliabilityTier) -> int:
        config = self._config
        return {
            ReliabilityTier.LOW: config.low_threshold,
            ReliabilityTier.MODERATE: config.moderate_threshold,
            ReliabilityTier.HIGH: config.high_threshold,
            ReliabilityTier.VERIFIED_SOURCE: config.verified_source_threshold,
        }.get(tier, 0)

    def tier_for_score(self, score: int) -> ReliabilityTier:
        """Rated tier implied by a score, ignoring hysteresis."""
        config = self._config
        if score >= config.verified_source_threshold:
            return ReliabilityTier.VERIFIED_SOURCE
        if score >= config.high_threshold:
            return ReliabilityTier.HIGH
        if score >= config.moderate_threshold:
            return ReliabilityTier.MODERATE
        return ReliabilityTier.LOW

    def anchor_score(self, tier: ReliabilityTier) -> int:
        """Middle of the tier's score band."""
        if not tier.is_rated:
            return DEFAULT_RELIABILITY_SCORE
        lower = self.lower_boundary(tier)
        if tier == ReliabilityTier.VERIFIED_SOURCE:
            upper = 100
        else:
            upper = self.lower_boundary(tier.step_up())
        return lower + (upper - lower) // 2

    def next_tier(
        self,
        current: ReliabilityTier,
        score: int,
        reviewed_tips: int,
        unresolved_hoax_flags: int,
    ) -> ReliabilityTier:
        """Tier after a change, honouring hysteresis and the one-step rule."""
        target = self.tier_for_score(score)
        if target == ReliabilityTier.VERIFIED_SOURCE and unresolved_hoax_flags:
            target = ReliabilityTier.HIGH

        if not current.is_rated:
            if reviewed_tips == 0:
                return current
            if reviewed_tips < self._config.min_reviews_for_rating:
                return ReliabilityTier.UNRATED
            return target

        if current == ReliabilityTier.VERIFIED_SOURCE:
            if target != ReliabilityTier.VERIFIED_SOURCE:
                return ReliabilityTier.HIGH
            return current

        if target.rank >= current.rank:
            return target
        if score >= self.lower_boundary(current) - self._config.hysteresis_buffer:
            return current
        return current.step_down()

    def _with_score(
        self, profile: TipsterProfile, score: int, **changes: object
    ) -> TipsterProfile:
        score = max(0, min(100, score))
        candidate = replace(profile, **changes)  # type: ignore[arg-type]
        tier = self.next_tier(
            profile.reliability_tier,
            score,
            candidate.reviewed_tips,
            candidate.unresolved_hoax_flags,
        )
        return profile.with_changes(
            reliability_score=score,
            reliability_tier=tier,
            **changes,
        )

    # ------------------------------------------------------------------
    # Scoring-driven updates
    # ------------------------------------------------------------------

    def score_delta(
        self,
        outcome: ReviewOutcome,
        partial: bool,
        high_risk_case: bool,
    ) -> int:
        """Signed score change for a review outcome."""
        config = self._config
        multiplier = config.high_risk_multiplier if high_risk_case else 1.0
        if outcome == ReviewOutcome.VERIFIED:
            step = min(config.max_step, round_half_up(config.verified_increment * multiplier))
            if partial:
                step = round_half_up(step * config.partial_factor)
            return step
        if outcome == ReviewOutcome.REJECTED:
            return -min(
                config.max_step,
                round_half_up(config.rejected_decrement * multiplier),
            )
        return 0

    def apply_outcome(
        self,
        profile: TipsterProfile,
        tip_id: UUID,
        outcome: ReviewOutcome,
        partial: bool = False,
        high_risk_case: bool = False,
    ) -> TipsterProfile:
        """Profile after a reviewer decided on one of its tips."""
        changes: dict[str, object] = {
            "recent_tips": profile.with_recent_tip_outcome(tip_id, outcome),
        }
        if outcome == ReviewOutcome.VERIFIED and partial:
            changes["partially_verified_tips"] = profile.partially_verified_tips + 1
        elif outcome == ReviewOutcome.VERIFIED:
            changes["verified_tips"] = profile.verified_tips + 1
        elif outcome == ReviewOutcome.REJECTED:
            changes["false_tips"] = profile.false_tips + 1

        score = profile.reliability_score + self.score_delta(
            outcome, partial, high_risk_case
        )
        return self._with_score(profile, score, **changes)

    def apply_resolution_credit(self, profile: TipsterProfile) -> TipsterProfile:
        """Profile after one of its tips led to the case being resolved."""
        bonus = min(self._config.max_step, self._config.resolution_bonus)
        return self._with_score(
            profile,
            profile.reliability_score + bonus,
            tips_leading_to_resolution=profile.tips_leading_to_resolution + 1,
        )

    def apply_submission(
        self,
        profile: TipsterProfile,
        tip: Tip,
        hoax_flagged: bool,
        is_spam: bool,
    ) -> TipsterProfile:
        """Bookkeeping for a newly scored tip.

        Counts the tip and records it in the recent window. The score is
        untouched; the tier only changes if a new hoax flag breaks the
        verified_source requirement.
        """
        window = profile.recent_tips + (
            RecentTip(
                tip_id=tip.tip_id,
                submitted_at=tip.submitted_at,
                hoax_flagged=hoax_flagged,
            ),
        )
        window = window[-self._config.recent_window :]
        changes: dict[str, object] = {
            "total_tips": profile.total_tips + 1,
            "spam_tips": profile.spam_tips + (1 if is_spam else 0),
            "first_tip_at": profile.first_tip_at or tip.submitted_at,
            "last_tip_at": max(profile.last_tip_at or tip.submitted_at, tip.submitted_at),
            "recent_tips": window,
            "provides_photos": profile.provides_photos or tip.has_photos,
            "provides_detailed_info": profile.provides_detailed_info
            or len(tip.content) >= DETAILED_CONTENT_LENGTH,
            "reports_coordinates": profile.reports_coordinates or tip.point is not None,
        }
        tier = profile.reliability_tier
        if tier == ReliabilityTier.VERIFIED_SOURCE and any(
            entry.has_unresolved_hoax_flag for entry in window
        ):
            tier = ReliabilityTier.HIGH
        return profile.with_changes(reliability_tier=tier, **changes)

    # ------------------------------------------------------------------
    # Administrative actions
    # ------------------------------------------------------------------

    def block(
        self,
        profile: TipsterProfile,
        reason: str | None,
        blocked_by: str,
        blocked_at: datetime,
    ) -> TipsterProfile:
        if profile.is_blocked:
            return profile
        return profile.with_changes(
            is_blocked=True,
            blocked_reason=reason,
            blocked_by=blocked_by,
            blocked_at=blocked_at,
        )

    def unblock(self, profile: TipsterProfile) -> TipsterProfile:
        if not profile.is_blocked:
            return profile
        return profile.with_changes(
            is_blocked=False,
            blocked_reason=None,
            blocked_by=None,
            blocked_at=None,
        )

    def upgrade_tier(self, profile: TipsterProfile) -> TipsterProfile:
        """Move one tier up and re-anchor the score.

        Raises:
            ValidationError: Already at the top tier, or verified_source
                would be granted with unresolved hoax flags.
        """
        current = profile.reliability_tier
        if current == ReliabilityTier.VERIFIED_SOURCE:
            raise ValidationError("tipster is already a verified source", "action")
        target = current.step_up()
        if target == ReliabilityTier.VERIFIED_SOURCE and profile.unresolved_hoax_flags:
            raise ValidationError(
                f"{profile.unresolved_hoax_flags} unresolved hoax flag(s) in recent tips",
                "action",
            )
        return profile.with_changes(
            reliability_tier=target,
            reliability_score=self.anchor_score(target),
        )

    def downgrade_tier(self, profile: TipsterProfile) -> TipsterProfile:
        """Move one tier down and re-anchor the score.

        Raises:
            ValidationError: Already at the bottom tier.
        """
        current = profile.reliability_tier
        if current == ReliabilityTier.NEW:
            raise ValidationError("tipster is already at the lowest tier", "action")
        target = current.step_down()
        return profile.with_changes(
            reliability_tier=target,
            reliability_score=self.anchor_score(target),
        )

    def set_tier(self, profile: TipsterProfile, tier: ReliabilityTier) -> TipsterProfile:
        """Place the profile in any tier and re-anchor the score.

        Setting the current tier again changes nothing.

        Raises:
            ValidationError: verified_source would be granted with
                unresolved hoax flags.
        """
        if tier == profile.reliability_tier:
            return profile
        if tier == ReliabilityTier.VERIFIED_SOURCE and profile.unresolved_hoax_flags:
            raise ValidationError(
                f"{profile.unresolved_hoax_flags} unresolved hoax flag(s) in recent tips",
                "new_tier",
            )
        return profile.with_changes(
            reliability_tier=tier,
            reliability_score=self.anchor_score(tier),
        )
