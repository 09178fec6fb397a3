"""Tipster reputation ledger service.

Owns every write to TipsterProfile:
- record_submission: profile creation and intake bookkeeping
- apply_outcome: scoring-driven update from a review decision
- credit_resolution: a tip led to the case being resolved
- perform_action: moderation (block, unblock, upgrade_tier, downgrade_tier,
  set_tier)

Writes for one tipster are serialized with a per-identity lock; writes for
different tipsters proceed concurrently. The score and tier arithmetic
lives in ReputationRules.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from uuid import UUID, uuid4

from tip_triage.application.ports.time_authority import TimeAuthorityProtocol
from tip_triage.application.ports.tipster_repository import (
    TipsterFilter,
    TipsterRepositoryProtocol,
)
from tip_triage.application.services.base import LoggingMixin
from tip_triage.application.services.keyed_lock import KeyedLock
from tip_triage.config.triage_config import ReputationConfig
from tip_triage.domain.errors import TipsterNotFoundError, ValidationError
from tip_triage.domain.models.review_decision import ReviewOutcome
from tip_triage.domain.models.tip import Tip, TipsterIdentity
from tip_triage.domain.models.tipster_profile import (
    ReliabilityTier,
    TipsterAction,
    TipsterProfile,
)
from tip_triage.domain.services.reputation_rules import ReputationRules

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 500

SORT_KEYS: dict[str, Callable[[TipsterProfile], Any]] = {
    "reliability_score": lambda p: p.reliability_score,
    "total_tips": lambda p: p.total_tips,
    "verified_tips": lambda p: p.verified_tips,
    "false_tips": lambda p: p.false_tips,
    "tips_leading_to_resolution": lambda p: p.tips_leading_to_resolution,
    "last_tip_at": lambda p: p.last_tip_at.timestamp() if p.last_tip_at else 0.0,
    "created_at": lambda p: p.created_at.timestamp(),
}


class TipsterReputationService(LoggingMixin):
    """Reads and serializes writes to tipster profiles.

    Example:
        >>> ledger = TipsterReputationService(repo, time_authority)
        >>> profile = await ledger.record_submission(tip, hoax_flagged=False, is_spam=False)
        >>> profile = await ledger.apply_outcome(
        ...     profile.tipster_id, tip.tip_id, ReviewOutcome.VERIFIED
        ... )
    """

    def __init__(
        self,
        repository: TipsterRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        config: ReputationConfig | None = None,
    ) -> None:
        self._repository = repository
        self._time = time_authority
        self._rules = ReputationRules(config or ReputationConfig())
        self._locks = KeyedLock()
        self._init_logger(component="reputation")

    @property
    def rules(self) -> ReputationRules:
        return self._rules

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_by_identity(self, identity: TipsterIdentity) -> TipsterProfile | None:
        """Current profile for an identity, without creating one."""
        return await self._repository.get_by_identity(identity.key)

    async def get_profile(self, tipster_id: UUID) -> TipsterProfile:
        """Fetch a profile.

        Raises:
            TipsterNotFoundError: Unknown tipster id.
        """
        profile = await self._repository.get(tipster_id)
        if profile is None:
            raise TipsterNotFoundError(tipster_id)
        return profile

    async def list_profiles(
        self,
        tier: ReliabilityTier | None = None,
        sort_by: str = "reliability_score",
        descending: bool = True,
        limit: int = DEFAULT_LIST_LIMIT,
        offset: int = 0,
        profile_filter: TipsterFilter | None = None,
    ) -> list[TipsterProfile]:
        """Ranked profiles, optionally restricted to one tier.

        Ties are broken by tipster id so the ranking is stable.

        Args:
            tier: Restrict to one reliability tier.
            sort_by: One of SORT_KEYS.
            descending: Highest first.
            limit: Page size.
            offset: Profiles skipped before the page starts.
            profile_filter: Blocked state, score range and identity search.

        Raises:
            ValidationError: Unknown sort key, limit or offset out of
                range, or an inverted score range.
        """
        if sort_by not in SORT_KEYS:
            raise ValidationError(
                f"must be one of {', '.join(sorted(SORT_KEYS))}", "sort_by"
            )
        if not 1 <= limit <= MAX_LIST_LIMIT:
            raise ValidationError(f"must be 1-{MAX_LIST_LIMIT}", "limit")
        if offset < 0:
            raise ValidationError("must not be negative", "offset")
        profile_filter = profile_filter or TipsterFilter()
        if (
            profile_filter.min_score is not None
            and profile_filter.max_score is not None
            and profile_filter.min_score > profile_filter.max_score
        ):
            raise ValidationError("must not exceed max_score", "min_score")

        profiles = await self._repository.list_profiles(tier, profile_filter)
        key = SORT_KEYS[sort_by]
        profiles.sort(key=lambda p: str(p.tipster_id))
        profiles.sort(key=key, reverse=descending)
        return profiles[offset : offset + limit]

    # ------------------------------------------------------------------
    # Scoring-driven writes
    # ------------------------------------------------------------------

    async def record_submission(
        self,
        tip: Tip,
        hoax_flagged: bool,
        is_spam: bool,
    ) -> TipsterProfile:
        """Count a scored tip against its tipster, creating the profile if needed."""
        key = tip.tipster.key
        async with self._locks.hold(key):
            existing = await self._repository.get_by_identity(key)
            if existing is None:
                fresh = TipsterProfile(
                    tipster_id=uuid4(),
                    identity=tip.tipster,
                    created_at=self._time.utcnow(),
                )
                updated = self._rules.apply_submission(fresh, tip, hoax_flagged, is_spam)
                await self._repository.save(updated)
                self._log_operation(
                    "record_submission",
                    tipster_id=str(updated.tipster_id),
                    tip_id=str(tip.tip_id),
                ).info("tipster_profile_created", identity_kind=tip.tipster.kind.value)
                return updated

            updated = self._rules.apply_submission(existing, tip, hoax_flagged, is_spam)
            await self._repository.update(updated)
            if updated.reliability_tier != existing.reliability_tier:
                self._log_operation(
                    "record_submission",
                    tipster_id=str(updated.tipster_id),
                    tip_id=str(tip.tip_id),
                ).warning(
                    "tipster_tier_demoted_by_hoax_flag",
                    from_tier=existing.reliability_tier.value,
                    to_tier=updated.reliability_tier.value,
                )
            return updated

    async def apply_outcome(
        self,
        tipster_id: UUID,
        tip_id: UUID,
        outcome: ReviewOutcome,
        partial: bool = False,
        high_risk_case: bool = False,
    ) -> TipsterProfile:
        """Apply a review verdict to the tipster's score, counts and tier.

        Raises:
            TipsterNotFoundError: Unknown tipster id.
        """
        return await self._update(
            tipster_id,
            "apply_outcome",
            lambda p: self._rules.apply_outcome(
                p, tip_id, outcome, partial=partial, high_risk_case=high_risk_case
            ),
            tip_id=str(tip_id),
            outcome=outcome.value,
            partial=partial,
        )

    async def credit_resolution(self, tipster_id: UUID) -> TipsterProfile:
        """Credit a tip that led to the case being resolved.

        Raises:
            TipsterNotFoundError: Unknown tipster id.
        """
        return await self._update(
            tipster_id, "credit_resolution", self._rules.apply_resolution_credit
        )

    async def restore(self, snapshot: TipsterProfile) -> None:
        """Put back a profile snapshot taken before a failed review.

        Only restores when nothing else has written the profile since,
        so a concurrent update is never clobbered.
        """
        async with self._locks.hold(snapshot.identity.key):
            current = await self._repository.get(snapshot.tipster_id)
            if current is None or current.version != snapshot.version + 1:
                self._log_operation(
                    "restore", tipster_id=str(snapshot.tipster_id)
                ).warning("tipster_restore_skipped")
                return
            await self._repository.update(snapshot)

    # ------------------------------------------------------------------
    # Moderation
    # ------------------------------------------------------------------

    async def perform_action(
        self,
        tipster_id: UUID,
        action: TipsterAction,
        reason: str | None = None,
        performed_by: str = "moderator",
        new_tier: ReliabilityTier | None = None,
    ) -> TipsterProfile:
        """Apply an administrative action, bypassing the scoring path.

        Block and unblock are idempotent; the block reason is optional.
        upgrade_tier and downgrade_tier go one step, set_tier jumps to
        new_tier. Every tier move re-anchors the score.

        Raises:
            TipsterNotFoundError: Unknown tipster id.
            ValidationError: set_tier without new_tier, a tier move past
                either end of the ladder, or verified_source with
                unresolved hoax flags.
        """
        if action == TipsterAction.SET_TIER and new_tier is None:
            raise ValidationError("required for set_tier", "new_tier")
        if reason is not None and not reason.strip():
            reason = None

        def change(profile: TipsterProfile) -> TipsterProfile:
            if action == TipsterAction.BLOCK:
                return self._rules.block(
                    profile, reason, performed_by, self._time.utcnow()
                )
            if action == TipsterAction.UNBLOCK:
                return self._rules.unblock(profile)
            if action == TipsterAction.UPGRADE_TIER:
                return self._rules.upgrade_tier(profile)
            if action == TipsterAction.SET_TIER and new_tier is not None:
                return self._rules.set_tier(profile, new_tier)
            return self._rules.downgrade_tier(profile)

        return await self._update(
            tipster_id,
            "perform_action",
            change,
            action=action.value,
            performed_by=performed_by,
            new_tier=new_tier.value if new_tier else None,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _update(
        self,
        tipster_id: UUID,
        operation: str,
        change: Callable[[TipsterProfile], TipsterProfile],
        **context: object,
    ) -> TipsterProfile:
        log = self._log_operation(operation, tipster_id=str(tipster_id), **context)
        profile = await self.get_profile(tipster_id)
        async with self._locks.hold(profile.identity.key):
            current = await self.get_profile(tipster_id)
            updated = change(current)
            if updated is current:
                log.info("tipster_unchanged")
                return current
            await self._repository.update(updated)

        log.info(
            "tipster_updated",
            reliability_score=updated.reliability_score,
            previous_score=current.reliability_score,
            reliability_tier=updated.reliability_tier.value,
            previous_tier=current.reliability_tier.value,
            is_blocked=updated.is_blocked,
        )
        return updated
