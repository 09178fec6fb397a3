"""Read-only dashboard statistics across queues, tipsters and decisions.

A case or date-range scope narrows the tip-derived figures (tip total,
hoax indicators, decision outcomes). Queue and tipster figures always
cover the whole system.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from tip_triage.application.ports.review_decision_repository import (
    ReviewDecisionRepositoryProtocol,
)
from tip_triage.application.ports.tip_repository import VerificationRepositoryProtocol
from tip_triage.application.ports.tipster_repository import TipsterRepositoryProtocol
from tip_triage.application.services.base import LoggingMixin
from tip_triage.application.services.review_queue_service import ReviewQueueService
from tip_triage.domain.errors import ValidationError
from tip_triage.domain.models.queue_item import QueueStatus, QueueType
from tip_triage.domain.models.review_decision import ReviewOutcome
from tip_triage.domain.models.tipster_profile import ReliabilityTier

DEFAULT_TOP_INDICATORS = 5


@dataclass(frozen=True)
class TriageStats:
    """Point-in-time snapshot of the triage system.

    Attributes:
        total_tips: Tips scored so far.
        pending_by_queue: Pending item count per queue type value.
        in_review_by_queue: Claimed item count per queue type value.
        breached: Unresolved items past their deadline.
        tier_counts: Tipster count per reliability tier value.
        blocked_tipsters: Blocked tipster count.
        outcome_counts: Decision count per review outcome value.
        top_hoax_indicators: Most frequent indicators, highest first.
    """

    total_tips: int
    pending_by_queue: dict[str, int]
    in_review_by_queue: dict[str, int]
    breached: int
    tier_counts: dict[str, int]
    blocked_tipsters: int
    outcome_counts: dict[str, int]
    top_hoax_indicators: list[tuple[str, int]] = field(default_factory=list)

    @property
    def total_pending(self) -> int:
        return sum(self.pending_by_queue.values())

    @property
    def total_in_review(self) -> int:
        return sum(self.in_review_by_queue.values())


class TriageStatsService(LoggingMixin):
    """Aggregates counts for the stats endpoint."""

    def __init__(
        self,
        *,
        queue_service: ReviewQueueService,
        verification_repository: VerificationRepositoryProtocol,
        tipster_repository: TipsterRepositoryProtocol,
        decision_repository: ReviewDecisionRepositoryProtocol,
        top_indicators: int = DEFAULT_TOP_INDICATORS,
    ) -> None:
        self._queue = queue_service
        self._verifications = verification_repository
        self._tipsters = tipster_repository
        self._decisions = decision_repository
        self._top_indicators = top_indicators
        self._init_logger(component="stats")

    async def get_stats(
        self,
        case_id: UUID | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> TriageStats:
        """Current figures, tip-derived ones optionally scoped.

        Raises:
            ValidationError: date_from is after date_to.
        """
        if date_from is not None and date_to is not None and date_from > date_to:
            raise ValidationError("must not be after date_to", "date_from")

        pending = {
            qt.value: await self._queue.count(qt, QueueStatus.PENDING) for qt in QueueType
        }
        in_review = {
            qt.value: await self._queue.count(qt, QueueStatus.IN_REVIEW)
            for qt in QueueType
        }

        verifications = await self._verifications.list_all(
            case_id=case_id, created_from=date_from, created_to=date_to
        )
        indicators: Counter[str] = Counter(
            indicator.value for v in verifications for indicator in v.hoax_indicators
        )

        profiles = await self._tipsters.list_profiles()
        tiers = Counter(p.reliability_tier.value for p in profiles)
        decisions = await self._decisions.list_all()
        if case_id is not None or date_from is not None or date_to is not None:
            in_scope = {v.tip_id for v in verifications}
            decisions = [d for d in decisions if d.tip_id in in_scope]
        outcomes = Counter(d.outcome.value for d in decisions)

        stats = TriageStats(
            total_tips=len(verifications),
            pending_by_queue=pending,
            in_review_by_queue=in_review,
            breached=await self._queue.count_breached(),
            tier_counts={tier.value: tiers.get(tier.value, 0) for tier in ReliabilityTier},
            blocked_tipsters=sum(1 for p in profiles if p.is_blocked),
            outcome_counts={o.value: outcomes.get(o.value, 0) for o in ReviewOutcome},
            top_hoax_indicators=sorted(
                indicators.items(), key=lambda kv: (-kv[1], kv[0])
            )[: self._top_indicators],
        )
        self._log_operation("get_stats").debug(
            "stats_computed",
            total_tips=stats.total_tips,
            total_pending=stats.total_pending,
            breached=stats.breached,
        )
        return stats
