"""Priority classifier: choose a queue, SLA deadline and review priority.

Rules are evaluated in order, first match wins:
1. Tipster blocked -> low_priority, labelled spam
2. Score >= critical threshold, no hoax indicators, high-risk case -> critical
3. Score >= high threshold -> high_priority
4. Score >= standard threshold -> standard
5. Otherwise -> low_priority, labelled spam when the spam score reaches
   the spam threshold, else low

Deadline = creation time + queue SLA, minus the queue's urgency discount
when the case has a short response window, never less than the minimum
SLA. The classifier is pure and idempotent: the same inputs always give
the same queue and deadline, which is what makes rescoring after a
reviewer override safe.

Note: This is pure domain logic with no infrastructure dependencies.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from tip_triage.domain.models.case_context import CaseRiskProfile
from tip_triage.domain.models.queue_item import QueueType
from tip_triage.domain.models.tip_verification import HoaxIndicator, PriorityBucket

if TYPE_CHECKING:
    from tip_triage.config.triage_config import ClassifierConfig

LOWEST_REVIEW_PRIORITY = 10

_BUCKET_FOR_QUEUE: dict[QueueType, PriorityBucket] = {
    QueueType.CRITICAL: PriorityBucket.CRITICAL,
    QueueType.HIGH_PRIORITY: PriorityBucket.HIGH,
    QueueType.STANDARD: PriorityBucket.MEDIUM,
    QueueType.LOW_PRIORITY: PriorityBucket.LOW,
}


@dataclass(frozen=True)
class ClassificationInput:
    """Everything the classifier looks at.

    Attributes:
        credibility_score: Effective aggregate score.
        hoax_indicators: Indicators raised for the tip.
        spam_score: 0-100 spam likelihood.
        tipster_blocked: The submitting tipster is blocked.
        risk: Risk attributes of the tip's case.
        created_at: Queue item creation time (UTC).
        is_duplicate: The tip corroborates an earlier one.
    """

    credibility_score: int
    hoax_indicators: Collection[HoaxIndicator]
    spam_score: int
    tipster_blocked: bool
    risk: CaseRiskProfile
    created_at: datetime
    is_duplicate: bool = False


@dataclass(frozen=True)
class Classification:
    """Classifier output.

    Attributes:
        queue_type: Queue the item goes into.
        bucket: Label stored on the verification.
        sla_deadline: Review deadline (UTC).
        review_priority: 1 (most urgent) to 10 within a queue.
        rule: Which rule matched, for logging.
    """

    queue_type: QueueType
    bucket: PriorityBucket
    sla_deadline: datetime
    review_priority: int
    rule: str


class PriorityClassifier:
    """Stateless rule evaluation over a ClassificationInput."""

    def __init__(self, config: ClassifierConfig) -> None:
        self._config = config

    def sla_deadline(
        self,
        queue_type: QueueType,
        created_at: datetime,
        risk: CaseRiskProfile,
    ) -> datetime:
        """Creation time + SLA, less the urgency discount, floored."""
        config = self._config
        sla = config.sla_for(queue_type.value)
        if risk.has_short_response_window:
            floor = min(sla, config.min_sla)
            sla = max(sla - config.discount_for(queue_type.value), floor)
        return created_at + sla

    def review_priority(
        self,
        queue_type: QueueType,
        credibility_score: int,
        risk: CaseRiskProfile,
        is_duplicate: bool,
    ) -> int:
        """Order items inside a queue, 1 = review first."""
        if queue_type == QueueType.CRITICAL:
            priority = 1
        elif risk.is_high_risk or credibility_score >= 70:
            priority = 2
        elif credibility_score >= 50:
            priority = 5
        else:
            priority = 8
        if is_duplicate:
            priority = max(1, priority - 1)
        return priority

    def classify(self, data: ClassificationInput) -> Classification:
        """Apply the rules in order; the first match wins."""
        config = self._config
        score = data.credibility_score

        if data.tipster_blocked:
            return Classification(
                queue_type=QueueType.LOW_PRIORITY,
                bucket=PriorityBucket.SPAM,
                sla_deadline=data.created_at
                + config.sla_for(QueueType.LOW_PRIORITY.value),
                review_priority=LOWEST_REVIEW_PRIORITY,
                rule="blocked_tipster",
            )

        if (
            score >= config.critical_threshold
            and not data.hoax_indicators
            and data.risk.is_high_risk
        ):
            queue_type, rule = QueueType.CRITICAL, "critical"
        elif score >= config.high_threshold:
            queue_type, rule = QueueType.HIGH_PRIORITY, "high_priority"
        elif score >= config.standard_threshold:
            queue_type, rule = QueueType.STANDARD, "standard"
        else:
            queue_type, rule = QueueType.LOW_PRIORITY, "low_priority"

        bucket = _BUCKET_FOR_QUEUE[queue_type]
        if queue_type == QueueType.LOW_PRIORITY and data.spam_score >= config.spam_threshold:
            bucket = PriorityBucket.SPAM

        review_priority = self.review_priority(
            queue_type, score, data.risk, data.is_duplicate
        )
        if bucket == PriorityBucket.SPAM:
            review_priority = LOWEST_REVIEW_PRIORITY

        return Classification(
            queue_type=queue_type,
            bucket=bucket,
            sla_deadline=self.sla_deadline(queue_type, data.created_at, data.risk),
            review_priority=review_priority,
            rule=rule,
        )

    def escalation_deadline(self, created_at: datetime) -> datetime:
        """Deadline of a follow-up item opened by escalation."""
        return created_at + self._config.escalation_sla
