"""Tip intake service: score, annotate, classify and enqueue a tip.

Pipeline for submit_tip:
1. Fetch case risk, case evidence, tipster profile and scam patterns
   concurrently
2. Fan the tip out to the six signal extractors and collect their results
3. Aggregate the available sub-scores into the credibility score
4. Detect near-duplicates and apply the hoax rules
5. Classify into a queue with an SLA deadline and review priority
6. Count the tip against its tipster, then persist tip, verification
   and queue item

Collaborator failures surface as DownstreamUnavailableError before any
state is written, so intake can safely retry.

Also hosts the verification-side operations: reviewer sub-score
overrides (with audit-preserving rescoring and reclassification of a
still-pending item) and merging of externally produced AI analysis.

Every read-modify-write of a verification holds the per-tip lock shared
with ReviewOutcomeService. Where both locks are needed, the tip lock is
taken before the queue-item lock.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from uuid import UUID, uuid4

from tip_triage.application.ports.case_collaborators import (
    CaseEvidenceLookupProtocol,
    CaseRiskLookupProtocol,
    ScamPatternSourceProtocol,
)
from tip_triage.application.ports.time_authority import TimeAuthorityProtocol
from tip_triage.application.ports.tip_repository import (
    TipRepositoryProtocol,
    VerificationRepositoryProtocol,
)
from tip_triage.application.services.base import LoggingMixin
from tip_triage.application.services.keyed_lock import KeyedLock
from tip_triage.application.services.review_queue_service import ReviewQueueService
from tip_triage.application.services.tipster_reputation_service import (
    TipsterReputationService,
)
from tip_triage.config.triage_config import TriageConfig
from tip_triage.domain.errors import (
    TipNotFoundError,
    ValidationError,
    VerificationNotFoundError,
)
from tip_triage.domain.models.queue_item import QueueItem, QueueStatus
from tip_triage.domain.models.tip import Tip
from tip_triage.domain.models.tip_verification import (
    CREDIBILITY_FIELD,
    OVERRIDABLE_FIELDS,
    HoaxIndicator,
    PriorityBucket,
    SignalName,
    SubScores,
    TipVerification,
)
from tip_triage.domain.models.tipster_profile import TipsterProfile
from tip_triage.domain.services.credibility_aggregator import CredibilityAggregator
from tip_triage.domain.services.duplicate_detector import (
    DuplicateDetector,
    DuplicateResult,
)
from tip_triage.domain.services.hoax_detector import HoaxDetector
from tip_triage.domain.services.priority_classifier import (
    Classification,
    ClassificationInput,
    PriorityClassifier,
)
from tip_triage.domain.services.signal_extractors import (
    EXTRACTORS,
    ExtractionContext,
    Extractor,
    SignalResult,
)

MAX_AI_RECOMMENDATIONS = 20


@dataclass(frozen=True)
class IntakeResult:
    """Everything submit_tip produced.

    Attributes:
        tip: The stored tip.
        verification: Its scoring record.
        queue_item: The queue item awaiting review.
        tipster: The tipster profile after bookkeeping.
        rule: Classifier rule that placed the item.
    """

    tip: Tip
    verification: TipVerification
    queue_item: QueueItem
    tipster: TipsterProfile
    rule: str


def _suggestions(
    tip: Tip,
    results: dict[SignalName, SignalResult],
    duplicate: DuplicateResult,
    indicators: frozenset[HoaxIndicator],
) -> tuple[str, ...]:
    """Follow-up hints for the reviewer."""
    hints: list[str] = []
    if not tip.has_photos:
        hints.append("Ask the tipster for a photo of the sighting")
    if tip.point is None:
        hints.append("Request precise coordinates or a map pin for the sighting")
    if tip.sighted_at is None:
        hints.append("Confirm when the sighting happened")
    if duplicate.is_duplicate:
        hints.append(f"Review together with earlier tip {duplicate.duplicate_of}")
    leads = results[SignalName.CROSS_REFERENCE].matching_lead_ids
    if leads:
        hints.append(f"Cross-check against lead(s) {', '.join(leads)}")
    if indicators:
        names = ", ".join(sorted(i.value for i in indicators))
        hints.append(f"Verify before acting; hoax indicators raised: {names}")
    if tip.is_anonymous:
        hints.append("Tipster is anonymous; corroborate independently")
    return tuple(hints)


class TipIntakeService(LoggingMixin):
    """Entry point for tips arriving from the intake collaborator.

    Example:
        >>> result = await intake.submit_tip(tip)
        >>> result.queue_item.queue_type
        <QueueType.CRITICAL: 'critical'>
    """

    def __init__(
        self,
        *,
        tip_repository: TipRepositoryProtocol,
        verification_repository: VerificationRepositoryProtocol,
        queue_service: ReviewQueueService,
        reputation_service: TipsterReputationService,
        case_risk_lookup: CaseRiskLookupProtocol,
        case_evidence_lookup: CaseEvidenceLookupProtocol,
        scam_patterns: ScamPatternSourceProtocol,
        time_authority: TimeAuthorityProtocol,
        config: TriageConfig | None = None,
        verification_locks: KeyedLock | None = None,
    ) -> None:
        self._tips = tip_repository
        self._verifications = verification_repository
        self._queue = queue_service
        self._reputation = reputation_service
        self._case_risk = case_risk_lookup
        self._case_evidence = case_evidence_lookup
        self._scam_patterns = scam_patterns
        self._time = time_authority
        self._config = config or TriageConfig()

        self._aggregator = CredibilityAggregator(self._config.weights)
        self._duplicates = DuplicateDetector(self._config.duplicates)
        self._hoax = HoaxDetector(self._config.hoax)
        self._classifier = PriorityClassifier(self._config.classifier)
        self._case_locks = KeyedLock()
        self._verification_locks = verification_locks or KeyedLock()
        self._init_logger(component="intake")

    @property
    def classifier(self) -> PriorityClassifier:
        return self._classifier

    # ------------------------------------------------------------------
    # Intake
    # ------------------------------------------------------------------

    async def submit_tip(self, tip: Tip) -> IntakeResult:
        """Score, classify and enqueue a newly submitted tip.

        Raises:
            ValidationError: The tip was already submitted.
            DownstreamUnavailableError: Case management is unreachable.
        """
        log = self._log_operation(
            "submit_tip", tip_id=str(tip.tip_id), case_id=str(tip.case_id)
        )
        log.info("tip_intake_started", source=tip.source.value)

        if await self._tips.get(tip.tip_id) is not None:
            raise ValidationError(f"tip {tip.tip_id} was already submitted", "tip_id")

        risk, evidence, profile, patterns = await asyncio.gather(
            self._case_risk.get_case_risk_profile(tip.case_id),
            self._case_evidence.get_case_evidence(tip.case_id),
            self._reputation.find_by_identity(tip.tipster),
            self._scam_patterns.list_active(),
        )

        context = ExtractionContext(
            evidence=evidence, profile=profile, config=self._config.extraction
        )
        results = await self._extract(tip, context)
        subscores = SubScores(**{s.value: r.score for s, r in results.items()})
        credibility = self._aggregator.aggregate(subscores)
        extractor_indicators = frozenset().union(*(r.indicators for r in results.values()))
        hoax = self._hoax.evaluate(tip, profile, patterns, extractor_indicators)

        # Serialize per case so concurrent near-duplicates see each other
        async with self._case_locks.hold(tip.case_id):
            recent = await self._tips.list_for_case_since(
                tip.case_id, tip.submitted_at - self._config.duplicates.window
            )
            duplicate = self._duplicates.detect(tip, recent)

            now = self._time.utcnow()
            classification = self._classifier.classify(
                ClassificationInput(
                    credibility_score=credibility,
                    hoax_indicators=hoax.indicators,
                    spam_score=hoax.spam_score,
                    tipster_blocked=profile is not None and profile.is_blocked,
                    risk=risk,
                    created_at=now,
                    is_duplicate=duplicate.is_duplicate,
                )
            )

            verification = TipVerification(
                verification_id=uuid4(),
                tip_id=tip.tip_id,
                case_id=tip.case_id,
                subscores=subscores,
                credibility_score=credibility,
                priority_bucket=classification.bucket,
                created_at=now,
                hoax_indicators=hoax.indicators,
                spam_score=hoax.spam_score,
                is_duplicate=duplicate.is_duplicate,
                duplicate_of=duplicate.duplicate_of,
                similarity_scores=duplicate.similarity_scores,
                notes=tuple(
                    (signal.value, result.note)
                    for signal, result in results.items()
                    if result.note
                ),
                suggestions=_suggestions(tip, results, duplicate, hoax.indicators),
            )
            item = QueueItem(
                item_id=uuid4(),
                tip_id=tip.tip_id,
                case_id=tip.case_id,
                queue_type=classification.queue_type,
                sla_deadline=classification.sla_deadline,
                enqueued_at=now,
                review_priority=classification.review_priority,
            )

            # The profile must exist before the item becomes reviewable
            tipster = await self._reputation.record_submission(
                tip,
                hoax_flagged=verification.has_hoax_indicators,
                is_spam=classification.bucket == PriorityBucket.SPAM,
            )
            await self._tips.save(tip)
            await self._verifications.save(verification)
            await self._queue.enqueue(item)

        log.info(
            "tip_classified",
            credibility_score=credibility,
            queue_type=classification.queue_type.value,
            priority_bucket=classification.bucket.value,
            rule=classification.rule,
            hoax_indicators=sorted(i.value for i in hoax.indicators),
            spam_score=hoax.spam_score,
            is_duplicate=duplicate.is_duplicate,
            queue_item_id=str(item.item_id),
            tipster_id=str(tipster.tipster_id),
        )
        return IntakeResult(tip, verification, item, tipster, classification.rule)

    async def _extract(
        self, tip: Tip, context: ExtractionContext
    ) -> dict[SignalName, SignalResult]:
        """Fan the tip out to every extractor and collect the results.

        The extractors are synchronous pure functions, so inside the
        gather they still run one after another on the event loop.
        """

        async def run(extractor: Extractor) -> SignalResult:
            return extractor(tip, context)

        signals = list(EXTRACTORS)
        results = await asyncio.gather(*(run(EXTRACTORS[s]) for s in signals))
        return dict(zip(signals, results))

    # ------------------------------------------------------------------
    # Verification reads and overrides
    # ------------------------------------------------------------------

    async def get_tip(self, tip_id: UUID) -> Tip:
        """Raises TipNotFoundError for an unknown tip."""
        tip = await self._tips.get(tip_id)
        if tip is None:
            raise TipNotFoundError(tip_id)
        return tip

    async def get_verification(self, tip_id: UUID) -> TipVerification:
        """Raises VerificationNotFoundError when the tip was never scored."""
        verification = await self._verifications.get_by_tip(tip_id)
        if verification is None:
            raise VerificationNotFoundError(tip_id)
        return verification

    async def override_score(
        self,
        tip_id: UUID,
        field_name: str,
        new_value: int,
        reviewer_id: str,
        reason: str | None = None,
    ) -> TipVerification:
        """Override a score field and rescore.

        The original value stays on the record and the override is
        appended to the audit trail. Overriding a sub-score re-aggregates
        the effective sub-scores (recorded as a credibility override) and
        re-runs the classifier; a still-pending queue item moves to the
        resulting queue with a deadline computed from its original
        enqueue time.

        Raises:
            ValidationError: Unknown field or value out of range.
            VerificationNotFoundError: Tip was never scored.
        """
        if field_name not in OVERRIDABLE_FIELDS:
            raise ValidationError(
                f"must be one of {', '.join(sorted(OVERRIDABLE_FIELDS))}", "field"
            )
        if not 0 <= new_value <= 100:
            raise ValidationError("must be within [0, 100]", "value")
        if not reviewer_id:
            raise ValidationError("must not be empty", "reviewer_id")

        log = self._log_operation(
            "override_score", tip_id=str(tip_id), field=field_name, reviewer_id=reviewer_id
        )
        async with self._verification_locks.hold(tip_id):
            verification = await self.get_verification(tip_id)
            now = self._time.utcnow()
            updated = verification.with_override(
                field_name, new_value, reviewer_id, now, reason
            )
            if field_name != CREDIBILITY_FIELD:
                rescored = self._aggregator.aggregate(updated.effective_subscores)
                if rescored != updated.effective_credibility_score:
                    updated = updated.with_override(
                        CREDIBILITY_FIELD,
                        rescored,
                        reviewer_id,
                        now,
                        f"recomputed after {field_name} override",
                    )

            classification = await self._reclassify(updated)
            if classification is not None:
                updated = updated.with_priority_bucket(classification.bucket)
            await self._verifications.update(updated)

        log.info(
            "score_overridden",
            original_value=verification.original_value(field_name),
            new_value=new_value,
            effective_credibility_score=updated.effective_credibility_score,
            priority_bucket=updated.priority_bucket.value,
        )
        return updated

    async def _reclassify(self, verification: TipVerification) -> Classification | None:
        """Re-run the classifier and move the tip's pending queue item.

        Returns None when no item is pending (claimed or resolved items
        keep their queue and bucket).
        """
        tip = await self.get_tip(verification.tip_id)
        pending = [
            item
            for item in await self._queue.list_items_for_tip(tip.tip_id)
            if item.status == QueueStatus.PENDING
        ]
        if not pending:
            return None

        risk = await self._case_risk.get_case_risk_profile(tip.case_id)
        profile = await self._reputation.find_by_identity(tip.tipster)
        item = pending[0]
        classification = self._classifier.classify(
            ClassificationInput(
                credibility_score=verification.effective_credibility_score,
                hoax_indicators=verification.hoax_indicators,
                spam_score=verification.spam_score,
                tipster_blocked=profile is not None and profile.is_blocked,
                risk=risk,
                created_at=item.enqueued_at,
                is_duplicate=verification.is_duplicate,
            )
        )
        moved = await self._queue.reclassify(
            item.item_id,
            classification.queue_type,
            classification.sla_deadline,
            classification.review_priority,
        )
        return classification if moved is not None else None

    async def attach_ai_analysis(
        self,
        tip_id: UUID,
        summary: str | None,
        recommendations: list[str],
    ) -> TipVerification:
        """Merge opaque AI summary/recommendations into the verification.

        Raises:
            ValidationError: Nothing to merge, or too many recommendations.
            VerificationNotFoundError: Tip was never scored.
        """
        cleaned = tuple(r.strip() for r in recommendations if r and r.strip())
        if (summary is None or not summary.strip()) and not cleaned:
            raise ValidationError("summary or recommendations required", "summary")
        if len(cleaned) > MAX_AI_RECOMMENDATIONS:
            raise ValidationError(
                f"at most {MAX_AI_RECOMMENDATIONS} allowed", "recommendations"
            )
        async with self._verification_locks.hold(tip_id):
            verification = await self.get_verification(tip_id)
            updated = verification.with_ai_analysis(
                summary.strip() if summary and summary.strip() else None, cleaned
            )
            await self._verifications.update(updated)
        self._log_operation("attach_ai_analysis", tip_id=str(tip_id)).info(
            "ai_analysis_merged",
            has_summary=updated.ai_summary is not None,
            recommendations=len(updated.ai_recommendations),
        )
        return updated
