"""Review outcome processor.

Records a reviewer's decision on a claimed queue item as one logical
transaction:
1. Resolve the queue item
2. Persist the ReviewDecision
3. Apply the reviewer's override score to the verification (the
   as-scored value stays on the audit trail)
4. Update the tipster's reputation
5. Open the escalation follow-up item, when escalating to a reviewer

If any of these fail, the ones already applied are undone in reverse
order and the error is raised. Lead creation for verified tips happens
afterwards, fire-and-forget, and can never roll the review back.

Replaying a review for an already-resolved item returns the stored
decision without touching reputation again.

Lock order: the per-tip verification lock (shared with TipIntakeService)
then the per-item queue lock.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from uuid import UUID, uuid4

from tip_triage.application.ports.case_collaborators import CaseRiskLookupProtocol
from tip_triage.application.ports.queue_repository import QueueRepositoryProtocol
from tip_triage.application.ports.review_decision_repository import (
    ReviewDecisionRepositoryProtocol,
)
from tip_triage.application.ports.time_authority import TimeAuthorityProtocol
from tip_triage.application.ports.tip_repository import (
    TipRepositoryProtocol,
    VerificationRepositoryProtocol,
)
from tip_triage.application.services.base import LoggingMixin
from tip_triage.application.services.keyed_lock import KeyedLock
from tip_triage.application.services.lead_dispatch_service import LeadDispatchService
from tip_triage.application.services.review_queue_service import ReviewQueueService
from tip_triage.application.services.tipster_reputation_service import (
    TipsterReputationService,
)
from tip_triage.config.triage_config import ClassifierConfig
from tip_triage.domain.errors import (
    DownstreamUnavailableError,
    ItemAlreadyClaimedError,
    ItemNotClaimableError,
    NotClaimantError,
    QueueItemNotFoundError,
    TipNotFoundError,
    TipsterNotFoundError,
    ValidationError,
    VerificationNotFoundError,
)
from tip_triage.domain.models.queue_item import QueueItem, QueueStatus, QueueType
from tip_triage.domain.models.review_decision import (
    LeadRequest,
    ReviewDecision,
    ReviewOutcome,
)
from tip_triage.domain.models.tip_verification import CREDIBILITY_FIELD
from tip_triage.domain.services.priority_classifier import PriorityClassifier

ESCALATION_REVIEW_PRIORITY = 2

Compensation = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class ReviewSubmission:
    """A reviewer's decision as submitted, before validation.

    Attributes:
        outcome: The verdict.
        notes: Free-text notes.
        override_score: Replacement credibility score (0-100).
        create_lead: Ask case management for a lead (verified only).
        lead_title: Title of the requested lead.
        lead_description: Description of the requested lead.
        partial: The tip was only partially verified.
        escalate_to: Reviewer who receives the escalated follow-up.
    """

    outcome: ReviewOutcome
    notes: str | None = None
    override_score: int | None = None
    create_lead: bool = False
    lead_title: str | None = None
    lead_description: str | None = None
    partial: bool = False
    escalate_to: str | None = None


def _lead_request(submission: ReviewSubmission) -> LeadRequest | None:
    if not submission.create_lead:
        return None
    if submission.outcome != ReviewOutcome.VERIFIED:
        raise ValidationError("leads can only be created for verified tips", "create_lead")
    if not submission.lead_title or not submission.lead_title.strip():
        raise ValidationError("required when create_lead is set", "lead_title")
    return LeadRequest(
        title=submission.lead_title.strip(),
        description=(submission.lead_description or "").strip(),
    )


class ReviewOutcomeService(LoggingMixin):
    """Single entry point for recording review decisions."""

    def __init__(
        self,
        *,
        queue_service: ReviewQueueService,
        queue_repository: QueueRepositoryProtocol,
        decision_repository: ReviewDecisionRepositoryProtocol,
        tip_repository: TipRepositoryProtocol,
        verification_repository: VerificationRepositoryProtocol,
        reputation_service: TipsterReputationService,
        lead_dispatch: LeadDispatchService,
        case_risk_lookup: CaseRiskLookupProtocol,
        time_authority: TimeAuthorityProtocol,
        classifier_config: ClassifierConfig | None = None,
        verification_locks: KeyedLock | None = None,
    ) -> None:
        self._queue = queue_service
        self._items = queue_repository
        self._decisions = decision_repository
        self._tips = tip_repository
        self._verifications = verification_repository
        self._reputation = reputation_service
        self._leads = lead_dispatch
        self._case_risk = case_risk_lookup
        self._time = time_authority
        self._classifier = PriorityClassifier(classifier_config or ClassifierConfig())
        self._verification_locks = verification_locks or KeyedLock()
        self._init_logger(component="review")

    async def get_decision(self, queue_item_id: UUID) -> ReviewDecision | None:
        return await self._decisions.get_by_queue_item(queue_item_id)

    async def process(
        self,
        queue_item_id: UUID,
        reviewer_id: str,
        submission: ReviewSubmission,
    ) -> ReviewDecision:
        """Record a decision on a claimed queue item.

        Raises:
            ValidationError: Malformed submission (nothing is changed).
            QueueItemNotFoundError: Unknown queue item.
            NotClaimantError: reviewer_id does not hold the claim.
            ItemNotClaimableError: The item is pending (never claimed).
        """
        if not reviewer_id or not reviewer_id.strip():
            raise ValidationError("must not be empty", "reviewer_id")
        lead_request = _lead_request(submission)
        if submission.escalate_to is not None and not submission.escalate_to.strip():
            raise ValidationError("must not be empty", "escalate_to")

        log = self._log_operation(
            "process_review",
            queue_item_id=str(queue_item_id),
            reviewer_id=reviewer_id,
            outcome=submission.outcome.value,
        )

        # An item's tip never changes, so it can be read before locking
        unlocked = await self._items.get(queue_item_id)
        if unlocked is None:
            raise QueueItemNotFoundError(queue_item_id)

        async with (
            self._verification_locks.hold(unlocked.tip_id),
            self._queue.item_lock(queue_item_id),
        ):
            item = await self._items.get(queue_item_id)
            if item is None:
                raise QueueItemNotFoundError(queue_item_id)

            if item.status == QueueStatus.RESOLVED:
                prior = await self._decisions.get_by_queue_item(queue_item_id)
                if prior is None:
                    raise ItemNotClaimableError(queue_item_id, item.status.value, "review")
                log.info("review_replayed", decision_id=str(prior.decision_id))
                return prior
            if item.status != QueueStatus.IN_REVIEW:
                raise ItemNotClaimableError(queue_item_id, item.status.value, "review")
            if item.claimed_by != reviewer_id:
                raise NotClaimantError(queue_item_id, reviewer_id, item.claimed_by)

            now = self._time.utcnow()
            try:
                decision = ReviewDecision(
                    decision_id=uuid4(),
                    queue_item_id=queue_item_id,
                    tip_id=item.tip_id,
                    reviewer_id=reviewer_id,
                    outcome=submission.outcome,
                    decided_at=now,
                    notes=submission.notes,
                    override_score=submission.override_score,
                    lead_request=lead_request,
                    partial=submission.partial,
                    escalate_to=submission.escalate_to,
                    follow_up_item_id=uuid4() if submission.escalate_to else None,
                )
            except ValueError as e:
                raise ValidationError(str(e)) from e

            await self._apply(item, decision)

        log.info(
            "review_recorded",
            decision_id=str(decision.decision_id),
            tip_id=str(decision.tip_id),
            override_score=decision.override_score,
            wants_lead=decision.wants_lead,
            follow_up_item_id=(
                str(decision.follow_up_item_id) if decision.follow_up_item_id else None
            ),
        )

        if decision.wants_lead and decision.lead_request is not None:
            self._leads.dispatch(decision.decision_id, item.case_id, decision.lead_request)
        return decision

    async def _apply(self, item: QueueItem, decision: ReviewDecision) -> None:
        """Steps 1-5 with compensation on failure."""
        log = self._log_operation(
            "apply_review",
            queue_item_id=str(item.item_id),
            decision_id=str(decision.decision_id),
        )
        tip = await self._tips.get(item.tip_id)
        if tip is None:
            raise TipNotFoundError(item.tip_id)
        verification = await self._verifications.get_by_tip(item.tip_id)
        if verification is None:
            raise VerificationNotFoundError(item.tip_id)
        profile = await self._reputation.find_by_identity(tip.tipster)
        if profile is None:
            raise TipsterNotFoundError(tip.tipster.key)
        high_risk = await self._is_high_risk_case(tip.case_id)

        undo: list[Compensation] = []
        try:
            # 1. resolve
            resolved = item.with_resolution(decision.decided_at)
            if not await self._items.compare_and_swap(item.version, resolved):
                current = await self._items.get(item.item_id)
                raise ItemAlreadyClaimedError(
                    item.item_id, current.claimed_by if current else None
                )

            async def reopen() -> None:
                await self._items.compare_and_swap(
                    resolved.version, replace(item, version=resolved.version + 1)
                )

            undo.append(reopen)

            # 2. persist decision
            await self._decisions.save(decision)

            async def forget_decision() -> None:
                await self._decisions.remove(decision.decision_id)

            undo.append(forget_decision)

            # 3. override score
            if decision.override_score is not None:
                await self._verifications.update(
                    verification.with_override(
                        CREDIBILITY_FIELD,
                        decision.override_score,
                        decision.reviewer_id,
                        decision.decided_at,
                        decision.notes,
                    )
                )

                async def restore_verification() -> None:
                    await self._verifications.update(verification)

                undo.append(restore_verification)

            # 4. reputation
            await self._reputation.apply_outcome(
                profile.tipster_id,
                tip.tip_id,
                decision.outcome,
                partial=decision.partial,
                high_risk_case=high_risk,
            )

            async def restore_reputation() -> None:
                await self._reputation.restore(profile)

            undo.append(restore_reputation)

            # 5. escalation follow-up
            if decision.escalate_to and decision.follow_up_item_id is not None:
                follow_up = QueueItem(
                    item_id=decision.follow_up_item_id,
                    tip_id=item.tip_id,
                    case_id=item.case_id,
                    queue_type=QueueType.HIGH_PRIORITY,
                    sla_deadline=self._classifier.escalation_deadline(decision.decided_at),
                    enqueued_at=decision.decided_at,
                    review_priority=ESCALATION_REVIEW_PRIORITY,
                    status=QueueStatus.IN_REVIEW,
                    claimed_by=decision.escalate_to,
                    claimed_at=decision.decided_at,
                )
                await self._items.add(follow_up)
        except Exception as e:
            log.error("review_failed_compensating", error=str(e), steps=len(undo))
            for compensate in reversed(undo):
                try:
                    await compensate()
                except Exception as undo_error:
                    log.error(
                        "review_compensation_failed",
                        step=compensate.__name__,
                        error=str(undo_error),
                        exc_info=True,
                    )
            raise

    async def _is_high_risk_case(self, case_id: UUID) -> bool:
        """Severity input for the reputation step.

        An unreachable case service falls back to normal severity rather
        than blocking the review.
        """
        try:
            risk = await self._case_risk.get_case_risk_profile(case_id)
        except DownstreamUnavailableError as e:
            self._log_operation("case_risk_lookup", case_id=str(case_id)).warning(
                "case_risk_unavailable_default_severity", error=str(e)
            )
            return False
        return risk.is_high_risk
