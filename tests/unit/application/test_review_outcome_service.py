"""Unit tests for ReviewOutcomeService.

Covers the happy path, idempotent replay, claimant checks, compensation
when a later step fails, escalation follow-ups and lead dispatch.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from tests.helpers import CASE_ID, TriageHarness, make_tip
from tip_triage.application.services.lead_dispatch_service import DispatchStatus
from tip_triage.application.services.review_outcome_service import (
    ReviewOutcomeService,
    ReviewSubmission,
)
from tip_triage.application.services.tip_intake_service import IntakeResult
from tip_triage.domain.errors import (
    ItemNotClaimableError,
    NotClaimantError,
    QueueItemNotFoundError,
    ValidationError,
)
from tip_triage.domain.models.case_context import CaseRiskProfile
from tip_triage.domain.models.queue_item import QueueStatus, QueueType
from tip_triage.domain.models.review_decision import ReviewOutcome
from tip_triage.domain.models.tipster_profile import ReliabilityTier

REVIEWER = "reviewer-1"
VERIFIED = ReviewSubmission(ReviewOutcome.VERIFIED, notes="Matches CCTV")


@pytest.fixture
def outcomes(harness: TriageHarness) -> ReviewOutcomeService:
    return harness.services.outcomes


@pytest.fixture
async def claimed(harness: TriageHarness) -> IntakeResult:
    """A submitted tip whose queue item REVIEWER has claimed."""
    result = await harness.services.intake.submit_tip(make_tip())
    await harness.services.queue.claim(result.queue_item.item_id, REVIEWER)
    return result


class TestProcess:
    async def test_verified_review(
        self,
        outcomes: ReviewOutcomeService,
        harness: TriageHarness,
        claimed: IntakeResult,
    ) -> None:
        item_id = claimed.queue_item.item_id

        decision = await outcomes.process(item_id, REVIEWER, VERIFIED)

        assert decision.outcome == ReviewOutcome.VERIFIED
        assert decision.tip_id == claimed.tip.tip_id
        item = await harness.services.queue.get_item(item_id)
        assert item.status == QueueStatus.RESOLVED
        assert item.resolved_at == harness.clock.utcnow()
        assert await outcomes.get_decision(item_id) == decision
        profile = await harness.services.reputation.get_profile(
            claimed.tipster.tipster_id
        )
        assert profile.verified_tips == 1
        assert profile.reliability_score == 55
        assert profile.reliability_tier == ReliabilityTier.UNRATED

    async def test_high_risk_case_weighs_more(
        self,
        outcomes: ReviewOutcomeService,
        harness: TriageHarness,
        claimed: IntakeResult,
    ) -> None:
        harness.case_risk.set_profile(CaseRiskProfile(CASE_ID, suspected_abduction=True))

        await outcomes.process(
            claimed.queue_item.item_id,
            REVIEWER,
            ReviewSubmission(ReviewOutcome.REJECTED),
        )

        profile = await harness.services.reputation.get_profile(
            claimed.tipster.tipster_id
        )
        assert profile.reliability_score == 40
        assert profile.false_tips == 1

    async def test_case_service_down_uses_normal_severity(
        self,
        outcomes: ReviewOutcomeService,
        harness: TriageHarness,
        claimed: IntakeResult,
    ) -> None:
        harness.case_risk.unavailable = True

        await outcomes.process(
            claimed.queue_item.item_id,
            REVIEWER,
            ReviewSubmission(ReviewOutcome.REJECTED),
        )

        profile = await harness.services.reputation.get_profile(
            claimed.tipster.tipster_id
        )
        assert profile.reliability_score == 42

    async def test_override_score_kept_on_audit_trail(
        self,
        outcomes: ReviewOutcomeService,
        harness: TriageHarness,
        claimed: IntakeResult,
    ) -> None:
        await outcomes.process(
            claimed.queue_item.item_id,
            REVIEWER,
            ReviewSubmission(ReviewOutcome.VERIFIED, override_score=92),
        )

        verification = await harness.services.intake.get_verification(
            claimed.tip.tip_id
        )
        assert verification.effective_credibility_score == 92
        assert verification.credibility_score == claimed.verification.credibility_score
        assert verification.overrides[0].reviewer_id == REVIEWER

    async def test_replay_returns_stored_decision(
        self,
        outcomes: ReviewOutcomeService,
        harness: TriageHarness,
        claimed: IntakeResult,
    ) -> None:
        item_id = claimed.queue_item.item_id
        first = await outcomes.process(item_id, REVIEWER, VERIFIED)

        replay = await outcomes.process(
            item_id, REVIEWER, ReviewSubmission(ReviewOutcome.REJECTED)
        )

        assert replay == first
        profile = await harness.services.reputation.get_profile(
            claimed.tipster.tipster_id
        )
        assert profile.verified_tips == 1
        assert profile.false_tips == 0
        assert harness.decisions.count() == 1


class TestConcurrentReviews:
    async def test_parallel_submissions_decide_once(
        self,
        outcomes: ReviewOutcomeService,
        harness: TriageHarness,
        claimed: IntakeResult,
    ) -> None:
        item_id = claimed.queue_item.item_id

        first, second = await asyncio.gather(
            outcomes.process(item_id, REVIEWER, VERIFIED),
            outcomes.process(item_id, REVIEWER, VERIFIED),
        )

        assert first == second
        assert harness.decisions.count() == 1
        profile = await harness.services.reputation.get_profile(
            claimed.tipster.tipster_id
        )
        assert profile.verified_tips == 1
        assert profile.reliability_score == 55

    async def test_review_override_and_reviewer_override_both_kept(
        self,
        outcomes: ReviewOutcomeService,
        harness: TriageHarness,
        claimed: IntakeResult,
    ) -> None:
        await asyncio.gather(
            outcomes.process(
                claimed.queue_item.item_id,
                REVIEWER,
                ReviewSubmission(ReviewOutcome.VERIFIED, override_score=92),
            ),
            harness.services.intake.override_score(
                claimed.tip.tip_id, "text_analysis", 10, "reviewer-2"
            ),
        )

        verification = await harness.services.intake.get_verification(
            claimed.tip.tip_id
        )
        assert any(
            o.field_name == "credibility_score"
            and o.new_value == 92
            and o.reviewer_id == REVIEWER
            for o in verification.overrides
        )
        assert any(o.field_name == "text_analysis" for o in verification.overrides)


class TestPreconditions:
    async def test_not_claimant(
        self, outcomes: ReviewOutcomeService, claimed: IntakeResult
    ) -> None:
        with pytest.raises(NotClaimantError):
            await outcomes.process(claimed.queue_item.item_id, "reviewer-2", VERIFIED)

    async def test_pending_item(
        self, outcomes: ReviewOutcomeService, harness: TriageHarness
    ) -> None:
        result = await harness.services.intake.submit_tip(make_tip())

        with pytest.raises(ItemNotClaimableError):
            await outcomes.process(result.queue_item.item_id, REVIEWER, VERIFIED)

    async def test_unknown_item(self, outcomes: ReviewOutcomeService) -> None:
        with pytest.raises(QueueItemNotFoundError):
            await outcomes.process(uuid4(), REVIEWER, VERIFIED)

    @pytest.mark.parametrize(
        "submission,bad_field",
        [
            (
                ReviewSubmission(
                    ReviewOutcome.REJECTED, create_lead=True, lead_title="Lead"
                ),
                "create_lead",
            ),
            (ReviewSubmission(ReviewOutcome.VERIFIED, create_lead=True), "lead_title"),
            (ReviewSubmission(ReviewOutcome.ESCALATED, escalate_to=" "), "escalate_to"),
        ],
    )
    async def test_malformed_submission_changes_nothing(
        self,
        outcomes: ReviewOutcomeService,
        harness: TriageHarness,
        claimed: IntakeResult,
        submission: ReviewSubmission,
        bad_field: str,
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await outcomes.process(claimed.queue_item.item_id, REVIEWER, submission)

        assert exc_info.value.field == bad_field
        item = await harness.services.queue.get_item(claimed.queue_item.item_id)
        assert item.status == QueueStatus.IN_REVIEW

    async def test_partial_on_rejection(
        self, outcomes: ReviewOutcomeService, claimed: IntakeResult
    ) -> None:
        with pytest.raises(ValidationError, match="partial"):
            await outcomes.process(
                claimed.queue_item.item_id,
                REVIEWER,
                ReviewSubmission(ReviewOutcome.REJECTED, partial=True),
            )


class TestEscalation:
    async def test_opens_follow_up_for_target_reviewer(
        self,
        outcomes: ReviewOutcomeService,
        harness: TriageHarness,
        claimed: IntakeResult,
    ) -> None:
        decision = await outcomes.process(
            claimed.queue_item.item_id,
            REVIEWER,
            ReviewSubmission(ReviewOutcome.ESCALATED, escalate_to="supervisor-1"),
        )

        assert decision.follow_up_item_id is not None
        follow_up = await harness.services.queue.get_item(decision.follow_up_item_id)
        assert follow_up.tip_id == claimed.tip.tip_id
        assert follow_up.queue_type == QueueType.HIGH_PRIORITY
        assert follow_up.status == QueueStatus.IN_REVIEW
        assert follow_up.claimed_by == "supervisor-1"
        assert follow_up.sla_deadline == decision.decided_at + timedelta(hours=4)


class TestCompensation:
    async def test_failed_step_undoes_earlier_steps(
        self,
        outcomes: ReviewOutcomeService,
        harness: TriageHarness,
        claimed: IntakeResult,
    ) -> None:
        harness.queue_items.add = AsyncMock(side_effect=RuntimeError("disk full"))
        item_id = claimed.queue_item.item_id

        with pytest.raises(RuntimeError, match="disk full"):
            await outcomes.process(
                item_id,
                REVIEWER,
                ReviewSubmission(
                    ReviewOutcome.ESCALATED,
                    override_score=70,
                    escalate_to="supervisor-1",
                ),
            )

        item = await harness.services.queue.get_item(item_id)
        assert item.status == QueueStatus.IN_REVIEW
        assert item.claimed_by == REVIEWER
        assert await outcomes.get_decision(item_id) is None
        verification = await harness.services.intake.get_verification(
            claimed.tip.tip_id
        )
        assert verification.overrides == ()
        profile = await harness.services.reputation.get_profile(
            claimed.tipster.tipster_id
        )
        assert profile == claimed.tipster

    async def test_review_can_be_retried_after_failure(
        self,
        outcomes: ReviewOutcomeService,
        harness: TriageHarness,
        claimed: IntakeResult,
    ) -> None:
        original_save = harness.decisions.save
        harness.decisions.save = AsyncMock(side_effect=RuntimeError("timeout"))
        item_id = claimed.queue_item.item_id

        with pytest.raises(RuntimeError):
            await outcomes.process(item_id, REVIEWER, VERIFIED)

        harness.decisions.save = original_save
        decision = await outcomes.process(item_id, REVIEWER, VERIFIED)

        assert decision.outcome == ReviewOutcome.VERIFIED
        item = await harness.services.queue.get_item(item_id)
        assert item.status == QueueStatus.RESOLVED


class TestLeadDispatch:
    async def test_verified_review_creates_lead(
        self,
        outcomes: ReviewOutcomeService,
        harness: TriageHarness,
        claimed: IntakeResult,
    ) -> None:
        decision = await outcomes.process(
            claimed.queue_item.item_id,
            REVIEWER,
            ReviewSubmission(
                ReviewOutcome.VERIFIED,
                create_lead=True,
                lead_title="Sighting on Main Street",
                lead_description="Girl in blue jacket near corner store",
            ),
        )
        await harness.services.lead_dispatch.drain()

        dispatch = harness.services.lead_dispatch.get_dispatch(decision.decision_id)
        assert dispatch is not None
        assert dispatch.status == DispatchStatus.CREATED
        assert harness.lead_sink.leads[0].title == "Sighting on Main Street"
        assert harness.lead_sink.leads[0].case_id == CASE_ID

    async def test_lead_failure_never_fails_review(
        self,
        outcomes: ReviewOutcomeService,
        harness: TriageHarness,
        claimed: IntakeResult,
    ) -> None:
        harness.lead_sink.fail_times = 10

        decision = await outcomes.process(
            claimed.queue_item.item_id,
            REVIEWER,
            ReviewSubmission(ReviewOutcome.VERIFIED, create_lead=True, lead_title="L"),
        )
        await harness.services.lead_dispatch.drain()

        dispatch = harness.services.lead_dispatch.get_dispatch(decision.decision_id)
        assert dispatch is not None
        assert dispatch.status == DispatchStatus.FAILED
        item = await harness.services.queue.get_item(claimed.queue_item.item_id)
        assert item.status == QueueStatus.RESOLVED
