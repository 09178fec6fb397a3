"""Unit tests for TipsterReputationService."""

from __future__ import annotations

import asyncio
from uuid import uuid4

import pytest

from tests.helpers import T0, TriageHarness, make_profile, make_tip
from tip_triage.application.ports.tipster_repository import TipsterFilter
from tip_triage.application.services.tipster_reputation_service import (
    TipsterReputationService,
)
from tip_triage.domain.errors import TipsterNotFoundError, ValidationError
from tip_triage.domain.models.review_decision import ReviewOutcome
from tip_triage.domain.models.tipster_profile import ReliabilityTier, TipsterAction


@pytest.fixture
def reputation(harness: TriageHarness) -> TipsterReputationService:
    return harness.services.reputation


class TestRecordSubmission:
    async def test_creates_profile_on_first_tip(
        self, reputation: TipsterReputationService, harness: TriageHarness
    ) -> None:
        tip = make_tip(tipster="New.Person@Example.com")

        profile = await reputation.record_submission(tip, False, False)

        assert profile.reliability_tier == ReliabilityTier.NEW
        assert profile.total_tips == 1
        assert profile.created_at == harness.clock.utcnow()
        found = await reputation.find_by_identity(tip.tipster)
        assert found == profile

    async def test_identity_is_case_insensitive_for_email(
        self, reputation: TipsterReputationService
    ) -> None:
        first = await reputation.record_submission(
            make_tip(tipster="jane@example.com"), False, False
        )
        second = await reputation.record_submission(
            make_tip(tipster="JANE@example.com"), False, False
        )

        assert second.tipster_id == first.tipster_id
        assert second.total_tips == 2


class TestApplyOutcome:
    async def test_updates_profile(
        self, reputation: TipsterReputationService, harness: TriageHarness
    ) -> None:
        profile = make_profile()
        await harness.tipsters.save(profile)

        updated = await reputation.apply_outcome(
            profile.tipster_id, uuid4(), ReviewOutcome.VERIFIED
        )

        assert updated.reliability_score == 55
        assert await reputation.get_profile(profile.tipster_id) == updated

    async def test_parallel_outcomes_both_land(
        self, reputation: TipsterReputationService, harness: TriageHarness
    ) -> None:
        profile = make_profile()
        await harness.tipsters.save(profile)

        await asyncio.gather(
            reputation.apply_outcome(profile.tipster_id, uuid4(), ReviewOutcome.VERIFIED),
            reputation.apply_outcome(profile.tipster_id, uuid4(), ReviewOutcome.VERIFIED),
        )

        stored = await reputation.get_profile(profile.tipster_id)
        assert stored.verified_tips == 2
        assert stored.version == profile.version + 2

    async def test_unknown_tipster(self, reputation: TipsterReputationService) -> None:
        with pytest.raises(TipsterNotFoundError):
            await reputation.apply_outcome(uuid4(), uuid4(), ReviewOutcome.VERIFIED)

    async def test_resolution_credit(
        self, reputation: TipsterReputationService, harness: TriageHarness
    ) -> None:
        profile = make_profile(
            reliability_tier=ReliabilityTier.MODERATE, reliability_score=60
        )
        await harness.tipsters.save(profile)

        updated = await reputation.credit_resolution(profile.tipster_id)

        assert updated.tips_leading_to_resolution == 1
        assert updated.reliability_score == 65

    async def test_restore_skips_if_profile_moved_on(
        self, reputation: TipsterReputationService, harness: TriageHarness
    ) -> None:
        profile = make_profile()
        await harness.tipsters.save(profile)
        await reputation.apply_outcome(profile.tipster_id, uuid4(), ReviewOutcome.VERIFIED)
        latest = await reputation.apply_outcome(
            profile.tipster_id, uuid4(), ReviewOutcome.VERIFIED
        )

        await reputation.restore(profile)

        assert await reputation.get_profile(profile.tipster_id) == latest


class TestPerformAction:
    async def test_block_without_reason(
        self, reputation: TipsterReputationService, harness: TriageHarness
    ) -> None:
        profile = make_profile()
        await harness.tipsters.save(profile)

        blocked = await reputation.perform_action(profile.tipster_id, TipsterAction.BLOCK)

        assert blocked.is_blocked
        assert blocked.blocked_reason is None
        assert blocked.blocked_at is not None

    async def test_block_then_unblock(
        self, reputation: TipsterReputationService, harness: TriageHarness
    ) -> None:
        profile = make_profile()
        await harness.tipsters.save(profile)

        blocked = await reputation.perform_action(
            profile.tipster_id, TipsterAction.BLOCK, "ransom scam", "moderator-1"
        )
        again = await reputation.perform_action(
            profile.tipster_id, TipsterAction.BLOCK, "duplicate click", "moderator-2"
        )
        unblocked = await reputation.perform_action(
            profile.tipster_id, TipsterAction.UNBLOCK
        )

        assert blocked.is_blocked
        assert blocked.blocked_at == T0
        assert again == blocked
        assert again.blocked_by == "moderator-1"
        assert not unblocked.is_blocked

    async def test_upgrade_and_downgrade(
        self, reputation: TipsterReputationService, harness: TriageHarness
    ) -> None:
        profile = make_profile(reliability_tier=ReliabilityTier.MODERATE)
        await harness.tipsters.save(profile)

        upgraded = await reputation.perform_action(
            profile.tipster_id, TipsterAction.UPGRADE_TIER
        )
        downgraded = await reputation.perform_action(
            profile.tipster_id, TipsterAction.DOWNGRADE_TIER
        )

        assert upgraded.reliability_tier == ReliabilityTier.HIGH
        assert upgraded.reliability_score == 82
        assert downgraded.reliability_tier == ReliabilityTier.MODERATE
        assert downgraded.reliability_score == 62

    async def test_set_tier_jumps_and_reanchors(
        self, reputation: TipsterReputationService, harness: TriageHarness
    ) -> None:
        profile = make_profile(reliability_tier=ReliabilityTier.MODERATE)
        await harness.tipsters.save(profile)

        moved = await reputation.perform_action(
            profile.tipster_id, TipsterAction.SET_TIER, new_tier=ReliabilityTier.HIGH
        )
        same = await reputation.perform_action(
            profile.tipster_id, TipsterAction.SET_TIER, new_tier=ReliabilityTier.HIGH
        )

        assert moved.reliability_tier == ReliabilityTier.HIGH
        assert moved.reliability_score == 82
        assert same == moved

    async def test_set_tier_needs_a_tier(
        self, reputation: TipsterReputationService, harness: TriageHarness
    ) -> None:
        profile = make_profile()
        await harness.tipsters.save(profile)

        with pytest.raises(ValidationError) as exc_info:
            await reputation.perform_action(profile.tipster_id, TipsterAction.SET_TIER)

        assert exc_info.value.field == "new_tier"

    async def test_unknown_tipster(self, reputation: TipsterReputationService) -> None:
        with pytest.raises(TipsterNotFoundError):
            await reputation.perform_action(uuid4(), TipsterAction.UNBLOCK)


class TestListProfiles:
    async def test_sorted_by_score_descending(
        self, reputation: TipsterReputationService, harness: TriageHarness
    ) -> None:
        for identity, score in (("a@x.org", 40), ("b@x.org", 90), ("c@x.org", 65)):
            await harness.tipsters.save(make_profile(identity, reliability_score=score))

        profiles = await reputation.list_profiles()

        assert [p.reliability_score for p in profiles] == [90, 65, 40]

    async def test_filter_sort_and_limit(
        self, reputation: TipsterReputationService, harness: TriageHarness
    ) -> None:
        high = ReliabilityTier.HIGH
        await harness.tipsters.save(make_profile("a@x.org", total_tips=5))
        await harness.tipsters.save(
            make_profile("b@x.org", reliability_tier=high, total_tips=3)
        )
        await harness.tipsters.save(
            make_profile("c@x.org", reliability_tier=high, total_tips=9)
        )

        profiles = await reputation.list_profiles(
            tier=high, sort_by="total_tips", descending=False, limit=1
        )

        assert [p.identity.value for p in profiles] == ["b@x.org"]

    async def test_unknown_sort_key(self, reputation: TipsterReputationService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await reputation.list_profiles(sort_by="charm")
        assert exc_info.value.field == "sort_by"

    async def test_blocked_score_range_and_search(
        self, reputation: TipsterReputationService, harness: TriageHarness
    ) -> None:
        await harness.tipsters.save(make_profile("ann@shelter.org", reliability_score=70))
        await harness.tipsters.save(
            make_profile(
                "bob@shelter.org", reliability_score=80, is_blocked=True, blocked_at=T0
            )
        )
        await harness.tipsters.save(make_profile("cat@news.com", reliability_score=75))
        await harness.tipsters.save(make_profile("dan@shelter.org", reliability_score=30))

        profiles = await reputation.list_profiles(
            profile_filter=TipsterFilter(
                is_blocked=False, min_score=60, max_score=90, search="SHELTER"
            )
        )

        assert [p.identity.value for p in profiles] == ["ann@shelter.org"]

    async def test_offset_pages_through_ranking(
        self, reputation: TipsterReputationService, harness: TriageHarness
    ) -> None:
        for identity, score in (("a@x.org", 40), ("b@x.org", 90), ("c@x.org", 65)):
            await harness.tipsters.save(make_profile(identity, reliability_score=score))

        page = await reputation.list_profiles(limit=1, offset=1)
        past_end = await reputation.list_profiles(offset=3)

        assert [p.reliability_score for p in page] == [65]
        assert past_end == []

    async def test_inverted_score_range(self, reputation: TipsterReputationService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await reputation.list_profiles(
                profile_filter=TipsterFilter(min_score=80, max_score=20)
            )
        assert exc_info.value.field == "min_score"
