"""Unit tests for ReviewQueueService claims, releases, expiry and listing."""

from __future__ import annotations

import asyncio
from datetime import timedelta
from uuid import uuid4

import pytest

from tests.helpers import T0, TriageHarness, make_queue_item
from tip_triage.application.services.review_queue_service import ReviewQueueService
from tip_triage.domain.errors import (
    ItemAlreadyClaimedError,
    ItemNotClaimableError,
    NotClaimantError,
    QueueItemNotFoundError,
    ValidationError,
)
from tip_triage.domain.models.queue_item import QueueItem, QueueStatus, QueueType


@pytest.fixture
def queue(harness: TriageHarness) -> ReviewQueueService:
    return harness.services.queue


async def _enqueue(queue: ReviewQueueService, item: QueueItem) -> QueueItem:
    return await queue.enqueue(item)


class TestClaim:
    async def test_claim_pending_item(
        self, queue: ReviewQueueService, harness: TriageHarness
    ) -> None:
        item = await _enqueue(queue, make_queue_item())
        harness.clock.advance(seconds=90)

        claimed = await queue.claim(item.item_id, "reviewer-1")

        assert claimed.status == QueueStatus.IN_REVIEW
        assert claimed.claimed_by == "reviewer-1"
        assert claimed.claimed_at == T0 + timedelta(seconds=90)

    async def test_reclaim_by_holder_is_noop(self, queue: ReviewQueueService) -> None:
        item = await _enqueue(queue, make_queue_item())
        first = await queue.claim(item.item_id, "reviewer-1")

        again = await queue.claim(item.item_id, "reviewer-1")

        assert again == first

    async def test_other_reviewer_conflicts(self, queue: ReviewQueueService) -> None:
        item = await _enqueue(queue, make_queue_item())
        await queue.claim(item.item_id, "reviewer-1")

        with pytest.raises(ItemAlreadyClaimedError):
            await queue.claim(item.item_id, "reviewer-2")

    async def test_concurrent_claims_have_one_winner(
        self, queue: ReviewQueueService
    ) -> None:
        item = await _enqueue(queue, make_queue_item())
        reviewers = [f"reviewer-{i}" for i in range(5)]

        results = await asyncio.gather(
            *(queue.claim(item.item_id, r) for r in reviewers),
            return_exceptions=True,
        )

        winners = [r for r in results if isinstance(r, QueueItem)]
        losers = [r for r in results if isinstance(r, ItemAlreadyClaimedError)]
        assert len(winners) == 1
        assert len(losers) == 4
        stored = await queue.get_item(item.item_id)
        assert stored.claimed_by == winners[0].claimed_by

    async def test_resolved_item_not_claimable(
        self, queue: ReviewQueueService, harness: TriageHarness
    ) -> None:
        item = make_queue_item(claimed_by="reviewer-1", status=QueueStatus.IN_REVIEW)
        await harness.queue_items.add(item.with_resolution(T0))

        with pytest.raises(ItemNotClaimableError):
            await queue.claim(item.item_id, "reviewer-2")

    async def test_unknown_item(self, queue: ReviewQueueService) -> None:
        with pytest.raises(QueueItemNotFoundError):
            await queue.claim(uuid4(), "reviewer-1")

    async def test_blank_reviewer(self, queue: ReviewQueueService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await queue.claim(uuid4(), "  ")
        assert exc_info.value.field == "reviewer_id"


class TestRelease:
    async def test_release_returns_to_pending(self, queue: ReviewQueueService) -> None:
        item = await _enqueue(queue, make_queue_item())
        await queue.claim(item.item_id, "reviewer-1")

        released = await queue.release(item.item_id, "reviewer-1")

        assert released.status == QueueStatus.PENDING
        assert released.claimed_by is None
        assert released.sla_deadline == item.sla_deadline

    async def test_only_claimant_may_release(self, queue: ReviewQueueService) -> None:
        item = await _enqueue(queue, make_queue_item())
        await queue.claim(item.item_id, "reviewer-1")

        with pytest.raises(NotClaimantError):
            await queue.release(item.item_id, "reviewer-2")

    async def test_pending_item_cannot_be_released(
        self, queue: ReviewQueueService
    ) -> None:
        item = await _enqueue(queue, make_queue_item())

        with pytest.raises(ItemNotClaimableError):
            await queue.release(item.item_id, "reviewer-1")


class TestAssign:
    async def test_assign_pending_item(
        self, queue: ReviewQueueService, harness: TriageHarness
    ) -> None:
        item = await _enqueue(queue, make_queue_item())
        harness.clock.advance(seconds=30)

        assigned = await queue.assign(item.item_id, "reviewer-2", "supervisor-1")

        assert assigned.status == QueueStatus.IN_REVIEW
        assert assigned.claimed_by == "reviewer-2"
        assert assigned.claimed_at == T0 + timedelta(seconds=30)

    async def test_reassign_takes_item_from_holder(
        self, queue: ReviewQueueService, harness: TriageHarness
    ) -> None:
        item = await _enqueue(queue, make_queue_item())
        claimed = await queue.claim(item.item_id, "reviewer-1")
        harness.clock.advance(delta=timedelta(minutes=5))

        moved = await queue.assign(item.item_id, "reviewer-2", "supervisor-1")

        assert moved.claimed_by == "reviewer-2"
        assert moved.claimed_at == T0 + timedelta(minutes=5)
        assert moved.version == claimed.version + 1
        with pytest.raises(NotClaimantError):
            await queue.release(item.item_id, "reviewer-1")

    async def test_assign_to_holder_is_noop(self, queue: ReviewQueueService) -> None:
        item = await _enqueue(queue, make_queue_item())
        claimed = await queue.claim(item.item_id, "reviewer-1")

        assert await queue.assign(item.item_id, "reviewer-1", "supervisor-1") == claimed

    async def test_resolved_item_not_assignable(
        self, queue: ReviewQueueService, harness: TriageHarness
    ) -> None:
        item = make_queue_item(claimed_by="reviewer-1", status=QueueStatus.IN_REVIEW)
        await harness.queue_items.add(item.with_resolution(T0))

        with pytest.raises(ItemNotClaimableError) as exc_info:
            await queue.assign(item.item_id, "reviewer-2", "supervisor-1")
        assert exc_info.value.operation == "assign"

    async def test_blank_assignee(self, queue: ReviewQueueService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await queue.assign(uuid4(), " ", "supervisor-1")
        assert exc_info.value.field == "assign_to"


class TestClaimExpiry:
    async def test_stale_claim_released(
        self, queue: ReviewQueueService, harness: TriageHarness
    ) -> None:
        item = await _enqueue(queue, make_queue_item())
        await queue.claim(item.item_id, "reviewer-1")
        harness.clock.advance(delta=timedelta(minutes=31))

        released = await harness.services.claim_expiry.run_once()

        assert released == 1
        assert (await queue.get_item(item.item_id)).status == QueueStatus.PENDING

    async def test_fresh_claim_kept(
        self, queue: ReviewQueueService, harness: TriageHarness
    ) -> None:
        item = await _enqueue(queue, make_queue_item())
        await queue.claim(item.item_id, "reviewer-1")
        harness.clock.advance(delta=timedelta(minutes=29))

        assert await queue.release_expired_claims() == 0
        assert (await queue.get_item(item.item_id)).claimed_by == "reviewer-1"


class TestSlaBreach:
    async def test_monitor_flags_once(
        self, queue: ReviewQueueService, harness: TriageHarness
    ) -> None:
        item = await _enqueue(queue, make_queue_item(sla=timedelta(hours=1)))
        harness.clock.advance(delta=timedelta(hours=2))

        assert await harness.services.sla_monitor.run_once() == 1
        assert await harness.services.sla_monitor.run_once() == 0

        stored = await queue.get_item(item.item_id)
        assert stored.breach_flagged_at == T0 + timedelta(hours=2)
        assert stored.queue_type == QueueType.STANDARD
        assert stored.status == QueueStatus.PENDING

    async def test_breach_is_derived_without_monitor(
        self, queue: ReviewQueueService, harness: TriageHarness
    ) -> None:
        item = await _enqueue(queue, make_queue_item(sla=timedelta(hours=1)))
        harness.clock.advance(delta=timedelta(hours=2))

        entry = await queue.get_entry(item.item_id)

        assert entry.sla_breached
        assert entry.time_remaining == timedelta(hours=-1)
        assert await queue.count_breached() == 1


class TestListQueue:
    async def test_ordering(
        self, queue: ReviewQueueService, harness: TriageHarness
    ) -> None:
        standard = await _enqueue(queue, make_queue_item(QueueType.STANDARD))
        critical = await _enqueue(
            queue, make_queue_item(QueueType.CRITICAL, sla=timedelta(hours=1))
        )
        low_breaching = await _enqueue(
            queue, make_queue_item(QueueType.LOW_PRIORITY, sla=timedelta(minutes=30))
        )
        harness.clock.advance(delta=timedelta(minutes=45))

        entries = await queue.list_queue()

        assert [e.item.item_id for e in entries] == [
            low_breaching.item_id,
            critical.item_id,
            standard.item_id,
        ]
        assert entries[0].sla_breached

    async def test_review_priority_breaks_ties(self, queue: ReviewQueueService) -> None:
        later = await _enqueue(queue, make_queue_item(review_priority=8))
        sooner = await _enqueue(queue, make_queue_item(review_priority=2))

        entries = await queue.list_queue(QueueType.STANDARD)

        assert [e.item.item_id for e in entries] == [sooner.item_id, later.item_id]

    async def test_breached_filter(
        self, queue: ReviewQueueService, harness: TriageHarness
    ) -> None:
        breaching = await _enqueue(queue, make_queue_item(sla=timedelta(hours=1)))
        on_time = await _enqueue(queue, make_queue_item(sla=timedelta(hours=24)))
        harness.clock.advance(delta=timedelta(hours=2))

        breached = await queue.list_queue(breached=True)
        not_breached = await queue.list_queue(breached=False)

        assert [e.item.item_id for e in breached] == [breaching.item_id]
        assert [e.item.item_id for e in not_breached] == [on_time.item_id]

    async def test_status_filter(self, queue: ReviewQueueService) -> None:
        item = await _enqueue(queue, make_queue_item())
        await queue.claim(item.item_id, "reviewer-1")

        assert await queue.list_queue() == []
        in_review = await queue.list_queue(status=QueueStatus.IN_REVIEW)
        assert [e.item.item_id for e in in_review] == [item.item_id]

    async def test_limit(self, queue: ReviewQueueService) -> None:
        for _ in range(3):
            await _enqueue(queue, make_queue_item())

        assert len(await queue.list_queue(limit=2)) == 2

    @pytest.mark.parametrize("limit", [0, 501])
    async def test_limit_out_of_range(
        self, queue: ReviewQueueService, limit: int
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await queue.list_queue(limit=limit)
        assert exc_info.value.field == "limit"


    async def test_claimed_by_filter(self, queue: ReviewQueueService) -> None:
        mine = await _enqueue(queue, make_queue_item())
        theirs = await _enqueue(queue, make_queue_item())
        await queue.claim(mine.item_id, "reviewer-1")
        await queue.claim(theirs.item_id, "reviewer-2")

        entries = await queue.list_queue(
            status=QueueStatus.IN_REVIEW, claimed_by="reviewer-1"
        )

        assert [e.item.item_id for e in entries] == [mine.item_id]

    async def test_offset(self, queue: ReviewQueueService) -> None:
        for priority in (1, 2, 3):
            await _enqueue(queue, make_queue_item(review_priority=priority))

        everything = await queue.list_queue()
        page = await queue.list_queue(limit=1, offset=1)

        assert [e.item.item_id for e in page] == [everything[1].item.item_id]
        assert await queue.list_queue(offset=3) == []

    async def test_negative_offset(self, queue: ReviewQueueService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await queue.list_queue(offset=-1)
        assert exc_info.value.field == "offset"


class TestReclassify:
    async def test_pending_item_moves(self, queue: ReviewQueueService) -> None:
        item = await _enqueue(queue, make_queue_item())
        deadline = T0 + timedelta(hours=6)

        moved = await queue.reclassify(
            item.item_id, QueueType.HIGH_PRIORITY, deadline, 3
        )

        assert moved is not None
        assert moved.queue_type == QueueType.HIGH_PRIORITY
        assert await queue.count(QueueType.STANDARD, QueueStatus.PENDING) == 0
        assert await queue.count(QueueType.HIGH_PRIORITY, QueueStatus.PENDING) == 1

    async def test_claimed_item_stays(self, queue: ReviewQueueService) -> None:
        item = await _enqueue(queue, make_queue_item())
        await queue.claim(item.item_id, "reviewer-1")

        moved = await queue.reclassify(
            item.item_id, QueueType.CRITICAL, T0 + timedelta(hours=1), 1
        )

        assert moved is None
        assert (await queue.get_item(item.item_id)).queue_type == QueueType.STANDARD
