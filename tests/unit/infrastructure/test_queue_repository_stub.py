"""Unit tests for QueueRepositoryStub compare-and-swap and indexes."""

from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest

from tests.helpers import T0, make_queue_item
from tip_triage.domain.errors import QueueItemNotFoundError, ValidationError
from tip_triage.domain.models.queue_item import QueueStatus, QueueType
from tip_triage.infrastructure.stubs import QueueRepositoryStub


@pytest.fixture
def repo() -> QueueRepositoryStub:
    return QueueRepositoryStub()


class TestAddAndGet:
    async def test_add_and_get(self, repo: QueueRepositoryStub) -> None:
        item = make_queue_item()
        await repo.add(item)

        assert await repo.get(item.item_id) == item
        assert await repo.list_for_tip(item.tip_id) == [item]
        assert repo.count() == 1

    async def test_duplicate_id_rejected(self, repo: QueueRepositoryStub) -> None:
        item = make_queue_item()
        await repo.add(item)

        with pytest.raises(ValidationError):
            await repo.add(item)

    async def test_get_unknown(self, repo: QueueRepositoryStub) -> None:
        assert await repo.get(uuid4()) is None


class TestCompareAndSwap:
    async def test_swap_with_current_version(self, repo: QueueRepositoryStub) -> None:
        item = make_queue_item()
        await repo.add(item)
        claimed = item.with_claim("reviewer-1", T0)

        assert await repo.compare_and_swap(item.version, claimed)
        assert (await repo.get(item.item_id)).claimed_by == "reviewer-1"

    async def test_stale_version_loses(self, repo: QueueRepositoryStub) -> None:
        item = make_queue_item()
        await repo.add(item)
        await repo.compare_and_swap(item.version, item.with_claim("reviewer-1", T0))

        lost = await repo.compare_and_swap(
            item.version, item.with_claim("reviewer-2", T0)
        )

        assert not lost
        assert (await repo.get(item.item_id)).claimed_by == "reviewer-1"

    async def test_unknown_item(self, repo: QueueRepositoryStub) -> None:
        with pytest.raises(QueueItemNotFoundError):
            await repo.compare_and_swap(0, make_queue_item())


class TestIndexes:
    async def test_bucket_index_follows_status(self, repo: QueueRepositoryStub) -> None:
        item = make_queue_item(QueueType.CRITICAL)
        await repo.add(item)
        await repo.compare_and_swap(item.version, item.with_claim("reviewer-1", T0))

        assert await repo.count_by(QueueType.CRITICAL, QueueStatus.PENDING) == 0
        assert await repo.count_by(QueueType.CRITICAL, QueueStatus.IN_REVIEW) == 1
        assert await repo.list_by(QueueType.STANDARD, QueueStatus.PENDING) == []

    async def test_deadline_index_is_ordered(self, repo: QueueRepositoryStub) -> None:
        late = make_queue_item(sla=timedelta(hours=6))
        early = make_queue_item(sla=timedelta(hours=1))
        beyond = make_queue_item(sla=timedelta(hours=48))
        for item in (late, early, beyond):
            await repo.add(item)

        due = await repo.list_deadline_before(T0 + timedelta(hours=24))

        assert [i.item_id for i in due] == [early.item_id, late.item_id]

    async def test_resolved_items_leave_deadline_index(
        self, repo: QueueRepositoryStub
    ) -> None:
        item = make_queue_item(sla=timedelta(hours=1))
        await repo.add(item)
        claimed = item.with_claim("reviewer-1", T0)
        await repo.compare_and_swap(item.version, claimed)
        await repo.compare_and_swap(claimed.version, claimed.with_resolution(T0))

        assert await repo.list_deadline_before(T0 + timedelta(days=1)) == []

    async def test_claimed_before(self, repo: QueueRepositoryStub) -> None:
        stale = make_queue_item(claimed_by="reviewer-1", status=QueueStatus.IN_REVIEW)
        fresh = make_queue_item(
            claimed_by="reviewer-2",
            status=QueueStatus.IN_REVIEW,
            enqueued_at=T0 + timedelta(minutes=40),
        )
        await repo.add(stale)
        await repo.add(fresh)

        expired = await repo.list_claimed_before(T0 + timedelta(minutes=10))

        assert [i.item_id for i in expired] == [stale.item_id]

    async def test_remove(self, repo: QueueRepositoryStub) -> None:
        item = make_queue_item()
        await repo.add(item)

        await repo.remove(item.item_id)
        await repo.remove(item.item_id)

        assert await repo.get(item.item_id) is None
        assert await repo.list_for_tip(item.tip_id) == []
        assert await repo.list_deadline_before(T0 + timedelta(days=2)) == []
