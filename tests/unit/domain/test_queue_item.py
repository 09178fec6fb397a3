"""Unit tests for QueueItem and its state machine."""

from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

import pytest

from tests.helpers import T0, make_queue_item
from tip_triage.domain.models.queue_item import QueueStatus, QueueType


class TestQueueType:
    def test_rank_follows_urgency(self) -> None:
        ranks = [q.rank for q in QueueType]
        assert ranks == [0, 1, 2, 3]
        assert QueueType.CRITICAL.rank < QueueType.LOW_PRIORITY.rank


class TestQueueStatus:
    def test_transitions(self) -> None:
        assert QueueStatus.PENDING.can_transition_to(QueueStatus.IN_REVIEW)
        assert QueueStatus.IN_REVIEW.can_transition_to(QueueStatus.PENDING)
        assert QueueStatus.IN_REVIEW.can_transition_to(QueueStatus.RESOLVED)
        assert not QueueStatus.PENDING.can_transition_to(QueueStatus.RESOLVED)
        assert not QueueStatus.RESOLVED.can_transition_to(QueueStatus.PENDING)

    def test_resolved_is_terminal(self) -> None:
        assert QueueStatus.RESOLVED.is_terminal()
        assert not QueueStatus.IN_REVIEW.is_terminal()


class TestQueueItem:
    def test_claim_release_resolve(self) -> None:
        item = make_queue_item()

        claimed = item.with_claim("reviewer-1", T0)
        assert claimed.status == QueueStatus.IN_REVIEW
        assert claimed.claimed_by == "reviewer-1"
        assert claimed.version == item.version + 1

        released = claimed.with_release()
        assert released.status == QueueStatus.PENDING
        assert released.claimed_by is None
        assert released.claimed_at is None

        resolved = claimed.with_resolution(T0 + timedelta(minutes=5))
        assert resolved.status == QueueStatus.RESOLVED
        assert resolved.claimed_by is None
        assert resolved.resolved_at == T0 + timedelta(minutes=5)

    def test_cannot_resolve_pending(self) -> None:
        with pytest.raises(ValueError, match="Invalid state transition"):
            make_queue_item().with_resolution(T0)

    def test_cannot_claim_twice(self) -> None:
        claimed = make_queue_item().with_claim("reviewer-1", T0)
        with pytest.raises(ValueError):
            claimed.with_claim("reviewer-2", T0)

    def test_in_review_requires_claimant(self) -> None:
        with pytest.raises(ValueError, match="claimed_by"):
            make_queue_item(status=QueueStatus.IN_REVIEW)

    def test_pending_must_not_have_claimant(self) -> None:
        item = make_queue_item()
        with pytest.raises(ValueError):
            replace(item, claimed_by="reviewer-1")

    def test_review_priority_range(self) -> None:
        with pytest.raises(ValueError, match="review_priority"):
            make_queue_item(review_priority=11)

    def test_sla_breach_is_derived(self) -> None:
        item = make_queue_item(sla=timedelta(hours=1))

        assert not item.is_sla_breached(T0 + timedelta(hours=1))
        assert item.is_sla_breached(T0 + timedelta(hours=1, seconds=1))
        assert item.time_remaining(T0 + timedelta(hours=2)) == timedelta(hours=-1)

    def test_resolved_item_never_breached(self) -> None:
        resolved = (
            make_queue_item(sla=timedelta(hours=1))
            .with_claim("reviewer-1", T0)
            .with_resolution(T0)
        )
        assert not resolved.is_sla_breached(T0 + timedelta(days=3))

    def test_claim_expiry(self) -> None:
        claimed = make_queue_item().with_claim("reviewer-1", T0)
        timeout = timedelta(minutes=30)

        assert not claimed.is_claim_expired(T0 + timedelta(minutes=30), timeout)
        assert claimed.is_claim_expired(T0 + timedelta(minutes=31), timeout)
        assert not make_queue_item().is_claim_expired(T0 + timedelta(days=1), timeout)

    def test_breach_flag_recorded_once(self) -> None:
        item = make_queue_item()
        flagged = item.with_breach_flag(T0)

        assert flagged.breach_flagged_at == T0
        assert flagged.with_breach_flag(T0 + timedelta(hours=1)) is flagged

    def test_reclassification_only_while_pending(self) -> None:
        item = make_queue_item().with_breach_flag(T0)
        moved = item.with_reclassification(QueueType.HIGH_PRIORITY, T0, 2)

        assert moved.queue_type == QueueType.HIGH_PRIORITY
        assert moved.breach_flagged_at is None

        with pytest.raises(ValueError, match="PENDING"):
            item.with_claim("reviewer-1", T0).with_reclassification(
                QueueType.CRITICAL, T0, 1
            )

    def test_assignment(self) -> None:
        item = make_queue_item()

        assigned = item.with_assignment("reviewer-1", T0)
        assert assigned.status == QueueStatus.IN_REVIEW
        assert assigned.claimed_by == "reviewer-1"

        later = T0 + timedelta(minutes=10)
        moved = assigned.with_assignment("reviewer-2", later)
        assert moved.status == QueueStatus.IN_REVIEW
        assert moved.claimed_by == "reviewer-2"
        assert moved.claimed_at == later
        assert moved.version == assigned.version + 1

        with pytest.raises(ValueError, match="resolved"):
            moved.with_resolution(later).with_assignment("reviewer-3", later)
