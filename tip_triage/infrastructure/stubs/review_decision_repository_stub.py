"""In-memory stub implementation of ReviewDecisionRepositoryProtocol."""

from __future__ import annotations

from uuid import UUID

from tip_triage.domain.errors import ValidationError
from tip_triage.domain.models.review_decision import ReviewDecision


class ReviewDecisionRepositoryStub:
    """In-memory implementation of ReviewDecisionRepositoryProtocol.

    Holds at most one decision per queue item.
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._decisions: dict[UUID, ReviewDecision] = {}
        self._by_queue_item: dict[UUID, UUID] = {}  # queue_item_id -> decision_id

    async def save(self, decision: ReviewDecision) -> None:
        """Persist a decision.

        Raises:
            ValidationError: The queue item already has a decision.
        """
        if decision.queue_item_id in self._by_queue_item:
            raise ValidationError(
                f"queue item {decision.queue_item_id} already has a decision",
                "queue_item_id",
            )
        self._decisions[decision.decision_id] = decision
        self._by_queue_item[decision.queue_item_id] = decision.decision_id

    async def get_by_queue_item(self, queue_item_id: UUID) -> ReviewDecision | None:
        decision_id = self._by_queue_item.get(queue_item_id)
        if decision_id is None:
            return None
        return self._decisions.get(decision_id)

    async def remove(self, decision_id: UUID) -> None:
        decision = self._decisions.pop(decision_id, None)
        if decision is not None:
            self._by_queue_item.pop(decision.queue_item_id, None)

    async def list_all(self) -> list[ReviewDecision]:
        return list(self._decisions.values())

    def clear(self) -> None:
        """Clear all stored decisions. For testing only."""
        self._decisions.clear()
        self._by_queue_item.clear()

    def count(self) -> int:
        """Number of stored decisions. For testing only."""
        return len(self._decisions)
