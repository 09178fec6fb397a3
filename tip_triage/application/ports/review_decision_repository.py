"""Review decision repository protocol."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uuid import UUID

    from tip_triage.domain.models.review_decision import ReviewDecision


class ReviewDecisionRepositoryProtocol(Protocol):
    """Repository protocol for review decisions.

    At most one decision exists per queue item.
    """

    @abstractmethod
    async def save(self, decision: ReviewDecision) -> None:
        """Persist a decision.

        Raises:
            ValidationError: The queue item already has a decision.
        """
        ...

    @abstractmethod
    async def get_by_queue_item(self, queue_item_id: UUID) -> ReviewDecision | None:
        """The decision recorded for a queue item, if any."""
        ...

    @abstractmethod
    async def remove(self, decision_id: UUID) -> None:
        """Delete a decision. Used only to undo a partially applied review."""
        ...

    @abstractmethod
    async def list_all(self) -> list[ReviewDecision]:
        """Every decision, for statistics."""
        ...
