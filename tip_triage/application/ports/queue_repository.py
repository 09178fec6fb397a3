"""Review queue repository protocol.

Implementations must maintain an index by (queue_type, status) and a
deadline-ordered index so listing and breach detection never scan every
item, and must make compare_and_swap atomic.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from tip_triage.domain.models.queue_item import QueueItem, QueueStatus, QueueType


class QueueRepositoryProtocol(Protocol):
    """Repository protocol for queue items."""

    @abstractmethod
    async def add(self, item: QueueItem) -> None:
        """Persist a new queue item.

        Raises:
            ValidationError: An item with the same id already exists.
        """
        ...

    @abstractmethod
    async def get(self, item_id: UUID) -> QueueItem | None:
        """Retrieve a queue item by id."""
        ...

    @abstractmethod
    async def list_for_tip(self, tip_id: UUID) -> list[QueueItem]:
        """Every queue item opened for a tip, oldest first."""
        ...

    @abstractmethod
    async def compare_and_swap(self, expected_version: int, item: QueueItem) -> bool:
        """Replace the stored item only if its version is still expected_version.

        Args:
            expected_version: Version the caller read.
            item: The new state (its version must be expected_version + 1).

        Returns:
            True if the swap happened, False if the item changed meanwhile.

        Raises:
            QueueItemNotFoundError: The item does not exist.
        """
        ...

    @abstractmethod
    async def remove(self, item_id: UUID) -> None:
        """Delete an item. Used only to undo a partially applied review."""
        ...

    @abstractmethod
    async def list_by(
        self,
        queue_type: QueueType,
        status: QueueStatus,
    ) -> list[QueueItem]:
        """Items in one (queue_type, status) bucket."""
        ...

    @abstractmethod
    async def list_deadline_before(self, cutoff: datetime) -> list[QueueItem]:
        """Unresolved items whose SLA deadline is before cutoff, earliest first."""
        ...

    @abstractmethod
    async def list_claimed_before(self, cutoff: datetime) -> list[QueueItem]:
        """In-review items claimed before cutoff."""
        ...

    @abstractmethod
    async def count_by(self, queue_type: QueueType, status: QueueStatus) -> int:
        """Size of one (queue_type, status) bucket."""
        ...
