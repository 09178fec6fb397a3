"""In-memory stub implementation of QueueRepositoryProtocol.

Maintains the two indexes the review queue relies on:
- (queue_type, status) -> item ids, for listing one queue
- a deadline-ordered list of unresolved items, for breach detection

compare_and_swap runs under a lock so concurrent claims on the same item
are linearizable.
"""

from __future__ import annotations

import asyncio
from bisect import bisect_left, insort
from datetime import datetime
from uuid import UUID

from tip_triage.domain.errors import QueueItemNotFoundError, ValidationError
from tip_triage.domain.models.queue_item import QueueItem, QueueStatus, QueueType


class QueueRepositoryStub:
    """In-memory implementation of QueueRepositoryProtocol.

    Example:
        >>> stub = QueueRepositoryStub()
        >>> await stub.add(item)
        >>> claimed = item.with_claim("reviewer-1", now)
        >>> await stub.compare_and_swap(item.version, claimed)
        True
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage and indexes."""
        self._items: dict[UUID, QueueItem] = {}
        self._by_bucket: dict[tuple[QueueType, QueueStatus], set[UUID]] = {}
        self._by_tip: dict[UUID, list[UUID]] = {}
        # sorted [(sla_deadline, item_id)] for unresolved items only
        self._deadlines: list[tuple[datetime, str]] = []
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Index maintenance
    # ------------------------------------------------------------------

    def _index(self, item: QueueItem) -> None:
        self._by_bucket.setdefault((item.queue_type, item.status), set()).add(
            item.item_id
        )
        if item.status != QueueStatus.RESOLVED:
            insort(self._deadlines, (item.sla_deadline, str(item.item_id)))

    def _unindex(self, item: QueueItem) -> None:
        self._by_bucket.get((item.queue_type, item.status), set()).discard(item.item_id)
        if item.status != QueueStatus.RESOLVED:
            key = (item.sla_deadline, str(item.item_id))
            position = bisect_left(self._deadlines, key)
            if position < len(self._deadlines) and self._deadlines[position] == key:
                del self._deadlines[position]

    # ------------------------------------------------------------------
    # QueueRepositoryProtocol
    # ------------------------------------------------------------------

    async def add(self, item: QueueItem) -> None:
        """Persist a new queue item.

        Raises:
            ValidationError: Item id already stored.
        """
        async with self._lock:
            if item.item_id in self._items:
                raise ValidationError(
                    f"queue item {item.item_id} already exists", "item_id"
                )
            self._items[item.item_id] = item
            self._by_tip.setdefault(item.tip_id, []).append(item.item_id)
            self._index(item)

    async def get(self, item_id: UUID) -> QueueItem | None:
        return self._items.get(item_id)

    async def list_for_tip(self, tip_id: UUID) -> list[QueueItem]:
        return [self._items[i] for i in self._by_tip.get(tip_id, []) if i in self._items]

    async def compare_and_swap(self, expected_version: int, item: QueueItem) -> bool:
        """Atomically replace an item if nobody changed it since it was read.

        Raises:
            QueueItemNotFoundError: Item does not exist.
        """
        async with self._lock:
            current = self._items.get(item.item_id)
            if current is None:
                raise QueueItemNotFoundError(item.item_id)
            if current.version != expected_version:
                return False
            self._unindex(current)
            self._items[item.item_id] = item
            self._index(item)
            return True

    async def remove(self, item_id: UUID) -> None:
        async with self._lock:
            item = self._items.pop(item_id, None)
            if item is None:
                return
            self._unindex(item)
            siblings = self._by_tip.get(item.tip_id, [])
            if item_id in siblings:
                siblings.remove(item_id)

    async def list_by(
        self,
        queue_type: QueueType,
        status: QueueStatus,
    ) -> list[QueueItem]:
        ids = self._by_bucket.get((queue_type, status), set())
        return [self._items[i] for i in ids]

    async def list_deadline_before(self, cutoff: datetime) -> list[QueueItem]:
        """Unresolved items due before cutoff, earliest deadline first."""
        end = bisect_left(self._deadlines, (cutoff, ""))
        return [self._items[UUID(item_id)] for _, item_id in self._deadlines[:end]]

    async def list_claimed_before(self, cutoff: datetime) -> list[QueueItem]:
        claimed: list[QueueItem] = []
        for queue_type in QueueType:
            for item in await self.list_by(queue_type, QueueStatus.IN_REVIEW):
                if item.claimed_at is not None and item.claimed_at < cutoff:
                    claimed.append(item)
        return claimed

    async def count_by(self, queue_type: QueueType, status: QueueStatus) -> int:
        return len(self._by_bucket.get((queue_type, status), set()))

    def clear(self) -> None:
        """Clear all stored items. For testing only."""
        self._items.clear()
        self._by_bucket.clear()
        self._by_tip.clear()
        self._deadlines.clear()

    def count(self) -> int:
        """Number of stored items. For testing only."""
        return len(self._items)
