"""Review queue service: claim, assign, release, listing and claim expiry.

State machine per QueueItem:
    pending -> in_review -> resolved
    in_review -> pending   (explicit release or claim expiry)
    in_review -> in_review (supervisor reassignment)

Claims are a compare-and-swap on the stored item, taken under a per-item
lock that the review outcome processor shares, so a decision is always
serialized against claims on the same item. Operations on different
items never wait on each other.

SLA breach is derived from the deadline and never changes queue
membership: a breached item stays in its queue and sorts first.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from tip_triage.application.ports.queue_repository import QueueRepositoryProtocol
from tip_triage.application.ports.time_authority import TimeAuthorityProtocol
from tip_triage.application.services.base import LoggingMixin
from tip_triage.application.services.keyed_lock import KeyedLock
from tip_triage.domain.errors import (
    ItemAlreadyClaimedError,
    ItemNotClaimableError,
    NotClaimantError,
    QueueItemNotFoundError,
    ValidationError,
)
from tip_triage.domain.models.queue_item import QueueItem, QueueStatus, QueueType

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 500
DEFAULT_CLAIM_TIMEOUT = timedelta(minutes=30)


@dataclass(frozen=True)
class QueueEntry:
    """A queue item as seen at a point in time.

    Attributes:
        item: The stored item.
        sla_breached: Deadline passed and the item is unresolved.
        time_remaining: Time until the deadline (negative once breached).
    """

    item: QueueItem
    sla_breached: bool
    time_remaining: timedelta


def _sort_key(entry: QueueEntry) -> tuple[int, int, int, datetime, datetime, str]:
    item = entry.item
    return (
        0 if entry.sla_breached else 1,
        item.queue_type.rank,
        item.review_priority,
        item.sla_deadline,
        item.enqueued_at,
        str(item.item_id),
    )


class ReviewQueueService(LoggingMixin):
    """Claims, releases and ordered listing over the review queues.

    Example:
        >>> queue = ReviewQueueService(repo, time_authority)
        >>> item = await queue.claim(item_id, "reviewer-7")
        >>> await queue.release(item_id, "reviewer-7")
    """

    def __init__(
        self,
        repository: QueueRepositoryProtocol,
        time_authority: TimeAuthorityProtocol,
        claim_timeout: timedelta = DEFAULT_CLAIM_TIMEOUT,
    ) -> None:
        self._repository = repository
        self._time = time_authority
        self._claim_timeout = claim_timeout
        self._locks = KeyedLock()
        self._init_logger(component="queue")

    @asynccontextmanager
    async def item_lock(self, item_id: UUID) -> AsyncIterator[None]:
        """Serialize work on one queue item."""
        async with self._locks.hold(item_id):
            yield

    async def get_item(self, item_id: UUID) -> QueueItem:
        """Fetch a queue item.

        Raises:
            QueueItemNotFoundError: Unknown item id.
        """
        item = await self._repository.get(item_id)
        if item is None:
            raise QueueItemNotFoundError(item_id)
        return item

    async def list_items_for_tip(self, tip_id: UUID) -> list[QueueItem]:
        """Every queue item opened for a tip, oldest first."""
        return await self._repository.list_for_tip(tip_id)

    def entry(self, item: QueueItem) -> QueueEntry:
        now = self._time.utcnow()
        return QueueEntry(
            item=item,
            sla_breached=item.is_sla_breached(now),
            time_remaining=item.time_remaining(now),
        )

    async def get_entry(self, item_id: UUID) -> QueueEntry:
        return self.entry(await self.get_item(item_id))

    # ------------------------------------------------------------------
    # Enqueue / reclassify
    # ------------------------------------------------------------------

    async def enqueue(self, item: QueueItem) -> QueueItem:
        """Place a freshly classified item in its queue."""
        await self._repository.add(item)
        self._log_operation(
            "enqueue", queue_item_id=str(item.item_id), tip_id=str(item.tip_id)
        ).info(
            "item_enqueued",
            queue_type=item.queue_type.value,
            review_priority=item.review_priority,
            sla_deadline=item.sla_deadline.isoformat(),
        )
        return item

    async def reclassify(
        self,
        item_id: UUID,
        queue_type: QueueType,
        sla_deadline: datetime,
        review_priority: int,
    ) -> QueueItem | None:
        """Move a pending item after rescoring.

        Items already claimed or resolved keep their queue.

        Returns:
            The moved item, or None if the item was not pending.
        """
        async with self._locks.hold(item_id):
            item = await self.get_item(item_id)
            if item.status != QueueStatus.PENDING:
                return None
            moved = item.with_reclassification(queue_type, sla_deadline, review_priority)
            await self._swap(item, moved)

        self._log_operation("reclassify", queue_item_id=str(item_id)).info(
            "item_reclassified",
            from_queue=item.queue_type.value,
            to_queue=queue_type.value,
            review_priority=review_priority,
        )
        return moved

    # ------------------------------------------------------------------
    # Claim / release
    # ------------------------------------------------------------------

    async def claim(self, item_id: UUID, reviewer_id: str) -> QueueItem:
        """Atomically assign a pending item to a reviewer.

        A reviewer re-claiming an item they already hold gets it back
        unchanged.

        Raises:
            ValidationError: Empty reviewer id.
            QueueItemNotFoundError: Unknown item id.
            ItemAlreadyClaimedError: Another reviewer holds the item.
            ItemNotClaimableError: The item is resolved.
        """
        if not reviewer_id or not reviewer_id.strip():
            raise ValidationError("must not be empty", "reviewer_id")
        log = self._log_operation(
            "claim", queue_item_id=str(item_id), reviewer_id=reviewer_id
        )

        async with self._locks.hold(item_id):
            item = await self.get_item(item_id)
            if item.status == QueueStatus.IN_REVIEW:
                if item.claimed_by == reviewer_id:
                    return item
                log.info("claim_conflict", claimed_by=item.claimed_by)
                raise ItemAlreadyClaimedError(item_id, item.claimed_by)
            if item.status != QueueStatus.PENDING:
                raise ItemNotClaimableError(item_id, item.status.value, "claim")

            claimed = item.with_claim(reviewer_id, self._time.utcnow())
            if not await self._repository.compare_and_swap(item.version, claimed):
                current = await self.get_item(item_id)
                log.info("claim_conflict", claimed_by=current.claimed_by)
                raise ItemAlreadyClaimedError(item_id, current.claimed_by)

        log.info("item_claimed", queue_type=claimed.queue_type.value)
        return claimed

    async def assign(
        self, item_id: UUID, reviewer_id: str, assigned_by: str
    ) -> QueueItem:
        """Hand an unresolved item to reviewer_id (supervisor action).

        Unlike claim, this also takes an item away from its current
        holder. Assigning to the current holder returns the item as is.

        Raises:
            ValidationError: Empty reviewer or supervisor id.
            QueueItemNotFoundError: Unknown item id.
            ItemNotClaimableError: The item is resolved.
        """
        if not reviewer_id or not reviewer_id.strip():
            raise ValidationError("must not be empty", "assign_to")
        if not assigned_by or not assigned_by.strip():
            raise ValidationError("must not be empty", "assigned_by")
        log = self._log_operation(
            "assign",
            queue_item_id=str(item_id),
            reviewer_id=reviewer_id,
            assigned_by=assigned_by,
        )

        async with self._locks.hold(item_id):
            item = await self.get_item(item_id)
            if item.status == QueueStatus.RESOLVED:
                raise ItemNotClaimableError(item_id, item.status.value, "assign")
            if item.claimed_by == reviewer_id:
                return item
            assigned = item.with_assignment(reviewer_id, self._time.utcnow())
            await self._swap(item, assigned)

        log.info("item_assigned", previous_holder=item.claimed_by)
        return assigned

    async def release(self, item_id: UUID, reviewer_id: str) -> QueueItem:
        """Return a claimed item to pending without a decision.

        Raises:
            QueueItemNotFoundError: Unknown item id.
            ItemNotClaimableError: The item is not in review.
            NotClaimantError: reviewer_id does not hold the claim.
        """
        log = self._log_operation(
            "release", queue_item_id=str(item_id), reviewer_id=reviewer_id
        )
        async with self._locks.hold(item_id):
            item = await self.get_item(item_id)
            if item.status != QueueStatus.IN_REVIEW:
                raise ItemNotClaimableError(item_id, item.status.value, "release")
            if item.claimed_by != reviewer_id:
                raise NotClaimantError(item_id, reviewer_id, item.claimed_by)
            released = item.with_release()
            await self._swap(item, released)

        log.info("item_released")
        return released

    async def release_expired_claims(self) -> int:
        """Revert claims held longer than the claim timeout.

        Returns:
            Number of claims released.
        """
        now = self._time.utcnow()
        stale = await self._repository.list_claimed_before(now - self._claim_timeout)
        released = 0
        for candidate in stale:
            async with self._locks.hold(candidate.item_id):
                item = await self._repository.get(candidate.item_id)
                if item is None or not item.is_claim_expired(now, self._claim_timeout):
                    continue
                await self._swap(item, item.with_release())
            released += 1
            self._log_operation(
                "release_expired_claims", queue_item_id=str(item.item_id)
            ).warning(
                "claim_expired",
                reviewer_id=item.claimed_by,
                claimed_at=item.claimed_at.isoformat() if item.claimed_at else None,
            )
        return released

    # ------------------------------------------------------------------
    # Breach flags
    # ------------------------------------------------------------------

    async def flag_breaches(self) -> list[QueueItem]:
        """Record breach_flagged_at on newly breached items.

        Only the breach indicator changes; status and queue membership
        never do.

        Returns:
            Items flagged by this call.
        """
        now = self._time.utcnow()
        flagged: list[QueueItem] = []
        for candidate in await self._repository.list_deadline_before(now):
            if candidate.breach_flagged_at is not None:
                continue
            async with self._locks.hold(candidate.item_id):
                item = await self._repository.get(candidate.item_id)
                if (
                    item is None
                    or item.breach_flagged_at is not None
                    or not item.is_sla_breached(now)
                ):
                    continue
                updated = item.with_breach_flag(now)
                await self._swap(item, updated)
            flagged.append(updated)
        return flagged

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def list_queue(
        self,
        queue_type: QueueType | None = None,
        status: QueueStatus = QueueStatus.PENDING,
        breached: bool | None = None,
        limit: int = DEFAULT_LIST_LIMIT,
        offset: int = 0,
        claimed_by: str | None = None,
    ) -> list[QueueEntry]:
        """Ordered queue listing, most urgent first.

        Order: breached items first, then queue urgency, review priority,
        SLA deadline and enqueue time.

        Args:
            queue_type: Restrict to one queue; None lists every queue.
            status: Item status to list.
            breached: True for breached only, False for on-time only.
            limit: Maximum entries returned.
            offset: Entries skipped before the page starts.
            claimed_by: Only items held by this reviewer.

        Raises:
            ValidationError: limit or offset out of range.
        """
        if not 1 <= limit <= MAX_LIST_LIMIT:
            raise ValidationError(f"must be 1-{MAX_LIST_LIMIT}", "limit")
        if offset < 0:
            raise ValidationError("must not be negative", "offset")

        if breached:
            now = self._time.utcnow()
            items = [
                item
                for item in await self._repository.list_deadline_before(now)
                if item.status == status
                and (queue_type is None or item.queue_type == queue_type)
            ]
        else:
            types = [queue_type] if queue_type is not None else list(QueueType)
            items = []
            for qt in types:
                items.extend(await self._repository.list_by(qt, status))

        if claimed_by is not None:
            items = [item for item in items if item.claimed_by == claimed_by]
        entries = [self.entry(item) for item in items]
        if breached is False:
            entries = [e for e in entries if not e.sla_breached]
        entries.sort(key=_sort_key)
        return entries[offset : offset + limit]

    async def count(self, queue_type: QueueType, status: QueueStatus) -> int:
        return await self._repository.count_by(queue_type, status)

    async def count_breached(self) -> int:
        now = self._time.utcnow()
        return len(await self._repository.list_deadline_before(now))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _swap(self, expected: QueueItem, updated: QueueItem) -> None:
        if not await self._repository.compare_and_swap(expected.version, updated):
            current = await self.get_item(expected.item_id)
            raise ItemAlreadyClaimedError(expected.item_id, current.claimed_by)
