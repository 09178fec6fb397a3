"""Conflict errors for claim races and double resolution.

Conflicts are expected and recoverable: the caller should re-fetch the
queue and pick a different item (or re-read the item and decide whether
to retry).
"""

from __future__ import annotations

from uuid import UUID

from tip_triage.domain.exceptions import TipTriageError


class ConflictError(TipTriageError):
    """Base error for operations rejected because of concurrent state.

    Attributes:
        queue_item_id: The queue item the operation targeted.
    """

    def __init__(self, queue_item_id: UUID, message: str) -> None:
        self.queue_item_id = queue_item_id
        super().__init__(message)


class ItemAlreadyClaimedError(ConflictError):
    """Raised when a claim CAS finds another reviewer already holds the item.

    Attributes:
        claimed_by: Reviewer currently holding the claim.
    """

    def __init__(self, queue_item_id: UUID, claimed_by: str | None) -> None:
        self.claimed_by = claimed_by
        super().__init__(
            queue_item_id,
            f"Queue item {queue_item_id} is already claimed by {claimed_by}",
        )


class ItemNotClaimableError(ConflictError):
    """Raised when an item is not in a state that accepts the operation.

    Attributes:
        status: The item's current status value.
        operation: The rejected operation (e.g. "claim", "release").
    """

    def __init__(self, queue_item_id: UUID, status: str, operation: str) -> None:
        self.status = status
        self.operation = operation
        super().__init__(
            queue_item_id,
            f"Cannot {operation} queue item {queue_item_id} in status {status}",
        )


class NotClaimantError(ConflictError):
    """Raised when someone other than the current claimant acts on an item.

    Attributes:
        reviewer_id: Reviewer attempting the operation.
        claimed_by: Reviewer actually holding the claim (may be None).
    """

    def __init__(
        self,
        queue_item_id: UUID,
        reviewer_id: str,
        claimed_by: str | None,
    ) -> None:
        self.reviewer_id = reviewer_id
        self.claimed_by = claimed_by
        super().__init__(
            queue_item_id,
            f"Reviewer {reviewer_id} does not hold the claim on queue item "
            f"{queue_item_id} (claimed by {claimed_by})",
        )
