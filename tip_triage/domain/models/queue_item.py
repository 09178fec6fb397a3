"""Review queue domain models.

This module defines the unit of reviewer work:
- QueueType: the four review queues, most urgent first
- QueueStatus: state machine for a queue item
- QueueItem: one tip awaiting (or under) human review

Constraints:
- At most one reviewer holds an item at a time (claimed_by)
- Resolution is terminal
- SLA breach is derived from the deadline, never stored as a status
- Every state change bumps version so repositories can compare-and-swap
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from uuid import UUID


class QueueType(str, Enum):
    """Review queues, declared most urgent first."""

    CRITICAL = "critical"
    HIGH_PRIORITY = "high_priority"
    STANDARD = "standard"
    LOW_PRIORITY = "low_priority"

    @property
    def rank(self) -> int:
        """0 for the most urgent queue."""
        return list(QueueType).index(self)


class QueueStatus(str, Enum):
    """Status states for a queue item.

    State Transition Matrix:
    - PENDING -> IN_REVIEW
    - IN_REVIEW -> PENDING (release or claim expiry), RESOLVED
    - RESOLVED -> (terminal)
    """

    PENDING = "pending"
    """Waiting for a reviewer to claim it."""

    IN_REVIEW = "in_review"
    """Claimed by exactly one reviewer."""

    RESOLVED = "resolved"
    """A review decision has been recorded."""

    def is_terminal(self) -> bool:
        return self == QueueStatus.RESOLVED

    def can_transition_to(self, target: QueueStatus) -> bool:
        """Check if transition to target state is valid.

        Args:
            target: The target status to transition to.

        Returns:
            True if the transition is valid, False otherwise.
        """
        valid_transitions: dict[QueueStatus, set[QueueStatus]] = {
            QueueStatus.PENDING: {QueueStatus.IN_REVIEW},
            QueueStatus.IN_REVIEW: {QueueStatus.PENDING, QueueStatus.RESOLVED},
            QueueStatus.RESOLVED: set(),  # Terminal
        }
        return target in valid_transitions.get(self, set())


@dataclass(frozen=True, eq=True)
class QueueItem:
    """A tip placed in a review queue.

    Attributes:
        item_id: Unique identifier for this queue item.
        tip_id: The tip under review.
        case_id: The tip's case (denormalized for filtering).
        queue_type: Which queue the item sits in.
        sla_deadline: When review must have happened by (UTC).
        enqueued_at: When the item was created (UTC).
        review_priority: Ordering hint inside a queue, 1 = most urgent.
        status: Current item status.
        claimed_by: Reviewer holding the item (only while IN_REVIEW).
        claimed_at: When the current claim was taken (UTC).
        resolved_at: When a decision was recorded (UTC).
        breach_flagged_at: When the SLA monitor first saw the deadline pass.
        version: Incremented on every change, used for compare-and-swap.
    """

    item_id: UUID
    tip_id: UUID
    case_id: UUID
    queue_type: QueueType
    sla_deadline: datetime
    enqueued_at: datetime
    review_priority: int = field(default=5)
    status: QueueStatus = field(default=QueueStatus.PENDING)
    claimed_by: str | None = field(default=None)
    claimed_at: datetime | None = field(default=None)
    resolved_at: datetime | None = field(default=None)
    breach_flagged_at: datetime | None = field(default=None)
    version: int = field(default=0)

    def __post_init__(self) -> None:
        """Validate queue item fields after initialization.

        Raises:
            ValueError: If any field validation fails.
        """
        if self.sla_deadline.tzinfo is None:
            raise ValueError("sla_deadline must be timezone-aware (UTC)")
        if self.enqueued_at.tzinfo is None:
            raise ValueError("enqueued_at must be timezone-aware (UTC)")
        if not 1 <= self.review_priority <= 10:
            raise ValueError(
                f"review_priority must be 1-10, got {self.review_priority}"
            )
        if self.status == QueueStatus.IN_REVIEW:
            if not self.claimed_by or self.claimed_at is None:
                raise ValueError("IN_REVIEW status requires claimed_by and claimed_at")
        elif self.claimed_by is not None:
            raise ValueError(
                f"claimed_by must be empty for status {self.status.value}"
            )
        if self.status == QueueStatus.RESOLVED and self.resolved_at is None:
            raise ValueError("RESOLVED status requires resolved_at timestamp")

    def is_sla_breached(self, now: datetime) -> bool:
        """Deadline has passed and the item is not resolved."""
        return self.status != QueueStatus.RESOLVED and now > self.sla_deadline

    def is_claim_expired(self, now: datetime, claim_timeout: timedelta) -> bool:
        """True if the item has been held longer than claim_timeout."""
        if self.status != QueueStatus.IN_REVIEW or self.claimed_at is None:
            return False
        return now - self.claimed_at > claim_timeout

    def time_remaining(self, now: datetime) -> timedelta:
        """Time until the SLA deadline (negative once breached)."""
        return self.sla_deadline - now

    def _transition(self, new_status: QueueStatus) -> None:
        if not self.status.can_transition_to(new_status):
            raise ValueError(
                f"Invalid state transition: {self.status.value} -> {new_status.value}"
            )

    def with_claim(self, reviewer_id: str, claimed_at: datetime) -> QueueItem:
        """Create a new item claimed by reviewer_id.

        Raises:
            ValueError: If the item is not PENDING.
        """
        self._transition(QueueStatus.IN_REVIEW)
        return replace(
            self,
            status=QueueStatus.IN_REVIEW,
            claimed_by=reviewer_id,
            claimed_at=claimed_at,
            version=self.version + 1,
        )

    def with_assignment(self, reviewer_id: str, assigned_at: datetime) -> QueueItem:
        """Create a new item held by reviewer_id on a supervisor's say-so.

        A pending item is claimed on the reviewer's behalf; an item in
        review changes hands and its claim clock restarts.

        Raises:
            ValueError: If the item is resolved.
        """
        if self.status == QueueStatus.PENDING:
            return self.with_claim(reviewer_id, assigned_at)
        if self.status != QueueStatus.IN_REVIEW:
            raise ValueError(f"Cannot assign: item is {self.status.value}")
        return replace(
            self,
            claimed_by=reviewer_id,
            claimed_at=assigned_at,
            version=self.version + 1,
        )

    def with_release(self) -> QueueItem:
        """Create a new item returned to PENDING with no claimant.

        Raises:
            ValueError: If the item is not IN_REVIEW.
        """
        self._transition(QueueStatus.PENDING)
        return replace(
            self,
            status=QueueStatus.PENDING,
            claimed_by=None,
            claimed_at=None,
            version=self.version + 1,
        )

    def with_resolution(self, resolved_at: datetime) -> QueueItem:
        """Create a new, terminal, RESOLVED item.

        Raises:
            ValueError: If the item is not IN_REVIEW.
        """
        self._transition(QueueStatus.RESOLVED)
        return replace(
            self,
            status=QueueStatus.RESOLVED,
            claimed_by=None,
            resolved_at=resolved_at,
            version=self.version + 1,
        )

    def with_reclassification(
        self,
        queue_type: QueueType,
        sla_deadline: datetime,
        review_priority: int,
    ) -> QueueItem:
        """Move a pending item to another queue after rescoring.

        Raises:
            ValueError: If the item is not PENDING.
        """
        if self.status != QueueStatus.PENDING:
            raise ValueError(
                f"Cannot reclassify: status must be PENDING, got {self.status.value}"
            )
        return replace(
            self,
            queue_type=queue_type,
            sla_deadline=sla_deadline,
            review_priority=review_priority,
            breach_flagged_at=None,
            version=self.version + 1,
        )

    def with_breach_flag(self, flagged_at: datetime) -> QueueItem:
        """Record when the SLA monitor first observed the breach."""
        if self.breach_flagged_at is not None:
            return self
        return replace(self, breach_flagged_at=flagged_at, version=self.version + 1)
