"""Not-found errors for unknown queue items, tips and tipsters."""

from __future__ import annotations

from uuid import UUID

from tip_triage.domain.exceptions import TipTriageError


class NotFoundError(TipTriageError):
    """Base error for a lookup that matched nothing.

    Attributes:
        entity: Kind of entity that was looked up.
        entity_id: Identifier that was not found.
    """

    entity: str = "entity"

    def __init__(self, entity_id: UUID | str) -> None:
        self.entity_id = entity_id
        super().__init__(f"{self.entity} not found: {entity_id}")


class QueueItemNotFoundError(NotFoundError):
    """Raised when a queue item id is unknown."""

    entity = "Queue item"


class TipNotFoundError(NotFoundError):
    """Raised when a tip id is unknown."""

    entity = "Tip"


class VerificationNotFoundError(NotFoundError):
    """Raised when no verification exists for a tip."""

    entity = "Tip verification"


class TipsterNotFoundError(NotFoundError):
    """Raised when a tipster profile id is unknown."""

    entity = "Tipster profile"
