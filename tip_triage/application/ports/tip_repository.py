"""Tip and verification repository protocols.

Tips are immutable once stored. Verifications are one-to-one with tips
and only ever change through audited overrides, reclassification or
merged AI analysis.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from tip_triage.domain.models.tip import Tip
    from tip_triage.domain.models.tip_verification import TipVerification


class TipRepositoryProtocol(Protocol):
    """Repository protocol for submitted tips."""

    @abstractmethod
    async def save(self, tip: Tip) -> None:
        """Persist a new tip.

        Raises:
            ValidationError: A tip with the same id already exists.
        """
        ...

    @abstractmethod
    async def get(self, tip_id: UUID) -> Tip | None:
        """Retrieve a tip by id."""
        ...

    @abstractmethod
    async def list_for_case_since(self, case_id: UUID, since: datetime) -> list[Tip]:
        """Tips on a case submitted at or after since, oldest first.

        Used for duplicate detection without scanning every tip.
        """
        ...


class VerificationRepositoryProtocol(Protocol):
    """Repository protocol for tip verifications."""

    @abstractmethod
    async def save(self, verification: TipVerification) -> None:
        """Persist the verification of a tip.

        Raises:
            ValidationError: The tip already has a verification.
        """
        ...

    @abstractmethod
    async def update(self, verification: TipVerification) -> None:
        """Replace a stored verification.

        Raises:
            VerificationNotFoundError: No verification for that tip.
        """
        ...

    @abstractmethod
    async def get_by_tip(self, tip_id: UUID) -> TipVerification | None:
        """Retrieve the verification of a tip."""
        ...

    @abstractmethod
    async def list_all(
        self,
        case_id: UUID | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
    ) -> list[TipVerification]:
        """Verifications for statistics, optionally one case and a time range.

        Both bounds of the range are inclusive.
        """
        ...
