"""In-memory stubs for TipRepositoryProtocol and VerificationRepositoryProtocol.

Tips are indexed per case in submission order so duplicate detection can
slice a time window without scanning every stored tip.
"""

from __future__ import annotations

from bisect import bisect_left, insort
from datetime import datetime
from uuid import UUID

from tip_triage.domain.errors import ValidationError, VerificationNotFoundError
from tip_triage.domain.models.tip import Tip
from tip_triage.domain.models.tip_verification import TipVerification


class TipRepositoryStub:
    """In-memory implementation of TipRepositoryProtocol.

    Example:
        >>> stub = TipRepositoryStub()
        >>> await stub.save(tip)
        >>> recent = await stub.list_for_case_since(tip.case_id, cutoff)
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._tips: dict[UUID, Tip] = {}
        # case_id -> sorted [(submitted_at, tip_id)]
        self._by_case: dict[UUID, list[tuple[datetime, str]]] = {}

    async def save(self, tip: Tip) -> None:
        """Persist a tip.

        Raises:
            ValidationError: Tip id already stored.
        """
        if tip.tip_id in self._tips:
            raise ValidationError(f"tip {tip.tip_id} already exists", "tip_id")
        self._tips[tip.tip_id] = tip
        insort(
            self._by_case.setdefault(tip.case_id, []),
            (tip.submitted_at, str(tip.tip_id)),
        )

    async def get(self, tip_id: UUID) -> Tip | None:
        return self._tips.get(tip_id)

    async def list_for_case_since(self, case_id: UUID, since: datetime) -> list[Tip]:
        """Tips on case_id submitted at or after since, oldest first."""
        index = self._by_case.get(case_id, [])
        start = bisect_left(index, (since, ""))
        return [self._tips[UUID(tip_id)] for _, tip_id in index[start:]]

    def clear(self) -> None:
        """Clear all stored tips. For testing only."""
        self._tips.clear()
        self._by_case.clear()

    def count(self) -> int:
        """Number of stored tips. For testing only."""
        return len(self._tips)


class VerificationRepositoryStub:
    """In-memory implementation of VerificationRepositoryProtocol."""

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._by_tip: dict[UUID, TipVerification] = {}

    async def save(self, verification: TipVerification) -> None:
        """Persist the verification of a tip.

        Raises:
            ValidationError: The tip already has a verification.
        """
        if verification.tip_id in self._by_tip:
            raise ValidationError(
                f"tip {verification.tip_id} already has a verification", "tip_id"
            )
        self._by_tip[verification.tip_id] = verification

    async def update(self, verification: TipVerification) -> None:
        """Replace the verification of a tip.

        Raises:
            VerificationNotFoundError: No verification stored for the tip.
        """
        if verification.tip_id not in self._by_tip:
            raise VerificationNotFoundError(verification.tip_id)
        self._by_tip[verification.tip_id] = verification

    async def get_by_tip(self, tip_id: UUID) -> TipVerification | None:
        return self._by_tip.get(tip_id)

    async def list_all(
        self,
        case_id: UUID | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
    ) -> list[TipVerification]:
        return [
            v
            for v in self._by_tip.values()
            if (case_id is None or v.case_id == case_id)
            and (created_from is None or v.created_at >= created_from)
            and (created_to is None or v.created_at <= created_to)
        ]

    def clear(self) -> None:
        """Clear all stored verifications. For testing only."""
        self._by_tip.clear()

    def count(self) -> int:
        """Number of stored verifications. For testing only."""
        return len(self._by_tip)
