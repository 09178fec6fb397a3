"""Tipster profile repository protocol.

Profiles are never deleted. Callers serialize writes per tipster; the
repository only needs to make each single write atomic.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uuid import UUID

    from tip_triage.domain.models.tipster_profile import ReliabilityTier, TipsterProfile


@dataclass(frozen=True)
class TipsterFilter:
    """Optional narrowing for profile listings.

    Attributes:
        is_blocked: Only blocked (True) or only active (False) profiles.
        min_score: Lowest reliability score included.
        max_score: Highest reliability score included.
        search: Case-insensitive substring of the identity value.
    """

    is_blocked: bool | None = None
    min_score: int | None = None
    max_score: int | None = None
    search: str | None = None

    def matches(self, profile: TipsterProfile) -> bool:
        if self.is_blocked is not None and profile.is_blocked != self.is_blocked:
            return False
        if self.min_score is not None and profile.reliability_score < self.min_score:
            return False
        if self.max_score is not None and profile.reliability_score > self.max_score:
            return False
        if self.search:
            return self.search.strip().lower() in profile.identity.value.lower()
        return True


class TipsterRepositoryProtocol(Protocol):
    """Repository protocol for tipster profiles."""

    @abstractmethod
    async def save(self, profile: TipsterProfile) -> None:
        """Persist a new profile.

        Raises:
            ValidationError: A profile for the same identity already exists.
        """
        ...

    @abstractmethod
    async def update(self, profile: TipsterProfile) -> None:
        """Replace a stored profile.

        Raises:
            TipsterNotFoundError: The profile does not exist.
        """
        ...

    @abstractmethod
    async def get(self, tipster_id: UUID) -> TipsterProfile | None:
        """Retrieve a profile by id."""
        ...

    @abstractmethod
    async def get_by_identity(self, identity_key: str) -> TipsterProfile | None:
        """Retrieve a profile by its identity key (see TipsterIdentity.key)."""
        ...

    @abstractmethod
    async def list_profiles(
        self,
        tier: ReliabilityTier | None = None,
        profile_filter: TipsterFilter | None = None,
    ) -> list[TipsterProfile]:
        """Every profile, optionally restricted to one tier and a filter."""
        ...
