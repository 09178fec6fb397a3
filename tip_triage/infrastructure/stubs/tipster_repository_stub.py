"""In-memory stub implementation of TipsterRepositoryProtocol."""

from __future__ import annotations

from uuid import UUID

from tip_triage.application.ports.tipster_repository import TipsterFilter
from tip_triage.domain.errors import TipsterNotFoundError, ValidationError
from tip_triage.domain.models.tipster_profile import ReliabilityTier, TipsterProfile


class TipsterRepositoryStub:
    """In-memory implementation of TipsterRepositoryProtocol.

    Profiles are indexed by id and by identity key. Nothing is ever
    removed, matching the retention rule for tipster profiles.
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._profiles: dict[UUID, TipsterProfile] = {}
        self._by_identity: dict[str, UUID] = {}

    async def save(self, profile: TipsterProfile) -> None:
        """Persist a new profile.

        Raises:
            ValidationError: Id or identity already stored.
        """
        key = profile.identity.key
        if profile.tipster_id in self._profiles or key in self._by_identity:
            raise ValidationError(f"tipster profile for {key} already exists", "identity")
        self._profiles[profile.tipster_id] = profile
        self._by_identity[key] = profile.tipster_id

    async def update(self, profile: TipsterProfile) -> None:
        """Replace a stored profile.

        Raises:
            TipsterNotFoundError: Profile doesn't exist.
        """
        if profile.tipster_id not in self._profiles:
            raise TipsterNotFoundError(profile.tipster_id)
        self._profiles[profile.tipster_id] = profile

    async def get(self, tipster_id: UUID) -> TipsterProfile | None:
        return self._profiles.get(tipster_id)

    async def get_by_identity(self, identity_key: str) -> TipsterProfile | None:
        tipster_id = self._by_identity.get(identity_key)
        if tipster_id is None:
            return None
        return self._profiles.get(tipster_id)

    async def list_profiles(
        self,
        tier: ReliabilityTier | None = None,
        profile_filter: TipsterFilter | None = None,
    ) -> list[TipsterProfile]:
        profiles = list(self._profiles.values())
        if tier is not None:
            profiles = [p for p in profiles if p.reliability_tier == tier]
        if profile_filter is not None:
            profiles = [p for p in profiles if profile_filter.matches(p)]
        return profiles

    def clear(self) -> None:
        """Clear all stored profiles. For testing only."""
        self._profiles.clear()
        self._by_identity.clear()

    def count(self) -> int:
        """Number of stored profiles. For testing only."""
        return len(self._profiles)
