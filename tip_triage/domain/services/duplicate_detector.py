"""Near-duplicate detection for tips on the same case.

A candidate matches when it was submitted on the same case within the
configured window before the new tip, its content is at least the
configured word similarity, and (when both tips carry coordinates) it
lies within the configured distance. Duplicates are still scored and
queued; corroboration is a weak positive signal.

Note: This is pure domain logic with no infrastructure dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from tip_triage.domain.models.tip import Tip
from tip_triage.domain.services.geo import haversine_km, jaccard_similarity

if TYPE_CHECKING:
    from tip_triage.config.triage_config import DuplicateConfig


@dataclass(frozen=True)
class DuplicateResult:
    """Outcome of duplicate detection.

    Attributes:
        is_duplicate: At least one earlier tip matched.
        duplicate_of: The earliest matching tip.
        similarity_scores: Content similarity against every compared tip,
            rounded to 4 places.
    """

    is_duplicate: bool
    duplicate_of: UUID | None
    similarity_scores: tuple[tuple[UUID, float], ...]


class DuplicateDetector:
    """Compares a new tip against recent tips for the same case."""

    def __init__(self, config: DuplicateConfig) -> None:
        self._config = config

    def is_candidate(self, tip: Tip, other: Tip) -> bool:
        """Same case, different tip, submitted within the window before tip."""
        if other.tip_id == tip.tip_id or other.case_id != tip.case_id:
            return False
        if other.submitted_at > tip.submitted_at:
            return False
        return tip.submitted_at - other.submitted_at <= self._config.window

    def detect(self, tip: Tip, recent: Iterable[Tip]) -> DuplicateResult:
        """Find the earliest near-duplicate of tip among recent tips."""
        scores: list[tuple[UUID, float]] = []
        matches: list[Tip] = []
        for other in recent:
            if not self.is_candidate(tip, other):
                continue
            similarity = jaccard_similarity(tip.content, other.content)
            scores.append((other.tip_id, round(similarity, 4)))
            if similarity < self._config.text_similarity:
                continue
            if tip.point is not None and other.point is not None:
                distance_m = haversine_km(tip.point, other.point) * 1000
                if distance_m > self._config.max_distance_m:
                    continue
            matches.append(other)

        if not matches:
            return DuplicateResult(False, None, tuple(scores))

        earliest = min(matches, key=lambda t: (t.submitted_at, str(t.tip_id)))
        return DuplicateResult(True, earliest.tip_id, tuple(scores))
