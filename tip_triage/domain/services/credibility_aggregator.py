"""Credibility aggregator: six sub-scores to one 0-100 score.

The aggregate is the weighted mean of the sub-scores that were produced.
Unavailable sub-scores are excluded and the remaining weights are
renormalized, so a tip that omits optional evidence is not penalized.
Result is clamped to [0, 100] and rounded half-up.

Note: This is pure domain logic with no infrastructure dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tip_triage.domain.models.tip_verification import SubScores
from tip_triage.domain.services.geo import clamp_score

if TYPE_CHECKING:
    from tip_triage.config.triage_config import ScoringWeights


class CredibilityAggregator:
    """Weighted, renormalizing aggregation of sub-scores.

    Example:
        >>> aggregator = CredibilityAggregator(ScoringWeights.equal())
        >>> aggregator.aggregate(SubScores(photo=90, text_analysis=70))
        80
    """

    def __init__(self, weights: ScoringWeights) -> None:
        self._weights = weights

    @property
    def weights(self) -> ScoringWeights:
        return self._weights

    def aggregate(self, subscores: SubScores) -> int:
        """Compute the credibility score.

        If every available signal carries zero weight the plain mean of
        the available signals is used.

        Raises:
            ValueError: If no sub-score is available.
        """
        available = subscores.available()
        if not available:
            raise ValueError("at least one sub-score is required")

        weights = self._weights.as_dict()
        total_weight = sum(weights[signal.value] for signal in available)
        if total_weight <= 0:
            return clamp_score(sum(available.values()) / len(available))

        weighted = sum(
            score * weights[signal.value] for signal, score in available.items()
        )
        return clamp_score(weighted / total_weight)
