"""Rule-based hoax and spam detection.

Each rule independently may add an indicator:
- known_scam_pattern: a configured scam pattern matches the content
- spam_signature: money-request phrases (also raises the spam score)
- repeated_false_reports: the tipster's reviewed tips are mostly false
- ai_generated_content, stock_photo_detected, suspicious_metadata,
  conflicting_location, impossible_timeline: raised by the extractors
  and merged in here

Any indicator bars the tip from the critical queue.

Note: This is pure domain logic with no infrastructure dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tip_triage.domain.models.scam_pattern import ScamPattern
from tip_triage.domain.models.tip import Tip
from tip_triage.domain.models.tip_verification import HoaxIndicator
from tip_triage.domain.models.tipster_profile import TipsterProfile

if TYPE_CHECKING:
    from tip_triage.config.triage_config import HoaxConfig

SPAM_PHRASES: tuple[str, ...] = (
    "wire money",
    "gift card",
    "western union",
    "bitcoin",
    "crypto",
    "payment required",
    "reward claim",
    "lottery",
    "inheritance",
    "nigerian prince",
    "urgent transfer",
)
"""Money-request phrases that mark a tip as spam."""

SHORT_CONTENT_LENGTH = 20
SHORT_CONTENT_POINTS = 10
ALL_CAPS_POINTS = 5


@dataclass(frozen=True)
class HoaxResult:
    """Indicators raised and the resulting spam score (0-100)."""

    indicators: frozenset[HoaxIndicator]
    spam_score: int


class HoaxDetector:
    """Applies the hoax rules to a scored tip."""

    def __init__(self, config: HoaxConfig) -> None:
        self._config = config

    def spam_score(
        self, content: str, patterns: Iterable[ScamPattern]
    ) -> tuple[int, set[HoaxIndicator]]:
        """Content-only spam rules."""
        lowered = content.lower()
        indicators: set[HoaxIndicator] = set()
        score = 0

        for pattern in patterns:
            if pattern.matches(content):
                score += self._config.scam_pattern_points
                indicators.add(HoaxIndicator.KNOWN_SCAM_PATTERN)

        for phrase in SPAM_PHRASES:
            if phrase in lowered:
                score += self._config.spam_phrase_points
                indicators.add(HoaxIndicator.SPAM_SIGNATURE)

        if len(content.strip()) < SHORT_CONTENT_LENGTH:
            score += SHORT_CONTENT_POINTS
        if (
            len(content) > SHORT_CONTENT_LENGTH
            and content == content.upper()
            and content != content.lower()
        ):
            score += ALL_CAPS_POINTS

        return min(100, score), indicators

    def has_repeated_false_reports(self, profile: TipsterProfile | None) -> bool:
        if profile is None:
            return False
        if profile.reviewed_tips < self._config.repeated_false_min_reviews:
            return False
        return profile.false_tip_rate > self._config.repeated_false_rate

    def evaluate(
        self,
        tip: Tip,
        profile: TipsterProfile | None,
        patterns: Iterable[ScamPattern],
        extractor_indicators: Iterable[HoaxIndicator] = (),
    ) -> HoaxResult:
        """Run every rule and merge in extractor-raised indicators."""
        spam_score, indicators = self.spam_score(tip.content, patterns)
        if self.has_repeated_false_reports(profile):
            indicators.add(HoaxIndicator.REPEATED_FALSE_REPORTS)
        indicators.update(extractor_indicators)
        return HoaxResult(frozenset(indicators), spam_score)
