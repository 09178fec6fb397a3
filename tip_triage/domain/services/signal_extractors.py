"""Signal extractors: six independent 0-100 sub-scores for a tip.

Each extractor is a pure function of the tip and an ExtractionContext.
Extractors never observe one another's output; only the tipster
reliability extractor reads the TipsterProfile. An extractor returns a
score of None when its signal is unavailable for the tip (no photo, no
location, ...) so the aggregator can exclude it instead of scoring zero.

Time-relative checks use the tip's submission time as "now", so scoring
the same tip twice yields the same result.

Note: This is pure domain logic with no infrastructure dependencies.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from tip_triage.domain.models.case_context import CaseEvidence
from tip_triage.domain.models.tip import PhotoEvidence, Tip
from tip_triage.domain.models.tip_verification import HoaxIndicator, SignalName
from tip_triage.domain.models.tipster_profile import ReliabilityTier, TipsterProfile
from tip_triage.domain.services.geo import (
    clamp_score,
    haversine_km,
    hours_between,
    jaccard_similarity,
)

if TYPE_CHECKING:
    from tip_triage.config.triage_config import ExtractionConfig


@dataclass(frozen=True)
class ExtractionContext:
    """Everything an extractor may read besides the tip itself.

    Attributes:
        evidence: Last-seen facts and known leads for the case.
        profile: The submitting tipster's profile, if one exists.
        config: Extraction thresholds.
    """

    evidence: CaseEvidence
    profile: TipsterProfile | None
    config: ExtractionConfig


@dataclass(frozen=True)
class SignalResult:
    """Output of one extractor.

    Attributes:
        signal: Which sub-score this is.
        score: 0-100, or None when the signal is unavailable.
        indicators: Hoax indicators the extractor raised.
        note: Short human-readable explanation.
        matching_lead_ids: Leads the tip corroborates (cross-reference only).
    """

    signal: SignalName
    score: int | None
    indicators: frozenset[HoaxIndicator] = field(default_factory=frozenset)
    note: str | None = None
    matching_lead_ids: tuple[str, ...] = ()


Extractor = Callable[[Tip, ExtractionContext], SignalResult]


# =============================================================================
# Photo
# =============================================================================


def _photo_indicators(photo: PhotoEvidence, tip: Tip) -> set[HoaxIndicator]:
    indicators: set[HoaxIndicator] = set()
    if photo.gps is not None and tip.point is not None:
        if haversine_km(photo.gps, tip.point) > 50:
            indicators.add(HoaxIndicator.CONFLICTING_LOCATION)
    if photo.taken_at is not None and tip.sighted_at is not None:
        if hours_between(photo.taken_at, tip.sighted_at) / 24 > 7:
            indicators.add(HoaxIndicator.SUSPICIOUS_METADATA)
    if photo.is_stock_photo:
        indicators.add(HoaxIndicator.STOCK_PHOTO_DETECTED)
    if photo.is_ai_generated:
        indicators.add(HoaxIndicator.AI_GENERATED_CONTENT)
    if photo.is_manipulated and photo.manipulation_confidence > 0.7:
        indicators.add(HoaxIndicator.SUSPICIOUS_METADATA)
    return indicators


def extract_photo(tip: Tip, context: ExtractionContext) -> SignalResult:
    """Score the primary photo's metadata and upstream analysis.

    Indicators are collected from every attached photo; the score comes
    from the first one.
    """
    if not tip.has_photos:
        return SignalResult(SignalName.PHOTO, None, note="No photo provided")

    photo = tip.photos[0]
    score = 60
    score += 10 if photo.has_exif else -5

    if photo.gps is not None:
        score += 15
        if tip.point is not None:
            distance = haversine_km(photo.gps, tip.point)
            if distance < 1:
                score += 10
            elif distance < 5:
                score += 5
            elif distance > 50:
                score -= 10

    if photo.taken_at is not None:
        score += 5
        if tip.sighted_at is not None:
            days = hours_between(photo.taken_at, tip.sighted_at) / 24
            if days < 1:
                score += 10
            elif days > 7:
                score -= 10

    if photo.is_stock_photo:
        score -= 30
    if photo.is_ai_generated:
        score -= 40
    if photo.is_manipulated and photo.manipulation_confidence > 0.7:
        score -= 20
    if photo.matches_missing_person:
        score += 25

    indicators: set[HoaxIndicator] = set()
    for attached in tip.photos:
        indicators |= _photo_indicators(attached, tip)

    if HoaxIndicator.STOCK_PHOTO_DETECTED in indicators:
        note = "Photo appears to be a stock image"
    elif HoaxIndicator.AI_GENERATED_CONTENT in indicators:
        note = "Photo appears to be AI-generated"
    elif score >= 80:
        note = "Photo with verified metadata and matching location/time"
    elif score >= 60:
        note = "Photo with GPS data" if photo.gps else "Photo with some metadata"
    else:
        note = "Photo quality or authenticity concerns"

    return SignalResult(
        SignalName.PHOTO, clamp_score(score), frozenset(indicators), note
    )


# =============================================================================
# Location
# =============================================================================


def extract_location(tip: Tip, context: ExtractionContext) -> SignalResult:
    """Score the claimed location against the last-seen point."""
    if tip.location is None or tip.location.is_empty:
        return SignalResult(SignalName.LOCATION, None, note="No location provided")

    if tip.point is None:
        return SignalResult(
            SignalName.LOCATION, 40, note="Text location provided, no coordinates"
        )

    config = context.config
    evidence = context.evidence
    indicators: set[HoaxIndicator] = set()
    score = 60
    distance: float | None = None

    if evidence.last_seen_point is not None:
        distance = haversine_km(tip.point, evidence.last_seen_point)
        if distance < 10:
            score += 20
        elif distance < 50:
            score += 15
        elif distance < 100:
            score += 10
        elif distance < config.max_plausible_distance_km:
            score += 5
        else:
            score -= 10

        if evidence.last_seen_at is not None:
            seen_at = tip.sighted_at or tip.submitted_at
            elapsed = hours_between(evidence.last_seen_at, seen_at)
            reachable_km = elapsed * config.max_travel_speed_kmh
            if distance > reachable_km and elapsed < config.travel_check_window_hours:
                score -= 20
                indicators.add(HoaxIndicator.IMPOSSIBLE_TIMELINE)

    text = tip.location_text
    if text and len(text) > 20:
        score += 5

    if indicators:
        note = "Location impossible given timeline"
    elif distance is not None:
        note = f"{distance:.1f}km from last seen location"
    else:
        note = "Location provided with coordinates"

    return SignalResult(
        SignalName.LOCATION, clamp_score(score), frozenset(indicators), note
    )


# =============================================================================
# Time plausibility
# =============================================================================


def extract_time_plausibility(tip: Tip, context: ExtractionContext) -> SignalResult:
    """Score the claimed sighting time."""
    if tip.sighted_at is None:
        return SignalResult(
            SignalName.TIME_PLAUSIBILITY, None, note="No sighting time provided"
        )

    evidence = context.evidence
    config = context.config
    impossible = frozenset({HoaxIndicator.IMPOSSIBLE_TIMELINE})
    reference: datetime = tip.submitted_at

    if evidence.last_seen_at is not None and tip.sighted_at < evidence.last_seen_at:
        return SignalResult(
            SignalName.TIME_PLAUSIBILITY,
            10,
            impossible,
            "Claimed sighting is before the disappearance",
        )
    if tip.sighted_at > reference:
        return SignalResult(
            SignalName.TIME_PLAUSIBILITY,
            10,
            impossible,
            "Claimed sighting is in the future",
        )

    score = 60
    indicators: frozenset[HoaxIndicator] = frozenset()
    travel_feasible = True

    if (
        tip.point is not None
        and evidence.last_seen_point is not None
        and evidence.last_seen_at is not None
    ):
        distance = haversine_km(evidence.last_seen_point, tip.point)
        elapsed = hours_between(evidence.last_seen_at, tip.sighted_at)
        if distance > elapsed * config.max_travel_speed_kmh:
            travel_feasible = False
            score -= 20
            indicators = impossible
        else:
            score += 10

    since_sighting = hours_between(tip.sighted_at, reference)
    if since_sighting < 24:
        score += 15
    elif since_sighting < 72:
        score += 10
    elif since_sighting > 168:
        score -= 5

    if not travel_feasible:
        note = "Travel time/distance inconsistent with claimed sighting"
    elif since_sighting < 24:
        note = "Recent sighting within 24 hours"
    elif since_sighting < 72:
        note = "Sighting within 3 days"
    else:
        note = f"Sighting {int(since_sighting // 24)} days before submission"

    return SignalResult(
        SignalName.TIME_PLAUSIBILITY, clamp_score(score), indicators, note
    )


# =============================================================================
# Text analysis
# =============================================================================

_DATE_PATTERN = re.compile(
    r"\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}|\b(january|february|march|april|may|june|"
    r"july|august|september|october|november|december)\b",
    re.IGNORECASE,
)
_TIME_PATTERN = re.compile(
    r"\d{1,2}:\d{2}|\b(morning|afternoon|evening|night|am|pm)\b", re.IGNORECASE
)
_PLACE_PATTERN = re.compile(
    r"\b(street|avenue|road|highway|store|restaurant|park|school|hospital|mall|"
    r"near|corner|intersection)\b",
    re.IGNORECASE,
)
_DESCRIPTION_PATTERN = re.compile(
    r"\b(wearing|hair|tall|short|shirt|pants|jacket|hat|glasses|tattoo)\b",
    re.IGNORECASE,
)
_CERTAIN_PATTERN = re.compile(
    r"\b(saw|seen|definitely|certain|sure|positive|confirmed|recognized)\b",
    re.IGNORECASE,
)
_UNCERTAIN_PATTERN = re.compile(
    r"\b(maybe|might|possibly|unsure|think|guess|not sure)\b", re.IGNORECASE
)
_SENTENCE_END = re.compile(r"[.!?]+")

TEXT_CONSISTENCY_BASELINE = 70


@dataclass(frozen=True)
class TextBreakdown:
    """Components of the text-analysis score."""

    detail_richness: int
    coherence: int
    sentiment: float
    consistency: int


def analyze_text(content: str) -> TextBreakdown:
    """Break tip content into detail, coherence and certainty measures."""
    word_count = len(content.split())
    sentence_count = len(_SENTENCE_END.findall(content)) or 1

    detail = 50
    for floor in (50, 100, 200):
        if word_count > floor:
            detail += 10
    for pattern in (_DATE_PATTERN, _TIME_PATTERN, _PLACE_PATTERN, _DESCRIPTION_PATTERN):
        if pattern.search(content):
            detail += 5
    detail = min(100, detail)

    words_per_sentence = word_count / sentence_count
    coherence = 60
    if 5 <= words_per_sentence <= 25:
        coherence += 20
    if words_per_sentence < 3 or words_per_sentence > 50:
        coherence -= 20
    if word_count > 5 and content == content.upper():
        coherence -= 10
    if word_count > 5 and content == content.lower():
        coherence -= 5
    coherence = max(0, min(100, coherence))

    sentiment = 0.1 * len(_CERTAIN_PATTERN.findall(content))
    sentiment -= 0.1 * len(_UNCERTAIN_PATTERN.findall(content))
    sentiment = max(-1.0, min(1.0, sentiment))

    return TextBreakdown(
        detail_richness=detail,
        coherence=coherence,
        sentiment=sentiment,
        consistency=TEXT_CONSISTENCY_BASELINE,
    )


def extract_text_analysis(tip: Tip, context: ExtractionContext) -> SignalResult:
    """Score the content itself. Always available."""
    breakdown = analyze_text(tip.content)
    raw = (
        breakdown.detail_richness * 0.4
        + breakdown.coherence * 0.3
        + (breakdown.sentiment + 1) * 25 * 0.2
        + breakdown.consistency * 0.1
    )
    score = clamp_score(raw)
    if score >= 70:
        note = "Detailed and coherent description"
    elif score >= 50:
        note = "Adequate description with some details"
    else:
        note = "Limited or vague description"
    return SignalResult(SignalName.TEXT_ANALYSIS, score, note=note)


# =============================================================================
# Cross-reference
# =============================================================================


def extract_cross_reference(tip: Tip, context: ExtractionContext) -> SignalResult:
    """Score corroboration against the case's existing leads."""
    leads = context.evidence.leads
    if not leads:
        return SignalResult(
            SignalName.CROSS_REFERENCE, None, note="Case has no leads to compare"
        )

    config = context.config
    matching: list[str] = []
    matches_known_location = False
    for lead in leads:
        if tip.point is not None and lead.point is not None:
            if haversine_km(tip.point, lead.point) < config.lead_match_radius_km:
                matching.append(lead.lead_id)
                matches_known_location = True
        if tip.location_text and lead.location_text:
            similarity = jaccard_similarity(tip.location_text, lead.location_text)
            if similarity > config.location_text_similarity:
                matches_known_location = True

    score = 50
    if matching:
        score += 20 + min(20, 5 * len(matching))
    if matches_known_location:
        score += 10

    note = (
        f"Corroborates {len(matching)} existing lead(s)"
        if matching
        else "No direct correlation with existing leads"
    )
    return SignalResult(
        SignalName.CROSS_REFERENCE,
        clamp_score(score),
        note=note,
        matching_lead_ids=tuple(matching),
    )


# =============================================================================
# Tipster reliability
# =============================================================================


def extract_tipster_reliability(tip: Tip, context: ExtractionContext) -> SignalResult:
    """Score the submitting tipster's track record."""
    profile = context.profile
    if profile is None:
        return SignalResult(
            SignalName.TIPSTER_RELIABILITY, None, note="First tip from this tipster"
        )
    if profile.is_blocked:
        return SignalResult(SignalName.TIPSTER_RELIABILITY, 0, note="Tipster is blocked")
    if profile.reliability_tier == ReliabilityTier.NEW:
        return SignalResult(
            SignalName.TIPSTER_RELIABILITY, None, note="No reviewed tips yet"
        )

    score = profile.reliability_score
    for behaviour in (
        profile.provides_photos,
        profile.provides_detailed_info,
        profile.reports_coordinates,
    ):
        if behaviour:
            score += 5
    score -= 5 * profile.spam_tips

    return SignalResult(
        SignalName.TIPSTER_RELIABILITY,
        clamp_score(score),
        note=f"{profile.reliability_tier.value} tipster",
    )


EXTRACTORS: dict[SignalName, Extractor] = {
    SignalName.PHOTO: extract_photo,
    SignalName.LOCATION: extract_location,
    SignalName.TIME_PLAUSIBILITY: extract_time_plausibility,
    SignalName.TEXT_ANALYSIS: extract_text_analysis,
    SignalName.CROSS_REFERENCE: extract_cross_reference,
    SignalName.TIPSTER_RELIABILITY: extract_tipster_reliability,
}
"""Every extractor keyed by the sub-score it produces."""
