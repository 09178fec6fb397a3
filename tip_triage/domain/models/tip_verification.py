"""Tip verification domain models.

This module defines the scoring record produced for every tip:
- SignalName: the six sub-scores an extractor can produce
- HoaxIndicator: rule-based hoax/spam flags
- PriorityBucket: credibility-facing priority label
- SubScores: the six 0-100 sub-scores (None when unavailable)
- ScoreOverride: one audited reviewer override
- TipVerification: one-to-one with a Tip

Score fields are override-only: a reviewer may overwrite the credibility
score or an individual sub-score, but the as-scored values stay on the
record and every override is appended to an audit trail.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from uuid import UUID

CREDIBILITY_FIELD: str = "credibility_score"
"""Override target name for the aggregate score."""


class SignalName(str, Enum):
    """Sub-scores produced by the signal extractors."""

    PHOTO = "photo"
    LOCATION = "location"
    TIME_PLAUSIBILITY = "time_plausibility"
    TEXT_ANALYSIS = "text_analysis"
    CROSS_REFERENCE = "cross_reference"
    TIPSTER_RELIABILITY = "tipster_reliability"


class HoaxIndicator(str, Enum):
    """Hoax/spam flags a tip can carry.

    Any indicator bars the tip from the critical queue.
    """

    KNOWN_SCAM_PATTERN = "known_scam_pattern"
    SUSPICIOUS_METADATA = "suspicious_metadata"
    IMPOSSIBLE_TIMELINE = "impossible_timeline"
    CONFLICTING_LOCATION = "conflicting_location"
    REPEATED_FALSE_REPORTS = "repeated_false_reports"
    SPAM_SIGNATURE = "spam_signature"
    AI_GENERATED_CONTENT = "ai_generated_content"
    STOCK_PHOTO_DETECTED = "stock_photo_detected"


class PriorityBucket(str, Enum):
    """Credibility-facing priority label stored on the verification."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    SPAM = "spam"


def _check_score(name: str, value: int | None) -> None:
    if value is not None and not 0 <= value <= 100:
        raise ValueError(f"{name} must be within [0, 100], got {value}")


@dataclass(frozen=True)
class SubScores:
    """The six extractor sub-scores.

    A None value means the signal was unavailable for this tip (e.g. no
    photo submitted) and is excluded from aggregation rather than scored
    as zero.
    """

    photo: int | None = None
    location: int | None = None
    time_plausibility: int | None = None
    text_analysis: int | None = None
    cross_reference: int | None = None
    tipster_reliability: int | None = None

    def __post_init__(self) -> None:
        for name, value in self.as_dict().items():
            _check_score(name.value, value)

    def get(self, signal: SignalName) -> int | None:
        return getattr(self, signal.value)

    def as_dict(self) -> dict[SignalName, int | None]:
        return {signal: getattr(self, signal.value) for signal in SignalName}

    def available(self) -> dict[SignalName, int]:
        """Only the sub-scores that were produced."""
        return {
            signal: value
            for signal, value in self.as_dict().items()
            if value is not None
        }

    def with_value(self, signal: SignalName, value: int) -> SubScores:
        return replace(self, **{signal.value: value})


@dataclass(frozen=True)
class ScoreOverride:
    """An audited reviewer override of one score field.

    Attributes:
        field_name: "credibility_score" or a SignalName value.
        original_value: Value before this override (may be None for a
            sub-score that was unavailable).
        new_value: Value the reviewer set.
        reviewer_id: Who overrode it.
        overridden_at: When (UTC).
        reason: Optional free-text justification.
    """

    field_name: str
    original_value: int | None
    new_value: int
    reviewer_id: str
    overridden_at: datetime
    reason: str | None = None

    def __post_init__(self) -> None:
        _check_score("new_value", self.new_value)
        if self.overridden_at.tzinfo is None:
            raise ValueError("overridden_at must be timezone-aware (UTC)")


OVERRIDABLE_FIELDS: frozenset[str] = frozenset(
    {CREDIBILITY_FIELD, *(signal.value for signal in SignalName)}
)


@dataclass(frozen=True, eq=True)
class TipVerification:
    """Scoring record for one tip.

    Attributes:
        verification_id: Identifier of this record.
        tip_id: The tip that was scored.
        case_id: The tip's case (denormalized for case-scoped queries).
        subscores: As-scored sub-scores (never rewritten).
        credibility_score: As-scored aggregate 0-100 (never rewritten).
        priority_bucket: Current classification label.
        hoax_indicators: Flags raised by extractors and hoax rules.
        spam_score: 0-100 spam likelihood from the hoax rules.
        is_duplicate: Near-duplicate of an earlier tip on the case.
        duplicate_of: Earliest matching tip, when a duplicate.
        similarity_scores: Text similarity against each compared tip.
        notes: Extractor explanations keyed by signal.
        suggestions: Follow-up hints generated while scoring.
        ai_summary: Opaque summary merged in by an external analyzer.
        ai_recommendations: Opaque recommendations merged in likewise.
        overrides: Append-only reviewer override trail.
        created_at: When scoring completed (UTC).
    """

    verification_id: UUID
    tip_id: UUID
    case_id: UUID
    subscores: SubScores
    credibility_score: int
    priority_bucket: PriorityBucket
    created_at: datetime
    hoax_indicators: frozenset[HoaxIndicator] = field(default_factory=frozenset)
    spam_score: int = field(default=0)
    is_duplicate: bool = field(default=False)
    duplicate_of: UUID | None = field(default=None)
    similarity_scores: tuple[tuple[UUID, float], ...] = field(default_factory=tuple)
    notes: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    suggestions: tuple[str, ...] = field(default_factory=tuple)
    ai_summary: str | None = field(default=None)
    ai_recommendations: tuple[str, ...] = field(default_factory=tuple)
    overrides: tuple[ScoreOverride, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate verification fields after initialization.

        Raises:
            ValueError: If any field validation fails.
        """
        _check_score("credibility_score", self.credibility_score)
        _check_score("spam_score", self.spam_score)
        if self.created_at.tzinfo is None:
            raise ValueError("created_at must be timezone-aware (UTC)")
        if self.is_duplicate and self.duplicate_of is None:
            raise ValueError("duplicate verification requires duplicate_of")
        if not self.is_duplicate and self.duplicate_of is not None:
            raise ValueError("duplicate_of requires is_duplicate")

    @property
    def has_hoax_indicators(self) -> bool:
        return len(self.hoax_indicators) > 0

    @property
    def effective_credibility_score(self) -> int:
        """Latest reviewer override of the aggregate, else the as-scored value."""
        latest = self._latest_override(CREDIBILITY_FIELD)
        return self.credibility_score if latest is None else latest.new_value

    @property
    def effective_subscores(self) -> SubScores:
        """Sub-scores with the latest override applied per signal."""
        effective = self.subscores
        for signal in SignalName:
            latest = self._latest_override(signal.value)
            if latest is not None:
                effective = effective.with_value(signal, latest.new_value)
        return effective

    @property
    def is_overridden(self) -> bool:
        return len(self.overrides) > 0

    def original_value(self, field_name: str) -> int | None:
        """Return the as-scored value of a score field, ignoring overrides.

        Args:
            field_name: "credibility_score" or a SignalName value.

        Raises:
            ValueError: If field_name is not an overridable score field.
        """
        if field_name not in OVERRIDABLE_FIELDS:
            raise ValueError(f"Unknown score field: {field_name}")
        if field_name == CREDIBILITY_FIELD:
            return self.credibility_score
        return self.subscores.get(SignalName(field_name))

    def with_override(
        self,
        field_name: str,
        new_value: int,
        reviewer_id: str,
        overridden_at: datetime,
        reason: str | None = None,
    ) -> TipVerification:
        """Return a copy with one more override appended to the trail.

        Raises:
            ValueError: If the field is unknown or the value out of range.
        """
        if field_name not in OVERRIDABLE_FIELDS:
            raise ValueError(f"Unknown score field: {field_name}")
        if field_name == CREDIBILITY_FIELD:
            previous: int | None = self.effective_credibility_score
        else:
            previous = self.effective_subscores.get(SignalName(field_name))
        override = ScoreOverride(
            field_name=field_name,
            original_value=previous,
            new_value=new_value,
            reviewer_id=reviewer_id,
            overridden_at=overridden_at,
            reason=reason,
        )
        return replace(self, overrides=self.overrides + (override,))

    def with_priority_bucket(self, bucket: PriorityBucket) -> TipVerification:
        return replace(self, priority_bucket=bucket)

    def with_ai_analysis(
        self,
        summary: str | None,
        recommendations: tuple[str, ...],
    ) -> TipVerification:
        """Merge externally produced AI analysis into the record."""
        return replace(
            self,
            ai_summary=summary if summary is not None else self.ai_summary,
            ai_recommendations=self.ai_recommendations + tuple(
                r for r in recommendations if r not in self.ai_recommendations
            ),
        )

    def _latest_override(self, field_name: str) -> ScoreOverride | None:
        for override in reversed(self.overrides):
            if override.field_name == field_name:
                return override
        return None
