"""Scoring, queueing and reputation configuration.

Every threshold the engine applies lives here rather than in logic, with
environment variable overrides for production tuning. Invalid or
unparseable environment values fall back to the defaults.

Environment Variables:
- TRIAGE_WEIGHT_PHOTO / _LOCATION / _TIME / _TEXT / _CROSS_REFERENCE /
  _TIPSTER: aggregator weights (each 0.0-1.0, must sum to 1.0)
- TRIAGE_MAX_PLAUSIBLE_DISTANCE_KM: location plausibility cap (default: 500)
- TRIAGE_MAX_TRAVEL_SPEED_KMH: travel feasibility speed (default: 200)
- TRIAGE_DUPLICATE_WINDOW_MINUTES: duplicate candidate window (default: 1440)
- TRIAGE_DUPLICATE_SIMILARITY: text similarity threshold (default: 0.8)
- TRIAGE_DUPLICATE_DISTANCE_M: duplicate geo threshold (default: 250)
- TRIAGE_CRITICAL_THRESHOLD / _HIGH_THRESHOLD / _STANDARD_THRESHOLD:
  classifier score floors (defaults: 80 / 60 / 30)
- TRIAGE_SPAM_THRESHOLD: spam score for the spam bucket (default: 70)
- TRIAGE_SLA_<QUEUE>_MINUTES: per-queue SLA
- TRIAGE_DISCOUNT_<QUEUE>_MINUTES: per-queue urgency discount
- TRIAGE_MIN_REVIEWS_FOR_RATING: reviews before a tier is assigned (default: 3)
- TRIAGE_VERIFIED_SOURCE_THRESHOLD: verified_source score floor (default: 90)
- TRIAGE_SLA_CHECK_INTERVAL_SECONDS: SLA monitor cadence (default: 60)
- TRIAGE_CLAIM_TIMEOUT_MINUTES: claim expiry (default: 30)
- TRIAGE_LEAD_MAX_RETRIES: lead creation retries (default: 3)
- TRIAGE_CASE_SERVICE_URL: base URL of case management (default: unset)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta

# =============================================================================
# Aggregator weights
# =============================================================================

DEFAULT_WEIGHT_PHOTO = 0.20
DEFAULT_WEIGHT_LOCATION = 0.20
DEFAULT_WEIGHT_TIME = 0.15
DEFAULT_WEIGHT_TEXT = 0.15
DEFAULT_WEIGHT_CROSS_REFERENCE = 0.15
DEFAULT_WEIGHT_TIPSTER = 0.15

WEIGHT_SUM_TOLERANCE = 1e-6

# =============================================================================
# Queue SLAs (minutes) and urgency discounts (minutes)
# =============================================================================

DEFAULT_SLA_MINUTES: dict[str, int] = {
    "critical": 60,
    "high_priority": 6 * 60,
    "standard": 24 * 60,
    "low_priority": 72 * 60,
}

DEFAULT_URGENCY_DISCOUNT_MINUTES: dict[str, int] = {
    "critical": 0,
    "high_priority": 60,
    "standard": 6 * 60,
    "low_priority": 24 * 60,
}

MIN_SLA_FLOOR_MINUTES = 15


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class ScoringWeights:
    """Per-signal aggregator weights.

    Attributes mirror the six sub-scores. Each weight is 0.0-1.0 and the
    six must sum to 1.0. Renormalization over available signals happens
    in the aggregator, not here.
    """

    photo: float = DEFAULT_WEIGHT_PHOTO
    location: float = DEFAULT_WEIGHT_LOCATION
    time_plausibility: float = DEFAULT_WEIGHT_TIME
    text_analysis: float = DEFAULT_WEIGHT_TEXT
    cross_reference: float = DEFAULT_WEIGHT_CROSS_REFERENCE
    tipster_reliability: float = DEFAULT_WEIGHT_TIPSTER

    def __post_init__(self) -> None:
        """Validate configuration values."""
        for name, value in self.as_dict().items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"weight {name} must be within [0, 1], got {value}")
        total = sum(self.as_dict().values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"weights must sum to 1.0, got {total:.6f}")

    def as_dict(self) -> dict[str, float]:
        """Weights keyed by sub-score name."""
        return {
            "photo": self.photo,
            "location": self.location,
            "time_plausibility": self.time_plausibility,
            "text_analysis": self.text_analysis,
            "cross_reference": self.cross_reference,
            "tipster_reliability": self.tipster_reliability,
        }

    @classmethod
    def equal(cls) -> ScoringWeights:
        """All six signals weighted 1/6."""
        sixth = 1.0 / 6.0
        return cls(sixth, sixth, sixth, sixth, sixth, 1.0 - 5 * sixth)

    @classmethod
    def from_environment(cls) -> ScoringWeights:
        """Create weights from environment variables.

        Falls back to the defaults as a whole if the configured weights do
        not validate (e.g. they no longer sum to 1.0).
        """
        try:
            return cls(
                photo=_get_float_env("TRIAGE_WEIGHT_PHOTO", DEFAULT_WEIGHT_PHOTO),
                location=_get_float_env(
                    "TRIAGE_WEIGHT_LOCATION", DEFAULT_WEIGHT_LOCATION
                ),
                time_plausibility=_get_float_env(
                    "TRIAGE_WEIGHT_TIME", DEFAULT_WEIGHT_TIME
                ),
                text_analysis=_get_float_env("TRIAGE_WEIGHT_TEXT", DEFAULT_WEIGHT_TEXT),
                cross_reference=_get_float_env(
                    "TRIAGE_WEIGHT_CROSS_REFERENCE", DEFAULT_WEIGHT_CROSS_REFERENCE
                ),
                tipster_reliability=_get_float_env(
                    "TRIAGE_WEIGHT_TIPSTER", DEFAULT_WEIGHT_TIPSTER
                ),
            )
        except ValueError:
            return cls()


@dataclass(frozen=True)
class ExtractionConfig:
    """Thresholds used by the signal extractors.

    Attributes:
        max_plausible_distance_km: Farthest plausible sighting from the
            last-seen point.
        max_travel_speed_kmh: Fastest plausible travel between last-seen and
            sighting.
        travel_check_window_hours: Travel feasibility in the location signal
            only applies within this many hours of the last sighting.
        lead_match_radius_km: Tips within this radius corroborate a lead.
        location_text_similarity: Word similarity at which free-text
            locations are considered the same place.
        detailed_content_length: Content at least this long counts as
            detailed when generating follow-up suggestions.
    """

    max_plausible_distance_km: float = 500.0
    max_travel_speed_kmh: float = 200.0
    travel_check_window_hours: float = 48.0
    lead_match_radius_km: float = 5.0
    location_text_similarity: float = 0.5
    detailed_content_length: int = 100

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_plausible_distance_km <= 0:
            raise ValueError("max_plausible_distance_km must be positive")
        if self.max_travel_speed_kmh <= 0:
            raise ValueError("max_travel_speed_kmh must be positive")
        if self.lead_match_radius_km <= 0:
            raise ValueError("lead_match_radius_km must be positive")
        if not 0.0 < self.location_text_similarity <= 1.0:
            raise ValueError("location_text_similarity must be within (0, 1]")

    @classmethod
    def from_environment(cls) -> ExtractionConfig:
        max_distance = _get_float_env("TRIAGE_MAX_PLAUSIBLE_DISTANCE_KM", 500.0)
        max_speed = _get_float_env("TRIAGE_MAX_TRAVEL_SPEED_KMH", 200.0)
        return cls(
            max_plausible_distance_km=max_distance if max_distance > 0 else 500.0,
            max_travel_speed_kmh=max_speed if max_speed > 0 else 200.0,
        )


@dataclass(frozen=True)
class DuplicateConfig:
    """Near-duplicate detection thresholds.

    Attributes:
        window_minutes: Only tips on the same case submitted within this
            window are candidates.
        text_similarity: Minimum word-set similarity for a match.
        max_distance_m: When both tips carry coordinates, they must be at
            most this far apart.
    """

    window_minutes: int = 24 * 60
    text_similarity: float = 0.8
    max_distance_m: float = 250.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.window_minutes <= 0:
            raise ValueError("window_minutes must be positive")
        if not 0.0 < self.text_similarity <= 1.0:
            raise ValueError("text_similarity must be within (0, 1]")
        if self.max_distance_m < 0:
            raise ValueError("max_distance_m must be non-negative")

    @property
    def window(self) -> timedelta:
        return timedelta(minutes=self.window_minutes)

    @classmethod
    def from_environment(cls) -> DuplicateConfig:
        window = _get_int_env("TRIAGE_DUPLICATE_WINDOW_MINUTES", 24 * 60)
        similarity = _get_float_env("TRIAGE_DUPLICATE_SIMILARITY", 0.8)
        distance = _get_float_env("TRIAGE_DUPLICATE_DISTANCE_M", 250.0)
        return cls(
            window_minutes=window if window > 0 else 24 * 60,
            text_similarity=similarity if 0.0 < similarity <= 1.0 else 0.8,
            max_distance_m=max(0.0, distance),
        )


@dataclass(frozen=True)
class HoaxConfig:
    """Rule thresholds for hoax/spam detection.

    Attributes:
        repeated_false_min_reviews: Reviewed tips needed before the
            repeated-false-reports rule can fire.
        repeated_false_rate: False-tip rate above which it fires.
        spam_phrase_points: Spam score per money-request phrase.
        scam_pattern_points: Spam score per matching scam pattern.
    """

    repeated_false_min_reviews: int = 3
    repeated_false_rate: float = 0.5
    spam_phrase_points: int = 30
    scam_pattern_points: int = 20

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.repeated_false_min_reviews < 1:
            raise ValueError("repeated_false_min_reviews must be at least 1")
        if not 0.0 <= self.repeated_false_rate <= 1.0:
            raise ValueError("repeated_false_rate must be within [0, 1]")


@dataclass(frozen=True)
class ClassifierConfig:
    """Priority classifier thresholds, SLAs and urgency discounts.

    Attributes:
        critical_threshold: Score floor for the critical queue.
        high_threshold: Score floor for the high-priority queue.
        standard_threshold: Score floor for the standard queue.
        spam_threshold: Spam score at which low-priority tips are labelled spam.
        sla_minutes: SLA per queue type value.
        urgency_discount_minutes: Subtracted from the SLA when the case has
            a short response window, per queue type value.
        min_sla_minutes: Floor for the discounted SLA.
        escalation_sla_minutes: SLA of a follow-up item opened by escalation.
    """

    critical_threshold: int = 80
    high_threshold: int = 60
    standard_threshold: int = 30
    spam_threshold: int = 70
    sla_minutes: dict[str, int] = field(
        default_factory=lambda: dict(DEFAULT_SLA_MINUTES)
    )
    urgency_discount_minutes: dict[str, int] = field(
        default_factory=lambda: dict(DEFAULT_URGENCY_DISCOUNT_MINUTES)
    )
    min_sla_minutes: int = MIN_SLA_FLOOR_MINUTES
    escalation_sla_minutes: int = 4 * 60

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not (
            0 <= self.standard_threshold
            <= self.high_threshold
            <= self.critical_threshold
            <= 100
        ):
            raise ValueError(
                "thresholds must satisfy 0 <= standard <= high <= critical <= 100"
            )
        if not 0 <= self.spam_threshold <= 100:
            raise ValueError("spam_threshold must be within [0, 100]")
        for queue, minutes in self.sla_minutes.items():
            if minutes <= 0:
                raise ValueError(f"SLA for {queue} must be positive")
        for queue in DEFAULT_SLA_MINUTES:
            if queue not in self.sla_minutes:
                raise ValueError(f"missing SLA for {queue}")
        for queue, minutes in self.urgency_discount_minutes.items():
            if minutes < 0:
                raise ValueError(f"urgency discount for {queue} must be non-negative")
        if self.min_sla_minutes <= 0:
            raise ValueError("min_sla_minutes must be positive")

    def sla_for(self, queue_type: str) -> timedelta:
        return timedelta(minutes=self.sla_minutes[queue_type])

    def discount_for(self, queue_type: str) -> timedelta:
        return timedelta(minutes=self.urgency_discount_minutes.get(queue_type, 0))

    @property
    def min_sla(self) -> timedelta:
        return timedelta(minutes=self.min_sla_minutes)

    @property
    def escalation_sla(self) -> timedelta:
        return timedelta(minutes=self.escalation_sla_minutes)

    @classmethod
    def from_environment(cls) -> ClassifierConfig:
        """Create config from environment variables with defaults.

        Thresholds that would break the critical >= high >= standard ordering
        fall back to the defaults together.
        """
        sla = {
            queue: _get_int_env(f"TRIAGE_SLA_{queue.upper()}_MINUTES", minutes)
            for queue, minutes in DEFAULT_SLA_MINUTES.items()
        }
        sla = {
            queue: minutes if minutes > 0 else DEFAULT_SLA_MINUTES[queue]
            for queue, minutes in sla.items()
        }
        discounts = {
            queue: max(0, _get_int_env(f"TRIAGE_DISCOUNT_{queue.upper()}_MINUTES", m))
            for queue, m in DEFAULT_URGENCY_DISCOUNT_MINUTES.items()
        }
        critical = _get_int_env("TRIAGE_CRITICAL_THRESHOLD", 80)
        high = _get_int_env("TRIAGE_HIGH_THRESHOLD", 60)
        standard = _get_int_env("TRIAGE_STANDARD_THRESHOLD", 30)
        if not 0 <= standard <= high <= critical <= 100:
            critical, high, standard = 80, 60, 30
        spam = _get_int_env("TRIAGE_SPAM_THRESHOLD", 70)
        return cls(
            critical_threshold=critical,
            high_threshold=high,
            standard_threshold=standard,
            spam_threshold=spam if 0 <= spam <= 100 else 70,
            sla_minutes=sla,
            urgency_discount_minutes=discounts,
        )


@dataclass(frozen=True)
class ReputationConfig:
    """Reputation ledger increments, tier thresholds and hysteresis.

    Attributes:
        verified_increment: Score gained for a verified tip.
        rejected_decrement: Score lost for a rejected tip.
        partial_factor: Fraction of the increment for a partial verification.
        high_risk_multiplier: Severity multiplier for high-risk cases.
        max_step: Upper bound on any single score change.
        resolution_bonus: Score gained when a tip leads to case resolution.
        min_reviews_for_rating: Reviewed tips before a tier is assigned.
        low_threshold / moderate_threshold / high_threshold /
        verified_source_threshold: Tier lower boundaries.
        hysteresis_buffer: A tier is only lost once the score falls this far
            below its lower boundary.
        recent_window: How many recent tips to keep for hoax-flag checks.
    """

    verified_increment: int = 5
    rejected_decrement: int = 8
    partial_factor: float = 0.5
    high_risk_multiplier: float = 1.5
    max_step: int = 10
    resolution_bonus: int = 5
    min_reviews_for_rating: int = 3
    low_threshold: int = 25
    moderate_threshold: int = 50
    high_threshold: int = 75
    verified_source_threshold: int = 90
    hysteresis_buffer: int = 5
    recent_window: int = 10

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not (
            0 <= self.low_threshold
            < self.moderate_threshold
            < self.high_threshold
            < self.verified_source_threshold
            <= 100
        ):
            raise ValueError("tier thresholds must be strictly increasing within [0, 100]")
        if self.max_step <= 0:
            raise ValueError("max_step must be positive")
        if self.verified_increment < 0 or self.rejected_decrement < 0:
            raise ValueError("increments must be non-negative")
        if not 0.0 <= self.partial_factor <= 1.0:
            raise ValueError("partial_factor must be within [0, 1]")
        if self.high_risk_multiplier < 1.0:
            raise ValueError("high_risk_multiplier must be at least 1.0")
        if self.min_reviews_for_rating < 1:
            raise ValueError("min_reviews_for_rating must be at least 1")
        if self.hysteresis_buffer < 0:
            raise ValueError("hysteresis_buffer must be non-negative")
        if self.recent_window < 1:
            raise ValueError("recent_window must be at least 1")

    @classmethod
    def from_environment(cls) -> ReputationConfig:
        min_reviews = _get_int_env("TRIAGE_MIN_REVIEWS_FOR_RATING", 3)
        verified_source = _get_int_env("TRIAGE_VERIFIED_SOURCE_THRESHOLD", 90)
        return cls(
            min_reviews_for_rating=max(1, min_reviews),
            verified_source_threshold=(
                verified_source if 75 < verified_source <= 100 else 90
            ),
        )


@dataclass(frozen=True)
class MonitorConfig:
    """Background loop cadence and claim expiry.

    Attributes:
        sla_check_interval_seconds: How often the SLA monitor runs.
        claim_timeout_minutes: Claims held longer than this revert to pending.
        claim_check_interval_seconds: How often the claim reaper runs.
    """

    sla_check_interval_seconds: int = 60
    claim_timeout_minutes: int = 30
    claim_check_interval_seconds: int = 60

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.sla_check_interval_seconds <= 0:
            raise ValueError("sla_check_interval_seconds must be positive")
        if self.claim_timeout_minutes <= 0:
            raise ValueError("claim_timeout_minutes must be positive")
        if self.claim_check_interval_seconds <= 0:
            raise ValueError("claim_check_interval_seconds must be positive")

    @property
    def claim_timeout(self) -> timedelta:
        return timedelta(minutes=self.claim_timeout_minutes)

    @classmethod
    def from_environment(cls) -> MonitorConfig:
        interval = _get_int_env("TRIAGE_SLA_CHECK_INTERVAL_SECONDS", 60)
        timeout = _get_int_env("TRIAGE_CLAIM_TIMEOUT_MINUTES", 30)
        reap = _get_int_env("TRIAGE_CLAIM_CHECK_INTERVAL_SECONDS", 60)
        return cls(
            sla_check_interval_seconds=interval if interval > 0 else 60,
            claim_timeout_minutes=timeout if timeout > 0 else 30,
            claim_check_interval_seconds=reap if reap > 0 else 60,
        )


@dataclass(frozen=True)
class LeadDispatchConfig:
    """Retry policy for fire-and-forget lead creation.

    Attributes:
        retry_delays_seconds: Backoff before each retry (exponential).
        max_retries: Retries after the first attempt.
        history_size: Finished dispatch records kept for lookup.
    """

    retry_delays_seconds: tuple[float, ...] = (1.0, 2.0, 4.0)
    max_retries: int = 3
    history_size: int = 1000

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if len(self.retry_delays_seconds) < self.max_retries:
            raise ValueError("retry_delays_seconds must cover every retry")
        if self.history_size < 1:
            raise ValueError("history_size must be at least 1")

    @classmethod
    def from_environment(cls) -> LeadDispatchConfig:
        retries = _get_int_env("TRIAGE_LEAD_MAX_RETRIES", 3)
        retries = max(0, min(retries, 8))
        return cls(
            retry_delays_seconds=tuple(float(2**i) for i in range(retries)),
            max_retries=retries,
            history_size=max(1, _get_int_env("TRIAGE_LEAD_HISTORY_SIZE", 1000)),
        )


@dataclass(frozen=True)
class CaseServiceConfig:
    """Where the case-management collaborator lives.

    Attributes:
        base_url: Base URL of case management; None wires in-memory stubs.
        timeout_seconds: Per-request timeout for HTTP adapters.
    """

    base_url: str | None = None
    timeout_seconds: float = 5.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

    @classmethod
    def from_environment(cls) -> CaseServiceConfig:
        timeout = _get_float_env("TRIAGE_CASE_SERVICE_TIMEOUT_SECONDS", 5.0)
        return cls(
            base_url=os.environ.get("TRIAGE_CASE_SERVICE_URL") or None,
            timeout_seconds=timeout if timeout > 0 else 5.0,
        )


@dataclass(frozen=True)
class TriageConfig:
    """All engine configuration in one place."""

    weights: ScoringWeights = field(default_factory=ScoringWeights)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    duplicates: DuplicateConfig = field(default_factory=DuplicateConfig)
    hoax: HoaxConfig = field(default_factory=HoaxConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    reputation: ReputationConfig = field(default_factory=ReputationConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    lead_dispatch: LeadDispatchConfig = field(default_factory=LeadDispatchConfig)
    case_service: CaseServiceConfig = field(default_factory=CaseServiceConfig)

    @classmethod
    def from_environment(cls) -> TriageConfig:
        """Create the full configuration from environment variables."""
        return cls(
            weights=ScoringWeights.from_environment(),
            extraction=ExtractionConfig.from_environment(),
            duplicates=DuplicateConfig.from_environment(),
            hoax=HoaxConfig(),
            classifier=ClassifierConfig.from_environment(),
            reputation=ReputationConfig.from_environment(),
            monitor=MonitorConfig.from_environment(),
            lead_dispatch=LeadDispatchConfig.from_environment(),
            case_service=CaseServiceConfig.from_environment(),
        )


# Default configuration instance
DEFAULT_TRIAGE_CONFIG = TriageConfig()

# Test configuration: zero lead retry delays and fast monitor cadence
TEST_TRIAGE_CONFIG = TriageConfig(
    monitor=MonitorConfig(
        sla_check_interval_seconds=1,
        claim_timeout_minutes=30,
        claim_check_interval_seconds=1,
    ),
    lead_dispatch=LeadDispatchConfig(
        retry_delays_seconds=(0.0, 0.0, 0.0),
        max_retries=3,
    ),
)
