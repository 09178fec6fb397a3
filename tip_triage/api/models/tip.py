"""Tip intake and verification API models.

The intake collaborator posts tips here once they are durably stored;
the verification endpoints expose what the engine learned about them.
"""

from uuid import UUID

from pydantic import Field, field_validator

from tip_triage.api.models.common import CamelModel, DateTimeWithZ
from tip_triage.api.models.queue import QueueItemResponse


class GeoPointModel(CamelModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class TipLocationModel(CamelModel):
    point: GeoPointModel | None = None
    description: str | None = Field(default=None, max_length=1000)


class PhotoEvidenceModel(CamelModel):
    """Photo reference plus upstream media analysis results."""

    reference: str = Field(..., min_length=1, max_length=2000)
    has_exif: bool = False
    gps: GeoPointModel | None = None
    taken_at: DateTimeWithZ | None = None
    device: str | None = None
    is_stock_photo: bool = False
    is_ai_generated: bool = False
    is_manipulated: bool = False
    manipulation_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    matches_missing_person: bool = False


class TipsterIdentityModel(CamelModel):
    kind: str = Field(..., description="email | phone | anonymous")
    value: str = Field(..., min_length=1, max_length=320)


class TipSubmissionRequest(CamelModel):
    """A tip handed over by the intake collaborator.

    Attributes:
        tip_id: Identifier assigned at intake.
        case_id: Case the tip refers to.
        content: Free-text description of the sighting.
        tipster: Identity the tip was submitted under.
        submitted_at: When intake stored the tip; defaults to now.
        location: Claimed sighting location.
        sighted_at: Claimed sighting time.
        photos: Photo references with media analysis.
        is_anonymous: Tipster asked to stay anonymous.
        source: Intake channel.
    """

    tip_id: UUID
    case_id: UUID
    content: str = Field(..., min_length=1)
    tipster: TipsterIdentityModel
    submitted_at: DateTimeWithZ | None = None
    location: TipLocationModel | None = None
    sighted_at: DateTimeWithZ | None = None
    photos: list[PhotoEvidenceModel] = Field(default_factory=list, max_length=20)
    is_anonymous: bool = False
    source: str = "web"

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        """Reject whitespace-only content."""
        if not v.strip():
            raise ValueError("content is required and cannot be empty")
        return v


class SimilarityScoreModel(CamelModel):
    tip_id: UUID
    score: float


class ScoreOverrideModel(CamelModel):
    field_name: str
    original_value: int | None
    new_value: int
    reviewer_id: str
    overridden_at: DateTimeWithZ
    reason: str | None = None


class VerificationResponse(CamelModel):
    """Scoring record for a tip, with the reviewer audit trail."""

    verification_id: UUID
    tip_id: UUID
    case_id: UUID
    credibility_score: int = Field(..., description="As-scored aggregate")
    effective_credibility_score: int = Field(
        ..., description="Latest reviewer override, else the as-scored aggregate"
    )
    priority_bucket: str
    subscores: dict[str, int | None]
    effective_subscores: dict[str, int | None]
    hoax_indicators: list[str]
    spam_score: int
    is_duplicate: bool
    duplicate_of: UUID | None = None
    similarity_scores: list[SimilarityScoreModel] = Field(default_factory=list)
    notes: dict[str, str] = Field(default_factory=dict)
    suggestions: list[str] = Field(default_factory=list)
    ai_summary: str | None = None
    ai_recommendations: list[str] = Field(default_factory=list)
    overrides: list[ScoreOverrideModel] = Field(default_factory=list)
    created_at: DateTimeWithZ


class TipIntakeResponse(CamelModel):
    """Result of scoring and enqueueing a tip."""

    verification: VerificationResponse
    queue_item: QueueItemResponse
    tipster_id: UUID
    rule: str = Field(..., description="Classifier rule that placed the item")


class AiAnalysisRequest(CamelModel):
    """Externally produced AI analysis to merge into a verification."""

    summary: str | None = Field(default=None, max_length=20_000)
    recommendations: list[str] = Field(default_factory=list)


class ScoreOverrideRequest(CamelModel):
    """Reviewer override of one score field.

    Attributes:
        field: credibility_score or one of the six signal names.
        value: New value (0-100).
        reviewer_id: Reviewer making the override.
        reason: Why the value was changed.
    """

    field: str
    value: int = Field(..., ge=0, le=100)
    reviewer_id: str = Field(..., min_length=1, max_length=200)
    reason: str | None = Field(default=None, max_length=2000)
