"""API request/response models."""

from tip_triage.api.models.common import (
    PROBLEM_RESPONSES,
    CamelModel,
    DateTimeWithZ,
    ProblemDetailResponse,
)
from tip_triage.api.models.health import HealthResponse
from tip_triage.api.models.queue import (
    ClaimRequest,
    QueueItemResponse,
    QueueListResponse,
    ReleaseRequest,
)
from tip_triage.api.models.review import (
    LeadRequestResponse,
    ReviewDecisionResponse,
    ReviewRequest,
)
from tip_triage.api.models.stats import HoaxIndicatorCount, StatsResponse
from tip_triage.api.models.tip import (
    AiAnalysisRequest,
    GeoPointModel,
    PhotoEvidenceModel,
    ScoreOverrideModel,
    ScoreOverrideRequest,
    SimilarityScoreModel,
    TipIntakeResponse,
    TipLocationModel,
    TipsterIdentityModel,
    TipSubmissionRequest,
    VerificationResponse,
)
from tip_triage.api.models.tipster import (
    TipsterActionRequest,
    TipsterListResponse,
    TipsterProfileResponse,
)

__all__: list[str] = [
    "PROBLEM_RESPONSES",
    "AiAnalysisRequest",
    "CamelModel",
    "ClaimRequest",
    "DateTimeWithZ",
    "GeoPointModel",
    "HealthResponse",
    "HoaxIndicatorCount",
    "LeadRequestResponse",
    "PhotoEvidenceModel",
    "ProblemDetailResponse",
    "QueueItemResponse",
    "QueueListResponse",
    "ReleaseRequest",
    "ReviewDecisionResponse",
    "ReviewRequest",
    "ScoreOverrideModel",
    "ScoreOverrideRequest",
    "SimilarityScoreModel",
    "StatsResponse",
    "TipIntakeResponse",
    "TipLocationModel",
    "TipSubmissionRequest",
    "TipsterActionRequest",
    "TipsterIdentityModel",
    "TipsterListResponse",
    "TipsterProfileResponse",
    "VerificationResponse",
]
