"""Unit tests for the API adapters."""

from datetime import timedelta
from uuid import uuid4

import pytest

from tests.helpers import CASE_ID, T0, make_profile, make_queue_item, make_verification
from tip_triage.api.adapters.triage import (
    QueueEntryAdapter,
    StatsAdapter,
    TipsterProfileAdapter,
    TipSubmissionAdapter,
    VerificationAdapter,
)
from tip_triage.api.models.tip import TipSubmissionRequest
from tip_triage.application.services.review_queue_service import QueueEntry
from tip_triage.application.services.triage_stats_service import TriageStats
from tip_triage.domain.errors import ValidationError
from tip_triage.domain.models.tip import IdentityKind, TipSource
from tip_triage.domain.models.tip_verification import HoaxIndicator, ScoreOverride


def _submission(**overrides) -> TipSubmissionRequest:
    payload = {
        "tipId": str(uuid4()),
        "caseId": str(CASE_ID),
        "content": "Saw her near the bus stop",
        "tipster": {"kind": "phone", "value": "+15551234567"},
    }
    payload.update(overrides)
    return TipSubmissionRequest.model_validate(payload)


class TestTipSubmissionAdapter:
    def test_defaults_submitted_at_to_now(self) -> None:
        tip = TipSubmissionAdapter.to_domain(_submission(), T0)

        assert tip.submitted_at == T0
        assert tip.tipster.kind == IdentityKind.PHONE
        assert tip.source == TipSource.WEB
        assert tip.location is None

    def test_maps_location_and_photos(self) -> None:
        request = _submission(
            location={"point": {"latitude": 40.7, "longitude": -74.0}},
            photos=[
                {
                    "reference": "s3://tips/p1.jpg",
                    "hasExif": True,
                    "gps": {"latitude": 40.71, "longitude": -74.01},
                }
            ],
            source="partner_api",
        )

        tip = TipSubmissionAdapter.to_domain(request, T0)

        assert tip.location is not None
        assert tip.location.point.latitude == 40.7
        assert tip.photos[0].has_exif
        assert tip.photos[0].gps.longitude == -74.01
        assert tip.source == TipSource.PARTNER_API

    def test_unknown_identity_kind(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            TipSubmissionAdapter.to_domain(
                _submission(tipster={"kind": "pigeon", "value": "x"}), T0
            )

        assert exc_info.value.field == "tipster.kind"

    def test_unknown_source(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            TipSubmissionAdapter.to_domain(_submission(source="fax"), T0)

        assert exc_info.value.field == "source"


class TestResponseAdapters:
    def test_queue_entry(self) -> None:
        item = make_queue_item()
        entry = QueueEntry(item, sla_breached=True, time_remaining=timedelta(minutes=-90))

        response = QueueEntryAdapter.to_response(entry)

        assert response.queue_item_id == item.item_id
        assert response.queue_type == "standard"
        assert response.sla_breached
        assert response.time_remaining_seconds == -5400

    def test_verification_exposes_as_scored_and_effective(self) -> None:
        verification = make_verification(
            credibility_score=48,
            hoax_indicators=frozenset(
                {HoaxIndicator.STOCK_PHOTO_DETECTED, HoaxIndicator.AI_GENERATED_CONTENT}
            ),
            overrides=(
                ScoreOverride(
                    field_name="credibility_score",
                    original_value=48,
                    new_value=75,
                    reviewer_id="reviewer-1",
                    overridden_at=T0,
                ),
            ),
        )

        response = VerificationAdapter.to_response(verification)

        assert response.credibility_score == 48
        assert response.effective_credibility_score == 75
        assert response.hoax_indicators == [
            "ai_generated_content",
            "stock_photo_detected",
        ]
        assert response.overrides[0].new_value == 75

    def test_tipster_profile_serializes_camel_case(self) -> None:
        profile = make_profile(total_tips=3)

        payload = TipsterProfileAdapter.to_response(profile).model_dump(
            mode="json", by_alias=True
        )

        assert payload["totalTips"] == 3
        assert payload["identityKind"] == "email"
        assert payload["createdAt"] == "2026-01-01T00:00:00Z"

    def test_stats(self) -> None:
        stats = TriageStats(
            total_tips=4,
            pending_by_queue={"critical": 1, "standard": 2},
            in_review_by_queue={"critical": 1},
            breached=0,
            tier_counts={"new": 2},
            blocked_tipsters=0,
            outcome_counts={"verified": 1},
            top_hoax_indicators=[("spam_signature", 2)],
        )

        response = StatsAdapter.to_response(stats)

        assert response.total_pending == 3
        assert response.total_in_review == 1
        assert response.top_hoax_indicators[0].indicator == "spam_signature"
