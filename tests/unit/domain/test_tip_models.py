"""Unit tests for tip, case context and scam pattern models."""

from __future__ import annotations

from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from tests.helpers import CASE_ID, T0, make_tip
from tip_triage.domain.models.case_context import CaseEvidence, CaseRiskProfile
from tip_triage.domain.models.scam_pattern import ScamPattern
from tip_triage.domain.models.tip import (
    MAX_CONTENT_LENGTH,
    GeoPoint,
    IdentityKind,
    PhotoEvidence,
    TipLocation,
    TipsterIdentity,
)


class TestGeoPoint:
    def test_valid_point(self) -> None:
        point = GeoPoint(40.7128, -74.0060)
        assert point.latitude == 40.7128

    @pytest.mark.parametrize("lat,lon", [(91.0, 0.0), (-90.5, 0.0), (0.0, 180.5)])
    def test_out_of_range_rejected(self, lat: float, lon: float) -> None:
        with pytest.raises(ValueError):
            GeoPoint(lat, lon)


class TestTip:
    def test_empty_content_rejected(self) -> None:
        with pytest.raises(ValueError, match="content must not be empty"):
            make_tip("   ")

    def test_oversized_content_rejected(self) -> None:
        with pytest.raises(ValueError, match="exceeds"):
            make_tip("x" * (MAX_CONTENT_LENGTH + 1))

    def test_naive_timestamps_rejected(self) -> None:
        with pytest.raises(ValueError, match="submitted_at"):
            make_tip(submitted_at=datetime(2026, 1, 1))
        with pytest.raises(ValueError, match="sighted_at"):
            make_tip(sighted_at=datetime(2026, 1, 1))

    def test_location_accessors(self) -> None:
        point = GeoPoint(40.0, -74.0)
        tip = make_tip(point=point, description="corner of 5th and Main")

        assert tip.point == point
        assert tip.location_text == "corner of 5th and Main"
        assert not tip.has_photos

    def test_no_location(self) -> None:
        tip = make_tip()
        assert tip.point is None
        assert tip.location_text is None

    def test_empty_location(self) -> None:
        assert TipLocation().is_empty
        assert not TipLocation(description="park").is_empty
        assert TipLocation(point=GeoPoint(0, 0)).has_coordinates


class TestTipsterIdentity:
    def test_email_key_is_case_insensitive(self) -> None:
        a = TipsterIdentity(IdentityKind.EMAIL, "Jane@Example.com ")
        b = TipsterIdentity(IdentityKind.EMAIL, "jane@example.com")
        assert a.key == b.key == "email:jane@example.com"

    def test_phone_key_keeps_value(self) -> None:
        identity = TipsterIdentity(IdentityKind.PHONE, "+15550100")
        assert identity.key == "phone:+15550100"

    def test_blank_value_rejected(self) -> None:
        with pytest.raises(ValueError):
            TipsterIdentity(IdentityKind.ANONYMOUS, "  ")


class TestPhotoEvidence:
    def test_confidence_range(self) -> None:
        with pytest.raises(ValueError, match="manipulation_confidence"):
            PhotoEvidence("s3://photos/1.jpg", manipulation_confidence=1.5)

    def test_reference_required(self) -> None:
        with pytest.raises(ValueError):
            PhotoEvidence("")

    def test_taken_at_must_be_aware(self) -> None:
        with pytest.raises(ValueError, match="taken_at"):
            PhotoEvidence("s3://photos/1.jpg", taken_at=datetime(2026, 1, 1))


class TestCaseRiskProfile:
    def test_unknown_case_is_not_high_risk(self) -> None:
        risk = CaseRiskProfile.unknown(CASE_ID)
        assert not risk.is_high_risk
        assert not risk.has_short_response_window

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"is_minor": True},
            {"suspected_abduction": True},
            {"response_window": timedelta(hours=24)},
        ],
    )
    def test_high_risk_attributes(self, kwargs: dict) -> None:
        assert CaseRiskProfile(CASE_ID, **kwargs).is_high_risk

    def test_long_window_is_not_high_risk(self) -> None:
        risk = CaseRiskProfile(CASE_ID, response_window=timedelta(hours=72))
        assert not risk.is_high_risk
        assert not risk.has_short_response_window

    def test_short_window(self) -> None:
        risk = CaseRiskProfile(CASE_ID, response_window=timedelta(hours=6))
        assert risk.has_short_response_window

    def test_non_positive_window_rejected(self) -> None:
        with pytest.raises(ValueError):
            CaseRiskProfile(CASE_ID, response_window=timedelta(0))


class TestCaseEvidence:
    def test_empty(self) -> None:
        evidence = CaseEvidence.empty(CASE_ID)
        assert evidence.leads == ()
        assert evidence.last_seen_point is None

    def test_naive_last_seen_rejected(self) -> None:
        with pytest.raises(ValueError):
            CaseEvidence(uuid4(), last_seen_at=datetime(2026, 1, 1))

    def test_aware_last_seen_accepted(self) -> None:
        assert CaseEvidence(CASE_ID, last_seen_at=T0).last_seen_at == T0


class TestScamPattern:
    def test_requires_min_matches(self) -> None:
        pattern = ScamPattern("ransom", ("ransom", "unharmed", "no police"), min_matches=2)

        assert pattern.matches("Pay the RANSOM and she stays unharmed")
        assert not pattern.matches("Is there a ransom?")

    def test_inactive_never_matches(self) -> None:
        pattern = ScamPattern("psychic", ("vision",), is_active=False)
        assert not pattern.matches("I had a vision")

    def test_invalid_min_matches(self) -> None:
        with pytest.raises(ValueError, match="min_matches"):
            ScamPattern("x", ("a",), min_matches=2)

    def test_terms_required(self) -> None:
        with pytest.raises(ValueError):
            ScamPattern("x", ())
