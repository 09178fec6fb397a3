"""Adapters between domain objects and API models.

Responses: domain -> pydantic response model (to_response).
Requests: pydantic request model -> domain object (to_domain), with the
domain constructors' ValueError surfaced as ValidationError so routes
answer 400.
"""

from datetime import datetime

from tip_triage.api.models.queue import QueueItemResponse
from tip_triage.api.models.review import LeadRequestResponse, ReviewDecisionResponse
from tip_triage.api.models.stats import HoaxIndicatorCount, StatsResponse
from tip_triage.api.models.tip import (
    GeoPointModel,
    ScoreOverrideModel,
    SimilarityScoreModel,
    TipSubmissionRequest,
    VerificationResponse,
)
from tip_triage.api.models.tipster import TipsterProfileResponse
from tip_triage.application.services.review_queue_service import QueueEntry
from tip_triage.application.services.triage_stats_service import TriageStats
from tip_triage.domain.errors import ValidationError
from tip_triage.domain.models.review_decision import ReviewDecision
from tip_triage.domain.models.tip import (
    GeoPoint,
    IdentityKind,
    PhotoEvidence,
    Tip,
    TipLocation,
    TipsterIdentity,
    TipSource,
)
from tip_triage.domain.models.tip_verification import TipVerification
from tip_triage.domain.models.tipster_profile import TipsterProfile


class QueueEntryAdapter:
    """Adapts a QueueEntry to the queue item response."""

    @staticmethod
    def to_response(entry: QueueEntry) -> QueueItemResponse:
        item = entry.item
        return QueueItemResponse(
            queue_item_id=item.item_id,
            tip_id=item.tip_id,
            case_id=item.case_id,
            queue_type=item.queue_type.value,
            status=item.status.value,
            review_priority=item.review_priority,
            sla_deadline=item.sla_deadline,
            enqueued_at=item.enqueued_at,
            sla_breached=entry.sla_breached,
            time_remaining_seconds=int(entry.time_remaining.total_seconds()),
            claimed_by=item.claimed_by,
            claimed_at=item.claimed_at,
            resolved_at=item.resolved_at,
            breach_flagged_at=item.breach_flagged_at,
        )


class VerificationAdapter:
    """Adapts a TipVerification, exposing both as-scored and effective values."""

    @staticmethod
    def to_response(verification: TipVerification) -> VerificationResponse:
        return VerificationResponse(
            verification_id=verification.verification_id,
            tip_id=verification.tip_id,
            case_id=verification.case_id,
            credibility_score=verification.credibility_score,
            effective_credibility_score=verification.effective_credibility_score,
            priority_bucket=verification.priority_bucket.value,
            subscores={s.value: v for s, v in verification.subscores.as_dict().items()},
            effective_subscores={
                s.value: v for s, v in verification.effective_subscores.as_dict().items()
            },
            hoax_indicators=sorted(i.value for i in verification.hoax_indicators),
            spam_score=verification.spam_score,
            is_duplicate=verification.is_duplicate,
            duplicate_of=verification.duplicate_of,
            similarity_scores=[
                SimilarityScoreModel(tip_id=tip_id, score=score)
                for tip_id, score in verification.similarity_scores
            ],
            notes=dict(verification.notes),
            suggestions=list(verification.suggestions),
            ai_summary=verification.ai_summary,
            ai_recommendations=list(verification.ai_recommendations),
            overrides=[
                ScoreOverrideModel(
                    field_name=o.field_name,
                    original_value=o.original_value,
                    new_value=o.new_value,
                    reviewer_id=o.reviewer_id,
                    overridden_at=o.overridden_at,
                    reason=o.reason,
                )
                for o in verification.overrides
            ],
            created_at=verification.created_at,
        )


class TipsterProfileAdapter:
    @staticmethod
    def to_response(profile: TipsterProfile) -> TipsterProfileResponse:
        return TipsterProfileResponse(
            tipster_id=profile.tipster_id,
            identity_kind=profile.identity.kind.value,
            identity=profile.identity.value,
            reliability_score=profile.reliability_score,
            reliability_tier=profile.reliability_tier.value,
            total_tips=profile.total_tips,
            verified_tips=profile.verified_tips,
            partially_verified_tips=profile.partially_verified_tips,
            false_tips=profile.false_tips,
            spam_tips=profile.spam_tips,
            tips_leading_to_resolution=profile.tips_leading_to_resolution,
            provides_photos=profile.provides_photos,
            provides_detailed_info=profile.provides_detailed_info,
            reports_coordinates=profile.reports_coordinates,
            is_blocked=profile.is_blocked,
            blocked_reason=profile.blocked_reason,
            blocked_by=profile.blocked_by,
            blocked_at=profile.blocked_at,
            first_tip_at=profile.first_tip_at,
            last_tip_at=profile.last_tip_at,
            unresolved_hoax_flags=profile.unresolved_hoax_flags,
            created_at=profile.created_at,
        )


class ReviewDecisionAdapter:
    @staticmethod
    def to_response(decision: ReviewDecision) -> ReviewDecisionResponse:
        lead = decision.lead_request
        return ReviewDecisionResponse(
            decision_id=decision.decision_id,
            queue_item_id=decision.queue_item_id,
            tip_id=decision.tip_id,
            reviewer_id=decision.reviewer_id,
            outcome=decision.outcome.value,
            decided_at=decision.decided_at,
            notes=decision.notes,
            override_score=decision.override_score,
            partial=decision.partial,
            lead_request=(
                LeadRequestResponse(title=lead.title, description=lead.description)
                if lead is not None
                else None
            ),
            escalate_to=decision.escalate_to,
            follow_up_item_id=decision.follow_up_item_id,
        )


class StatsAdapter:
    @staticmethod
    def to_response(stats: TriageStats) -> StatsResponse:
        return StatsResponse(
            total_tips=stats.total_tips,
            total_pending=stats.total_pending,
            total_in_review=stats.total_in_review,
            pending_by_queue=stats.pending_by_queue,
            in_review_by_queue=stats.in_review_by_queue,
            breached=stats.breached,
            tier_counts=stats.tier_counts,
            blocked_tipsters=stats.blocked_tipsters,
            outcome_counts=stats.outcome_counts,
            top_hoax_indicators=[
                HoaxIndicatorCount(indicator=name, count=count)
                for name, count in stats.top_hoax_indicators
            ],
        )


def _point(model: GeoPointModel | None) -> GeoPoint | None:
    if model is None:
        return None
    return GeoPoint(model.latitude, model.longitude)


class TipSubmissionAdapter:
    """Builds the domain Tip from a submission request."""

    @staticmethod
    def to_domain(request: TipSubmissionRequest, now: datetime) -> Tip:
        """Convert a submission; submitted_at defaults to now.

        Raises:
            ValidationError: Unknown enum value or a domain constraint failed.
        """
        try:
            kind = IdentityKind(request.tipster.kind)
        except ValueError:
            raise ValidationError(
                f"must be one of {', '.join(k.value for k in IdentityKind)}",
                "tipster.kind",
            ) from None
        try:
            source = TipSource(request.source)
        except ValueError:
            raise ValidationError(
                f"must be one of {', '.join(s.value for s in TipSource)}", "source"
            ) from None

        try:
            location = None
            if request.location is not None:
                location = TipLocation(
                    point=_point(request.location.point),
                    description=request.location.description,
                )
            return Tip(
                tip_id=request.tip_id,
                case_id=request.case_id,
                content=request.content,
                tipster=TipsterIdentity(kind, request.tipster.value),
                submitted_at=request.submitted_at or now,
                location=location,
                sighted_at=request.sighted_at,
                photos=tuple(
                    PhotoEvidence(
                        reference=p.reference,
                        has_exif=p.has_exif,
                        gps=_point(p.gps),
                        taken_at=p.taken_at,
                        device=p.device,
                        is_stock_photo=p.is_stock_photo,
                        is_ai_generated=p.is_ai_generated,
                        is_manipulated=p.is_manipulated,
                        manipulation_confidence=p.manipulation_confidence,
                        matches_missing_person=p.matches_missing_person,
                    )
                    for p in request.photos
                ),
                is_anonymous=request.is_anonymous,
                source=source,
            )
        except ValueError as e:
            raise ValidationError(str(e)) from e
