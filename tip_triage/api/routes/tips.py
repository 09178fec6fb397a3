"""Tip intake and verification API routes.

- POST /tips: score, classify and enqueue a tip from the intake service
- GET /tips/{tip_id}/verification: the scoring record and audit trail
- POST /tips/{tip_id}/overrides: reviewer override of one score field
- POST /tips/{tip_id}/ai-analysis: merge externally produced analysis
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from tip_triage.api.adapters.triage import (
    QueueEntryAdapter,
    TipSubmissionAdapter,
    VerificationAdapter,
)
from tip_triage.api.dependencies.triage import (
    get_review_queue_service,
    get_time_authority,
    get_tip_intake_service,
)
from tip_triage.api.models.common import PROBLEM_RESPONSES
from tip_triage.api.models.tip import (
    AiAnalysisRequest,
    ScoreOverrideRequest,
    TipIntakeResponse,
    TipSubmissionRequest,
    VerificationResponse,
)
from tip_triage.api.problem_details import problem_response
from tip_triage.application.ports.time_authority import TimeAuthorityProtocol
from tip_triage.application.services.review_queue_service import ReviewQueueService
from tip_triage.application.services.tip_intake_service import TipIntakeService
from tip_triage.domain.exceptions import TipTriageError

router = APIRouter(prefix="/tips", tags=["tips"])


@router.post(
    "",
    response_model=TipIntakeResponse,
    status_code=201,
    responses=PROBLEM_RESPONSES,
)
async def submit_tip(
    body: TipSubmissionRequest,
    request: Request,
    intake: TipIntakeService = Depends(get_tip_intake_service),
    queue: ReviewQueueService = Depends(get_review_queue_service),
    time_authority: TimeAuthorityProtocol = Depends(get_time_authority),
) -> TipIntakeResponse | JSONResponse:
    """Score and enqueue a newly stored tip.

    Raises:
        400: Malformed tip, or the tip id was already submitted
        503: Case service unreachable (nothing was stored; safe to retry)
    """
    try:
        tip = TipSubmissionAdapter.to_domain(body, time_authority.utcnow())
        result = await intake.submit_tip(tip)
    except TipTriageError as e:
        return problem_response(e, request)
    return TipIntakeResponse(
        verification=VerificationAdapter.to_response(result.verification),
        queue_item=QueueEntryAdapter.to_response(queue.entry(result.queue_item)),
        tipster_id=result.tipster.tipster_id,
        rule=result.rule,
    )


@router.get(
    "/{tip_id}/verification",
    response_model=VerificationResponse,
    responses=PROBLEM_RESPONSES,
)
async def get_verification(
    tip_id: UUID,
    request: Request,
    intake: TipIntakeService = Depends(get_tip_intake_service),
) -> VerificationResponse | JSONResponse:
    try:
        return VerificationAdapter.to_response(await intake.get_verification(tip_id))
    except TipTriageError as e:
        return problem_response(e, request)


@router.post(
    "/{tip_id}/overrides",
    response_model=VerificationResponse,
    responses=PROBLEM_RESPONSES,
)
async def override_score(
    tip_id: UUID,
    body: ScoreOverrideRequest,
    request: Request,
    intake: TipIntakeService = Depends(get_tip_intake_service),
) -> VerificationResponse | JSONResponse:
    """Override one score field; the as-scored value stays on record."""
    try:
        verification = await intake.override_score(
            tip_id, body.field, body.value, body.reviewer_id, body.reason
        )
    except TipTriageError as e:
        return problem_response(e, request)
    return VerificationAdapter.to_response(verification)


@router.post(
    "/{tip_id}/ai-analysis",
    response_model=VerificationResponse,
    responses=PROBLEM_RESPONSES,
)
async def attach_ai_analysis(
    tip_id: UUID,
    body: AiAnalysisRequest,
    request: Request,
    intake: TipIntakeService = Depends(get_tip_intake_service),
) -> VerificationResponse | JSONResponse:
    try:
        verification = await intake.attach_ai_analysis(
            tip_id, body.summary, body.recommendations
        )
    except TipTriageError as e:
        return problem_response(e, request)
    return VerificationAdapter.to_response(verification)
