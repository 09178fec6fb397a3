"""Review decision API route.

POST /review records a claimant's decision. Replaying the same request
for an already-resolved item returns the stored decision.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from tip_triage.api.adapters.triage import ReviewDecisionAdapter
from tip_triage.api.dependencies.triage import get_review_outcome_service
from tip_triage.api.models.common import PROBLEM_RESPONSES
from tip_triage.api.models.review import ReviewDecisionResponse, ReviewRequest
from tip_triage.api.problem_details import problem_response
from tip_triage.application.services.review_outcome_service import (
    ReviewOutcomeService,
    ReviewSubmission,
)
from tip_triage.domain.errors import ValidationError
from tip_triage.domain.exceptions import TipTriageError
from tip_triage.domain.models.review_decision import ReviewOutcome

router = APIRouter(tags=["review"])


def _submission(body: ReviewRequest) -> ReviewSubmission:
    try:
        outcome = ReviewOutcome(body.outcome)
    except ValueError:
        raise ValidationError(
            f"must be one of {', '.join(o.value for o in ReviewOutcome)}", "outcome"
        ) from None
    return ReviewSubmission(
        outcome=outcome,
        notes=body.notes,
        override_score=body.override_score,
        create_lead=body.create_lead,
        lead_title=body.lead_title,
        lead_description=body.lead_description,
        partial=body.partial,
        escalate_to=body.escalate_to,
    )


@router.post(
    "/review",
    response_model=ReviewDecisionResponse,
    responses=PROBLEM_RESPONSES,
)
async def submit_review(
    body: ReviewRequest,
    request: Request,
    outcomes: ReviewOutcomeService = Depends(get_review_outcome_service),
) -> ReviewDecisionResponse | JSONResponse:
    """Record a review decision on a claimed item.

    Raises:
        400: Malformed decision (nothing is changed)
        404: Unknown queue item
        409: Caller does not hold the claim
    """
    try:
        decision = await outcomes.process(
            body.queue_item_id, body.reviewer_id, _submission(body)
        )
    except TipTriageError as e:
        return problem_response(e, request)
    return ReviewDecisionAdapter.to_response(decision)
