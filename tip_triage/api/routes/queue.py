"""Review queue API routes.

- POST /queue/claim: atomically assign a pending item to a reviewer
- POST /queue/assign: supervisor hands an unresolved item to a reviewer
- POST /queue/release: hand a claimed item back to pending
- GET /queue: ordered listing, breached items first; assignedTo (or
  myQueue with reviewerId) narrows it to one reviewer's claims
- GET /queue/{queue_item_id}: one item with its SLA state

A claim race loses with 409; the caller should re-fetch the queue and
pick another item.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from tip_triage.api.adapters.triage import QueueEntryAdapter
from tip_triage.api.dependencies.triage import get_review_queue_service
from tip_triage.api.models.common import PROBLEM_RESPONSES
from tip_triage.api.models.queue import (
    AssignRequest,
    ClaimRequest,
    QueueItemResponse,
    QueueListResponse,
    ReleaseRequest,
)
from tip_triage.api.problem_details import problem_response
from tip_triage.application.services.review_queue_service import (
    DEFAULT_LIST_LIMIT,
    MAX_LIST_LIMIT,
    ReviewQueueService,
)
from tip_triage.domain.errors import ValidationError
from tip_triage.domain.exceptions import TipTriageError
from tip_triage.domain.models.queue_item import QueueStatus, QueueType

router = APIRouter(prefix="/queue", tags=["queue"])


def _parse_queue_type(value: str | None) -> QueueType | None:
    if value is None:
        return None
    try:
        return QueueType(value)
    except ValueError:
        raise ValidationError(
            f"must be one of {', '.join(q.value for q in QueueType)}", "type"
        ) from None


def _parse_status(value: str) -> QueueStatus:
    try:
        return QueueStatus(value)
    except ValueError:
        raise ValidationError(
            f"must be one of {', '.join(s.value for s in QueueStatus)}", "status"
        ) from None


def _claimant_filter(
    assigned_to: str | None, my_queue: bool, reviewer_id: str | None
) -> str | None:
    if not my_queue:
        return assigned_to
    if not reviewer_id:
        raise ValidationError("required when myQueue is set", "reviewer_id")
    return reviewer_id


@router.post(
    "/claim",
    response_model=QueueItemResponse,
    responses=PROBLEM_RESPONSES,
)
async def claim_queue_item(
    body: ClaimRequest,
    request: Request,
    queue: ReviewQueueService = Depends(get_review_queue_service),
) -> QueueItemResponse | JSONResponse:
    """Claim a pending item for review.

    Returns:
        The claimed item (also when the reviewer already held it).

    Raises:
        404: Unknown queue item
        409: Another reviewer holds the item, or it is resolved
    """
    try:
        item = await queue.claim(body.queue_item_id, body.reviewer_id)
        return QueueEntryAdapter.to_response(queue.entry(item))
    except TipTriageError as e:
        return problem_response(e, request)


@router.post(
    "/assign",
    response_model=QueueItemResponse,
    responses=PROBLEM_RESPONSES,
)
async def assign_queue_item(
    body: AssignRequest,
    request: Request,
    queue: ReviewQueueService = Depends(get_review_queue_service),
) -> QueueItemResponse | JSONResponse:
    """Assign an item to a reviewer, taking it from any current holder.

    Raises:
        404: Unknown queue item
        409: The item is resolved
    """
    try:
        item = await queue.assign(body.queue_item_id, body.assign_to, body.assigned_by)
        return QueueEntryAdapter.to_response(queue.entry(item))
    except TipTriageError as e:
        return problem_response(e, request)


@router.post(
    "/release",
    response_model=QueueItemResponse,
    responses=PROBLEM_RESPONSES,
)
async def release_queue_item(
    body: ReleaseRequest,
    request: Request,
    queue: ReviewQueueService = Depends(get_review_queue_service),
) -> QueueItemResponse | JSONResponse:
    """Release a claim without recording a decision."""
    try:
        item = await queue.release(body.queue_item_id, body.reviewer_id)
        return QueueEntryAdapter.to_response(queue.entry(item))
    except TipTriageError as e:
        return problem_response(e, request)


@router.get(
    "",
    response_model=QueueListResponse,
    responses=PROBLEM_RESPONSES,
)
async def list_queue(
    request: Request,
    queue_type: str | None = Query(
        None, alias="type", description="critical | high_priority | standard | low_priority"
    ),
    status: str | None = Query(
        None,
        description="Item status (default pending, or in_review for one reviewer)",
    ),
    breached: bool | None = Query(None, description="Only breached (true) or on-time (false)"),
    assigned_to: str | None = Query(
        None, alias="assignedTo", description="Only items held by this reviewer"
    ),
    my_queue: bool = Query(
        False, alias="myQueue", description="Only items held by reviewerId"
    ),
    reviewer_id: str | None = Query(None, alias="reviewerId"),
    limit: int = Query(
        DEFAULT_LIST_LIMIT,
        ge=1,
        le=MAX_LIST_LIMIT,
        description=f"Maximum items (default {DEFAULT_LIST_LIMIT}, max {MAX_LIST_LIMIT})",
    ),
    offset: int = Query(0, ge=0),
    queue: ReviewQueueService = Depends(get_review_queue_service),
) -> QueueListResponse | JSONResponse:
    """List queue items, most urgent first.

    Order: breached first, then queue urgency, review priority, SLA
    deadline and enqueue time.
    """
    try:
        claimed_by = _claimant_filter(assigned_to, my_queue, reviewer_id)
        if status is not None:
            item_status = _parse_status(status)
        elif claimed_by is not None:
            item_status = QueueStatus.IN_REVIEW
        else:
            item_status = QueueStatus.PENDING
        entries = await queue.list_queue(
            queue_type=_parse_queue_type(queue_type),
            status=item_status,
            breached=breached,
            limit=limit,
            offset=offset,
            claimed_by=claimed_by,
        )
    except TipTriageError as e:
        return problem_response(e, request)
    items = [QueueEntryAdapter.to_response(entry) for entry in entries]
    return QueueListResponse(items=items, count=len(items), offset=offset)


@router.get(
    "/{queue_item_id}",
    response_model=QueueItemResponse,
    responses=PROBLEM_RESPONSES,
)
async def get_queue_item(
    queue_item_id: UUID,
    request: Request,
    queue: ReviewQueueService = Depends(get_review_queue_service),
) -> QueueItemResponse | JSONResponse:
    try:
        return QueueEntryAdapter.to_response(await queue.get_entry(queue_item_id))
    except TipTriageError as e:
        return problem_response(e, request)
