"""Tipster reputation API routes.

- GET /tipsters: ranked, filtered and paged profiles
- GET /tipsters/{tipster_id}: one profile
- POST /tipsters/{tipster_id}/action: block, unblock, upgrade_tier,
  downgrade_tier, set_tier
- POST /tipsters/{tipster_id}/resolution-credit: a tip led to the case
  being resolved
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from tip_triage.api.adapters.triage import TipsterProfileAdapter
from tip_triage.api.dependencies.triage import get_tipster_reputation_service
from tip_triage.api.models.common import PROBLEM_RESPONSES
from tip_triage.api.models.tipster import (
    TipsterActionRequest,
    TipsterListResponse,
    TipsterProfileResponse,
)
from tip_triage.api.problem_details import problem_response
from tip_triage.application.ports.tipster_repository import TipsterFilter
from tip_triage.application.services.tipster_reputation_service import (
    DEFAULT_LIST_LIMIT,
    MAX_LIST_LIMIT,
    TipsterReputationService,
)
from tip_triage.domain.errors import ValidationError
from tip_triage.domain.exceptions import TipTriageError
from tip_triage.domain.models.tipster_profile import ReliabilityTier, TipsterAction

router = APIRouter(prefix="/tipsters", tags=["tipsters"])


def _parse_tier(value: str | None, field: str = "tier") -> ReliabilityTier | None:
    if value is None:
        return None
    try:
        return ReliabilityTier(value)
    except ValueError:
        raise ValidationError(
            f"must be one of {', '.join(t.value for t in ReliabilityTier)}", field
        ) from None


def _parse_action(value: str) -> TipsterAction:
    try:
        return TipsterAction(value)
    except ValueError:
        raise ValidationError(
            f"must be one of {', '.join(a.value for a in TipsterAction)}", "action"
        ) from None


@router.get(
    "",
    response_model=TipsterListResponse,
    responses=PROBLEM_RESPONSES,
)
async def list_tipsters(
    request: Request,
    tier: str | None = Query(None, description="Restrict to one reliability tier"),
    sort_by: str = Query("reliability_score", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    limit: int = Query(DEFAULT_LIST_LIMIT, ge=1, le=MAX_LIST_LIMIT),
    offset: int = Query(0, ge=0),
    is_blocked: bool | None = Query(None, alias="isBlocked"),
    min_score: int | None = Query(None, alias="minScore", ge=0, le=100),
    max_score: int | None = Query(None, alias="maxScore", ge=0, le=100),
    search: str | None = Query(
        None, max_length=200, description="Substring of the email or phone"
    ),
    ledger: TipsterReputationService = Depends(get_tipster_reputation_service),
) -> TipsterListResponse | JSONResponse:
    """Ranked tipster profiles (ties broken by tipster id)."""
    try:
        profiles = await ledger.list_profiles(
            tier=_parse_tier(tier),
            sort_by=sort_by,
            descending=sort_order == "desc",
            limit=limit,
            offset=offset,
            profile_filter=TipsterFilter(
                is_blocked=is_blocked,
                min_score=min_score,
                max_score=max_score,
                search=search,
            ),
        )
    except TipTriageError as e:
        return problem_response(e, request)
    tipsters = [TipsterProfileAdapter.to_response(p) for p in profiles]
    return TipsterListResponse(tipsters=tipsters, count=len(tipsters), offset=offset)


@router.get(
    "/{tipster_id}",
    response_model=TipsterProfileResponse,
    responses=PROBLEM_RESPONSES,
)
async def get_tipster(
    tipster_id: UUID,
    request: Request,
    ledger: TipsterReputationService = Depends(get_tipster_reputation_service),
) -> TipsterProfileResponse | JSONResponse:
    try:
        return TipsterProfileAdapter.to_response(await ledger.get_profile(tipster_id))
    except TipTriageError as e:
        return problem_response(e, request)


@router.post(
    "/{tipster_id}/action",
    response_model=TipsterProfileResponse,
    responses=PROBLEM_RESPONSES,
)
async def perform_tipster_action(
    tipster_id: UUID,
    body: TipsterActionRequest,
    request: Request,
    ledger: TipsterReputationService = Depends(get_tipster_reputation_service),
) -> TipsterProfileResponse | JSONResponse:
    """Apply a moderation action.

    Block takes an optional reason and is sticky: only unblock lifts it.
    """
    try:
        profile = await ledger.perform_action(
            tipster_id,
            _parse_action(body.action),
            reason=body.reason,
            performed_by=body.performed_by,
            new_tier=_parse_tier(body.new_tier, "new_tier"),
        )
    except TipTriageError as e:
        return problem_response(e, request)
    return TipsterProfileAdapter.to_response(profile)


@router.post(
    "/{tipster_id}/resolution-credit",
    response_model=TipsterProfileResponse,
    responses=PROBLEM_RESPONSES,
)
async def credit_resolution(
    tipster_id: UUID,
    request: Request,
    ledger: TipsterReputationService = Depends(get_tipster_reputation_service),
) -> TipsterProfileResponse | JSONResponse:
    try:
        return TipsterProfileAdapter.to_response(
            await ledger.credit_resolution(tipster_id)
        )
    except TipTriageError as e:
        return problem_response(e, request)
