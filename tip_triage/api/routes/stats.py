"""Dashboard statistics route."""

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from tip_triage.api.adapters.triage import StatsAdapter
from tip_triage.api.dependencies.triage import get_triage_stats_service
from tip_triage.api.models.common import PROBLEM_RESPONSES
from tip_triage.api.models.stats import StatsResponse
from tip_triage.api.problem_details import problem_response
from tip_triage.application.services.triage_stats_service import TriageStatsService
from tip_triage.domain.exceptions import TipTriageError

router = APIRouter(tags=["stats"])


def _as_utc(value: datetime | None) -> datetime | None:
    # Naive timestamps are taken to be UTC
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


@router.get("/stats", response_model=StatsResponse, responses=PROBLEM_RESPONSES)
async def get_stats(
    request: Request,
    case_id: UUID | None = Query(None, alias="caseId"),
    date_from: datetime | None = Query(None, alias="dateFrom"),
    date_to: datetime | None = Query(None, alias="dateTo"),
    stats: TriageStatsService = Depends(get_triage_stats_service),
) -> StatsResponse | JSONResponse:
    """Queue, tipster and decision counts for the dashboard.

    caseId, dateFrom and dateTo scope the tip-derived figures only.
    """
    try:
        snapshot = await stats.get_stats(
            case_id=case_id, date_from=_as_utc(date_from), date_to=_as_utc(date_to)
        )
    except TipTriageError as e:
        return problem_response(e, request)
    return StatsAdapter.to_response(snapshot)
