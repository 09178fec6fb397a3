"""Health check endpoint for the Tip Triage API."""

from fastapi import APIRouter, Depends

from tip_triage.api.dependencies.triage import get_lead_dispatch_service
from tip_triage.api.models.health import HealthResponse
from tip_triage.application.services.lead_dispatch_service import LeadDispatchService

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    lead_dispatch: LeadDispatchService = Depends(get_lead_dispatch_service),
) -> HealthResponse:
    """Return health status.

    Returns:
        Health status with 200 OK.
    """
    return HealthResponse(
        status="healthy", lead_dispatches_in_flight=lead_dispatch.in_flight
    )
