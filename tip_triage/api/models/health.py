"""Health check response model."""

from tip_triage.api.models.common import CamelModel


class HealthResponse(CamelModel):
    """Health check response."""

    status: str
    lead_dispatches_in_flight: int = 0
