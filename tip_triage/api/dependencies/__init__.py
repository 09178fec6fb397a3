"""API dependencies for dependency injection."""

from tip_triage.api.dependencies.triage import (
    TriageServices,
    get_lead_dispatch_service,
    get_review_outcome_service,
    get_review_queue_service,
    get_time_authority,
    get_tip_intake_service,
    get_tipster_reputation_service,
    get_triage_services,
    get_triage_stats_service,
    set_triage_services,
)

__all__: list[str] = [
    "TriageServices",
    "get_lead_dispatch_service",
    "get_review_outcome_service",
    "get_review_queue_service",
    "get_time_authority",
    "get_tip_intake_service",
    "get_tipster_reputation_service",
    "get_triage_services",
    "get_triage_stats_service",
    "set_triage_services",
]
