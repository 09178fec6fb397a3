"""Triage service dependencies.

The services are wired once at startup (see tip_triage.api.startup) and
held here as a singleton. Routes depend on the per-service getters; tests
override get_triage_services with a container built over stubs.
"""

from dataclasses import dataclass

from fastapi import Depends

from tip_triage.application.ports.time_authority import TimeAuthorityProtocol
from tip_triage.application.services.claim_expiry_service import ClaimExpiryService
from tip_triage.application.services.lead_dispatch_service import LeadDispatchService
from tip_triage.application.services.review_outcome_service import ReviewOutcomeService
from tip_triage.application.services.review_queue_service import ReviewQueueService
from tip_triage.application.services.sla_monitor_service import SlaMonitorService
from tip_triage.application.services.tip_intake_service import TipIntakeService
from tip_triage.application.services.tipster_reputation_service import (
    TipsterReputationService,
)
from tip_triage.application.services.triage_stats_service import TriageStatsService


@dataclass(frozen=True)
class TriageServices:
    """Every wired service the API and the background tasks use."""

    time_authority: TimeAuthorityProtocol
    intake: TipIntakeService
    queue: ReviewQueueService
    outcomes: ReviewOutcomeService
    reputation: TipsterReputationService
    stats: TriageStatsService
    lead_dispatch: LeadDispatchService
    sla_monitor: SlaMonitorService
    claim_expiry: ClaimExpiryService


# Singleton instance (initialized at startup)
_triage_services: TriageServices | None = None


def get_triage_services() -> TriageServices:
    """Get the wired services.

    Raises:
        RuntimeError: If services were not initialized (startup error).
    """
    if _triage_services is None:
        raise RuntimeError(
            "Triage services not initialized. "
            "Call set_triage_services() during startup."
        )
    return _triage_services


def set_triage_services(services: TriageServices | None) -> None:
    """Install (or clear, with None) the wired services."""
    global _triage_services
    _triage_services = services


def get_tip_intake_service(
    services: TriageServices = Depends(get_triage_services),
) -> TipIntakeService:
    return services.intake


def get_review_queue_service(
    services: TriageServices = Depends(get_triage_services),
) -> ReviewQueueService:
    return services.queue


def get_review_outcome_service(
    services: TriageServices = Depends(get_triage_services),
) -> ReviewOutcomeService:
    return services.outcomes


def get_tipster_reputation_service(
    services: TriageServices = Depends(get_triage_services),
) -> TipsterReputationService:
    return services.reputation


def get_triage_stats_service(
    services: TriageServices = Depends(get_triage_services),
) -> TriageStatsService:
    return services.stats


def get_time_authority(
    services: TriageServices = Depends(get_triage_services),
) -> TimeAuthorityProtocol:
    return services.time_authority


def get_lead_dispatch_service(
    services: TriageServices = Depends(get_triage_services),
) -> LeadDispatchService:
    return services.lead_dispatch


__all__ = [
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
