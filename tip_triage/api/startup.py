"""Startup configuration for the Tip Triage API.

This module provides startup hooks that:
1. Load .env files and configure structured logging
2. Wire the triage services over the configured collaborators
3. Start and stop the background monitors (SLA breach flags, claim expiry)
   and drain in-flight lead dispatches on shutdown

Collaborators: when TRIAGE_CASE_SERVICE_URL is set the case risk lookup,
evidence lookup and lead sink talk to the case service over HTTP;
otherwise in-memory stubs are used (development mode). Repositories are
in-memory.

Usage in FastAPI:
    @asynccontextmanager
    async def lifespan(app):
        configure_logging()
        services = build_triage_services()
        set_triage_services(services)
        await start_background_tasks(services)
        yield
        await stop_background_tasks(services)
"""

import os

from dotenv import load_dotenv
from structlog import get_logger

from tip_triage.api.dependencies.triage import TriageServices
from tip_triage.application.ports.case_collaborators import (
    CaseEvidenceLookupProtocol,
    CaseRiskLookupProtocol,
    LeadSinkProtocol,
    ScamPatternSourceProtocol,
)
from tip_triage.application.ports.time_authority import TimeAuthorityProtocol
from tip_triage.application.services.claim_expiry_service import ClaimExpiryService
from tip_triage.application.services.keyed_lock import KeyedLock
from tip_triage.application.services.lead_dispatch_service import LeadDispatchService
from tip_triage.application.services.review_outcome_service import ReviewOutcomeService
from tip_triage.application.services.review_queue_service import ReviewQueueService
from tip_triage.application.services.sla_monitor_service import SlaMonitorService
from tip_triage.application.services.time_authority_service import (
    TimeAuthorityService,
)
from tip_triage.application.services.tip_intake_service import TipIntakeService
from tip_triage.application.services.tipster_reputation_service import (
    TipsterReputationService,
)
from tip_triage.application.services.triage_stats_service import TriageStatsService
from tip_triage.config.triage_config import TriageConfig
from tip_triage.infrastructure.adapters.case_service_client import (
    CaseServiceClient,
    HttpCaseEvidenceLookup,
    HttpCaseRiskLookup,
    HttpLeadSink,
)
from tip_triage.infrastructure.observability import configure_structlog
from tip_triage.infrastructure.stubs import (
    CaseEvidenceLookupStub,
    CaseRiskLookupStub,
    LeadSinkStub,
    QueueRepositoryStub,
    ReviewDecisionRepositoryStub,
    ScamPatternSourceStub,
    TipRepositoryStub,
    TipsterRepositoryStub,
    VerificationRepositoryStub,
)

# Environment variable for environment detection
ENVIRONMENT_VAR = "ENVIRONMENT"
DEFAULT_ENVIRONMENT = "development"

logger = get_logger()


def configure_logging() -> None:
    """Load .env and configure structured logging.

    - production: JSON output for log aggregation
    - development (default): colored console output

    Should be called first in the startup sequence, before any logging occurs.
    """
    load_dotenv()
    environment = os.getenv(ENVIRONMENT_VAR, DEFAULT_ENVIRONMENT)
    configure_structlog(environment=environment)

    log = get_logger().bind(component="startup_logging")
    log.info("structured_logging_configured", environment=environment)


def build_triage_services(
    config: TriageConfig | None = None,
    time_authority: TimeAuthorityProtocol | None = None,
    *,
    case_risk_lookup: CaseRiskLookupProtocol | None = None,
    case_evidence_lookup: CaseEvidenceLookupProtocol | None = None,
    lead_sink: LeadSinkProtocol | None = None,
    scam_patterns: ScamPatternSourceProtocol | None = None,
) -> TriageServices:
    """Wire every triage service.

    Collaborators not passed explicitly come from the case service when
    one is configured, else from in-memory stubs.

    Args:
        config: Engine configuration (default: read from the environment).
        time_authority: Clock (default: TimeAuthorityService).
        case_risk_lookup: Case risk collaborator override.
        case_evidence_lookup: Case evidence collaborator override.
        lead_sink: Lead creation collaborator override.
        scam_patterns: Scam pattern source override.

    Returns:
        The wired services.
    """
    config = config or TriageConfig.from_environment()
    time_authority = time_authority or TimeAuthorityService()
    log = logger.bind(component="startup_wiring")

    base_url = config.case_service.base_url
    if base_url:
        client = CaseServiceClient(base_url, config.case_service.timeout_seconds)
        case_risk_lookup = case_risk_lookup or HttpCaseRiskLookup(client)
        case_evidence_lookup = case_evidence_lookup or HttpCaseEvidenceLookup(client)
        lead_sink = lead_sink or HttpLeadSink(client)
    else:
        case_risk_lookup = case_risk_lookup or CaseRiskLookupStub()
        case_evidence_lookup = case_evidence_lookup or CaseEvidenceLookupStub()
        lead_sink = lead_sink or LeadSinkStub()
    scam_patterns = scam_patterns or ScamPatternSourceStub()

    tips = TipRepositoryStub()
    verifications = VerificationRepositoryStub()
    queue_items = QueueRepositoryStub()
    tipsters = TipsterRepositoryStub()
    decisions = ReviewDecisionRepositoryStub()

    queue = ReviewQueueService(
        queue_items, time_authority, claim_timeout=config.monitor.claim_timeout
    )
    reputation = TipsterReputationService(tipsters, time_authority, config.reputation)
    lead_dispatch = LeadDispatchService(lead_sink, config.lead_dispatch)
    verification_locks = KeyedLock()

    services = TriageServices(
        time_authority=time_authority,
        intake=TipIntakeService(
            tip_repository=tips,
            verification_repository=verifications,
            queue_service=queue,
            reputation_service=reputation,
            case_risk_lookup=case_risk_lookup,
            case_evidence_lookup=case_evidence_lookup,
            scam_patterns=scam_patterns,
            time_authority=time_authority,
            config=config,
            verification_locks=verification_locks,
        ),
        queue=queue,
        outcomes=ReviewOutcomeService(
            queue_service=queue,
            queue_repository=queue_items,
            decision_repository=decisions,
            tip_repository=tips,
            verification_repository=verifications,
            reputation_service=reputation,
            lead_dispatch=lead_dispatch,
            case_risk_lookup=case_risk_lookup,
            time_authority=time_authority,
            classifier_config=config.classifier,
            verification_locks=verification_locks,
        ),
        reputation=reputation,
        stats=TriageStatsService(
            queue_service=queue,
            verification_repository=verifications,
            tipster_repository=tipsters,
            decision_repository=decisions,
        ),
        lead_dispatch=lead_dispatch,
        sla_monitor=SlaMonitorService(
            queue, interval_seconds=config.monitor.sla_check_interval_seconds
        ),
        claim_expiry=ClaimExpiryService(
            queue, interval_seconds=config.monitor.claim_check_interval_seconds
        ),
    )
    log.info(
        "triage_services_wired",
        case_service=base_url or "stub",
        claim_timeout_minutes=config.monitor.claim_timeout_minutes,
    )
    return services


async def start_background_tasks(services: TriageServices) -> None:
    """Start the SLA monitor and the claim expiry reaper."""
    await services.sla_monitor.start_monitoring()
    await services.claim_expiry.start_monitoring()
    logger.bind(component="startup").info("background_tasks_started")


async def stop_background_tasks(services: TriageServices) -> None:
    """Stop the monitors and wait for in-flight lead dispatches."""
    await services.sla_monitor.stop_monitoring()
    await services.claim_expiry.stop_monitoring()
    await services.lead_dispatch.drain()
    logger.bind(component="shutdown").info("background_tasks_stopped")
