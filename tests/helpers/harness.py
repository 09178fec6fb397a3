"""Triage services wired over in-memory stubs, with every stub exposed.

Service tests reach into the stubs to seed state (case risk, evidence,
profiles) and to assert on what was stored.
"""

from __future__ import annotations

from dataclasses import dataclass

from tests.helpers.fake_time_authority import FakeTimeAuthority
from tip_triage.api.dependencies.triage import TriageServices
from tip_triage.application.services.claim_expiry_service import ClaimExpiryService
from tip_triage.application.services.keyed_lock import KeyedLock
from tip_triage.application.services.lead_dispatch_service import LeadDispatchService
from tip_triage.application.services.review_outcome_service import ReviewOutcomeService
from tip_triage.application.services.review_queue_service import ReviewQueueService
from tip_triage.application.services.sla_monitor_service import SlaMonitorService
from tip_triage.application.services.tip_intake_service import TipIntakeService
from tip_triage.application.services.tipster_reputation_service import (
    TipsterReputationService,
)
from tip_triage.application.services.triage_stats_service import TriageStatsService
from tip_triage.config.triage_config import TEST_TRIAGE_CONFIG, TriageConfig
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


@dataclass
class TriageHarness:
    clock: FakeTimeAuthority
    case_risk: CaseRiskLookupStub
    case_evidence: CaseEvidenceLookupStub
    lead_sink: LeadSinkStub
    scam_patterns: ScamPatternSourceStub
    tips: TipRepositoryStub
    verifications: VerificationRepositoryStub
    queue_items: QueueRepositoryStub
    tipsters: TipsterRepositoryStub
    decisions: ReviewDecisionRepositoryStub
    services: TriageServices


def build_harness(
    clock: FakeTimeAuthority | None = None,
    config: TriageConfig = TEST_TRIAGE_CONFIG,
    lead_sink: LeadSinkStub | None = None,
) -> TriageHarness:
    clock = clock or FakeTimeAuthority()
    case_risk = CaseRiskLookupStub()
    case_evidence = CaseEvidenceLookupStub()
    lead_sink = lead_sink or LeadSinkStub()
    scam_patterns = ScamPatternSourceStub()
    tips = TipRepositoryStub()
    verifications = VerificationRepositoryStub()
    queue_items = QueueRepositoryStub()
    tipsters = TipsterRepositoryStub()
    decisions = ReviewDecisionRepositoryStub()

    queue = ReviewQueueService(
        queue_items, clock, claim_timeout=config.monitor.claim_timeout
    )
    reputation = TipsterReputationService(tipsters, clock, config.reputation)
    lead_dispatch = LeadDispatchService(lead_sink, config.lead_dispatch)
    verification_locks = KeyedLock()
    services = TriageServices(
        time_authority=clock,
        intake=TipIntakeService(
            tip_repository=tips,
            verification_repository=verifications,
            queue_service=queue,
            reputation_service=reputation,
            case_risk_lookup=case_risk,
            case_evidence_lookup=case_evidence,
            scam_patterns=scam_patterns,
            time_authority=clock,
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
            case_risk_lookup=case_risk,
            time_authority=clock,
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
    return TriageHarness(
        clock=clock,
        case_risk=case_risk,
        case_evidence=case_evidence,
        lead_sink=lead_sink,
        scam_patterns=scam_patterns,
        tips=tips,
        verifications=verifications,
        queue_items=queue_items,
        tipsters=tipsters,
        decisions=decisions,
        services=services,
    )
