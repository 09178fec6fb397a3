"""Application services - Use case orchestration.

This module contains application services that orchestrate domain
operations and coordinate with infrastructure adapters.

Available services:
- TimeAuthorityService: UTC clock
- TipIntakeService: scoring, duplicate/hoax detection and classification
- ReviewQueueService: claim, release, listing and claim expiry
- ReviewOutcomeService: review decisions with compensation
- TipsterReputationService: reputation ledger and moderation
- LeadDispatchService: background lead creation with retry
- SlaMonitorService / ClaimExpiryService: background monitors
- TriageStatsService: dashboard statistics
"""

from tip_triage.application.services.base import LoggingMixin
from tip_triage.application.services.claim_expiry_service import ClaimExpiryService
from tip_triage.application.services.keyed_lock import KeyedLock
from tip_triage.application.services.lead_dispatch_service import (
    DispatchStatus,
    LeadDispatch,
    LeadDispatchService,
)
from tip_triage.application.services.periodic_monitor import PeriodicMonitor
from tip_triage.application.services.review_outcome_service import (
    ReviewOutcomeService,
    ReviewSubmission,
)
from tip_triage.application.services.review_queue_service import (
    QueueEntry,
    ReviewQueueService,
)
from tip_triage.application.services.sla_monitor_service import SlaMonitorService
from tip_triage.application.services.time_authority_service import (
    TimeAuthorityService,
)
from tip_triage.application.services.tip_intake_service import (
    IntakeResult,
    TipIntakeService,
)
from tip_triage.application.services.tipster_reputation_service import (
    TipsterReputationService,
)
from tip_triage.application.services.triage_stats_service import (
    TriageStats,
    TriageStatsService,
)

__all__ = [
    "ClaimExpiryService",
    "DispatchStatus",
    "IntakeResult",
    "KeyedLock",
    "LeadDispatch",
    "LeadDispatchService",
    "LoggingMixin",
    "PeriodicMonitor",
    "QueueEntry",
    "ReviewOutcomeService",
    "ReviewQueueService",
    "ReviewSubmission",
    "SlaMonitorService",
    "TimeAuthorityService",
    "TipIntakeService",
    "TipsterReputationService",
    "TriageStats",
    "TriageStatsService",
]
