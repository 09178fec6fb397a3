"""Configuration module for the tip triage engine.

Available Configurations:
- TriageConfig: bundle of every engine setting
- ScoringWeights: aggregator weights
- ExtractionConfig / DuplicateConfig / HoaxConfig: scoring thresholds
- ClassifierConfig: queue thresholds, SLAs and urgency discounts
- ReputationConfig: ledger increments, tiers and hysteresis
- MonitorConfig: SLA monitor and claim expiry cadence
- LeadDispatchConfig: lead creation retry policy
- CaseServiceConfig: case-management collaborator endpoint
"""

from tip_triage.config.triage_config import (
    DEFAULT_TRIAGE_CONFIG,
    TEST_TRIAGE_CONFIG,
    CaseServiceConfig,
    ClassifierConfig,
    DuplicateConfig,
    ExtractionConfig,
    HoaxConfig,
    LeadDispatchConfig,
    MonitorConfig,
    ReputationConfig,
    ScoringWeights,
    TriageConfig,
)

__all__ = [
    "TriageConfig",
    "ScoringWeights",
    "ExtractionConfig",
    "DuplicateConfig",
    "HoaxConfig",
    "ClassifierConfig",
    "ReputationConfig",
    "MonitorConfig",
    "LeadDispatchConfig",
    "CaseServiceConfig",
    "DEFAULT_TRIAGE_CONFIG",
    "TEST_TRIAGE_CONFIG",
]
