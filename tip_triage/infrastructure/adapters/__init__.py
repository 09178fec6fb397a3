"""External adapters for the case-management collaborator (httpx)."""

from tip_triage.infrastructure.adapters.case_service_client import (
    CaseServiceClient,
    HttpCaseEvidenceLookup,
    HttpCaseRiskLookup,
    HttpLeadSink,
)

__all__ = [
    "CaseServiceClient",
    "HttpCaseEvidenceLookup",
    "HttpCaseRiskLookup",
    "HttpLeadSink",
]
