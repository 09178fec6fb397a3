"""HTTP adapters for the case-management collaborator.

Implements CaseRiskLookupProtocol, CaseEvidenceLookupProtocol and
LeadSinkProtocol over the case service's JSON API with httpx:

    GET  {base}/cases/{case_id}/risk-profile
    GET  {base}/cases/{case_id}/evidence
    POST {base}/cases/{case_id}/leads

Transport failures, 5xx responses and malformed payloads surface as
DownstreamUnavailableError. A 404 on a lookup means the case has no
recorded data and yields the empty value.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

import httpx
import structlog

from tip_triage.domain.errors import DownstreamUnavailableError
from tip_triage.domain.models.case_context import (
    CaseEvidence,
    CaseRiskProfile,
    KnownLead,
)
from tip_triage.domain.models.tip import GeoPoint

log = structlog.get_logger()

COLLABORATOR = "case_service"


def _point(data: dict[str, Any] | None) -> GeoPoint | None:
    if not data or data.get("latitude") is None or data.get("longitude") is None:
        return None
    return GeoPoint(float(data["latitude"]), float(data["longitude"]))


def _timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp without timezone: {value}")
    return parsed


class CaseServiceClient:
    """httpx client for the case service, shared by the three adapters.

    Args:
        base_url: Case service base URL.
        timeout_seconds: Per-request timeout.
        client: Optional preconfigured AsyncClient (tests pass one with a
            MockTransport). When omitted a client is opened per request.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._client = client

    async def request(
        self,
        method: str,
        path: str,
        operation: str,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send one request, mapping transport and server errors.

        Raises:
            DownstreamUnavailableError: The request failed or returned 5xx.
        """
        url = f"{self._base_url}{path}"
        try:
            if self._client is not None:
                response = await self._client.request(
                    method, url, json=json, timeout=self._timeout
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.request(
                        method, url, json=json, timeout=self._timeout
                    )
        except httpx.HTTPError as e:
            log.warning(
                "case_service_request_failed",
                operation=operation,
                url=url,
                error=str(e),
            )
            raise DownstreamUnavailableError(COLLABORATOR, operation, str(e)) from e

        if response.status_code >= 500:
            log.warning(
                "case_service_server_error",
                operation=operation,
                url=url,
                status_code=response.status_code,
            )
            raise DownstreamUnavailableError(
                COLLABORATOR, operation, f"HTTP {response.status_code}"
            )
        return response


class HttpCaseRiskLookup:
    """CaseRiskLookupProtocol over the case service."""

    def __init__(self, client: CaseServiceClient) -> None:
        self._client = client

    async def get_case_risk_profile(self, case_id: UUID) -> CaseRiskProfile:
        operation = "get_case_risk_profile"
        response = await self._client.request(
            "GET", f"/cases/{case_id}/risk-profile", operation
        )
        if response.status_code == 404:
            return CaseRiskProfile.unknown(case_id)
        if response.status_code >= 400:
            raise DownstreamUnavailableError(
                COLLABORATOR, operation, f"HTTP {response.status_code}"
            )
        try:
            data = response.json()
            window = data.get("responseWindowMinutes")
            return CaseRiskProfile(
                case_id=case_id,
                is_minor=bool(data.get("isMinor", False)),
                suspected_abduction=bool(data.get("suspectedAbduction", False)),
                response_window=(
                    timedelta(minutes=float(window)) if window is not None else None
                ),
            )
        except (ValueError, TypeError, AttributeError) as e:
            raise DownstreamUnavailableError(
                COLLABORATOR, operation, f"malformed payload: {e}"
            ) from e


class HttpCaseEvidenceLookup:
    """CaseEvidenceLookupProtocol over the case service."""

    def __init__(self, client: CaseServiceClient) -> None:
        self._client = client

    async def get_case_evidence(self, case_id: UUID) -> CaseEvidence:
        operation = "get_case_evidence"
        response = await self._client.request(
            "GET", f"/cases/{case_id}/evidence", operation
        )
        if response.status_code == 404:
            return CaseEvidence.empty(case_id)
        if response.status_code >= 400:
            raise DownstreamUnavailableError(
                COLLABORATOR, operation, f"HTTP {response.status_code}"
            )
        try:
            data = response.json()
            last_seen = data.get("lastSeen") or {}
            leads = tuple(
                KnownLead(
                    lead_id=str(lead["leadId"]),
                    point=_point(lead.get("point")),
                    location_text=lead.get("locationText"),
                )
                for lead in data.get("leads", [])
            )
            return CaseEvidence(
                case_id=case_id,
                last_seen_point=_point(last_seen.get("point")),
                last_seen_at=_timestamp(last_seen.get("at")),
                leads=leads,
            )
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            raise DownstreamUnavailableError(
                COLLABORATOR, operation, f"malformed payload: {e}"
            ) from e


class HttpLeadSink:
    """LeadSinkProtocol over the case service."""

    def __init__(self, client: CaseServiceClient) -> None:
        self._client = client

    async def create_lead(self, case_id: UUID, title: str, description: str) -> str:
        operation = "create_lead"
        response = await self._client.request(
            "POST",
            f"/cases/{case_id}/leads",
            operation,
            json={"title": title, "description": description},
        )
        if response.status_code >= 300:
            raise DownstreamUnavailableError(
                COLLABORATOR, operation, f"HTTP {response.status_code}"
            )
        try:
            lead_id = str(response.json()["leadId"])
        except (ValueError, KeyError, TypeError) as e:
            raise DownstreamUnavailableError(
                COLLABORATOR, operation, f"malformed payload: {e}"
            ) from e
        log.info("lead_created", case_id=str(case_id), lead_id=lead_id)
        return lead_id
