"""RFC 7807 problem responses for domain errors.

Every route catches TipTriageError and hands it to problem_response(),
which picks the status and type URN from the error class:

    ValidationError             -> 400
    NotFoundError               -> 404
    ConflictError               -> 409
    DownstreamUnavailableError  -> 503
"""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse
from starlette.requests import Request

from tip_triage.domain.errors import (
    ConflictError,
    DownstreamUnavailableError,
    ItemAlreadyClaimedError,
    NotClaimantError,
    NotFoundError,
    ValidationError,
)
from tip_triage.domain.exceptions import TipTriageError

PROBLEM_MEDIA_TYPE = "application/problem+json"
TYPE_PREFIX = "urn:tip-triage"


def problem(
    status: int,
    type_suffix: str,
    title: str,
    detail: str,
    instance: str,
    **extensions: Any,
) -> JSONResponse:
    content: dict[str, Any] = {
        "type": f"{TYPE_PREFIX}:{type_suffix}",
        "title": title,
        "status": status,
        "detail": detail,
        "instance": instance,
    }
    content.update({k: v for k, v in extensions.items() if v is not None})
    return JSONResponse(status_code=status, content=content, media_type=PROBLEM_MEDIA_TYPE)


def problem_response(error: TipTriageError, request: Request) -> JSONResponse:
    """Translate a domain error into a problem+json response."""
    instance = request.url.path

    if isinstance(error, ValidationError):
        return problem(
            400, "validation", "Invalid Request", str(error), instance, field=error.field
        )
    if isinstance(error, NotFoundError):
        return problem(
            404,
            "not-found",
            f"{error.entity} Not Found",
            str(error),
            instance,
            entity_id=str(error.entity_id),
        )
    if isinstance(error, ItemAlreadyClaimedError):
        return problem(
            409,
            "queue:already-claimed",
            "Queue Item Already Claimed",
            str(error),
            instance,
            queue_item_id=str(error.queue_item_id),
            claimed_by=error.claimed_by,
        )
    if isinstance(error, NotClaimantError):
        return problem(
            409,
            "queue:not-claimant",
            "Not The Claimant",
            str(error),
            instance,
            queue_item_id=str(error.queue_item_id),
            claimed_by=error.claimed_by,
        )
    if isinstance(error, ConflictError):
        return problem(
            409,
            "queue:conflict",
            "Queue Item Conflict",
            str(error),
            instance,
            queue_item_id=str(error.queue_item_id),
        )
    if isinstance(error, DownstreamUnavailableError):
        return problem(
            503,
            "downstream-unavailable",
            "Downstream Service Unavailable",
            str(error),
            instance,
            collaborator=error.collaborator,
        )
    return problem(500, "internal", "Internal Error", str(error), instance)
