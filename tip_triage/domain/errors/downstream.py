"""Errors for unavailable external collaborators.

Case-risk lookups and the lead sink live outside this engine. When they
fail the adapters raise DownstreamUnavailableError; lead creation retries
with backoff and never fails the review that requested it.
"""

from __future__ import annotations

from tip_triage.domain.exceptions import TipTriageError


class DownstreamUnavailableError(TipTriageError):
    """Raised when an external collaborator cannot be reached or errors.

    Attributes:
        collaborator: Name of the collaborator (e.g. "lead_sink").
        operation: The attempted operation (e.g. "create_lead").
        reason: Underlying failure description.
    """

    def __init__(self, collaborator: str, operation: str, reason: str) -> None:
        self.collaborator = collaborator
        self.operation = operation
        self.reason = reason
        super().__init__(f"{collaborator} unavailable during {operation}: {reason}")
