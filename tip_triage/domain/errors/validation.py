"""Validation errors for malformed tip and decision input.

Raised before any state change, so a caller receiving one can correct
the request and resubmit without reconciling partial effects.
"""

from __future__ import annotations

from tip_triage.domain.exceptions import TipTriageError


class ValidationError(TipTriageError):
    """Raised when a tip, review decision or moderation request is malformed.

    Attributes:
        field: Name of the offending field, if a single field is at fault.
        reason: Human-readable description of the problem.
    """

    def __init__(self, reason: str, field: str | None = None) -> None:
        """Initialize validation error.

        Args:
            reason: What is wrong with the input.
            field: Optional name of the offending field.
        """
        self.field = field
        self.reason = reason
        if field:
            super().__init__(f"Invalid {field}: {reason}")
        else:
            super().__init__(reason)
