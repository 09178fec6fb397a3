"""System clock behind TimeAuthorityProtocol."""

from datetime import datetime, timezone

from tip_triage.application.ports.time_authority import TimeAuthorityProtocol


class TimeAuthorityService(TimeAuthorityProtocol):
    def utcnow(self) -> datetime:
        return datetime.now(timezone.utc)
