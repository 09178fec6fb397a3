"""Clock port.

Every timestamp the engine writes (verification created_at, SLA
deadlines, claimed_at, breach flags, decisions) comes from an injected
TimeAuthorityProtocol, never from datetime.now(). Tests drive SLA
breach and claim expiry with FakeTimeAuthority.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Source of timezone-aware UTC timestamps."""

    @abstractmethod
    def utcnow(self) -> datetime:
        """Current time, tz-aware UTC."""
        ...
