"""FakeTimeAuthority - controllable clock for deterministic tests.

SLA deadlines, breach detection and claim expiry all read the injected
TimeAuthorityProtocol, so tests freeze the clock and move it explicitly:

    >>> clock = FakeTimeAuthority()
    >>> queue = ReviewQueueService(repo, clock)
    >>> clock.advance(delta=timedelta(minutes=31))  # claim now expired

Use the `fake_time_authority` fixture from conftest.py in most tests.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from tip_triage.application.ports.time_authority import TimeAuthorityProtocol

DEFAULT_FROZEN_AT = datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


class FakeTimeAuthority(TimeAuthorityProtocol):
    """Frozen clock that only moves when a test moves it."""

    def __init__(self, frozen_at: datetime | None = None) -> None:
        """Freeze the clock at frozen_at (default 2026-01-01T00:00:00Z).

        A naive value is taken as UTC.
        """
        self._current_time = _as_utc(frozen_at or DEFAULT_FROZEN_AT)

    def utcnow(self) -> datetime:
        return self._current_time

    def advance(
        self,
        seconds: float | int | None = None,
        delta: timedelta | None = None,
    ) -> None:
        """Move the clock forward; delta wins over seconds.

        Raises:
            ValueError: Nothing to advance by, or a negative amount.
        """
        if delta is not None:
            step = delta
        elif seconds is not None:
            step = timedelta(seconds=seconds)
        else:
            raise ValueError("Must provide either 'seconds' or 'delta' argument")
        if step < timedelta(0):
            raise ValueError(f"Cannot advance time backwards ({step})")
        self._current_time += step

    def __repr__(self) -> str:
        return f"FakeTimeAuthority(current_time={self._current_time.isoformat()})"


def _as_utc(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)
