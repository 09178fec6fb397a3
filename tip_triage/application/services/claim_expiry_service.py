"""Claim expiry reaper.

Claims abandoned by a reviewer (closed tab, lost connection) would
otherwise hold an item forever. Every cycle releases claims older than
the configured claim timeout back to pending.
"""

from __future__ import annotations

from tip_triage.application.services.periodic_monitor import PeriodicMonitor
from tip_triage.application.services.review_queue_service import ReviewQueueService


class ClaimExpiryService(PeriodicMonitor):
    """Background task reverting stale claims to pending."""

    def __init__(
        self,
        queue_service: ReviewQueueService,
        interval_seconds: float = 60,
    ) -> None:
        super().__init__(interval_seconds)
        self._queue = queue_service

    async def run_once(self) -> int:
        released = await self._queue.release_expired_claims()
        if released:
            self._log.info("expired_claims_released", count=released)
        return released
