"""SLA breach monitor.

Periodically walks the deadline index and stamps breach_flagged_at on
items whose deadline has passed. It never changes an item's status or
queue, so it can run at any cadence (or not at all) without affecting
correctness: breach is always derivable from the deadline.
"""

from __future__ import annotations

from tip_triage.application.services.periodic_monitor import PeriodicMonitor
from tip_triage.application.services.review_queue_service import ReviewQueueService


class SlaMonitorService(PeriodicMonitor):
    """Background task flagging newly breached queue items."""

    def __init__(
        self,
        queue_service: ReviewQueueService,
        interval_seconds: float = 60,
    ) -> None:
        super().__init__(interval_seconds)
        self._queue = queue_service

    async def run_once(self) -> int:
        flagged = await self._queue.flag_breaches()
        for item in flagged:
            self._log_operation(
                "check_sla", queue_item_id=str(item.item_id)
            ).warning(
                "sla_breached",
                queue_type=item.queue_type.value,
                status=item.status.value,
                sla_deadline=item.sla_deadline.isoformat(),
                claimed_by=item.claimed_by,
            )
        return len(flagged)
