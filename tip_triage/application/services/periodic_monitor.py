"""Base class for background loops with a start/stop lifecycle.

A monitor calls run_once() every interval until stopped. Each cycle runs
in its own correlation scope; unexpected exceptions are logged and the
loop continues.
"""

from __future__ import annotations

import asyncio
import contextlib
import time
from abc import ABC, abstractmethod

from tip_triage.application.services.base import LoggingMixin
from tip_triage.infrastructure.observability.correlation import correlation_scope


class PeriodicMonitor(LoggingMixin, ABC):
    """Runs run_once() on a fixed interval in a background task.

    Example:
        >>> monitor = SlaMonitorService(queue_service, interval_seconds=60)
        >>> await monitor.start_monitoring()
        >>> # ... runs in background
        >>> await monitor.stop_monitoring()
    """

    def __init__(self, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._interval_seconds = interval_seconds
        self._is_monitoring = False
        self._monitoring_task: asyncio.Task[None] | None = None
        self._init_logger(component="monitor")

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def is_monitoring(self) -> bool:
        return self._is_monitoring

    @abstractmethod
    async def run_once(self) -> int:
        """One monitoring cycle. Returns the number of items affected."""
        ...

    async def start_monitoring(self) -> None:
        """Start the background loop. A second call is a no-op."""
        if self._is_monitoring:
            self._log.warning("monitoring_already_running")
            return

        self._is_monitoring = True
        self._monitoring_task = asyncio.create_task(self._monitoring_loop())
        self._log.info("monitoring_started", interval_seconds=self._interval_seconds)

    async def stop_monitoring(self) -> None:
        """Stop the background loop and wait for it to finish."""
        if not self._is_monitoring:
            self._log.debug("monitoring_not_running")
            return

        self._is_monitoring = False

        if self._monitoring_task is not None:
            self._monitoring_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._monitoring_task
            self._monitoring_task = None

        self._log.info("monitoring_stopped")

    async def _monitoring_loop(self) -> None:
        self._log.debug("monitoring_loop_started")

        while self._is_monitoring:
            start_time = time.monotonic()
            affected = 0

            with correlation_scope():
                try:
                    affected = await self.run_once()
                except asyncio.CancelledError:
                    break
                except Exception as e:
                    self._log.error("monitor_cycle_failed", error=str(e), exc_info=True)
                finally:
                    latency_ms = (time.monotonic() - start_time) * 1000
                    self._log.debug(
                        "monitor_cycle_completed",
                        latency_ms=round(latency_ms, 2),
                        affected=affected,
                    )

            try:
                await asyncio.sleep(self._interval_seconds)
            except asyncio.CancelledError:
                break

        self._log.debug("monitoring_loop_ended")
