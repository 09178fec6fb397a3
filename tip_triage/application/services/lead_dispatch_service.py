"""Fire-and-forget lead creation with bounded retry.

A verified review may ask case management to open a lead. The request
runs as a background task so it never blocks (or fails) the review:
DownstreamUnavailableError is retried with exponential backoff up to the
configured number of retries, then logged and given up.

drain() awaits every in-flight dispatch and is called on shutdown.

Only in-flight dispatches hold a task. Finished ones leave a compact
LeadDispatch record, and only the most recent history_size of those are
kept.
"""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from tip_triage.application.ports.case_collaborators import LeadSinkProtocol
from tip_triage.application.services.base import LoggingMixin
from tip_triage.config.triage_config import LeadDispatchConfig
from tip_triage.domain.errors import DownstreamUnavailableError
from tip_triage.domain.models.review_decision import LeadRequest


class DispatchStatus(str, Enum):
    """Where a lead dispatch stands."""

    PENDING = "pending"
    CREATED = "created"
    FAILED = "failed"


@dataclass(frozen=True)
class LeadDispatch:
    """Result of one lead dispatch.

    Attributes:
        decision_id: Review decision that requested the lead.
        case_id: Case the lead belongs to.
        status: Current dispatch status.
        attempts: Calls made to the lead sink so far.
        lead_id: Lead id once created.
        last_error: Most recent failure reason.
    """

    decision_id: UUID
    case_id: UUID
    status: DispatchStatus
    attempts: int = 0
    lead_id: str | None = None
    last_error: str | None = None


class LeadDispatchService(LoggingMixin):
    """Background lead creation against a LeadSinkProtocol."""

    def __init__(
        self,
        lead_sink: LeadSinkProtocol,
        config: LeadDispatchConfig | None = None,
    ) -> None:
        self._sink = lead_sink
        self._config = config or LeadDispatchConfig()
        self._in_flight: dict[UUID, asyncio.Task[LeadDispatch]] = {}
        self._progress: dict[UUID, LeadDispatch] = {}
        self._finished: OrderedDict[UUID, LeadDispatch] = OrderedDict()
        self._init_logger(component="leads")

    def dispatch(
        self,
        decision_id: UUID,
        case_id: UUID,
        request: LeadRequest,
    ) -> asyncio.Future[LeadDispatch]:
        """Schedule lead creation and return immediately.

        A decision only ever dispatches once. Asking again while the
        first dispatch runs returns its task; asking after it finished
        returns a resolved future holding the recorded result.
        """
        running = self._in_flight.get(decision_id)
        if running is not None:
            return running
        finished = self._finished.get(decision_id)
        if finished is not None:
            done: asyncio.Future[LeadDispatch] = asyncio.get_running_loop().create_future()
            done.set_result(finished)
            return done

        self._progress[decision_id] = LeadDispatch(
            decision_id, case_id, DispatchStatus.PENDING
        )
        task = asyncio.create_task(
            self._create_with_retry(decision_id, case_id, request),
            name=f"lead-{decision_id}",
        )
        self._in_flight[decision_id] = task
        task.add_done_callback(lambda _: self._forget_task(decision_id))
        return task

    def get_dispatch(self, decision_id: UUID) -> LeadDispatch | None:
        return self._progress.get(decision_id) or self._finished.get(decision_id)

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    @property
    def history(self) -> int:
        """Finished dispatch records currently kept."""
        return len(self._finished)

    async def drain(self) -> None:
        """Wait for every in-flight dispatch to finish."""
        if self._in_flight:
            await asyncio.gather(*list(self._in_flight.values()), return_exceptions=True)

    def _forget_task(self, decision_id: UUID) -> None:
        self._in_flight.pop(decision_id, None)
        self._progress.pop(decision_id, None)

    def _record_finished(self, result: LeadDispatch) -> None:
        self._progress.pop(result.decision_id, None)
        self._finished[result.decision_id] = result
        while len(self._finished) > self._config.history_size:
            self._finished.popitem(last=False)

    async def _create_with_retry(
        self,
        decision_id: UUID,
        case_id: UUID,
        request: LeadRequest,
    ) -> LeadDispatch:
        log = self._log_operation(
            "create_lead", decision_id=str(decision_id), case_id=str(case_id)
        )
        total_attempts = self._config.max_retries + 1
        last_error: str | None = None

        for attempt in range(total_attempts):
            try:
                lead_id = await self._sink.create_lead(
                    case_id, request.title, request.description
                )
            except DownstreamUnavailableError as e:
                last_error = str(e)
                log.warning("lead_creation_failed", attempt=attempt + 1, error=last_error)
            except Exception as e:
                last_error = str(e)
                log.error(
                    "lead_creation_error",
                    attempt=attempt + 1,
                    error=last_error,
                    exc_info=True,
                )
            else:
                result = LeadDispatch(
                    decision_id,
                    case_id,
                    DispatchStatus.CREATED,
                    attempts=attempt + 1,
                    lead_id=lead_id,
                )
                self._record_finished(result)
                log.info("lead_dispatched", lead_id=lead_id, attempt=attempt + 1)
                return result

            self._progress[decision_id] = LeadDispatch(
                decision_id,
                case_id,
                DispatchStatus.PENDING,
                attempts=attempt + 1,
                last_error=last_error,
            )
            if attempt < self._config.max_retries:
                await asyncio.sleep(self._config.retry_delays_seconds[attempt])

        result = LeadDispatch(
            decision_id,
            case_id,
            DispatchStatus.FAILED,
            attempts=total_attempts,
            last_error=last_error,
        )
        self._record_finished(result)
        log.error("lead_dispatch_exhausted", attempts=total_attempts, error=last_error)
        return result
