"""Unit tests for LeadDispatchService retry and idempotence."""

from __future__ import annotations

from unittest.mock import AsyncMock
from uuid import uuid4

from tests.helpers import CASE_ID
from tip_triage.application.services.lead_dispatch_service import (
    DispatchStatus,
    LeadDispatchService,
)
from tip_triage.config.triage_config import TEST_TRIAGE_CONFIG, LeadDispatchConfig
from tip_triage.domain.models.review_decision import LeadRequest
from tip_triage.infrastructure.stubs import LeadSinkStub

REQUEST = LeadRequest("Sighting on Main Street", "Girl in blue jacket")


def _service(sink: LeadSinkStub) -> LeadDispatchService:
    return LeadDispatchService(sink, TEST_TRIAGE_CONFIG.lead_dispatch)


class TestLeadDispatchService:
    async def test_first_attempt_succeeds(self) -> None:
        sink = LeadSinkStub()
        service = _service(sink)
        decision_id = uuid4()

        result = await service.dispatch(decision_id, CASE_ID, REQUEST)

        assert result.status == DispatchStatus.CREATED
        assert result.attempts == 1
        assert result.lead_id == sink.leads[0].lead_id
        assert service.get_dispatch(decision_id) == result

    async def test_retries_until_success(self) -> None:
        sink = LeadSinkStub(fail_times=2)
        service = _service(sink)

        result = await service.dispatch(uuid4(), CASE_ID, REQUEST)

        assert result.status == DispatchStatus.CREATED
        assert result.attempts == 3
        assert sink.attempts == 3

    async def test_gives_up_after_max_retries(self) -> None:
        sink = LeadSinkStub(fail_times=10)
        service = _service(sink)

        result = await service.dispatch(uuid4(), CASE_ID, REQUEST)

        assert result.status == DispatchStatus.FAILED
        assert result.attempts == 4
        assert sink.attempts == 4
        assert result.last_error is not None
        assert sink.count() == 0

    async def test_unexpected_error_is_retried(self) -> None:
        sink = LeadSinkStub()
        sink.create_lead = AsyncMock(side_effect=[RuntimeError("boom"), "lead-7"])
        service = _service(sink)

        result = await service.dispatch(uuid4(), CASE_ID, REQUEST)

        assert result.status == DispatchStatus.CREATED
        assert result.lead_id == "lead-7"

    async def test_one_dispatch_per_decision(self) -> None:
        sink = LeadSinkStub()
        service = _service(sink)
        decision_id = uuid4()

        first = service.dispatch(decision_id, CASE_ID, REQUEST)
        second = service.dispatch(decision_id, CASE_ID, REQUEST)
        await service.drain()

        assert first is second
        assert sink.count() == 1

    async def test_drain_waits_for_in_flight(self) -> None:
        sink = LeadSinkStub(fail_times=1)
        service = _service(sink)

        for _ in range(3):
            service.dispatch(uuid4(), CASE_ID, REQUEST)
        assert service.in_flight == 3

        await service.drain()

        assert service.in_flight == 0
        assert sink.count() == 3

    async def test_no_retries_configured(self) -> None:
        sink = LeadSinkStub(fail_times=1)
        service = LeadDispatchService(
            sink, LeadDispatchConfig(retry_delays_seconds=(), max_retries=0)
        )

        result = await service.dispatch(uuid4(), CASE_ID, REQUEST)

        assert result.status == DispatchStatus.FAILED
        assert result.attempts == 1

    async def test_redispatch_after_finish_returns_record(self) -> None:
        sink = LeadSinkStub()
        service = _service(sink)
        decision_id = uuid4()

        first = await service.dispatch(decision_id, CASE_ID, REQUEST)
        again = await service.dispatch(decision_id, CASE_ID, REQUEST)

        assert again == first
        assert sink.count() == 1
        assert service.in_flight == 0

    async def test_history_keeps_most_recent(self) -> None:
        sink = LeadSinkStub()
        service = LeadDispatchService(sink, LeadDispatchConfig(history_size=2))
        decisions = [uuid4() for _ in range(3)]

        for decision_id in decisions:
            await service.dispatch(decision_id, CASE_ID, REQUEST)

        assert service.history == 2
        assert service.get_dispatch(decisions[0]) is None
        assert service.get_dispatch(decisions[2]).status == DispatchStatus.CREATED
