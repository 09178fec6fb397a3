"""Unit tests for correlation ID context management."""

from __future__ import annotations

from tip_triage.infrastructure.observability.correlation import (
    correlation_id_processor,
    correlation_scope,
    get_correlation_id,
    set_correlation_id,
)


class TestCorrelationScope:
    def test_scope_sets_and_restores(self) -> None:
        set_correlation_id("outer")

        with correlation_scope("inner") as value:
            assert value == "inner"
            assert get_correlation_id() == "inner"

        assert get_correlation_id() == "outer"

    def test_scope_generates_id(self) -> None:
        with correlation_scope() as value:
            assert len(value) == 36
            assert get_correlation_id() == value


class TestCorrelationProcessor:
    def test_adds_context_id(self) -> None:
        with correlation_scope("abc"):
            event = correlation_id_processor(None, "info", {"event": "tip_scored"})

        assert event["correlation_id"] == "abc"

    def test_bound_id_wins(self) -> None:
        with correlation_scope("abc"):
            event = correlation_id_processor(
                None, "info", {"event": "tip_scored", "correlation_id": "bound"}
            )

        assert event["correlation_id"] == "bound"
