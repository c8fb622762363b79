"""Testes de métricas via log e do correlation_id."""

from __future__ import annotations

import logging

import pytest

from app.observability import (
    correlation_scope,
    get_correlation_id,
    record_latency,
    record_reconnect,
    record_recovery,
    record_session_transition,
    reset_correlation_id,
    set_correlation_id,
)


class TestCorrelation:
    def test_set_generates_when_missing(self) -> None:
        token = set_correlation_id(None)
        try:
            assert len(get_correlation_id()) == 36
        finally:
            reset_correlation_id(token)

    def test_scope_restores_previous_value(self) -> None:
        token = set_correlation_id("req-1")
        try:
            with correlation_scope("loja") as value:
                assert value == "loja"
                assert get_correlation_id() == "loja"
            assert get_correlation_id() == "req-1"
        finally:
            reset_correlation_id(token)


class TestMetrics:
    """Métricas são registros de log com metric_type."""

    def test_latency_uses_context_correlation(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="app.observability.metrics")

        with correlation_scope("loja"):
            record_latency("messenger", "send_text", 12.345)

        record = caplog.records[-1]
        assert record.getMessage() == "metric_latency"
        assert record.metric_type == "latency"
        assert record.latency_ms == 12.35
        assert record.correlation_id == "loja"

    def test_session_transition(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="app.observability.metrics")

        record_session_transition("loja", "INITIALIZING", "CONNECTED", "connection_opened")

        record = caplog.records[-1]
        assert record.metric_type == "session_transition"
        assert (record.from_state, record.to_state) == ("INITIALIZING", "CONNECTED")

    def test_reconnect(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="app.observability.metrics")

        record_reconnect("loja", "retry", 515, attempt=2, delay_seconds=10.0)

        record = caplog.records[-1]
        assert record.action == "retry"
        assert record.reason_code == 515
        assert record.attempt == 2

    def test_recovery_with_metadata(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="app.observability.metrics")

        record_recovery(2, 1, metadata={"root": "auth_info"})

        record = caplog.records[-1]
        assert (record.recovered, record.failed) == (2, 1)
        assert record.root == "auth_info"
