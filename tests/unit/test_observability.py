"""Unit tests for in-process tool call metrics."""

from __future__ import annotations

import pytest

from slackbridge.observability import latency_metrics_snapshot
from slackbridge.observability import record_latency
from slackbridge.observability import reset_latency_metrics


class TestObservabilityLatency:
    def setup_method(self):
        reset_latency_metrics()

    def teardown_method(self):
        reset_latency_metrics()

    def test_records_aggregates_by_outcome(self):
        record_latency(operation="tool.slack_wait_for_reply", duration_ms=10.0)
        record_latency(
            operation="tool.slack_wait_for_reply", duration_ms=30.0, outcome="negative"
        )
        record_latency(
            operation="tool.slack_wait_for_reply", duration_ms=20.0, outcome="error"
        )

        metrics = latency_metrics_snapshot()["tool.slack_wait_for_reply"]
        assert metrics["count"] == 3
        assert metrics["negative_count"] == 1
        assert metrics["error_count"] == 1
        assert metrics["avg_ms"] == 20.0
        assert metrics["max_ms"] == 30.0
        assert metrics["last_ms"] == 20.0

    def test_negative_duration_clamped(self):
        record_latency(operation="tool.slack_get_file", duration_ms=-5.0)
        assert latency_metrics_snapshot()["tool.slack_get_file"]["max_ms"] == 0.0

    def test_rejects_unknown_outcome(self):
        with pytest.raises(ValueError, match="outcome must be one of"):
            record_latency(operation="tool.x", duration_ms=1.0, outcome="maybe")

    def test_reset_clears_all_metrics(self):
        record_latency(operation="tool.slack_list_channels", duration_ms=12.0)
        assert "tool.slack_list_channels" in latency_metrics_snapshot()
        reset_latency_metrics()
        assert latency_metrics_snapshot() == {}
