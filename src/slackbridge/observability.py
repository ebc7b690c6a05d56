"""In-process latency and outcome metrics for tool calls."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock

logger = logging.getLogger(__name__)

OUTCOMES = ("ok", "negative", "error")


@dataclass
class ToolCallSummary:
    """Aggregated metrics for one tool."""

    count: int = 0
    negative_count: int = 0
    error_count: int = 0
    total_ms: float = 0.0
    max_ms: float = 0.0
    last_ms: float = 0.0


class _ToolCallRecorder:
    def __init__(self) -> None:
        self._lock = Lock()
        self._stats: dict[str, ToolCallSummary] = {}

    def record(self, *, operation: str, duration_ms: float, outcome: str) -> None:
        if outcome not in OUTCOMES:
            raise ValueError(f"outcome must be one of {OUTCOMES}, got {outcome!r}")
        normalized = max(float(duration_ms), 0.0)
        with self._lock:
            summary = self._stats.setdefault(operation, ToolCallSummary())
            summary.count += 1
            if outcome == "negative":
                summary.negative_count += 1
            elif outcome == "error":
                summary.error_count += 1
            summary.total_ms += normalized
            summary.last_ms = normalized
            summary.max_ms = max(summary.max_ms, normalized)

        logger.info(
            "latency operation=%s duration_ms=%.3f outcome=%s",
            operation,
            normalized,
            outcome,
        )

    def snapshot(self) -> dict[str, dict[str, float | int]]:
        with self._lock:
            return {
                operation: {
                    "count": summary.count,
                    "negative_count": summary.negative_count,
                    "error_count": summary.error_count,
                    "avg_ms": round(
                        summary.total_ms / summary.count if summary.count else 0.0,
                        3,
                    ),
                    "max_ms": round(summary.max_ms, 3),
                    "last_ms": round(summary.last_ms, 3),
                }
                for operation, summary in sorted(self._stats.items())
            }

    def reset(self) -> None:
        with self._lock:
            self._stats.clear()


_RECORDER = _ToolCallRecorder()


def record_latency(*, operation: str, duration_ms: float, outcome: str = "ok") -> None:
    """Record one tool call sample."""
    _RECORDER.record(operation=operation, duration_ms=duration_ms, outcome=outcome)


def latency_metrics_snapshot() -> dict[str, dict[str, float | int]]:
    """Return current in-process aggregates keyed by operation."""
    return _RECORDER.snapshot()


def reset_latency_metrics() -> None:
    """Clear all aggregates (test helper)."""
    _RECORDER.reset()
