"""
Latency metrics for assistant requests.

Tracks:
- P50, P95, P99 latencies of whole requests
- Time spent waiting on the chat-completion provider
- Request counts per kind (chat, complete, refactor)
"""

import threading
from collections import Counter, deque
from dataclasses import dataclass
from typing import Dict, Optional


@dataclass
class LatencyMetrics:
    """Latency metrics for a single assistant request."""

    kind: str
    total_ms: float
    llm_ms: Optional[float] = None
    failed: bool = False


class LatencyCollector:
    """
    Collect and analyze latency metrics.

    Maintains rolling windows for percentile calculations.
    """

    def __init__(self, window_size: int = 1000):
        """
        Args:
            window_size: Number of recent requests to keep for percentiles
        """
        self.window_size = window_size
        self._total: deque = deque(maxlen=window_size)
        self._llm: deque = deque(maxlen=window_size)
        self._requests: Counter = Counter()
        self._failures: Counter = Counter()
        self._lock = threading.Lock()

    def record(self, metrics: LatencyMetrics):
        """Record a latency measurement."""
        with self._lock:
            self._total.append(metrics.total_ms)
            if metrics.llm_ms is not None:
                self._llm.append(metrics.llm_ms)
            self._requests[metrics.kind] += 1
            if metrics.failed:
                self._failures[metrics.kind] += 1

    def get_percentiles(self, component: Optional[str] = None) -> Dict[str, float]:
        """
        Get latency percentiles.

        Args:
            component: "llm" for provider latency, None for whole requests
        """
        with self._lock:
            values = list(self._llm if component == "llm" else self._total)

        if not values:
            return {"p50": 0.0, "p95": 0.0, "p99": 0.0}

        sorted_values = sorted(values)
        n = len(sorted_values)

        return {
            "p50": sorted_values[int(n * 0.50)],
            "p95": sorted_values[int(n * 0.95)],
            "p99": sorted_values[int(n * 0.99)],
            "mean": sum(sorted_values) / n,
            "min": sorted_values[0],
            "max": sorted_values[-1],
        }

    def get_summary(self) -> Dict:
        """Get comprehensive latency summary."""
        with self._lock:
            requests = dict(self._requests)
            failures = dict(self._failures)

        return {
            "total": self.get_percentiles(),
            "llm": self.get_percentiles("llm"),
            "requests": requests,
            "failures": failures,
        }

    def reset(self):
        """Reset all metrics."""
        with self._lock:
            self._total.clear()
            self._llm.clear()
            self._requests.clear()
            self._failures.clear()
