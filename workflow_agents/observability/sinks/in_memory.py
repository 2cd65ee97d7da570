"""
In-memory metrics sink for testing and local development.

Stores agent invocation metrics in a bounded buffer and answers simple
queries and summaries over them.
"""

from __future__ import annotations

import asyncio
import statistics
import time
from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional, Tuple

from ..metrics import AgentMetrics, MetricsSink


@dataclass
class MetricsSummary:
    """Summary statistics for a set of agent invocations."""
    count: int = 0
    avg_latency_ms: float = 0.0
    p50_latency_ms: float = 0.0
    p95_latency_ms: float = 0.0
    total_tokens: int = 0
    total_cost: float = 0.0
    error_rate: float = 0.0
    roles: Dict[str, int] = field(default_factory=dict)
    errors: Dict[str, int] = field(default_factory=dict)


class InMemoryMetricsSink(MetricsSink):
    """
    In-memory metrics storage with query capabilities.

    Features:
    - Fixed-size circular buffer
    - Filtering by request, role and phase
    - Summary statistics
    """

    def __init__(self, max_size: int = 10000):
        """
        Initialize the in-memory sink.

        Args:
            max_size: Maximum number of metrics to store
        """
        self.max_size = max_size
        self._metrics: Deque[Tuple[float, AgentMetrics]] = deque(maxlen=max_size)
        self._lock = asyncio.Lock()

        self._total_records = 0
        self._total_errors = 0
        self._total_cost = 0.0

    async def record(self, metrics: AgentMetrics) -> None:
        """Record a metric."""
        async with self._lock:
            self._metrics.append((time.time(), metrics))
            self._total_records += 1
            if metrics.error_class:
                self._total_errors += 1
            self._total_cost += metrics.cost

    async def flush(self) -> None:
        """No-op for in-memory sink."""
        pass

    async def get_metrics(
        self,
        request_id: Optional[str] = None,
        agent_role: Optional[str] = None,
        phase: Optional[str] = None,
        limit: int = 1000
    ) -> List[AgentMetrics]:
        """
        Query metrics with filters.

        Args:
            request_id: Filter by request ID
            agent_role: Filter by agent role value
            phase: Filter by phase ("analysis" or "synthesis")
            limit: Maximum number of results

        Returns:
            Matching metrics in record order
        """
        async with self._lock:
            results = []
            for _, metric in self._metrics:
                if request_id and metric.request_id != request_id:
                    continue
                if agent_role and metric.agent_role != agent_role:
                    continue
                if phase and metric.phase != phase:
                    continue
                results.append(metric)
                if len(results) >= limit:
                    break
            return results

    async def get_summary(self, window_seconds: float = 300) -> MetricsSummary:
        """
        Get summary statistics for a time window.

        Args:
            window_seconds: Time window in seconds (default 5 minutes)

        Returns:
            Summary statistics
        """
        async with self._lock:
            start_time = time.time() - window_seconds
            latencies = []
            summary = MetricsSummary()
            roles: Dict[str, int] = defaultdict(int)
            errors: Dict[str, int] = defaultdict(int)

            for timestamp, metric in self._metrics:
                if timestamp < start_time:
                    continue
                latencies.append(metric.latency_ms)
                summary.total_tokens += metric.input_tokens + metric.output_tokens
                summary.total_cost += metric.cost
                roles[metric.agent_role] += 1
                if metric.error_class:
                    errors[metric.error_class] += 1

            summary.count = len(latencies)
            if latencies:
                summary.avg_latency_ms = statistics.mean(latencies)
                summary.p50_latency_ms = statistics.median(latencies)
                if len(latencies) >= 20:
                    summary.p95_latency_ms = sorted(latencies)[int(len(latencies) * 0.95)]
                summary.error_rate = sum(errors.values()) / len(latencies)
            summary.roles = dict(roles)
            summary.errors = dict(errors)
            return summary

    async def clear(self) -> None:
        """Clear all stored metrics."""
        async with self._lock:
            self._metrics.clear()
            self._total_records = 0
            self._total_errors = 0
            self._total_cost = 0.0

    def get_stats(self) -> Dict[str, Any]:
        """Get current statistics (synchronous for convenience)."""
        return {
            "total_records": self._total_records,
            "total_errors": self._total_errors,
            "total_cost": self._total_cost,
            "error_rate": self._total_errors / self._total_records if self._total_records else 0,
            "stored_metrics": len(self._metrics),
        }
