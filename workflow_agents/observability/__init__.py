"""Observability layer: structured logging and per-agent metrics."""

from .logging import AgentLogger
from .metrics import AgentMetrics, MetricsSink
from .sinks import InMemoryMetricsSink, MetricsSummary

__all__ = [
    "AgentLogger",
    "AgentMetrics",
    "MetricsSink",
    "InMemoryMetricsSink",
    "MetricsSummary",
]
