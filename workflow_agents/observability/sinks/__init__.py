"""Metrics sink implementations."""

from .in_memory import InMemoryMetricsSink, MetricsSummary

__all__ = ["InMemoryMetricsSink", "MetricsSummary"]
