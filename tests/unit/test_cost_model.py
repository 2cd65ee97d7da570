"""Unit tests for the cost model and per-request tracker."""

import pytest

from workflow_agents.pricing.cost_model import CostModel, CostTracker
from workflow_agents.providers.base import InferenceUsage


class TestCostModel:
    """Test token pricing."""

    def test_default_rate(self):
        model = CostModel()

        assert model.cost(1000) == pytest.approx(0.003)

    def test_estimate_matches_cost(self):
        """Test pre-flight estimates use the same rate as recorded spend."""
        model = CostModel(cost_per_token=0.00001)

        assert model.estimate(4000) == model.cost(4000) == pytest.approx(0.04)

    def test_negative_tokens_cost_nothing(self):
        assert CostModel().cost(-50) == 0

    def test_negative_rate_rejected(self):
        with pytest.raises(ValueError):
            CostModel(cost_per_token=-1)

    def test_cost_for_usage_dict(self):
        """Test dict usage, with and without total_tokens."""
        model = CostModel(cost_per_token=0.001)

        assert model.cost_for_usage({"prompt_tokens": 10, "completion_tokens": 5}) == pytest.approx(0.015)
        assert model.cost_for_usage({"total_tokens": 20}) == pytest.approx(0.02)

    def test_cost_for_usage_object(self):
        model = CostModel(cost_per_token=0.001)
        usage = InferenceUsage(prompt_tokens=700, completion_tokens=300)

        assert model.cost_for_usage(usage) == pytest.approx(1.0)

    def test_start_request_is_fresh(self):
        """Test each request gets its own tracker."""
        model = CostModel()
        first = model.start_request()
        first.record(0.5)

        second = model.start_request()

        assert second.total == 0.0
        assert first is not second


class TestCostTracker:
    """Test running totals."""

    def test_record_accumulates(self):
        tracker = CostTracker()

        assert tracker.record(0.1) == pytest.approx(0.1)
        assert tracker.record(0.2) == pytest.approx(0.3)
        assert tracker.entries == 2

    def test_negative_cost_rejected(self):
        """Test totals never decrease."""
        tracker = CostTracker()

        with pytest.raises(ValueError):
            tracker.record(-0.01)

    def test_would_exceed_is_strict(self):
        """Test reaching the ceiling exactly is allowed."""
        tracker = CostTracker()
        tracker.record(0.5)

        assert tracker.would_exceed(0.5, 1.0) is False
        assert tracker.would_exceed(0.51, 1.0) is True

    def test_remaining_never_negative(self):
        tracker = CostTracker()
        tracker.record(2.0)

        assert tracker.remaining(1.0) == 0.0
        assert tracker.snapshot() == {"total": 2.0, "entries": 1.0}
