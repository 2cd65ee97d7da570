"""Token pricing and per-request spend tracking."""

from .cost_model import CostModel, CostTracker

__all__ = ["CostModel", "CostTracker"]
