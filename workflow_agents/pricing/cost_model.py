"""Cost model and per-request spend tracking.

Costs use a single blended rate per token. The same function prices actual
usage after a call and expected usage before one, so pre-flight estimates and
recorded spend are always comparable.
"""

from typing import Any, Dict, Mapping, Union

from ..config.constants import DEFAULT_COST_PER_TOKEN


class CostModel:
    """Maps token counts to USD."""

    def __init__(self, cost_per_token: float = DEFAULT_COST_PER_TOKEN):
        if cost_per_token < 0:
            raise ValueError(f"cost_per_token must be non-negative, got {cost_per_token}")
        self.cost_per_token = cost_per_token

    def cost(self, tokens: int) -> float:
        """Cost of ``tokens`` tokens actually consumed."""
        return max(0, tokens) * self.cost_per_token

    def estimate(self, expected_tokens: int) -> float:
        """Pre-flight estimate for a call expected to use ``expected_tokens``."""
        return self.cost(expected_tokens)

    def cost_for_usage(self, usage: Union[Mapping[str, Any], Any]) -> float:
        """Cost of a usage record (dict or object with token fields)."""
        if not isinstance(usage, Mapping):
            usage = {
                "prompt_tokens": getattr(usage, "prompt_tokens", 0),
                "completion_tokens": getattr(usage, "completion_tokens", 0),
                "total_tokens": getattr(usage, "total_tokens", 0),
            }
        total = usage.get("total_tokens") or (
            usage.get("prompt_tokens", 0) + usage.get("completion_tokens", 0)
        )
        return self.cost(total)

    def start_request(self) -> "CostTracker":
        """Fresh tracker for one request; running totals never carry over."""
        return CostTracker()


class CostTracker:
    """Running spend of a single request."""

    def __init__(self):
        self._total = 0.0
        self._entries = 0

    @property
    def total(self) -> float:
        return self._total

    @property
    def entries(self) -> int:
        return self._entries

    def record(self, amount: float) -> float:
        """Add ``amount`` to the running total and return the new total."""
        if amount < 0:
            raise ValueError(f"Cannot record negative cost {amount}")
        self._total += amount
        self._entries += 1
        return self._total

    def would_exceed(self, additional: float, ceiling: float) -> bool:
        return self._total + additional > ceiling

    def remaining(self, ceiling: float) -> float:
        return max(0.0, ceiling - self._total)

    def snapshot(self) -> Dict[str, float]:
        return {"total": self._total, "entries": float(self._entries)}
