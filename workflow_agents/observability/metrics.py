from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol


@dataclass
class AgentMetrics:
    request_id: Optional[str]
    agent_id: str
    agent_role: str
    model: Optional[str]
    latency_ms: int
    input_tokens: int
    output_tokens: int
    cost: float
    error_class: Optional[str]
    tools_used: List[str] = field(default_factory=list)
    phase: str = "analysis"  # analysis or synthesis
    tools_invoked: int = 0
    tool_failures: int = 0


class MetricsSink(Protocol):
    async def record(self, metrics: AgentMetrics) -> None: ...
    async def flush(self) -> None: ...
