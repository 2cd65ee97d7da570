"""Per-request execution state."""

from __future__ import annotations

import asyncio
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from ..models.orchestration import AgentResponse, ApprovalStep, ValidationResult
from ..models.roles import AgentRole, AgentStatus
from ..pricing.cost_model import CostTracker


@dataclass
class ExecutionContext:
    """Everything one ``process()`` call mutates.

    Each request gets its own context, so concurrent requests never share
    status maps, cost totals or response lists.
    """

    tracker: CostTracker
    max_cost: float
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_at: float = field(default_factory=time.time)
    cancel_event: Optional[asyncio.Event] = None
    role_statuses: Dict[AgentRole, AgentStatus] = field(default_factory=dict)
    active_agents: Set[str] = field(default_factory=set)
    responses: List[AgentResponse] = field(default_factory=list)
    validations: List[ValidationResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    notices: List[str] = field(default_factory=list)
    steps_pending: List[ApprovalStep] = field(default_factory=list)

    @property
    def spent(self) -> float:
        return self.tracker.total

    @property
    def elapsed_ms(self) -> int:
        return int((time.time() - self.started_at) * 1000)

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def would_exceed(self, estimate: float) -> bool:
        return self.tracker.would_exceed(estimate, self.max_cost)

    def record_response(self, response: AgentResponse) -> None:
        """Append a response and charge its cost in the same step."""
        self.tracker.record(response.metadata.cost)
        self.responses.append(response)

    def set_status(self, role: AgentRole, status: AgentStatus) -> None:
        self.role_statuses[role] = status
