"""Request, response and finding models for a single orchestration run."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config.constants import MAX_SUGGESTIONS
from .context import RunContext
from .roles import AgentRole, AgentStatus
from .tools import ToolCall


class ApprovalMode(str, Enum):
    """How the caller wants steps approved."""
    AUTO = "auto"
    STEP_BY_STEP = "step-by-step"
    BATCH = "batch"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ValidationStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    WARNING = "warning"


ValidationType = Literal["security", "design", "integration", "quality"]


class ValidationResult(BaseModel):
    """A finding derived from one tool call."""

    agent_role: AgentRole
    type: ValidationType
    status: ValidationStatus
    message: str
    details: Optional[Dict[str, Any]] = None
    suggestions: Optional[List[str]] = None


class ApprovalStep(BaseModel):
    """A step that was not executed and would need approval or more budget."""

    step_type: Literal["agent_execution", "tool_call", "api_call"] = "agent_execution"
    agent_role: Optional[AgentRole] = None
    description: str
    estimated_cost: float = Field(0.0, ge=0.0)
    details: Dict[str, Any] = Field(default_factory=dict)


class ResponseMetadata(BaseModel):
    """Accounting attached to each agent response."""

    execution_time_ms: int = Field(0, ge=0)
    token_count: int = Field(0, ge=0)
    tools_used: List[str] = Field(default_factory=list)
    cost: float = Field(0.0, ge=0.0)
    phase: Literal["analysis", "synthesis"] = "analysis"


class AgentResponse(BaseModel):
    """Output of one successful agent invocation."""
    model_config = ConfigDict(frozen=True)

    agent_id: str
    agent_role: AgentRole
    content: str
    tool_calls: List[ToolCall] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: Optional[str] = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class OrchestrationRequest(BaseModel):
    """A user request to be analyzed by the agents."""
    model_config = ConfigDict(extra="forbid")

    user_message: str = Field(..., description="The user's request")
    context: RunContext
    required_agents: Optional[List[AgentRole]] = Field(
        None,
        description="Explicit specialized roles to run; None lets the selector decide"
    )
    max_cost: Optional[float] = Field(None, gt=0, description="Cost ceiling in USD")
    approval_mode: ApprovalMode = ApprovalMode.AUTO
    priority: Priority = Priority.MEDIUM
    timeout_ms: Optional[int] = Field(None, ge=1, description="Per-agent call timeout")

    @field_validator("user_message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("user_message must not be empty")
        return v


class OrchestrationResponse(BaseModel):
    """Structured result of one orchestration run."""

    request_id: str
    success: bool
    responses: List[AgentResponse] = Field(default_factory=list)
    final_output: str = ""
    workflow_code: Optional[str] = None
    validation_results: List[ValidationResult] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list, max_length=MAX_SUGGESTIONS)
    errors: List[str] = Field(default_factory=list)
    execution_time_ms: int = 0
    total_cost: float = 0.0
    steps_pending: List[ApprovalStep] = Field(default_factory=list)
    needs_approval: bool = False
    notices: List[str] = Field(default_factory=list)
    agent_statuses: Dict[AgentRole, AgentStatus] = Field(default_factory=dict)
