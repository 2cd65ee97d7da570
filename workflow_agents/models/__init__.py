"""Data models for workflow agents."""

from .roles import AgentRole, AgentStatus, SPECIALIZED_ROLES
from .tools import ToolCall, ToolCallRequest, ToolResult
from .context import ConversationMessage, RunContext
from .orchestration import (
    AgentResponse,
    ApprovalMode,
    ApprovalStep,
    OrchestrationRequest,
    OrchestrationResponse,
    Priority,
    ResponseMetadata,
    ValidationResult,
    ValidationStatus,
)
from .reports import (
    IntegrationSuggestion,
    IntegrationSuggestions,
    RealTimeValidation,
    SecurityScanReport,
    WorkflowBuildResult,
)

__all__ = [
    # Roles
    "AgentRole",
    "AgentStatus",
    "SPECIALIZED_ROLES",

    # Tool invocation
    "ToolCall",
    "ToolCallRequest",
    "ToolResult",

    # Context
    "ConversationMessage",
    "RunContext",

    # Orchestration
    "AgentResponse",
    "ApprovalMode",
    "ApprovalStep",
    "OrchestrationRequest",
    "OrchestrationResponse",
    "Priority",
    "ResponseMetadata",
    "ValidationResult",
    "ValidationStatus",

    # Client reports
    "IntegrationSuggestion",
    "IntegrationSuggestions",
    "RealTimeValidation",
    "SecurityScanReport",
    "WorkflowBuildResult",
]
