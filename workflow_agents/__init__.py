"""
Workflow Agents - cost-bounded multi-agent analysis of workflow requests.

Five agents work on each request:
- Orchestration (plans, then synthesizes the final answer)
- Security (packages, permissions, compliance, secrets)
- Design (UI, accessibility, responsiveness)
- Integration (connections, OAuth scopes, rate limits)
- Quality (code review, performance, tests)

Features:
- Hard per-request cost ceiling with pre-flight estimates
- Fixed dependency-respecting execution order
- Per-agent failure isolation
- AI synthesis with a deterministic fallback
"""

__version__ = "0.1.0"

# Orchestration first: tools and agents import its error types
from .orchestration import (
    AgentOrchestrator,
    BudgetExceeded,
    ConfigurationError,
    OrchestrationConfig,
    OrchestratorError,
)
from .agents import AgentRegistry, create_all_agents
from .api.client import WorkflowAgentsClient, process_workflow
from .models import (
    AgentResponse,
    AgentRole,
    AgentStatus,
    ApprovalMode,
    OrchestrationRequest,
    OrchestrationResponse,
    RunContext,
    ValidationResult,
)
from .providers import AnthropicInferenceProvider, InferenceProvider, ProviderError

__all__ = [
    # Main client
    "WorkflowAgentsClient",
    "process_workflow",

    # Orchestration
    "AgentOrchestrator",
    "OrchestrationConfig",
    "AgentRegistry",
    "create_all_agents",

    # Providers
    "InferenceProvider",
    "AnthropicInferenceProvider",
    "ProviderError",

    # Errors
    "OrchestratorError",
    "ConfigurationError",
    "BudgetExceeded",

    # Models
    "AgentResponse",
    "AgentRole",
    "AgentStatus",
    "ApprovalMode",
    "OrchestrationRequest",
    "OrchestrationResponse",
    "RunContext",
    "ValidationResult",
]
