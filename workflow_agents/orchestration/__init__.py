"""Multi-agent orchestration."""

from .errors import (
    OrchestratorError,
    ConfigurationError,
    ToolExecutionError,
    BudgetExceeded,
    AgentExecutionError,
    SynthesisError,
)
from .options import OrchestrationConfig
from .context import ExecutionContext
from .planning import AgentSelector, KeywordAgentSelector, KeywordRule, execution_order
from .synthesis import Synthesizer, fallback_synthesis
from .orchestrator import AgentOrchestrator

__all__ = [
    "AgentOrchestrator",
    "OrchestrationConfig",
    "ExecutionContext",
    "AgentSelector",
    "KeywordAgentSelector",
    "KeywordRule",
    "execution_order",
    "Synthesizer",
    "fallback_synthesis",
    "OrchestratorError",
    "ConfigurationError",
    "ToolExecutionError",
    "BudgetExceeded",
    "AgentExecutionError",
    "SynthesisError",
]
