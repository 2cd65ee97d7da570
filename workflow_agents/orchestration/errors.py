"""Orchestration-specific error definitions."""

from typing import Optional, Dict, Any, List


class OrchestratorError(Exception):
    """Base exception for orchestration errors."""
    pass


class ConfigurationError(OrchestratorError):
    """Exception raised when the agent setup is unusable (e.g. a required agent is missing)."""
    pass


class ToolExecutionError(OrchestratorError):
    """Exception raised when a tool execution fails."""

    def __init__(
        self,
        tool_name: str,
        original_error: Exception,
        metadata: Optional[Dict[str, Any]] = None
    ):
        self.tool_name = tool_name
        self.original_error = original_error
        self.metadata = metadata or {}

        message = f"Tool '{tool_name}' failed: {str(original_error)}"
        super().__init__(message)


class BudgetExceeded(OrchestratorError):
    """Exception raised when a pre-flight estimate would push spend past the cost ceiling."""

    def __init__(
        self,
        stage: str,  # "orchestration", "specialized", "agent", "synthesis"
        limit: float,
        spent: float,
        estimated: float,
        affected_agents: Optional[List[str]] = None
    ):
        self.stage = stage
        self.limit = limit
        self.spent = spent
        self.estimated = estimated
        self.affected_agents = affected_agents or []

        message = (
            f"Cost limit exceeded at {stage} stage: "
            f"${self.projected:.4f} > ${limit:.4f}"
        )
        if affected_agents:
            message += f" (affected agents: {', '.join(affected_agents)})"
        super().__init__(message)

    @property
    def projected(self) -> float:
        """Spend so far plus the estimate that triggered the halt."""
        return self.spent + self.estimated


class AgentExecutionError(OrchestratorError):
    """Exception raised when a single agent invocation fails."""

    def __init__(
        self,
        agent_id: str,
        role: str,
        original_error: Exception
    ):
        self.agent_id = agent_id
        self.role = role
        self.original_error = original_error

        self.reason = str(original_error) or type(original_error).__name__
        super().__init__(f"Agent {agent_id} failed: {self.reason}")


class SynthesisError(OrchestratorError):
    """Exception raised when AI synthesis of agent responses fails."""

    def __init__(self, reason: str, original_error: Optional[Exception] = None):
        self.reason = reason
        self.original_error = original_error
        super().__init__(f"Synthesis failed: {reason}")
