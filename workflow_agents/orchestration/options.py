"""Configuration options for orchestrator behavior."""

import os
from typing import Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from ..config.constants import (
    AGENT_MAX_TOKENS,
    AGENT_TEMPERATURE,
    DEFAULT_AGENT_TIMEOUT_S,
    DEFAULT_COST_PER_TOKEN,
    DEFAULT_EXECUTION_ORDER,
    DEFAULT_MAX_COST,
    DEFAULT_METRICS_HISTORY_SIZE,
    DEFAULT_MODEL,
    ENV_AGENT_TIMEOUT,
    ENV_COST_PER_TOKEN,
    ENV_MAX_COST,
    ENV_MODEL,
    ENV_PER_AGENT_BUDGET_CHECK,
    ORCHESTRATION_ESTIMATE_TOKENS,
    PER_AGENT_ESTIMATE_TOKENS,
    SYNTHESIS_ESTIMATE_TOKENS,
    SYNTHESIS_MAX_TOKENS,
    SYNTHESIS_TEMPERATURE,
)
from ..models.roles import SPECIALIZED_ROLES, AgentRole

_TRUTHY = {"1", "true", "yes", "on"}


class OrchestrationConfig(BaseModel):
    """Settings for one orchestrator instance."""

    model: str = Field(
        default=DEFAULT_MODEL,
        description="Model used for every agent call"
    )

    # Pricing and budgets
    cost_per_token: float = Field(
        default=DEFAULT_COST_PER_TOKEN,
        ge=0.0,
        description="Blended USD cost per token"
    )

    default_max_cost: float = Field(
        default=DEFAULT_MAX_COST,
        gt=0.0,
        description="Cost ceiling used when a request does not set max_cost"
    )

    orchestration_estimate_tokens: int = Field(
        default=ORCHESTRATION_ESTIMATE_TOKENS,
        ge=0,
        description="Pre-flight token estimate for the orchestration agent"
    )

    per_agent_estimate_tokens: int = Field(
        default=PER_AGENT_ESTIMATE_TOKENS,
        ge=0,
        description="Pre-flight token estimate per specialized agent"
    )

    synthesis_estimate_tokens: int = Field(
        default=SYNTHESIS_ESTIMATE_TOKENS,
        ge=0,
        description="Pre-flight token estimate for AI synthesis"
    )

    per_agent_budget_check: bool = Field(
        default=False,
        description="Re-check the remaining budget before each specialized agent"
    )

    # Inference call settings
    agent_max_tokens: int = Field(default=AGENT_MAX_TOKENS, ge=1)
    agent_temperature: float = Field(default=AGENT_TEMPERATURE, ge=0.0, le=1.0)
    synthesis_max_tokens: int = Field(default=SYNTHESIS_MAX_TOKENS, ge=1)
    synthesis_temperature: float = Field(default=SYNTHESIS_TEMPERATURE, ge=0.0, le=1.0)

    agent_timeout_s: float = Field(
        default=DEFAULT_AGENT_TIMEOUT_S,
        gt=0.0,
        description="Timeout per agent call in seconds"
    )

    execution_order: Tuple[AgentRole, ...] = Field(
        default=tuple(AgentRole(r) for r in DEFAULT_EXECUTION_ORDER),
        description="Dependency order of the specialized roles"
    )

    metrics_history_size: int = Field(
        default=DEFAULT_METRICS_HISTORY_SIZE,
        ge=1,
        description="Number of execution-metric entries kept for the status API"
    )

    @field_validator('execution_order')
    @classmethod
    def validate_execution_order(cls, v):
        """Order must list every specialized role exactly once."""
        if len(set(v)) != len(v):
            raise ValueError(f"Execution order contains duplicates: {[r.value for r in v]}")
        if set(v) != set(SPECIALIZED_ROLES):
            raise ValueError(
                "Execution order must contain exactly the specialized roles: "
                f"{[r.value for r in SPECIALIZED_ROLES]}"
            )
        return v

    @classmethod
    def from_env(cls, **overrides) -> "OrchestrationConfig":
        """Build a config from ``WORKFLOW_AGENTS_*`` environment variables.

        Explicit keyword overrides win over the environment.
        """
        load_dotenv()
        values = {}
        if os.getenv(ENV_MODEL):
            values["model"] = os.getenv(ENV_MODEL)
        if os.getenv(ENV_COST_PER_TOKEN):
            values["cost_per_token"] = float(os.getenv(ENV_COST_PER_TOKEN))
        if os.getenv(ENV_MAX_COST):
            values["default_max_cost"] = float(os.getenv(ENV_MAX_COST))
        if os.getenv(ENV_AGENT_TIMEOUT):
            values["agent_timeout_s"] = float(os.getenv(ENV_AGENT_TIMEOUT))
        if os.getenv(ENV_PER_AGENT_BUDGET_CHECK):
            values["per_agent_budget_check"] = os.getenv(ENV_PER_AGENT_BUDGET_CHECK).strip().lower() in _TRUTHY
        values.update(overrides)
        return cls(**values)
