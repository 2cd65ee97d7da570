"""Agent definition model."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..tools.definition import Tool
from .roles import AgentRole


class AgentDefinition(BaseModel):
    """Static definition of one agent.

    Definitions are immutable. Runtime status is tracked by the registry and
    by each request's execution context, never on the definition itself.
    """
    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    id: str = Field(..., min_length=1, description="Unique agent id")
    role: AgentRole = Field(..., description="Role the agent fills")
    name: str = Field(..., description="Display name")
    description: str = Field(..., description="One-line summary")
    instructions: str = Field(..., description="System instructions for the model")
    handoff_description: Optional[str] = Field(None, description="When other agents should hand off to this one")
    tools: List[Tool] = Field(default_factory=list, description="Tools this agent owns")
    capabilities: List[str] = Field(default_factory=list, description="Human-readable capabilities")
    config: Dict[str, Any] = Field(default_factory=dict, description="Role-specific settings")

    @property
    def tool_names(self) -> List[str]:
        return [tool.name for tool in self.tools]

    def get_tool(self, name: str) -> Optional[Tool]:
        for tool in self.tools:
            if tool.name == name:
                return tool
        return None
