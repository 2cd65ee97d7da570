"""Built-in agents and the agent registry."""

from .definitions import (
    create_agent,
    create_all_agents,
    create_design_agent,
    create_integration_agent,
    create_orchestration_agent,
    create_quality_agent,
    create_security_agent,
)
from .registry import AgentRegistry

__all__ = [
    "AgentRegistry",
    "create_agent",
    "create_all_agents",
    "create_design_agent",
    "create_integration_agent",
    "create_orchestration_agent",
    "create_quality_agent",
    "create_security_agent",
]
