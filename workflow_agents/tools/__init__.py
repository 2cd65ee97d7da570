"""Agent-owned tools and their executor."""

from .definition import ParameterType, Tool, ToolParameter
from .executor import ToolExecutor
from .security import create_security_tools
from .design import create_design_tools
from .integration import IntegrationState, OAuthGrant, create_integration_tools
from .quality import create_quality_tools

__all__ = [
    "ParameterType",
    "Tool",
    "ToolParameter",
    "ToolExecutor",
    "create_security_tools",
    "create_design_tools",
    "create_integration_tools",
    "create_quality_tools",
    "IntegrationState",
    "OAuthGrant",
]
