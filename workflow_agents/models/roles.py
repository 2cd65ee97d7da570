"""Role and status enumerations shared across the package."""

from enum import Enum


class AgentRole(str, Enum):
    """Fixed set of agent roles."""
    ORCHESTRATION = "orchestration"
    SECURITY = "security"
    DESIGN = "design"
    INTEGRATION = "integration"
    QUALITY = "quality"


class AgentStatus(str, Enum):
    """Lifecycle status of an agent."""
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"
    ERROR = "error"


SPECIALIZED_ROLES = (
    AgentRole.SECURITY,
    AgentRole.INTEGRATION,
    AgentRole.DESIGN,
    AgentRole.QUALITY,
)
