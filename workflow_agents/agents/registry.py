"""Agent registry.

The registry holds exactly one agent per role. Membership is fixed once the
registry is constructed; only the display status of each agent changes
afterwards.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ..models.agent import AgentDefinition
from ..models.roles import AgentRole, AgentStatus
from ..orchestration.errors import ConfigurationError
from .definitions import create_all_agents

logger = logging.getLogger(__name__)


class AgentRegistry:
    """Lookup of agent definitions by id and by role.

    Status kept here is for display only. Per-request execution state lives in
    the orchestrator's execution context.
    """

    def __init__(self, agents: Optional[Iterable[AgentDefinition]] = None):
        """Build the registry.

        Args:
            agents: Explicit agent definitions. Defaults to the five built-in
                agents from ``create_all_agents()``.

        Raises:
            ConfigurationError: If two agents share a role or an id
        """
        if agents is None:
            agents = create_all_agents().values()

        self._by_id: Dict[str, AgentDefinition] = {}
        self._by_role: Dict[AgentRole, AgentDefinition] = {}
        self._status: Dict[str, AgentStatus] = {}

        for agent in agents:
            if agent.id in self._by_id:
                raise ConfigurationError(f"Agent id '{agent.id}' already registered")
            if agent.role in self._by_role:
                raise ConfigurationError(
                    f"Role '{agent.role.value}' already registered by agent "
                    f"'{self._by_role[agent.role].id}'"
                )
            self._by_id[agent.id] = agent
            self._by_role[agent.role] = agent
            self._status[agent.id] = AgentStatus.IDLE

        logger.debug(f"Registered {len(self._by_id)} agents: {', '.join(self._by_id)}")

    def get(self, agent_id: str) -> Optional[AgentDefinition]:
        return self._by_id.get(agent_id)

    def get_by_role(self, role: AgentRole) -> Optional[AgentDefinition]:
        return self._by_role.get(AgentRole(role))

    def all(self) -> List[AgentDefinition]:
        return list(self._by_id.values())

    def specialized(self) -> List[AgentDefinition]:
        """Every agent except the orchestration agent."""
        return [a for a in self._by_id.values() if a.role is not AgentRole.ORCHESTRATION]

    def orchestration_agent(self) -> AgentDefinition:
        """Return the orchestration agent.

        Raises:
            ConfigurationError: If no orchestration agent is registered
        """
        agent = self._by_role.get(AgentRole.ORCHESTRATION)
        if agent is None:
            raise ConfigurationError("Orchestration agent not found")
        return agent

    def set_status(self, agent_id: str, status: AgentStatus) -> None:
        if agent_id not in self._status:
            logger.warning(f"Ignoring status update for unknown agent '{agent_id}'")
            return
        self._status[agent_id] = AgentStatus(status)

    def status(self, agent_id: str) -> Optional[AgentStatus]:
        return self._status.get(agent_id)

    def capabilities(self) -> Dict[AgentRole, List[str]]:
        """Capabilities of every registered agent, keyed by role."""
        return {agent.role: list(agent.capabilities) for agent in self._by_id.values()}

    def __len__(self) -> int:
        return len(self._by_id)
