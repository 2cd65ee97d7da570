"""Agent selection strategies.

A selector decides which specialized roles a request needs. Selection is pure:
it depends only on the message and the caller's explicit list.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from ...models.roles import SPECIALIZED_ROLES, AgentRole


class AgentSelector(ABC):
    """Abstract base class for agent selectors."""

    @abstractmethod
    def select(self, message: str, explicit: Optional[Sequence[AgentRole]] = None) -> List[AgentRole]:
        """
        Choose the specialized roles for a request.

        Args:
            message: The user's message
            explicit: Roles requested by the caller. When not None it is
                returned verbatim (an empty list selects nothing).

        Returns:
            Selected roles, unordered and possibly with duplicates
        """
        pass


@dataclass
class KeywordRule:
    """Select ``role`` when any keyword occurs in the lowercased message."""

    role: AgentRole
    keywords: List[str] = field(default_factory=list)
    description: Optional[str] = None

    def matches(self, message: str) -> bool:
        lowered = message.lower()
        return any(keyword in lowered for keyword in self.keywords)


def create_keyword_rule(role: AgentRole, keywords: Iterable[str], description: Optional[str] = None) -> KeywordRule:
    return KeywordRule(role=AgentRole(role), keywords=[k.lower() for k in keywords], description=description)


DEFAULT_KEYWORD_RULES = [
    create_keyword_rule(AgentRole.SECURITY, ["workflow", "create", "build"], "Anything that produces a workflow"),
    create_keyword_rule(
        AgentRole.INTEGRATION,
        ["integration", "api", "connect", "salesforce", "slack", "email"],
        "External systems"
    ),
    create_keyword_rule(AgentRole.DESIGN, ["form", "ui", "interface", "design", "dashboard"], "User interfaces"),
    create_keyword_rule(AgentRole.QUALITY, ["code", "workflow", "function", "script"], "Generated code"),
]


class KeywordAgentSelector(AgentSelector):
    """Selector driven by keyword substring rules.

    If no rule matches, every specialized role is selected.
    """

    def __init__(self, rules: Optional[List[KeywordRule]] = None):
        self.rules = list(rules if rules is not None else DEFAULT_KEYWORD_RULES)

    def add_rule(self, rule: KeywordRule) -> None:
        self.rules.append(rule)

    def select(self, message: str, explicit: Optional[Sequence[AgentRole]] = None) -> List[AgentRole]:
        if explicit is not None:
            return [AgentRole(role) for role in explicit]

        selected: List[AgentRole] = []
        for rule in self.rules:
            if rule.role not in selected and rule.matches(message):
                selected.append(rule.role)

        return selected or list(SPECIALIZED_ROLES)


def execution_order(roles: Iterable[AgentRole], order: Sequence[AgentRole] = SPECIALIZED_ROLES) -> List[AgentRole]:
    """Filter ``order`` down to the given roles, dropping duplicates and non-specialized roles."""
    wanted = {AgentRole(role) for role in roles}
    return [role for role in order if role in wanted]
