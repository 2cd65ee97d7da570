"""Planning module for agent selection and ordering."""

from .selector import (
    DEFAULT_KEYWORD_RULES,
    AgentSelector,
    KeywordAgentSelector,
    KeywordRule,
    create_keyword_rule,
    execution_order,
)

__all__ = [
    "AgentSelector",
    "KeywordAgentSelector",
    "KeywordRule",
    "create_keyword_rule",
    "DEFAULT_KEYWORD_RULES",
    "execution_order",
]
