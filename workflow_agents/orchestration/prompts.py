"""Prompt templates for agent and synthesis calls."""

from typing import Iterable, List, Optional

from jinja2 import DictLoader, Environment, StrictUndefined

from ..models.agent import AgentDefinition
from ..models.context import RunContext
from ..models.orchestration import AgentResponse, ValidationResult

_TEMPLATES = {
    "context.j2": """
User Request: {{ message }}
Organization: {{ context.organization_id }}
User Role: {{ context.user_role }}
Session: {{ context.session_id }}
{% if previous %}

Previous Agent Responses:
{% for response in previous %}

{{ response.agent_role.value | upper }} Agent: {{ response.content }}
{% if response.tool_calls %}
Tools Used: {{ response.tool_calls | map(attribute='tool_name') | join(', ') }}
{% endif %}
{% endfor %}
{% endif %}
""",
    "system.j2": """{{ agent.instructions }}

Available Tools:
{% for tool in agent.tools %}
- {{ tool.name }}: {{ tool.description }}
{% endfor %}

Context Information:
{{ enriched_context }}

Your response should be structured and actionable. If you identify issues, provide clear recommendations for resolution.""",
    "synthesis.j2": """
Synthesize the following agent responses into a comprehensive final response for the user's request: "{{ message }}"

Agent Responses:
{% for response in responses %}

{{ response.agent_role.value | upper }} AGENT:
{{ response.content }}
{% if response.tool_calls %}
Tools Used: {{ response.tool_calls | map(attribute='tool_name') | join(', ') }}
{% endif %}
{% endfor %}

Validation Results:
{% for validation in validations %}
- {{ validation.type | upper }}: {{ validation.status.value }} - {{ validation.message }}
{% endfor %}

Provide a clear, comprehensive response that:
1. Summarizes what has been accomplished
2. Highlights any important findings or recommendations
3. Lists any issues that need to be addressed
4. Provides next steps or action items
""",
    "synthesis_system.j2": (
        "You are the orchestration agent. Merge the specialized agents' findings "
        "into one answer for the user."
    ),
}

_env = Environment(
    loader=DictLoader(_TEMPLATES),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    autoescape=False,
)


def build_enriched_context(
    message: str,
    context: RunContext,
    previous: Optional[Iterable[AgentResponse]] = None
) -> str:
    """Request details plus every earlier response of this request."""
    return _env.get_template("context.j2").render(
        message=message,
        context=context,
        previous=list(previous or []),
    )


def build_system_prompt(agent: AgentDefinition, enriched_context: str) -> str:
    return _env.get_template("system.j2").render(agent=agent, enriched_context=enriched_context)


def build_synthesis_prompt(
    message: str,
    responses: List[AgentResponse],
    validations: List[ValidationResult]
) -> str:
    return _env.get_template("synthesis.j2").render(
        message=message,
        responses=responses,
        validations=validations,
    )


def synthesis_system_prompt() -> str:
    return _env.get_template("synthesis_system.j2").render()
