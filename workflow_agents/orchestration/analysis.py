"""Post-processing of agent responses.

Confidence and reasoning are heuristic annotations for display. Nothing in the
orchestrator makes decisions based on them.
"""

import re
from typing import Iterable, List, Optional

from ..config.constants import (
    CONFIDENCE_BASE,
    CONFIDENCE_LENGTH_BONUS,
    CONFIDENCE_LENGTH_THRESHOLD,
    CONFIDENCE_TOOL_WEIGHT,
    MAX_SUGGESTIONS,
    REASONING_KEYWORDS,
)
from ..models.orchestration import AgentResponse, ValidationResult, ValidationStatus
from ..models.roles import AgentRole
from ..models.tools import ToolCall

_CODE_BLOCK = re.compile(r"```[^\n`]*\n?(.*?)\n?```", re.DOTALL)


def calculate_confidence(content: str, tool_calls: Optional[List[ToolCall]] = None) -> float:
    """Base score, plus tool success rate, plus a bonus for long answers; clamped to [0, 1]."""
    confidence = CONFIDENCE_BASE
    if tool_calls:
        succeeded = sum(1 for call in tool_calls if call.succeeded)
        confidence += (succeeded / len(tool_calls)) * CONFIDENCE_TOOL_WEIGHT
    if len(content) > CONFIDENCE_LENGTH_THRESHOLD:
        confidence += CONFIDENCE_LENGTH_BONUS
    return max(0.0, min(confidence, 1.0))


def extract_reasoning(content: str) -> Optional[str]:
    """First sentence that reads like a justification, if any."""
    for sentence in content.split(". "):
        lowered = sentence.lower()
        if any(keyword in lowered for keyword in REASONING_KEYWORDS):
            return sentence if sentence.endswith(".") else sentence + "."
    return None


def validation_type_for(role: AgentRole) -> str:
    """Finding category for an agent role; the orchestration agent reports as quality."""
    if role is AgentRole.ORCHESTRATION:
        return AgentRole.QUALITY.value
    return AgentRole(role).value


def extract_validation_results(response: AgentResponse) -> List[ValidationResult]:
    """One finding per failed tool call or per successful call that raised warnings."""
    findings: List[ValidationResult] = []
    category = validation_type_for(response.agent_role)

    for call in response.tool_calls:
        result = call.result
        if result is None:
            continue
        if not result.success:
            findings.append(
                ValidationResult(
                    agent_role=response.agent_role,
                    type=category,
                    status=ValidationStatus.FAILED,
                    message=result.error or "Tool execution failed",
                    details={"tool_name": call.tool_name, "parameters": call.parameters},
                    suggestions=result.suggestions,
                )
            )
        elif result.warnings:
            findings.append(
                ValidationResult(
                    agent_role=response.agent_role,
                    type=category,
                    status=ValidationStatus.WARNING,
                    message=", ".join(result.warnings),
                    details={"tool_name": call.tool_name},
                    suggestions=result.suggestions,
                )
            )
    return findings


def collect_suggestions(
    responses: Iterable[AgentResponse],
    validations: Iterable[ValidationResult],
    limit: int = MAX_SUGGESTIONS
) -> List[str]:
    """Tool suggestions then finding suggestions, de-duplicated in order."""
    suggestions: List[str] = []
    for response in responses:
        for call in response.tool_calls:
            if call.result and call.result.suggestions:
                suggestions.extend(call.result.suggestions)
    for validation in validations:
        if validation.suggestions:
            suggestions.extend(validation.suggestions)
    return list(dict.fromkeys(suggestions))[:limit]


def extract_workflow_code(responses: Iterable[AgentResponse]) -> Optional[str]:
    """Body of the first fenced code block in any response."""
    for response in responses:
        match = _CODE_BLOCK.search(response.content)
        if match:
            return match.group(1)
    return None
