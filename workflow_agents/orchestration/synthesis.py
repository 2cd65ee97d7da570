"""Merging agent responses into the final answer."""

import asyncio
from typing import List

from ..config.constants import FALLBACK_SUMMARY_CHARS
from ..models.orchestration import AgentResponse, ValidationResult, ValidationStatus
from ..providers.base import InferenceProvider, InferenceResult
from .errors import SynthesisError
from .options import OrchestrationConfig
from .prompts import build_synthesis_prompt, synthesis_system_prompt


class Synthesizer:
    """AI synthesis over all responses and findings of a request."""

    def __init__(self, provider: InferenceProvider, config: OrchestrationConfig):
        self.provider = provider
        self.config = config

    async def synthesize(
        self,
        message: str,
        responses: List[AgentResponse],
        validations: List[ValidationResult],
        timeout_s: float
    ) -> InferenceResult:
        """Run the synthesis call.

        Raises:
            SynthesisError: If the call fails, times out or returns no text
        """
        prompt = build_synthesis_prompt(message, responses, validations)
        try:
            result = await asyncio.wait_for(
                self.provider.infer(
                    system_prompt=synthesis_system_prompt(),
                    user_message=prompt,
                    max_tokens=self.config.synthesis_max_tokens,
                    temperature=self.config.synthesis_temperature,
                ),
                timeout=timeout_s,
            )
        except asyncio.TimeoutError as e:
            raise SynthesisError(f"timed out after {timeout_s:g}s", e) from e
        except Exception as e:
            raise SynthesisError(str(e) or type(e).__name__, e) from e

        if not result.text.strip():
            raise SynthesisError("empty synthesis output")
        return result


def fallback_synthesis(responses: List[AgentResponse], validations: List[ValidationResult]) -> str:
    """Deterministic summary used when AI synthesis is skipped or fails.

    Always names every responding agent's role and repeats every failed or
    warning finding's message.
    """
    summaries = "\n\n".join(
        f"**{response.agent_role.value.upper()} Agent**: "
        f"{response.content[:FALLBACK_SUMMARY_CHARS]}..."
        for response in responses
    )

    issues = [v for v in validations if v.status in (ValidationStatus.FAILED, ValidationStatus.WARNING)]
    issues_summary = ""
    if issues:
        issues_summary = "\n\n**Issues Found**: " + ", ".join(f"{i.type}: {i.message}" for i in issues)

    return (
        "## Multi-Agent Analysis Complete\n\n"
        f"{summaries}{issues_summary}\n\n"
        f"The workflow has been analyzed by {len(responses)} specialized agents. "
        "Please review the recommendations above and address any identified issues."
    )
