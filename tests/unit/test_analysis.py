"""Unit tests for response analysis, prompt rendering and synthesis."""

import pytest

from workflow_agents.agents.definitions import create_security_agent
from workflow_agents.models.orchestration import AgentResponse, ValidationResult, ValidationStatus
from workflow_agents.models.roles import AgentRole
from workflow_agents.models.tools import ToolCall, ToolResult
from workflow_agents.orchestration import OrchestrationConfig, Synthesizer, fallback_synthesis
from workflow_agents.orchestration.analysis import (
    calculate_confidence,
    collect_suggestions,
    extract_reasoning,
    extract_validation_results,
    extract_workflow_code,
    validation_type_for,
)
from workflow_agents.orchestration.errors import SynthesisError
from workflow_agents.orchestration.prompts import (
    build_enriched_context,
    build_synthesis_prompt,
    build_system_prompt,
)
from tests.helpers.stub_provider import StubInferenceProvider


def make_call(name, success=True, error=None, warnings=None, suggestions=None):
    return ToolCall(
        tool_name=name,
        parameters={"x": 1},
        result=ToolResult(success=success, error=error, warnings=warnings, suggestions=suggestions),
    )


def make_response(role=AgentRole.SECURITY, content="Looks fine.", tool_calls=None):
    return AgentResponse(
        agent_id=f"{role.value}-agent",
        agent_role=role,
        content=content,
        tool_calls=tool_calls or [],
        confidence=0.7,
    )


class TestConfidence:
    """Test the confidence heuristic."""

    def test_base(self):
        assert calculate_confidence("short") == pytest.approx(0.7)

    def test_tool_success_rate(self):
        """Test half the tools succeeding adds half the tool weight."""
        calls = [make_call("a"), make_call("b", success=False)]

        assert calculate_confidence("short", calls) == pytest.approx(0.8)

    def test_clamped_to_one(self):
        calls = [make_call("a")]

        assert calculate_confidence("x" * 600, calls) == pytest.approx(1.0)


class TestReasoning:
    """Test reasoning extraction."""

    def test_first_justifying_sentence(self):
        content = "The form is fine. It needs review because input is unchecked. Done"

        assert extract_reasoning(content) == "It needs review because input is unchecked."

    def test_none_when_no_keyword(self):
        assert extract_reasoning("All good. Nothing else.") is None


class TestValidationResults:
    """Test findings derived from tool calls."""

    def test_failed_and_warning_calls(self):
        """Test one finding per failed call or call with warnings."""
        response = make_response(tool_calls=[
            make_call("scan_for_secrets", success=False, error="secret found", suggestions=["rotate"]),
            make_call("validate_package_security", warnings=["Found 1 security vulnerabilities"]),
            make_call("check_permissions"),
        ])

        findings = extract_validation_results(response)

        assert [f.status for f in findings] == [ValidationStatus.FAILED, ValidationStatus.WARNING]
        assert findings[0].type == "security"
        assert findings[0].message == "secret found"
        assert findings[0].details == {"tool_name": "scan_for_secrets", "parameters": {"x": 1}}
        assert findings[1].message == "Found 1 security vulnerabilities"

    def test_missing_error_message(self):
        response = make_response(tool_calls=[make_call("t", success=False)])

        assert extract_validation_results(response)[0].message == "Tool execution failed"

    def test_orchestration_reports_as_quality(self):
        assert validation_type_for(AgentRole.ORCHESTRATION) == "quality"
        assert validation_type_for(AgentRole.DESIGN) == "design"


class TestSuggestions:
    """Test suggestion aggregation."""

    def test_deduplicated_in_order(self):
        response = make_response(tool_calls=[make_call("a", suggestions=["one", "two"])])
        finding = ValidationResult(
            agent_role=AgentRole.SECURITY,
            type="security",
            status=ValidationStatus.FAILED,
            message="m",
            suggestions=["two", "three"],
        )

        assert collect_suggestions([response], [finding]) == ["one", "two", "three"]

    def test_limit(self):
        response = make_response(tool_calls=[make_call("a", suggestions=[str(i) for i in range(20)])])

        assert len(collect_suggestions([response], [])) == 10


class TestWorkflowCode:
    """Test code block extraction."""

    def test_first_fenced_block(self):
        responses = [
            make_response(content="No code here."),
            make_response(role=AgentRole.QUALITY, content="Try:\n```python\nprint('hi')\n```\n```js\nx\n```"),
        ]

        assert extract_workflow_code(responses) == "print('hi')"

    def test_no_code(self):
        assert extract_workflow_code([make_response()]) is None


class TestPrompts:
    """Test template rendering."""

    def test_enriched_context_includes_previous(self, run_context):
        previous = [make_response(content="Security checked.", tool_calls=[make_call("scan_for_secrets")])]

        text = build_enriched_context("Build a form", run_context, previous)

        assert "User Request: Build a form" in text
        assert "Organization: org-1" in text
        assert "SECURITY Agent: Security checked." in text
        assert "Tools Used: scan_for_secrets" in text

    def test_enriched_context_without_previous(self, run_context):
        assert "Previous Agent Responses" not in build_enriched_context("Hi", run_context)

    def test_system_prompt_lists_tools(self, run_context):
        agent = create_security_agent()

        prompt = build_system_prompt(agent, "CONTEXT")

        assert prompt.startswith(agent.instructions)
        assert "- scan_for_secrets: " in prompt
        assert "CONTEXT" in prompt

    def test_synthesis_prompt(self):
        finding = ValidationResult(
            agent_role=AgentRole.SECURITY, type="security", status=ValidationStatus.WARNING, message="careful"
        )

        prompt = build_synthesis_prompt("Build a form", [make_response()], [finding])

        assert '"Build a form"' in prompt
        assert "SECURITY AGENT:" in prompt
        assert "- SECURITY: warning - careful" in prompt


class TestFallbackSynthesis:
    """Test the deterministic summary."""

    def test_names_every_role_and_issue(self):
        responses = [make_response(), make_response(role=AgentRole.QUALITY, content="q" * 500)]
        findings = [
            ValidationResult(agent_role=AgentRole.SECURITY, type="security", status=ValidationStatus.FAILED, message="bad"),
            ValidationResult(agent_role=AgentRole.QUALITY, type="quality", status=ValidationStatus.PASSED, message="ok"),
        ]

        text = fallback_synthesis(responses, findings)

        assert "**SECURITY Agent**" in text
        assert "**QUALITY Agent**: " + "q" * 200 + "..." in text
        assert "q" * 201 not in text
        assert "**Issues Found**: security: bad" in text
        assert "quality: ok" not in text
        assert "analyzed by 2 specialized agents" in text

    def test_no_issues_section(self):
        assert "Issues Found" not in fallback_synthesis([make_response()], [])


class TestSynthesizer:
    """Test the AI synthesis call."""

    @pytest.mark.asyncio
    async def test_success(self):
        provider = StubInferenceProvider(texts={"synthesis": "Merged answer."})
        synthesizer = Synthesizer(provider, OrchestrationConfig())

        result = await synthesizer.synthesize("Build", [make_response()], [], timeout_s=5)

        assert result.text == "Merged answer."
        assert provider.calls[0]["caller"] == "synthesis"
        assert provider.calls[0]["max_tokens"] == 2000
        assert provider.calls[0]["temperature"] == pytest.approx(0.4)

    @pytest.mark.asyncio
    async def test_provider_failure(self):
        provider = StubInferenceProvider(failures={"synthesis": RuntimeError("down")})

        with pytest.raises(SynthesisError) as exc_info:
            await Synthesizer(provider, OrchestrationConfig()).synthesize("Build", [], [], timeout_s=5)

        assert exc_info.value.reason == "down"

    @pytest.mark.asyncio
    async def test_empty_output(self):
        provider = StubInferenceProvider(texts={"synthesis": "   "})

        with pytest.raises(SynthesisError, match="empty synthesis output"):
            await Synthesizer(provider, OrchestrationConfig()).synthesize("Build", [], [], timeout_s=5)

    @pytest.mark.asyncio
    async def test_timeout(self):
        provider = StubInferenceProvider(delays={"synthesis": 1.0})

        with pytest.raises(SynthesisError) as exc_info:
            await Synthesizer(provider, OrchestrationConfig()).synthesize("Build", [], [], timeout_s=0.01)

        assert exc_info.value.reason == "timed out after 0.01s"
