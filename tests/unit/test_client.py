"""Unit tests for the high-level client."""

from unittest.mock import AsyncMock, patch

import pytest

from workflow_agents import WorkflowAgentsClient
from workflow_agents.agents.definitions import create_orchestration_agent, create_security_agent
from workflow_agents.agents.registry import AgentRegistry
from workflow_agents.api.client import process_workflow
from workflow_agents.models.roles import AgentRole
from workflow_agents.models.tools import ToolCallRequest
from workflow_agents.orchestration import ConfigurationError, OrchestrationConfig
from tests.helpers.stub_provider import StubInferenceProvider


def make_client(provider=None, **kwargs):
    return WorkflowAgentsClient(
        provider=provider or StubInferenceProvider(),
        config=OrchestrationConfig(),
        **kwargs
    )


class TestProcessWorkflow:
    """Test request construction and delegation."""

    @pytest.mark.asyncio
    async def test_runs_selected_agents(self, run_context):
        provider = StubInferenceProvider()
        client = make_client(provider)

        result = await client.process_workflow("Review this workflow", run_context)

        assert result.success is True
        assert provider.callers == ["orchestration", "security", "quality", "synthesis"]

    @pytest.mark.asyncio
    async def test_explicit_agents_and_budget(self, run_context):
        provider = StubInferenceProvider()
        client = make_client(provider)

        result = await client.process_workflow(
            "Anything", run_context, required_agents=[AgentRole.DESIGN], max_cost=0.0001
        )

        assert result.success is False
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_module_level_helper(self, run_context):
        """Test the convenience function delegates to a default client."""
        with patch.object(WorkflowAgentsClient, "__init__", return_value=None), \
                patch.object(WorkflowAgentsClient, "process_workflow", new_callable=AsyncMock) as mock_process:
            mock_process.return_value = "result"

            result = await process_workflow("Hi", run_context, max_cost=0.5)

        assert result == "result"
        mock_process.assert_awaited_once_with("Hi", run_context, max_cost=0.5)


class TestBuildWorkflow:
    """Test workflow building."""

    @pytest.mark.asyncio
    async def test_default_roles(self, run_context):
        """Test security scan and quality review run by default."""
        provider = StubInferenceProvider()

        await make_client(provider).build_workflow("Anything at all", run_context)

        assert provider.callers == ["orchestration", "security", "quality", "synthesis"]

    @pytest.mark.asyncio
    async def test_flags_and_required_agents_are_merged(self, run_context):
        provider = StubInferenceProvider()

        await make_client(provider).build_workflow(
            "Anything",
            run_context,
            required_agents=[AgentRole.QUALITY],
            include_security_scan=False,
            include_design_validation=True,
            include_integration_check=True,
        )

        assert provider.callers == ["orchestration", "integration", "design", "quality", "synthesis"]

    @pytest.mark.asyncio
    async def test_findings_split_by_category(self, run_context):
        """Test failed tool findings land in the matching issue list."""
        provider = StubInferenceProvider(
            texts={"quality": "Generated:\n```js\nrun()\n```"},
            tool_calls={
                "security": [
                    ToolCallRequest(tool_name="scan_for_secrets", arguments={"workflow_code": 'password = "x"'})
                ]
            },
        )

        result = await make_client(provider).build_workflow("Build it", run_context)

        assert result.success is True
        assert result.workflow_code == "run()"
        assert len(result.security_issues) == 1
        assert result.quality_issues == []
        assert "Remove hardcoded secrets and use environment variables" in result.recommendations
        assert result.total_cost > 0


class TestValidateWorkflow:
    """Test real-time validation."""

    @pytest.mark.asyncio
    async def test_single_validation_type(self, run_context):
        provider = StubInferenceProvider()

        result = await make_client(provider).validate_workflow(
            run_context,
            code="const x = 1;",
            integrations=["slack"],
            validation_type="design",
        )

        assert result.is_valid is True
        assert provider.callers == ["orchestration", "design", "synthesis"]
        message = provider.calls[0]["system_prompt"]
        assert "User Request: Validate the following workflow data:" in message
        assert "Integrations: slack" in message

    @pytest.mark.asyncio
    async def test_all_types(self, run_context):
        provider = StubInferenceProvider()

        await make_client(provider).validate_workflow(run_context, code="x")

        assert provider.callers == ["orchestration", "security", "integration", "design", "quality", "synthesis"]

    @pytest.mark.asyncio
    async def test_agent_errors_make_it_invalid(self, run_context):
        """Test run errors become failed issues."""
        provider = StubInferenceProvider(failures={"design": RuntimeError("boom")})

        result = await make_client(provider).validate_workflow(run_context, code="x", validation_type="design")

        assert result.is_valid is False
        assert result.issues[-1].message.startswith("Validation failed:")
        assert result.issues[-1].agent_role == AgentRole.ORCHESTRATION

    @pytest.mark.asyncio
    async def test_unknown_validation_type(self, run_context):
        with pytest.raises(ValueError):
            await make_client().validate_workflow(run_context, code="x", validation_type="marketing")


class TestToolShortcuts:
    """Test client operations that call tools directly."""

    @pytest.mark.asyncio
    async def test_suggest_integrations(self, run_context):
        provider = StubInferenceProvider()

        result = await make_client(provider).suggest_integrations("Sync Salesforce leads", run_context)

        assert result.suggestions[0].integration_id == "salesforce"
        assert result.suggestions[0].score == 3
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_suggest_integrations_by_category(self, run_context):
        result = await make_client().suggest_integrations("Nothing specific", run_context, categories=["Email"])

        assert [s.integration_id for s in result.suggestions] == ["gmail"]

    @pytest.mark.asyncio
    async def test_security_scan(self, run_context):
        """Test the score is the share of passing scans."""
        provider = StubInferenceProvider()

        report = await make_client(provider).security_scan(
            'const password = "hunter2";',
            [{"name": "lodash", "version": "4.17.15"}],
            run_context,
        )

        assert report.security_score == 33
        assert len(report.vulnerabilities) == 1
        assert [p["policy_id"] for p in report.compliance_issues] == ["data-encryption"]
        assert report.secrets[0]["type"] == "hardcoded password"
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_clean_security_scan(self, run_context):
        report = await make_client().security_scan("const x = 1;", [], run_context)

        assert report.security_score == 100
        assert report.recommendations == []

    @pytest.mark.asyncio
    async def test_missing_agent(self, run_context):
        registry = AgentRegistry([create_orchestration_agent(), create_security_agent()])
        client = make_client(registry=registry)

        with pytest.raises(ConfigurationError, match="Integration agent not available"):
            await client.suggest_integrations("x", run_context)


class TestIntrospection:
    """Test capability, status and metrics views."""

    def test_capabilities(self):
        capabilities = make_client().capabilities()

        assert set(capabilities) == {"orchestration", "security", "design", "integration", "quality"}

    @pytest.mark.asyncio
    async def test_statuses_and_metrics(self, run_context):
        client = make_client()
        assert client.statuses()["security-agent"] == {"status": "idle", "is_active": False}

        await client.process_workflow("Review this workflow", run_context)

        assert client.statuses()["security-agent"]["status"] == "completed"
        assert client.statuses()["design-agent"]["status"] == "idle"
        assert any(key.startswith("security-agent:") for key in client.metrics())
