"""Unit tests for the command line interface."""

import json
from unittest.mock import patch

import pytest

from workflow_agents.api.client import WorkflowAgentsClient
from workflow_agents.cli import main
from workflow_agents.orchestration import OrchestrationConfig
from tests.helpers.stub_provider import StubInferenceProvider


def stub_client_factory(provider):
    def factory(*args, **kwargs):
        return WorkflowAgentsClient(provider=provider, config=OrchestrationConfig())
    return factory


class TestAgentsCommand:
    """Test `workflow-agents agents`."""

    def test_lists_every_agent(self, capsys):
        assert main(["agents"]) == 0

        out = capsys.readouterr().out
        assert out.startswith("Available Agents:")
        assert "Security Agent [security] (security-agent)" in out
        assert "Tools: validate_package_security, check_permissions" in out
        assert "Workflow Orchestration Agent [orchestration]" in out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage:" in capsys.readouterr().out


class TestProcessCommand:
    """Test `workflow-agents process`."""

    def test_prints_response_json(self, capsys):
        provider = StubInferenceProvider()
        with patch("workflow_agents.cli.WorkflowAgentsClient", side_effect=stub_client_factory(provider)):
            code = main(["process", "Review this script", "--permission", "workflows:read"])

        assert code == 0
        body = json.loads(capsys.readouterr().out)
        assert body["success"] is True
        assert provider.callers == ["orchestration", "quality", "synthesis"]

    def test_explicit_agents(self, capsys):
        provider = StubInferenceProvider()
        with patch("workflow_agents.cli.WorkflowAgentsClient", side_effect=stub_client_factory(provider)):
            main(["process", "Anything", "--agents", "design", "security", "--org", "acme"])

        assert provider.callers == ["orchestration", "security", "design", "synthesis"]
        assert "Organization: acme" in provider.calls[0]["system_prompt"]

    def test_budget_halt_exit_code(self, capsys):
        """Test an unsuccessful run exits non-zero."""
        provider = StubInferenceProvider()
        with patch("workflow_agents.cli.WorkflowAgentsClient", side_effect=stub_client_factory(provider)):
            code = main(["process", "Review this workflow", "--max-cost", "0.0001"])

        assert code == 1
        assert json.loads(capsys.readouterr().out)["errors"][0].startswith("Orchestration cost")

    def test_client_error(self, capsys):
        with patch("workflow_agents.cli.WorkflowAgentsClient", side_effect=RuntimeError("no key")):
            code = main(["process", "Hi"])

        assert code == 1
        assert capsys.readouterr().out.strip() == "Error: no key"

    def test_invalid_agent_choice(self):
        with pytest.raises(SystemExit):
            main(["process", "Hi", "--agents", "marketing"])
