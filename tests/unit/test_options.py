"""Unit tests for orchestrator configuration."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from workflow_agents.models.roles import AgentRole
from workflow_agents.orchestration import OrchestrationConfig


class TestOrchestrationConfig:
    """Test defaults and validation."""

    def test_defaults(self):
        config = OrchestrationConfig()

        assert config.default_max_cost == 1.0
        assert config.cost_per_token == pytest.approx(0.000003)
        assert config.per_agent_budget_check is False
        assert config.agent_max_tokens == 4000
        assert config.agent_temperature == pytest.approx(0.3)
        assert config.execution_order == (
            AgentRole.SECURITY, AgentRole.INTEGRATION, AgentRole.DESIGN, AgentRole.QUALITY
        )

    def test_custom_execution_order(self):
        order = ("quality", "design", "integration", "security")

        config = OrchestrationConfig(execution_order=order)

        assert config.execution_order[0] == AgentRole.QUALITY

    @pytest.mark.parametrize("order", [
        ("security", "security", "design", "quality"),
        ("security", "design", "quality"),
        ("orchestration", "security", "design", "integration", "quality"),
    ])
    def test_invalid_execution_order(self, order):
        """Test the order must name every specialized role exactly once."""
        with pytest.raises(ValidationError):
            OrchestrationConfig(execution_order=order)

    def test_ceiling_must_be_positive(self):
        with pytest.raises(ValidationError):
            OrchestrationConfig(default_max_cost=0)


class TestFromEnv:
    """Test environment loading."""

    @pytest.fixture(autouse=True)
    def no_dotenv(self):
        with patch("workflow_agents.orchestration.options.load_dotenv"):
            yield

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("WORKFLOW_AGENTS_MODEL", "claude-test")
        monkeypatch.setenv("WORKFLOW_AGENTS_MAX_COST", "0.5")
        monkeypatch.setenv("WORKFLOW_AGENTS_COST_PER_TOKEN", "0.00001")
        monkeypatch.setenv("WORKFLOW_AGENTS_AGENT_TIMEOUT", "12")
        monkeypatch.setenv("WORKFLOW_AGENTS_PER_AGENT_BUDGET_CHECK", "Yes")

        config = OrchestrationConfig.from_env()

        assert config.model == "claude-test"
        assert config.default_max_cost == 0.5
        assert config.cost_per_token == pytest.approx(0.00001)
        assert config.agent_timeout_s == 12.0
        assert config.per_agent_budget_check is True

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("WORKFLOW_AGENTS_MAX_COST", "0.5")

        config = OrchestrationConfig.from_env(default_max_cost=2.0)

        assert config.default_max_cost == 2.0

    def test_unset_uses_defaults(self, monkeypatch):
        for name in (
            "WORKFLOW_AGENTS_MODEL",
            "WORKFLOW_AGENTS_MAX_COST",
            "WORKFLOW_AGENTS_COST_PER_TOKEN",
            "WORKFLOW_AGENTS_AGENT_TIMEOUT",
            "WORKFLOW_AGENTS_PER_AGENT_BUDGET_CHECK",
        ):
            monkeypatch.delenv(name, raising=False)

        assert OrchestrationConfig.from_env() == OrchestrationConfig()
