"""Shared pytest fixtures for Workflow Agents tests."""

import pytest

from workflow_agents.agents.registry import AgentRegistry
from workflow_agents.models.context import RunContext
from workflow_agents.models.orchestration import OrchestrationRequest
from workflow_agents.observability import InMemoryMetricsSink
from workflow_agents.orchestration import AgentOrchestrator, OrchestrationConfig
from tests.helpers.stub_provider import StubInferenceProvider


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: end-to-end flows through the full stack")


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Mock environment variables for testing."""
    env_vars = {
        "ANTHROPIC_API_KEY": "test-anthropic-key",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def run_context():
    """Sample run context."""
    return RunContext(
        organization_id="org-1",
        user_id="user-123",
        user_role="developer",
        permissions=["workflows:create", "workflows:read"],
        session_id="session-1",
    )


@pytest.fixture
def stub_provider():
    """Deterministic inference provider."""
    return StubInferenceProvider()


@pytest.fixture
def config():
    return OrchestrationConfig()


@pytest.fixture
def metrics_sink():
    return InMemoryMetricsSink()


@pytest.fixture
def orchestrator(stub_provider, config, metrics_sink):
    """Orchestrator wired to the stub provider and a fresh registry."""
    return AgentOrchestrator(
        provider=stub_provider,
        registry=AgentRegistry(),
        config=config,
        metrics_sink=metrics_sink,
    )


@pytest.fixture
def make_request(run_context):
    """Factory for orchestration requests."""
    def _make(message="Review this workflow", **kwargs):
        return OrchestrationRequest(user_message=message, context=run_context, **kwargs)
    return _make
