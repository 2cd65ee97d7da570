"""Unit tests for agent selection and execution ordering."""

import pytest

from workflow_agents.models.roles import SPECIALIZED_ROLES, AgentRole
from workflow_agents.orchestration.planning.selector import (
    KeywordAgentSelector,
    create_keyword_rule,
    execution_order,
)


class TestKeywordAgentSelector:
    """Test keyword-driven selection."""

    @pytest.fixture
    def selector(self):
        return KeywordAgentSelector()

    @pytest.mark.parametrize("message,expected", [
        ("Connect to Salesforce", {AgentRole.INTEGRATION}),
        ("Build a login form", {AgentRole.SECURITY, AgentRole.DESIGN}),
        ("Review this script", {AgentRole.QUALITY}),
        ("Create a workflow that posts to Slack", {AgentRole.SECURITY, AgentRole.INTEGRATION, AgentRole.QUALITY}),
    ])
    def test_keyword_matches(self, selector, message, expected):
        assert set(selector.select(message)) == expected

    def test_case_insensitive(self, selector):
        assert selector.select("DASHBOARD please") == [AgentRole.DESIGN]

    def test_no_match_selects_everything(self, selector):
        """Test a message with no keywords selects every specialized role."""
        assert set(selector.select("Hello there")) == set(SPECIALIZED_ROLES)

    def test_explicit_list_used_verbatim(self, selector):
        """Test explicit roles bypass keyword rules."""
        assert selector.select("Build a form", explicit=[AgentRole.QUALITY]) == [AgentRole.QUALITY]

    def test_explicit_empty_selects_nothing(self, selector):
        assert selector.select("Build a form", explicit=[]) == []

    def test_no_duplicates_from_rules(self, selector):
        """Test a role matched by several keywords is selected once."""
        roles = selector.select("workflow code script function")

        assert roles.count(AgentRole.QUALITY) == 1

    def test_custom_rules(self):
        selector = KeywordAgentSelector(rules=[])
        selector.add_rule(create_keyword_rule(AgentRole.DESIGN, ["Colour"]))

        assert selector.select("pick a colour") == [AgentRole.DESIGN]
        assert set(selector.select("nothing")) == set(SPECIALIZED_ROLES)


class TestExecutionOrder:
    """Test ordering of selected roles."""

    def test_fixed_order(self):
        """Test roles always run security, integration, design, quality."""
        roles = [AgentRole.QUALITY, AgentRole.DESIGN, AgentRole.SECURITY, AgentRole.INTEGRATION]

        assert execution_order(roles) == [
            AgentRole.SECURITY, AgentRole.INTEGRATION, AgentRole.DESIGN, AgentRole.QUALITY
        ]

    def test_duplicates_dropped(self):
        assert execution_order([AgentRole.QUALITY, AgentRole.QUALITY]) == [AgentRole.QUALITY]

    def test_orchestration_excluded(self):
        assert execution_order([AgentRole.ORCHESTRATION, AgentRole.DESIGN]) == [AgentRole.DESIGN]

    def test_custom_order(self):
        order = [AgentRole.QUALITY, AgentRole.SECURITY]

        assert execution_order([AgentRole.SECURITY, AgentRole.QUALITY], order) == order

    def test_accepts_values(self):
        assert execution_order(["design", "security"]) == [AgentRole.SECURITY, AgentRole.DESIGN]
