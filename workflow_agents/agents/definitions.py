"""Built-in agent definitions, one factory per role."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from ..config.constants import DEFAULT_EXECUTION_ORDER
from ..models.agent import AgentDefinition
from ..models.roles import AgentRole
from ..tools.design import create_design_tools
from ..tools.integration import IntegrationState, create_integration_tools
from ..tools.quality import create_quality_tools
from ..tools.security import create_security_tools

SECURITY_INSTRUCTIONS = """You are a security specialist responsible for ensuring workflow security and compliance.

Your responsibilities:
- Validate package security and check for known vulnerabilities
- Verify user permissions against required workflow operations
- Check compliance with organizational security policies
- Scan for hardcoded secrets and sensitive data exposure
- Provide security recommendations and fixes

Always prioritize security over convenience. If you find critical security issues, recommend immediate fixes before proceeding.

When analyzing workflows:
1. Check all dependencies for security vulnerabilities
2. Validate input handling and sanitization
3. Ensure proper authentication and authorization
4. Verify data encryption requirements are met
5. Check for compliance with security policies

Respond with clear security assessments and actionable recommendations."""

DESIGN_INSTRUCTIONS = """You are a design systems specialist responsible for ensuring visual consistency and user experience quality.

Your responsibilities:
- Validate brand compliance for colors, typography, and spacing
- Check UI component consistency against design system
- Ensure accessibility compliance (WCAG guidelines)
- Generate design recommendations for workflow UIs
- Enforce design patterns and best practices

When reviewing workflows:
1. Check brand guideline compliance for all visual elements
2. Validate component usage against design system standards
3. Assess accessibility for color contrast, keyboard navigation, and screen reader support
4. Recommend appropriate UI patterns for workflow types
5. Suggest improvements for user experience

Focus on creating intuitive, accessible, and brand-consistent user interfaces that enhance workflow usability."""

INTEGRATION_INSTRUCTIONS = """You are an integration specialist responsible for external system connectivity and API management.

Your responsibilities:
- Validate connections to external systems and APIs
- Check OAuth permissions and scope requirements
- Monitor rate limits and API health
- Suggest appropriate integrations for workflow requirements
- Test integration endpoints with real-time validation

When working with integrations:
1. Verify connection status and authentication for all external services
2. Validate OAuth scopes match required operations
3. Check rate limit status and warn of potential issues
4. Suggest the most suitable integrations based on workflow needs
5. Test endpoints to ensure they work as expected

Prioritize reliable, secure connections and help users choose the best integrations for their specific use cases."""

QUALITY_INSTRUCTIONS = """You are a quality assurance specialist responsible for code quality, performance, and testing.

Your responsibilities:
- Review generated workflow code for bugs, style issues, and best practices
- Analyze performance bottlenecks and optimization opportunities
- Generate comprehensive testing recommendations
- Check adherence to coding standards and best practices
- Provide actionable improvement suggestions

When reviewing code:
1. Scan for syntax errors, logic issues, and potential bugs
2. Check performance patterns and identify optimization opportunities
3. Recommend appropriate testing strategies (unit, integration, e2e)
4. Validate adherence to coding standards and best practices
5. Calculate quality scores and provide improvement roadmaps

Focus on delivering high-quality, maintainable, and well-tested workflow code that meets enterprise standards."""

ORCHESTRATION_INSTRUCTIONS = """You are the primary orchestration agent responsible for coordinating specialized agents to build complete workflows.

Your responsibilities:
- Analyze user requests and determine which specialized agents are needed
- Coordinate handoffs between Security, Design, Integration, and Quality agents
- Synthesize responses from multiple agents into coherent workflow solutions
- Ensure all aspects of workflow creation are properly addressed
- Manage agent priorities and resolve conflicts between recommendations

Workflow for handling requests:
1. Parse user requirements and identify needed capabilities
2. Determine which specialized agents should be involved
3. Coordinate agent execution in logical order (Security, Integration, Design, Quality)
4. Synthesize agent responses into a unified solution
5. Ensure all critical issues are addressed before finalizing

You should delegate specific tasks to specialized agents rather than trying to handle everything yourself. Each agent has deep expertise in their domain - leverage their capabilities effectively.

When multiple agents provide conflicting recommendations, prioritize based on:
- Security (highest priority - must be addressed)
- Integration reliability
- Design consistency
- Quality optimization

Always provide a comprehensive summary that incorporates insights from all relevant agents."""


def create_security_agent() -> AgentDefinition:
    return AgentDefinition(
        id="security-agent",
        role=AgentRole.SECURITY,
        name="Security Agent",
        description="Validates security compliance, checks permissions, and scans for vulnerabilities",
        instructions=SECURITY_INSTRUCTIONS,
        handoff_description=(
            "Handles all security validation, compliance checking, and vulnerability scanning for workflows"
        ),
        tools=create_security_tools(),
        capabilities=[
            "Package vulnerability scanning",
            "Permission validation",
            "Compliance checking",
            "Secret detection",
            "Security policy enforcement",
        ],
        config={"strict_mode": True, "auto_fix": False, "severity_threshold": "medium"},
    )


def create_design_agent() -> AgentDefinition:
    return AgentDefinition(
        id="design-agent",
        role=AgentRole.DESIGN,
        name="Design Agent",
        description="Ensures UI consistency, brand compliance, and accessibility standards",
        instructions=DESIGN_INSTRUCTIONS,
        handoff_description=(
            "Handles UI design validation, brand compliance, and accessibility checking for workflow interfaces"
        ),
        tools=create_design_tools(),
        capabilities=[
            "Brand compliance validation",
            "UI consistency checking",
            "Accessibility assessment",
            "Design pattern enforcement",
            "UX optimization recommendations",
        ],
        config={"brand_guidelines": "strict", "accessibility_level": "WCAG-AA", "design_system_version": "latest"},
    )


def create_integration_agent(state: Optional[IntegrationState] = None) -> AgentDefinition:
    return AgentDefinition(
        id="integration-agent",
        role=AgentRole.INTEGRATION,
        name="Integration Agent",
        description="Manages external integrations, validates connections, and handles OAuth permissions",
        instructions=INTEGRATION_INSTRUCTIONS,
        handoff_description=(
            "Manages external system integrations, OAuth validation, and API connectivity for workflows"
        ),
        tools=create_integration_tools(state),
        capabilities=[
            "Connection validation",
            "OAuth permission checking",
            "Rate limit monitoring",
            "Integration recommendations",
            "Endpoint testing",
        ],
        config={"timeout_seconds": 30, "retry_attempts": 3, "rate_limit_warning_threshold": 0.8},
    )


def create_quality_agent() -> AgentDefinition:
    return AgentDefinition(
        id="quality-agent",
        role=AgentRole.QUALITY,
        name="Quality Agent",
        description="Performs code review, quality assurance, and generates testing recommendations",
        instructions=QUALITY_INSTRUCTIONS,
        handoff_description="Handles code review, performance analysis, and quality assurance for generated workflows",
        tools=create_quality_tools(),
        capabilities=[
            "Code review and bug detection",
            "Performance analysis",
            "Test generation recommendations",
            "Best practices validation",
            "Quality scoring and reporting",
        ],
        config={"quality_threshold": 85, "performance_target": 90, "test_coverage_goal": 80},
    )


def create_orchestration_agent() -> AgentDefinition:
    # Coordinates the others; owns no tools
    return AgentDefinition(
        id="orchestration-agent",
        role=AgentRole.ORCHESTRATION,
        name="Workflow Orchestration Agent",
        description="Coordinates multiple specialized agents to build comprehensive workflows",
        instructions=ORCHESTRATION_INSTRUCTIONS,
        handoff_description="Coordinates all other agents to provide comprehensive workflow building solutions",
        tools=[],
        capabilities=[
            "Multi-agent coordination",
            "Requirement analysis",
            "Agent handoff management",
            "Response synthesis",
            "Conflict resolution",
        ],
        config={
            "require_security_validation": True,
            "default_agent_order": list(DEFAULT_EXECUTION_ORDER),
        },
    )


_FACTORIES: Dict[AgentRole, Callable[[], AgentDefinition]] = {
    AgentRole.ORCHESTRATION: create_orchestration_agent,
    AgentRole.SECURITY: create_security_agent,
    AgentRole.DESIGN: create_design_agent,
    AgentRole.INTEGRATION: create_integration_agent,
    AgentRole.QUALITY: create_quality_agent,
}


def create_agent(role: AgentRole) -> AgentDefinition:
    """Build the built-in agent for a role."""
    try:
        factory = _FACTORIES[AgentRole(role)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown agent role: {role}")
    return factory()


def create_all_agents(integration_state: Optional[IntegrationState] = None) -> Dict[AgentRole, AgentDefinition]:
    """One agent per role, keyed by role."""
    return {
        AgentRole.ORCHESTRATION: create_orchestration_agent(),
        AgentRole.SECURITY: create_security_agent(),
        AgentRole.DESIGN: create_design_agent(),
        AgentRole.INTEGRATION: create_integration_agent(integration_state),
        AgentRole.QUALITY: create_quality_agent(),
    }
