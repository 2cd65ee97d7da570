"""Main client interface for Workflow Agents."""

import asyncio
import json
import time
from typing import Any, Dict, List, Optional

from ..orchestration import AgentOrchestrator, ConfigurationError, OrchestrationConfig
from ..agents.registry import AgentRegistry
from ..models.context import RunContext
from ..models.orchestration import (
    ApprovalMode,
    OrchestrationRequest,
    OrchestrationResponse,
    Priority,
    ValidationResult,
    ValidationStatus,
)
from ..models.reports import (
    IntegrationSuggestion,
    IntegrationSuggestions,
    RealTimeValidation,
    SecurityScanReport,
    WorkflowBuildResult,
)
from ..models.roles import SPECIALIZED_ROLES, AgentRole
from ..observability import InMemoryMetricsSink, MetricsSink
from ..providers.anthropic import AnthropicInferenceProvider
from ..providers.base import InferenceProvider
from ..tools.executor import ToolExecutor

VALIDATION_CODE_CHARS = 1000
VALIDATION_JSON_CHARS = 500


class WorkflowAgentsClient:
    """High-level client for Workflow Agents."""

    def __init__(
        self,
        provider: Optional[InferenceProvider] = None,
        api_key: Optional[str] = None,
        config: Optional[OrchestrationConfig] = None,
        registry: Optional[AgentRegistry] = None,
        metrics_sink: Optional[MetricsSink] = None
    ):
        """
        Initialize the client.

        Args:
            provider: Inference provider; defaults to Anthropic
            api_key: Optional Anthropic API key (falls back to ANTHROPIC_API_KEY)
            config: Orchestration settings; defaults to ``OrchestrationConfig.from_env()``
            registry: Agent registry; defaults to the five built-in agents
            metrics_sink: Optional metrics sink; defaults to an in-memory sink
        """
        self.config = config or OrchestrationConfig.from_env()
        self.provider = provider or AnthropicInferenceProvider(api_key=api_key, model=self.config.model)
        self.registry = registry or AgentRegistry()
        self.metrics_sink = metrics_sink or InMemoryMetricsSink(max_size=self.config.metrics_history_size)
        self.tool_executor = ToolExecutor()

        self.orchestrator = AgentOrchestrator(
            provider=self.provider,
            registry=self.registry,
            config=self.config,
            tool_executor=self.tool_executor,
            metrics_sink=self.metrics_sink
        )

    async def process_workflow(
        self,
        message: str,
        context: RunContext,
        required_agents: Optional[List[AgentRole]] = None,
        max_cost: Optional[float] = None,
        approval_mode: ApprovalMode = ApprovalMode.AUTO,
        priority: Priority = Priority.MEDIUM,
        timeout_ms: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> OrchestrationResponse:
        """Run a request through all selected agents.

        Args:
            message: The user's request
            context: Who is asking, and from where
            required_agents: Explicit specialized roles; None lets the selector decide
            max_cost: Cost ceiling in USD; defaults to the configured ceiling
            approval_mode: Requested approval mode
            priority: Request priority
            timeout_ms: Per-agent call timeout
            cancel_event: When set, no further agent is started

        Returns:
            OrchestrationResponse
        """
        request = OrchestrationRequest(
            user_message=message,
            context=context,
            required_agents=required_agents,
            max_cost=max_cost,
            approval_mode=approval_mode,
            priority=priority,
            timeout_ms=timeout_ms
        )
        return await self.orchestrator.process(request, cancel_event=cancel_event)

    async def build_workflow(
        self,
        description: str,
        context: RunContext,
        required_agents: Optional[List[AgentRole]] = None,
        priority: Priority = Priority.MEDIUM,
        include_security_scan: bool = True,
        include_design_validation: bool = False,
        include_integration_check: bool = False,
        include_quality_review: bool = True,
        max_cost: Optional[float] = None
    ) -> WorkflowBuildResult:
        """Build a workflow with the chosen agents and split findings by category."""
        roles = list(required_agents or [])
        if include_security_scan:
            roles.append(AgentRole.SECURITY)
        if include_design_validation:
            roles.append(AgentRole.DESIGN)
        if include_integration_check:
            roles.append(AgentRole.INTEGRATION)
        if include_quality_review:
            roles.append(AgentRole.QUALITY)

        result = await self.process_workflow(
            description,
            context,
            required_agents=list(dict.fromkeys(roles)),
            max_cost=max_cost,
            priority=priority
        )

        def by_type(category: str) -> List[ValidationResult]:
            return [v for v in result.validation_results if v.type == category]

        return WorkflowBuildResult(
            success=result.success,
            workflow_code=result.workflow_code,
            validation_results=result.validation_results,
            recommendations=result.suggestions,
            security_issues=by_type("security"),
            design_issues=by_type("design"),
            integration_issues=by_type("integration"),
            quality_issues=by_type("quality"),
            total_cost=result.total_cost,
            execution_time_ms=result.execution_time_ms
        )

    async def validate_workflow(
        self,
        context: RunContext,
        code: Optional[str] = None,
        components: Optional[List[Any]] = None,
        integrations: Optional[List[str]] = None,
        ui_elements: Optional[List[Any]] = None,
        validation_type: str = "all",
        max_cost: Optional[float] = None
    ) -> RealTimeValidation:
        """Validate workflow parts while the user is still building them.

        ``validation_type`` is one specialized role value or ``"all"``. The
        workflow is valid when no finding failed and the run itself had no
        errors.
        """
        start_time = time.time()
        if validation_type == "all":
            roles = list(SPECIALIZED_ROLES)
        else:
            roles = [AgentRole(validation_type)]

        lines = ["Validate the following workflow data:"]
        if code:
            lines.append(f"Code: {code[:VALIDATION_CODE_CHARS]}...")
        if components:
            lines.append(f"Components: {json.dumps(components, default=str)[:VALIDATION_JSON_CHARS]}...")
        if integrations:
            lines.append(f"Integrations: {', '.join(integrations)}")
        if ui_elements:
            lines.append(f"UI Elements: {json.dumps(ui_elements, default=str)[:VALIDATION_JSON_CHARS]}...")

        result = await self.process_workflow(
            "\n".join(lines),
            context,
            required_agents=roles,
            max_cost=max_cost
        )

        issues = list(result.validation_results)
        for error in result.errors:
            issues.append(
                ValidationResult(
                    agent_role=AgentRole.ORCHESTRATION,
                    type="quality",
                    status=ValidationStatus.FAILED,
                    message=f"Validation failed: {error}",
                )
            )

        return RealTimeValidation(
            is_valid=not any(issue.status is ValidationStatus.FAILED for issue in issues),
            issues=issues,
            suggestions=result.suggestions,
            execution_time_ms=int((time.time() - start_time) * 1000)
        )

    async def suggest_integrations(
        self,
        description: str,
        context: RunContext,
        categories: Optional[List[str]] = None
    ) -> IntegrationSuggestions:
        """Rank catalog integrations for a workflow description. No inference call."""
        start_time = time.time()
        tool = self._agent_tool(AgentRole.INTEGRATION, "suggest_integrations")

        arguments: Dict[str, Any] = {"workflow_description": description}
        if categories:
            arguments["categories"] = categories
        result = await self.tool_executor.invoke(tool, arguments, context)

        return IntegrationSuggestions(
            suggestions=[
                IntegrationSuggestion(**suggestion)
                for suggestion in (result.data or {}).get("suggestions", [])
            ],
            execution_time_ms=int((time.time() - start_time) * 1000)
        )

    async def security_scan(
        self,
        workflow_code: str,
        packages: List[Dict[str, str]],
        context: RunContext
    ) -> SecurityScanReport:
        """Package, compliance and secret scans. No inference call.

        The score is the share of the three scans that passed.
        """
        start_time = time.time()
        package_tool = self._agent_tool(AgentRole.SECURITY, "validate_package_security")
        compliance_tool = self._agent_tool(AgentRole.SECURITY, "validate_compliance")
        secrets_tool = self._agent_tool(AgentRole.SECURITY, "scan_for_secrets")

        results = await asyncio.gather(
            self.tool_executor.execute(package_tool, {"packages": packages}, context),
            self.tool_executor.execute(compliance_tool, {"workflow_code": workflow_code}, context),
            self.tool_executor.execute(secrets_tool, {"workflow_code": workflow_code}, context),
        )
        package_result, compliance_result, secrets_result = results

        passed = sum(1 for r in results if r.success)
        policies = (compliance_result.data or {}).get("policies", [])
        recommendations = []
        for r in results:
            recommendations.extend(r.suggestions or [])

        return SecurityScanReport(
            security_score=round(passed / len(results) * 100),
            vulnerabilities=(package_result.data or {}).get("vulnerabilities", []),
            compliance_issues=[p for p in policies if p["status"] == "violation"],
            secrets=(secrets_result.data or {}).get("findings", []),
            recommendations=recommendations,
            execution_time_ms=int((time.time() - start_time) * 1000)
        )

    def capabilities(self) -> Dict[str, List[str]]:
        """Capabilities of every registered agent, keyed by role."""
        return {role.value: caps for role, caps in self.registry.capabilities().items()}

    def statuses(self) -> Dict[str, Dict[str, Any]]:
        """Display status of every agent."""
        return self.orchestrator.agent_statuses()

    def metrics(self) -> Dict[str, Dict[str, Any]]:
        """Timing of recent agent invocations."""
        return self.orchestrator.execution_metrics()

    def _agent_tool(self, role: AgentRole, tool_name: str):
        agent = self.registry.get_by_role(role)
        if agent is None:
            raise ConfigurationError(f"{role.value.capitalize()} agent not available")
        tool = agent.get_tool(tool_name)
        if tool is None:
            raise ConfigurationError(f"Tool {tool_name} not available on {agent.id}")
        return tool


async def process_workflow(message: str, context: RunContext, **kwargs) -> OrchestrationResponse:
    """Convenience function for one-off requests with a default client."""
    client = WorkflowAgentsClient()
    return await client.process_workflow(message, context, **kwargs)
