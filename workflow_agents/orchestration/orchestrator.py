"""Multi-agent orchestrator.

The orchestrator runs one request through a fixed pipeline:

1. Pre-flight cost check for the orchestration agent
2. Orchestration agent
3. Agent selection
4. One cost check for the whole specialized batch
5. Specialized agents, sequentially, in dependency order
6. Synthesis (AI, with a deterministic fallback)

Every request gets its own ``ExecutionContext``. ``process()`` never raises;
failures are reported in the returned ``OrchestrationResponse``.
"""

import asyncio
from collections import OrderedDict
import logging
import time
from typing import Any, Dict, List, Optional

from ..agents.registry import AgentRegistry
from ..models.agent import AgentDefinition
from ..models.orchestration import (
    AgentResponse,
    ApprovalMode,
    ApprovalStep,
    OrchestrationRequest,
    OrchestrationResponse,
    ResponseMetadata,
)
from ..models.roles import AgentRole, AgentStatus
from ..models.tools import ToolCall
from ..observability.logging import AgentLogger
from ..observability.metrics import AgentMetrics, MetricsSink
from ..pricing.cost_model import CostModel
from ..providers.base import InferenceProvider, InferenceResult
from ..tools.executor import ToolExecutor
from .analysis import (
    calculate_confidence,
    collect_suggestions,
    extract_reasoning,
    extract_validation_results,
    extract_workflow_code,
)
from .context import ExecutionContext
from .errors import AgentExecutionError, BudgetExceeded, SynthesisError
from .options import OrchestrationConfig
from .planning.selector import AgentSelector, KeywordAgentSelector, execution_order
from .prompts import build_enriched_context, build_system_prompt
from .synthesis import Synthesizer, fallback_synthesis

logger = logging.getLogger(__name__)


class AgentOrchestrator:
    """Coordinates the orchestration agent and the specialized agents.

    The orchestrator is responsible for:
    1. Enforcing the per-request cost ceiling before each billable stage
    2. Running agents in dependency order and isolating their failures
    3. Executing tool calls requested by the model
    4. Collecting findings, suggestions and the generated code artifact
    5. Synthesizing the final answer
    """

    def __init__(
        self,
        provider: InferenceProvider,
        registry: Optional[AgentRegistry] = None,
        cost_model: Optional[CostModel] = None,
        selector: Optional[AgentSelector] = None,
        config: Optional[OrchestrationConfig] = None,
        tool_executor: Optional[ToolExecutor] = None,
        metrics_sink: Optional[MetricsSink] = None
    ):
        """Initialize orchestrator.

        Raises:
            ConfigurationError: If the registry has no orchestration agent
        """
        self.config = config or OrchestrationConfig()
        self.provider = provider
        self.registry = registry or AgentRegistry()
        self.cost_model = cost_model or CostModel(self.config.cost_per_token)
        self.selector = selector or KeywordAgentSelector()
        self.tool_executor = tool_executor or ToolExecutor()
        self.metrics_sink = metrics_sink
        self.synthesizer = Synthesizer(provider, self.config)
        self.agent_logger = AgentLogger("orchestrator")

        # Fail fast: nothing can run without the orchestration agent
        self.registry.orchestration_agent()

        self._in_flight: Dict[str, ExecutionContext] = {}
        self._execution_metrics: "OrderedDict[str, Dict[str, Optional[float]]]" = OrderedDict()

    async def process(
        self,
        request: OrchestrationRequest,
        cancel_event: Optional[asyncio.Event] = None
    ) -> OrchestrationResponse:
        """Process one request end to end.

        Args:
            request: The orchestration request
            cancel_event: When set, no further agent is started

        Returns:
            OrchestrationResponse; never raises
        """
        ctx = ExecutionContext(
            tracker=self.cost_model.start_request(),
            max_cost=request.max_cost or self.config.default_max_cost,
            cancel_event=cancel_event,
        )
        self._in_flight[ctx.request_id] = ctx
        self.agent_logger.info(
            "Processing request",
            request_id=ctx.request_id,
            max_cost=f"{ctx.max_cost:.4f}",
            approval_mode=request.approval_mode.value
        )

        try:
            return await self._run(request, ctx)
        except BudgetExceeded as e:
            self.agent_logger.warning(str(e), request_id=ctx.request_id, stage=e.stage)
            return self._budget_halt_response(ctx, e)
        except Exception as e:
            self.agent_logger.error("Request failed", request_id=ctx.request_id, error=e)
            ctx.errors.append(str(e) or type(e).__name__)
            return self._build_response(ctx, final_output=f"Failed to process request: {e}")
        finally:
            self._in_flight.pop(ctx.request_id, None)

    async def _run(self, request: OrchestrationRequest, ctx: ExecutionContext) -> OrchestrationResponse:
        orchestration_agent = self.registry.orchestration_agent()

        if ctx.cancelled:
            ctx.errors.append("Request cancelled before orchestration agent")
            self.agent_logger.warning("Request cancelled", request_id=ctx.request_id, next_agent="orchestration")
            return self._build_response(ctx, final_output="Request cancelled before any agent ran.")

        # Step 1: the orchestration call must fit the ceiling on its own
        self._check_budget(
            ctx,
            stage="orchestration",
            estimated=self.cost_model.estimate(self.config.orchestration_estimate_tokens),
            affected=[AgentRole.ORCHESTRATION],
        )

        if request.approval_mode is not ApprovalMode.AUTO:
            notice = (
                f"Approval mode '{request.approval_mode.value}' is not supported yet; "
                "proceeding automatically with cost monitoring"
            )
            self.agent_logger.warning(notice, request_id=ctx.request_id)
            ctx.notices.append(notice)

        # Step 2: orchestration agent
        try:
            response = await self._execute_agent(orchestration_agent, request, ctx, previous=[])
        except AgentExecutionError as e:
            ctx.errors.append(f"Failed to execute orchestration agent: {e.reason}")
            return self._build_response(ctx, final_output=f"Failed to process request: {e.reason}")
        ctx.record_response(response)

        # Step 3: selection and ordering
        selected = self.selector.select(request.user_message, request.required_agents)
        ordered = execution_order(selected, self.config.execution_order)
        self.agent_logger.debug(
            "Selected agents",
            request_id=ctx.request_id,
            agents=",".join(role.value for role in ordered) or "none"
        )

        # Step 4: one check for the whole batch
        if ordered:
            self._check_budget(
                ctx,
                stage="specialized",
                estimated=self._agent_estimate() * len(ordered),
                affected=ordered,
            )

        # Step 5: specialized agents
        await self._execute_specialized(request, ctx, ordered)

        # Step 6: synthesis
        final_output = await self._synthesize(request, ctx)

        return self._build_response(ctx, final_output=final_output)

    async def _execute_specialized(
        self,
        request: OrchestrationRequest,
        ctx: ExecutionContext,
        ordered: List[AgentRole]
    ) -> None:
        for index, role in enumerate(ordered):
            if ctx.cancelled:
                ctx.errors.append(f"Request cancelled before {role.value} agent")
                ctx.steps_pending.extend(self._pending_steps(ordered[index:]))
                self.agent_logger.warning("Request cancelled", request_id=ctx.request_id, next_agent=role.value)
                return

            if self.config.per_agent_budget_check:
                self._check_budget(
                    ctx,
                    stage="agent",
                    estimated=self._agent_estimate(),
                    affected=ordered[index:],
                )

            agent = self.registry.get_by_role(role)
            if agent is None:
                ctx.errors.append(f"Agent not found for role: {role.value}")
                continue

            try:
                response = await self._execute_agent(agent, request, ctx, previous=list(ctx.responses))
            except AgentExecutionError as e:
                ctx.errors.append(f"Failed to execute {role.value} agent: {e.reason}")
                continue

            ctx.record_response(response)
            ctx.validations.extend(extract_validation_results(response))

    async def _execute_agent(
        self,
        agent: AgentDefinition,
        request: OrchestrationRequest,
        ctx: ExecutionContext,
        previous: List[AgentResponse]
    ) -> AgentResponse:
        """Run one agent, including any tool calls it requests.

        Raises:
            AgentExecutionError: On inference failure or timeout
        """
        timeout_s = self._timeout_s(request)
        metric_key = self._start_metric(agent.id, ctx.request_id, "analysis")
        ctx.active_agents.add(agent.id)
        ctx.set_status(agent.role, AgentStatus.ACTIVE)
        self.registry.set_status(agent.id, AgentStatus.ACTIVE)

        try:
            with self.agent_logger.track_agent(agent.id, agent.role.value, ctx.request_id) as info:
                try:
                    result = await asyncio.wait_for(self._infer(agent, request, previous), timeout=timeout_s)
                except asyncio.TimeoutError as e:
                    raise TimeoutError(f"timed out after {timeout_s:g}s") from e
                # Inference is billed from here; tool failures come back as failed results
                tool_calls: List[ToolCall] = []
                if result.tool_calls:
                    tool_calls = await self.tool_executor.run_calls(
                        agent.tools, result.tool_calls, request.context, timeout_s=timeout_s
                    )
        except Exception as e:
            ctx.set_status(agent.role, AgentStatus.ERROR)
            self.registry.set_status(agent.id, AgentStatus.ERROR)
            await self._record_metrics(
                AgentMetrics(
                    request_id=ctx.request_id,
                    agent_id=agent.id,
                    agent_role=agent.role.value,
                    model=self.config.model,
                    latency_ms=info["duration_ms"],
                    input_tokens=0,
                    output_tokens=0,
                    cost=0.0,
                    error_class=type(e).__name__,
                )
            )
            raise AgentExecutionError(agent.id, agent.role.value, e) from e
        finally:
            ctx.active_agents.discard(agent.id)
            self._end_metric(metric_key)

        tokens = result.usage.total_tokens
        response = AgentResponse(
            agent_id=agent.id,
            agent_role=agent.role,
            content=result.text,
            tool_calls=tool_calls,
            confidence=calculate_confidence(result.text, tool_calls),
            reasoning=extract_reasoning(result.text),
            metadata=ResponseMetadata(
                execution_time_ms=info["duration_ms"],
                token_count=tokens,
                tools_used=[call.tool_name for call in tool_calls],
                cost=self.cost_model.cost_for_usage(result.usage),
                phase="analysis",
            ),
        )

        ctx.set_status(agent.role, AgentStatus.COMPLETED)
        self.registry.set_status(agent.id, AgentStatus.COMPLETED)
        await self._record_metrics(self._metrics_for(ctx, agent, result, response))
        return response

    async def _infer(
        self,
        agent: AgentDefinition,
        request: OrchestrationRequest,
        previous: List[AgentResponse]
    ) -> InferenceResult:
        enriched = build_enriched_context(request.user_message, request.context, previous)
        return await self.provider.infer(
            system_prompt=build_system_prompt(agent, enriched),
            user_message=request.user_message,
            max_tokens=self.config.agent_max_tokens,
            temperature=self.config.agent_temperature,
            tools=[tool.to_provider_schema() for tool in agent.tools] or None,
        )

    async def _synthesize(self, request: OrchestrationRequest, ctx: ExecutionContext) -> str:
        """AI synthesis when the budget allows it, otherwise the fallback summary."""
        if ctx.cancelled:
            ctx.notices.append("AI synthesis skipped: request cancelled; showing a summary instead")
            return fallback_synthesis(ctx.responses, ctx.validations)

        estimate = self.cost_model.estimate(self.config.synthesis_estimate_tokens)
        self.agent_logger.log_cost("synthesis", ctx.request_id, ctx.spent, estimate, ctx.max_cost)
        if ctx.would_exceed(estimate):
            ctx.notices.append(
                f"AI synthesis skipped: estimated cost ${estimate:.4f} exceeds remaining budget "
                f"${ctx.tracker.remaining(ctx.max_cost):.4f}; showing a summary instead"
            )
            return fallback_synthesis(ctx.responses, ctx.validations)

        agent = self.registry.orchestration_agent()
        metric_key = self._start_metric(agent.id, ctx.request_id, "synthesis")
        try:
            with self.agent_logger.track_agent(agent.id, agent.role.value, ctx.request_id, phase="synthesis") as info:
                result = await self.synthesizer.synthesize(
                    request.user_message,
                    list(ctx.responses),
                    list(ctx.validations),
                    timeout_s=self._timeout_s(request),
                )
        except SynthesisError as e:
            ctx.notices.append(f"AI synthesis unavailable ({e.reason}); showing a summary instead")
            return fallback_synthesis(ctx.responses, ctx.validations)
        finally:
            self._end_metric(metric_key)

        tokens = result.usage.total_tokens
        response = AgentResponse(
            agent_id=agent.id,
            agent_role=agent.role,
            content=result.text,
            confidence=calculate_confidence(result.text),
            reasoning=extract_reasoning(result.text),
            metadata=ResponseMetadata(
                execution_time_ms=info["duration_ms"],
                token_count=tokens,
                cost=self.cost_model.cost_for_usage(result.usage),
                phase="synthesis",
            ),
        )
        ctx.record_response(response)
        await self._record_metrics(self._metrics_for(ctx, agent, result, response))
        return result.text

    # Budget

    def _agent_estimate(self) -> float:
        return self.cost_model.estimate(self.config.per_agent_estimate_tokens)

    def _check_budget(
        self,
        ctx: ExecutionContext,
        stage: str,
        estimated: float,
        affected: List[AgentRole]
    ) -> None:
        """Raise BudgetExceeded if ``estimated`` does not fit in the remaining budget."""
        self.agent_logger.log_cost(stage, ctx.request_id, ctx.spent, estimated, ctx.max_cost)
        if ctx.would_exceed(estimated):
            raise BudgetExceeded(
                stage=stage,
                limit=ctx.max_cost,
                spent=ctx.spent,
                estimated=estimated,
                affected_agents=[role.value for role in affected],
            )

    def _pending_steps(self, roles: List[AgentRole]) -> List[ApprovalStep]:
        estimate = self._agent_estimate()
        return [
            ApprovalStep(
                step_type="agent_execution",
                agent_role=role,
                description=f"Run the {role.value} agent",
                estimated_cost=estimate,
                details={"tokens": self.config.per_agent_estimate_tokens},
            )
            for role in roles
        ]

    def _budget_halt_response(self, ctx: ExecutionContext, exc: BudgetExceeded) -> OrchestrationResponse:
        if exc.stage == "orchestration":
            ctx.errors.append(
                f"Orchestration cost ${exc.estimated:.4f} exceeds cost limit ${exc.limit:.4f}"
            )
            final_output = (
                "🛑 **Cannot start - orchestration step exceeds cost limit**\n\n"
                f"• Cost limit: ${exc.limit:.4f}\n"
                f"• Orchestration cost: ${exc.estimated:.4f}\n\n"
                f"Please increase your cost limit to at least ${exc.estimated:.4f} to proceed."
            )
            return self._build_response(ctx, final_output=final_output)

        ctx.errors.append(f"Cost limit exceeded: ${exc.projected:.4f} > ${exc.limit:.4f}")
        ctx.steps_pending.extend(self._pending_steps([AgentRole(a) for a in exc.affected_agents]))
        final_output = (
            "🛑 **Execution stopped to prevent cost overrun**\n\n"
            f"• Cost limit: ${exc.limit:.4f}\n"
            f"• Cost so far: ${exc.spent:.4f}\n"
            f"• Estimated additional cost: ${exc.estimated:.4f}\n"
            f"• Total estimated: ${exc.projected:.4f}\n\n"
            "To continue, increase your cost limit or switch to approval mode to control each step."
        )
        return self._build_response(ctx, final_output=final_output, needs_approval=True)

    # Response assembly

    def _build_response(
        self,
        ctx: ExecutionContext,
        final_output: str,
        needs_approval: bool = False
    ) -> OrchestrationResponse:
        return OrchestrationResponse(
            request_id=ctx.request_id,
            success=not ctx.errors,
            responses=list(ctx.responses),
            final_output=final_output,
            workflow_code=extract_workflow_code(ctx.responses),
            validation_results=list(ctx.validations),
            suggestions=collect_suggestions(ctx.responses, ctx.validations),
            errors=list(ctx.errors),
            execution_time_ms=ctx.elapsed_ms,
            total_cost=ctx.spent,
            steps_pending=list(ctx.steps_pending),
            needs_approval=needs_approval or bool(ctx.steps_pending and not ctx.cancelled),
            notices=list(ctx.notices),
            agent_statuses=dict(ctx.role_statuses),
        )

    def _timeout_s(self, request: OrchestrationRequest) -> float:
        if request.timeout_ms:
            return request.timeout_ms / 1000
        return self.config.agent_timeout_s

    # Status and metrics

    def _start_metric(self, agent_id: str, request_id: str, phase: str) -> str:
        key = f"{agent_id}:{request_id}:{phase}"
        self._execution_metrics[key] = {"start": time.time(), "end": None}
        while len(self._execution_metrics) > self.config.metrics_history_size:
            self._execution_metrics.popitem(last=False)
        return key

    def _end_metric(self, key: str) -> None:
        entry = self._execution_metrics.get(key)
        if entry is not None:
            entry["end"] = time.time()

    def _metrics_for(
        self,
        ctx: ExecutionContext,
        agent: AgentDefinition,
        result: InferenceResult,
        response: AgentResponse
    ) -> AgentMetrics:
        return AgentMetrics(
            request_id=ctx.request_id,
            agent_id=agent.id,
            agent_role=agent.role.value,
            model=result.model or self.config.model,
            latency_ms=response.metadata.execution_time_ms,
            input_tokens=result.usage.prompt_tokens,
            output_tokens=result.usage.completion_tokens,
            cost=response.metadata.cost,
            error_class=None,
            tools_used=list(response.metadata.tools_used),
            phase=response.metadata.phase,
            tools_invoked=len(response.tool_calls),
            tool_failures=sum(1 for call in response.tool_calls if not call.succeeded),
        )

    async def _record_metrics(self, metrics: AgentMetrics) -> None:
        if self.metrics_sink is None:
            return
        try:
            await self.metrics_sink.record(metrics)
        except Exception as e:
            logger.warning(f"Metrics sink failed to record {metrics.agent_id}: {e}")

    def agent_statuses(self) -> Dict[str, Dict[str, Any]]:
        """Display status of every agent and whether any in-flight request is running it."""
        active = set()
        for ctx in list(self._in_flight.values()):
            active.update(ctx.active_agents)
        return {
            agent.id: {
                "status": self.registry.status(agent.id).value,
                "is_active": agent.id in active,
            }
            for agent in self.registry.all()
        }

    def execution_metrics(self) -> Dict[str, Dict[str, Any]]:
        """Timing of recent agent invocations, keyed ``agent_id:request_id:phase``."""
        now = time.time()
        metrics = {}
        for key, entry in list(self._execution_metrics.items()):
            end = entry["end"]
            metrics[key] = {
                "execution_time_ms": int(((end if end is not None else now) - entry["start"]) * 1000),
                "is_complete": end is not None,
            }
        return metrics
