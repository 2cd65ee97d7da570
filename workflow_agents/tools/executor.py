from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Dict, Iterable, List, Optional

from jsonschema import ValidationError

from ..models.context import RunContext
from ..models.tools import ToolCall, ToolCallRequest, ToolResult
from ..orchestration.errors import ToolExecutionError
from .definition import Tool

logger = logging.getLogger(__name__)


class ToolExecutor:
    """Validates arguments against a tool's schema and runs its handler."""

    async def invoke(
        self,
        tool: Tool,
        arguments: Dict[str, Any],
        context: Optional[RunContext] = None
    ) -> ToolResult:
        """Run a tool, raising ToolExecutionError on invalid input or handler failure."""
        try:
            tool.validator.validate(arguments)
        except ValidationError as e:
            raise ToolExecutionError(tool.name, e, metadata={"stage": "validation"}) from e

        try:
            result = tool.handler(arguments, context)
            if inspect.isawaitable(result):
                result = await result
            if not isinstance(result, ToolResult):
                result = ToolResult.model_validate(result)
        except Exception as e:
            raise ToolExecutionError(tool.name, e, metadata={"stage": "handler"}) from e

        return result

    async def execute(
        self,
        tool: Tool,
        arguments: Dict[str, Any],
        context: Optional[RunContext] = None
    ) -> ToolResult:
        """Run a tool; failures come back as an unsuccessful ToolResult."""
        try:
            return await self.invoke(tool, arguments, context)
        except ToolExecutionError as e:
            logger.warning(f"Tool '{tool.name}' failed: {e.original_error}")
            if isinstance(e.original_error, ValidationError):
                message = f"Invalid arguments for {tool.name}: {e.original_error.message}"
            else:
                message = str(e.original_error)
            return ToolResult(success=False, error=message)

    async def run_calls(
        self,
        tools: Iterable[Tool],
        requests: Iterable[ToolCallRequest],
        context: Optional[RunContext] = None,
        timeout_s: Optional[float] = None
    ) -> List[ToolCall]:
        """Execute model-requested tool calls sequentially against an agent's own tools.

        Each call gets its own ``timeout_s``; a call that runs over comes back
        as a failed result and the remaining calls still run.
        """
        available = {tool.name: tool for tool in tools}
        calls: List[ToolCall] = []
        for request in requests:
            tool = available.get(request.tool_name)
            if tool is None:
                result = ToolResult(success=False, error=f"Tool {request.tool_name} not found")
            else:
                try:
                    result = await asyncio.wait_for(
                        self.execute(tool, request.arguments, context),
                        timeout=timeout_s,
                    )
                except asyncio.TimeoutError:
                    logger.warning(f"Tool '{tool.name}' timed out after {timeout_s:g}s")
                    result = ToolResult(success=False, error=f"Tool {tool.name} timed out after {timeout_s:g}s")
            calls.append(ToolCall(tool_name=request.tool_name, parameters=request.arguments, result=result))
        return calls
