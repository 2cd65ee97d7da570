"""Tool invocation models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ToolResult(BaseModel):
    """Outcome of a single tool execution."""
    model_config = ConfigDict(extra="forbid")

    success: bool = Field(..., description="Whether the tool completed its check")
    data: Any = Field(None, description="Tool-specific payload")
    error: Optional[str] = Field(None, description="Error message when success is False")
    warnings: Optional[List[str]] = Field(None, description="Non-fatal findings")
    suggestions: Optional[List[str]] = Field(None, description="Actionable recommendations")


class ToolCallRequest(BaseModel):
    """A tool invocation requested by the model."""

    tool_name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
    id: Optional[str] = None


class ToolCall(BaseModel):
    """A tool invocation that was actually made, with its result."""

    tool_name: str
    parameters: Dict[str, Any] = Field(default_factory=dict)
    result: Optional[ToolResult] = None

    @property
    def succeeded(self) -> bool:
        return bool(self.result and self.result.success)
