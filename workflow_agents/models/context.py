"""Run context and conversation models."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .roles import AgentRole
from .tools import ToolCall


class ConversationMessage(BaseModel):
    """A single message in the conversation leading up to a request."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    role: Literal["user", "assistant", "agent", "tool"]
    content: str
    agent_role: Optional[AgentRole] = None
    tool_calls: Optional[List[ToolCall]] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Dict[str, Any] = Field(default_factory=dict)


class RunContext(BaseModel):
    """Per-request context. Read-only to the orchestrator, agents and tools."""
    model_config = ConfigDict(frozen=True)

    workflow_id: Optional[str] = Field(None, description="Workflow being edited, if any")
    organization_id: str = Field(..., description="Owning organization")
    user_id: str = Field(..., description="Requesting user")
    user_role: str = Field(..., description="Role of the requesting user")
    permissions: List[str] = Field(default_factory=list, description="Granted permission strings")
    session_id: str = Field(..., description="Chat or builder session")
    conversation_history: List[ConversationMessage] = Field(
        default_factory=list,
        description="Ordered conversation so far"
    )
