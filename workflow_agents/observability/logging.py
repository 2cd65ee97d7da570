"""
Structured logging for agent invocations.

Messages carry standard fields (agent, role, request_id) in a
``[key=value ...] message`` prefix so log lines from one request can be
correlated.
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Optional


class AgentLogger:
    """Structured logger for orchestration components."""

    def __init__(self, component: str):
        """
        Initialize logger for a component.

        Args:
            component: Component name (e.g., "orchestrator", "synthesis")
        """
        self.component = component
        self.logger = logging.getLogger(f"workflow_agents.{component}")

    def _format_message(self, message: str, **kwargs) -> str:
        """Format message with structured fields."""
        fields = [f"{key}={value}" for key, value in kwargs.items() if value is not None]
        if not fields:
            return message
        return f"[{' '.join(fields)}] {message}"

    def debug(self, message: str, request_id: Optional[str] = None, **kwargs):
        self.logger.debug(self._format_message(message, request_id=request_id, **kwargs))

    def info(self, message: str, request_id: Optional[str] = None, **kwargs):
        self.logger.info(self._format_message(message, request_id=request_id, **kwargs))

    def warning(self, message: str, request_id: Optional[str] = None, **kwargs):
        self.logger.warning(self._format_message(message, request_id=request_id, **kwargs))

    def error(self, message: str, request_id: Optional[str] = None,
              error: Optional[Exception] = None, **kwargs):
        """Log error message with structured fields."""
        if error:
            kwargs['error_type'] = type(error).__name__
            kwargs['error_msg'] = str(error)
        self.logger.error(self._format_message(message, request_id=request_id, **kwargs))

    @contextmanager
    def track_agent(self, agent_id: str, role: str, request_id: str, phase: str = "analysis"):
        """
        Context manager timing one agent invocation.

        Args:
            agent_id: Agent being invoked
            role: Agent role value
            request_id: Orchestration request id
            phase: "analysis" or "synthesis"

        Yields:
            Dict with invocation metadata; ``duration_ms`` is filled in on exit
        """
        start_time = time.time()
        self.debug(f"Starting {role} agent", request_id=request_id, agent=agent_id, phase=phase)

        info: Dict[str, Any] = {
            'agent_id': agent_id,
            'role': role,
            'request_id': request_id,
            'phase': phase,
            'start_time': start_time,
            'duration_ms': 0,
        }

        try:
            yield info
            info['duration_ms'] = int((time.time() - start_time) * 1000)
            self.info(
                f"Completed {role} agent",
                request_id=request_id,
                agent=agent_id,
                phase=phase,
                duration_ms=info['duration_ms']
            )
        except Exception as e:
            info['duration_ms'] = int((time.time() - start_time) * 1000)
            self.error(
                f"Failed {role} agent",
                request_id=request_id,
                agent=agent_id,
                phase=phase,
                duration_ms=info['duration_ms'],
                error=e
            )
            raise

    def log_cost(self, stage: str, request_id: str, spent: float, estimated: float, limit: float):
        """Log a budget check."""
        self.debug(
            f"Budget check at {stage} stage",
            request_id=request_id,
            spent=f"{spent:.6f}",
            estimated=f"{estimated:.6f}",
            limit=f"{limit:.6f}"
        )
