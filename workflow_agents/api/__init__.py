"""Public API for Workflow Agents."""

from .client import WorkflowAgentsClient, process_workflow

__all__ = ["WorkflowAgentsClient", "process_workflow"]
