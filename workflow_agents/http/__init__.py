"""HTTP endpoints for Workflow Agents."""

from .api import get_client, router

__all__ = ["router", "get_client"]
