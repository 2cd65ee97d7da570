"""FastAPI HTTP endpoints for Workflow Agents.

Mount ``router`` on an application to expose the orchestrator over REST.
The client is resolved through ``get_client`` so applications and tests can
swap it with ``app.dependency_overrides``.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..api.client import WorkflowAgentsClient
from ..models.context import RunContext
from ..models.orchestration import OrchestrationRequest, OrchestrationResponse
from ..models.reports import IntegrationSuggestions, SecurityScanReport
from ..orchestration.errors import OrchestratorError, ToolExecutionError


class PackageRef(BaseModel):
    name: str
    version: str


class SecurityScanRequest(BaseModel):
    workflow_code: str
    packages: List[PackageRef] = Field(default_factory=list)
    context: RunContext


class IntegrationSuggestRequest(BaseModel):
    description: str = Field(..., min_length=1)
    context: RunContext
    categories: Optional[List[str]] = None


# Create router instance
router = APIRouter(prefix="/agents", tags=["agents"])

# Shared client, created on first use
_client: Optional[WorkflowAgentsClient] = None


def get_client() -> WorkflowAgentsClient:
    global _client
    if _client is None:
        _client = WorkflowAgentsClient()
    return _client


@router.post("/process", response_model=OrchestrationResponse)
async def process_request(
    request: OrchestrationRequest,
    client: WorkflowAgentsClient = Depends(get_client)
):
    """Run a request through the agents. Budget halts and agent failures come back in the body."""
    return await client.orchestrator.process(request)


@router.get("/status")
async def agent_status(client: WorkflowAgentsClient = Depends(get_client)) -> Dict[str, Any]:
    """Get display status of all agents."""
    return {"agents": client.statuses()}


@router.get("/metrics")
async def agent_metrics(client: WorkflowAgentsClient = Depends(get_client)) -> Dict[str, Any]:
    """Get timing of recent agent invocations."""
    return {"metrics": client.metrics()}


@router.get("/capabilities")
async def agent_capabilities(client: WorkflowAgentsClient = Depends(get_client)) -> Dict[str, List[str]]:
    """Get capabilities of all agents by role."""
    return client.capabilities()


@router.post("/security-scan", response_model=SecurityScanReport)
async def security_scan(
    body: SecurityScanRequest,
    client: WorkflowAgentsClient = Depends(get_client)
):
    """Run the package, compliance and secret scans."""
    try:
        return await client.security_scan(
            body.workflow_code,
            [package.model_dump() for package in body.packages],
            body.context
        )
    except OrchestratorError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/integrations/suggest", response_model=IntegrationSuggestions)
async def suggest_integrations(
    body: IntegrationSuggestRequest,
    client: WorkflowAgentsClient = Depends(get_client)
):
    """Rank catalog integrations for a workflow description."""
    try:
        return await client.suggest_integrations(body.description, body.context, body.categories)
    except ToolExecutionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OrchestratorError as e:
        raise HTTPException(status_code=500, detail=str(e))
