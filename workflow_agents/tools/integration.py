"""Integration agent tools.

Connection, OAuth and rate-limit state is injected when the tool set is built,
so the tools themselves stay deterministic. ``create_integration_tools()`` with
no arguments uses a small demo state: ``user-123`` has Salesforce and Slack
connected with partial scopes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from ..models.context import RunContext
from ..models.tools import ToolResult
from .definition import ParameterType, Tool, ToolParameter

AVAILABLE_INTEGRATIONS: Dict[str, Dict[str, Any]] = {
    "salesforce": {
        "name": "Salesforce CRM",
        "category": "CRM",
        "required_scopes": ["api", "refresh_token", "full"],
        "rate_limit": {"requests": 1000, "window": "1h"},
        "endpoints": {
            "create_lead": {"method": "POST", "path": "/services/data/v52.0/sobjects/Lead"},
            "update_contact": {"method": "PATCH", "path": "/services/data/v52.0/sobjects/Contact/{id}"},
            "query_opportunities": {"method": "GET", "path": "/services/data/v52.0/query"},
        },
    },
    "slack": {
        "name": "Slack",
        "category": "Communication",
        "required_scopes": ["chat:write", "channels:read", "users:read"],
        "rate_limit": {"requests": 100, "window": "1m"},
        "endpoints": {
            "send_message": {"method": "POST", "path": "/api/chat.postMessage"},
            "create_channel": {"method": "POST", "path": "/api/conversations.create"},
            "list_users": {"method": "GET", "path": "/api/users.list"},
        },
    },
    "hubspot": {
        "name": "HubSpot",
        "category": "CRM",
        "required_scopes": ["contacts", "oauth"],
        "rate_limit": {"requests": 500, "window": "10m"},
        "endpoints": {
            "create_contact": {"method": "POST", "path": "/crm/v3/objects/contacts"},
            "update_deal": {"method": "PATCH", "path": "/crm/v3/objects/deals/{id}"},
            "get_companies": {"method": "GET", "path": "/crm/v3/objects/companies"},
        },
    },
    "gmail": {
        "name": "Gmail",
        "category": "Email",
        "required_scopes": [
            "https://www.googleapis.com/auth/gmail.send",
            "https://www.googleapis.com/auth/gmail.readonly",
        ],
        "rate_limit": {"requests": 250, "window": "1s"},
        "endpoints": {
            "send_email": {"method": "POST", "path": "/gmail/v1/users/me/messages/send"},
            "list_messages": {"method": "GET", "path": "/gmail/v1/users/me/messages"},
            "get_message": {"method": "GET", "path": "/gmail/v1/users/me/messages/{id}"},
        },
    },
}

SAMPLE_RESPONSES: Dict[str, Dict[str, Any]] = {
    "salesforce": {
        "create_lead": {"id": "00Q000001234567", "success": True},
        "update_contact": {"id": "003000001234567", "success": True},
        "query_opportunities": {"totalSize": 5, "records": [{"Id": "006000001234567", "Name": "Test Opportunity"}]},
    },
    "slack": {
        "send_message": {"ok": True, "ts": "1234567890.123", "channel": "C1234567890"},
        "create_channel": {"ok": True, "channel": {"id": "C1234567890", "name": "test-channel"}},
        "list_users": {"ok": True, "members": [{"id": "U1234567890", "name": "testuser"}]},
    },
    "hubspot": {
        "create_contact": {"id": "1234567890", "properties": {"email": "test@example.com"}},
        "update_deal": {"id": "9876543210", "properties": {"amount": "10000"}},
        "get_companies": {"results": [{"id": "1111111111", "properties": {"name": "Test Company"}}]},
    },
    "gmail": {
        "send_email": {"id": "17a1b2c3d4e5f6g7", "threadId": "17a1b2c3d4e5f6g7"},
        "list_messages": {"messages": [{"id": "17a1b2c3d4e5f6g7", "threadId": "17a1b2c3d4e5f6g7"}]},
        "get_message": {"id": "17a1b2c3d4e5f6g7", "snippet": "Test email content"},
    },
}

# Below this fraction of remaining requests a rate limit is reported as a warning
RATE_LIMIT_WARNING_RATIO = 0.1


@dataclass(frozen=True)
class OAuthGrant:
    """A user's OAuth connection to one integration."""
    scopes: List[str]
    expires_at: datetime


@dataclass
class IntegrationState:
    """Connection, rate-limit and availability state the integration tools read."""
    grants: Dict[str, Dict[str, OAuthGrant]] = field(default_factory=dict)
    requests_used: Dict[str, int] = field(default_factory=dict)
    unavailable_endpoints: Set[str] = field(default_factory=set)  # "integration.endpoint"
    clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)

    def grant_for(self, context: Optional[RunContext], integration: str) -> Optional[OAuthGrant]:
        if context is None:
            return None
        return self.grants.get(context.user_id, {}).get(integration)


def demo_state() -> IntegrationState:
    now = datetime.now(timezone.utc)
    return IntegrationState(
        grants={
            "user-123": {
                "salesforce": OAuthGrant(scopes=["api", "refresh_token"], expires_at=now + timedelta(hours=1)),
                "slack": OAuthGrant(scopes=["chat:write", "channels:read"], expires_at=now + timedelta(hours=24)),
            }
        }
    )


def build_integration_handlers(state: IntegrationState) -> Dict[str, Callable[..., ToolResult]]:
    """Handlers bound to one IntegrationState, keyed by tool name."""

    def validate_connection(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
        checked_at = state.clock()
        statuses: Dict[str, Dict[str, Any]] = {}
        for integration in arguments["integrations"]:
            grant = state.grant_for(context, integration)
            if integration not in AVAILABLE_INTEGRATIONS:
                status: Dict[str, Any] = {"connected": False, "error": "Integration not found in registry"}
            elif grant is None:
                status = {"connected": False, "error": "Not connected - OAuth required"}
            elif grant.expires_at < checked_at:
                status = {"connected": False, "error": "OAuth token expired"}
            else:
                status = {"connected": True}
            status["last_checked"] = checked_at.isoformat()
            statuses[integration] = status

        failed = [name for name, status in statuses.items() if not status["connected"]]
        return ToolResult(
            success=not failed,
            data=statuses,
            warnings=[f"{len(failed)} integrations have connection issues"] if failed else None,
            suggestions=[
                "Reconnect failed integrations",
                "Check OAuth token expiration",
                "Verify integration configuration",
            ] if failed else None,
        )

    def check_integration_permissions(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
        validation: Dict[str, Dict[str, List[str]]] = {}
        for op in arguments["integration_operations"]:
            required = list(op["required_scopes"])
            grant = state.grant_for(context, op["integration"])
            granted = list(grant.scopes) if grant else []
            validation[op["integration"]] = {
                "operation": op["operation"],
                "required_scopes": required,
                "granted_scopes": granted,
                "missing_scopes": [s for s in required if s not in granted],
                "excess_scopes": [s for s in granted if s not in required],
            }

        issues = [name for name, v in validation.items() if v["missing_scopes"]]
        return ToolResult(
            success=not issues,
            data=validation,
            warnings=[f"{len(issues)} integrations have permission issues"] if issues else None,
            suggestions=[
                "Request additional OAuth scopes",
                "Update integration permissions",
                "Re-authorize integrations",
            ] if issues else None,
        )

    def check_rate_limits(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
        reset_time = (state.clock() + timedelta(hours=1)).isoformat()
        limits: Dict[str, Dict[str, Any]] = {}
        for integration in arguments["integrations"]:
            config = AVAILABLE_INTEGRATIONS.get(integration)
            if config is None:
                continue
            limit = config["rate_limit"]["requests"]
            remaining = max(0, limit - state.requests_used.get(integration, 0))
            if remaining == 0:
                status = "exceeded"
            elif remaining < limit * RATE_LIMIT_WARNING_RATIO:
                status = "warning"
            else:
                status = "ok"
            limits[integration] = {
                "limit": limit,
                "remaining": remaining,
                "reset_time": reset_time,
                "status": status,
            }

        issues = [name for name, v in limits.items() if v["status"] != "ok"]
        return ToolResult(
            success=not issues,
            data=limits,
            warnings=[f"{len(issues)} integrations approaching or at rate limits"] if issues else None,
            suggestions=[
                "Implement request queuing",
                "Reduce API call frequency",
                "Consider caching responses",
            ] if issues else None,
        )

    def test_integration_endpoint(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
        integration = arguments["integration"]
        endpoint = arguments["endpoint"]
        config = AVAILABLE_INTEGRATIONS.get(integration)
        if config is None:
            return ToolResult(success=False, error=f"Integration '{integration}' not found")
        endpoint_config = config["endpoints"].get(endpoint)
        if endpoint_config is None:
            return ToolResult(success=False, error=f"Endpoint '{endpoint}' not found for {integration}")

        if f"{integration}.{endpoint}" in state.unavailable_endpoints:
            return ToolResult(
                success=False,
                error="Endpoint temporarily unavailable",
                suggestions=[
                    "Retry the request",
                    "Check integration status",
                    "Verify endpoint parameters",
                ],
            )

        response = SAMPLE_RESPONSES.get(integration, {}).get(endpoint, {"success": True, "message": "Mock response"})
        return ToolResult(
            success=True,
            data={
                "integration": integration,
                "endpoint": endpoint,
                "method": endpoint_config["method"],
                "path": endpoint_config["path"],
                "request": arguments.get("test_data") or {},
                "response": response,
                "status": "success",
            },
            suggestions=["Test completed successfully", "Integration is working properly"],
        )

    return {
        "validate_connection": validate_connection,
        "check_integration_permissions": check_integration_permissions,
        "check_rate_limits": check_rate_limits,
        "suggest_integrations": suggest_integrations,
        "test_integration_endpoint": test_integration_endpoint,
    }


def suggest_integrations(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
    """Score the catalog against a workflow description. Stateless."""
    description = arguments["workflow_description"].lower()
    categories = arguments.get("categories") or []
    scored = []

    for integration_id, integration in AVAILABLE_INTEGRATIONS.items():
        score = 0
        reasons = []
        if integration["category"] in categories:
            score += 3
            reasons.append(f"Matches requested {integration['category']} category")
        if "crm" in description and integration["category"] == "CRM":
            score += 2
            reasons.append("CRM functionality required")
        if "email" in description and integration["category"] == "Email":
            score += 2
            reasons.append("Email functionality required")
        if integration_id == "slack" and ("slack" in description or "message" in description):
            score += 3
            reasons.append("Messaging/communication required")
        if integration_id == "salesforce" and ("salesforce" in description or "lead" in description):
            score += 3
            reasons.append("Salesforce-specific functionality detected")

        if score > 0:
            scored.append({
                "integration_id": integration_id,
                "name": integration["name"],
                "category": integration["category"],
                "score": score,
                "reasons": reasons,
                "required_scopes": list(integration["required_scopes"]),
                "available_operations": list(integration["endpoints"]),
            })

    # Stable sort keeps catalog order between equal scores
    scored.sort(key=lambda s: s["score"], reverse=True)

    return ToolResult(
        success=True,
        data={"suggestions": scored},
        suggestions=[f"Consider using {s['name']} for {', '.join(s['reasons'])}" for s in scored[:3]],
    )


def create_integration_tools(state: Optional[IntegrationState] = None) -> List[Tool]:
    handlers = build_integration_handlers(state or demo_state())
    string_list = {"type": "string"}
    return [
        Tool(
            name="validate_connection",
            description="Check connection status and health of external integrations",
            parameters=[
                ToolParameter(
                    name="integrations",
                    type=ParameterType.ARRAY,
                    description="Integration names to validate",
                    required=True,
                    items=string_list,
                )
            ],
            handler=handlers["validate_connection"],
        ),
        Tool(
            name="check_integration_permissions",
            description="Validate OAuth permissions for required integration operations",
            parameters=[
                ToolParameter(
                    name="integration_operations",
                    type=ParameterType.ARRAY,
                    description="Integration operations with their required scopes",
                    required=True,
                    items={
                        "type": "object",
                        "properties": {
                            "integration": {"type": "string"},
                            "operation": {"type": "string"},
                            "required_scopes": {"type": "array", "items": {"type": "string"}},
                        },
                        "required": ["integration", "operation", "required_scopes"],
                    },
                )
            ],
            handler=handlers["check_integration_permissions"],
        ),
        Tool(
            name="check_rate_limits",
            description="Check current rate limit status for integrations",
            parameters=[
                ToolParameter(
                    name="integrations",
                    type=ParameterType.ARRAY,
                    description="Integration names to check rate limits for",
                    required=True,
                    items=string_list,
                )
            ],
            handler=handlers["check_rate_limits"],
        ),
        Tool(
            name="suggest_integrations",
            description="Suggest appropriate integrations based on workflow requirements",
            parameters=[
                ToolParameter(
                    name="workflow_description",
                    type=ParameterType.STRING,
                    description="Description of the workflow and its requirements",
                    required=True,
                ),
                ToolParameter(
                    name="categories",
                    type=ParameterType.ARRAY,
                    description="Preferred integration categories (optional)",
                    items=string_list,
                ),
            ],
            handler=handlers["suggest_integrations"],
        ),
        Tool(
            name="test_integration_endpoint",
            description="Test specific integration endpoint with sample data",
            parameters=[
                ToolParameter(
                    name="integration",
                    type=ParameterType.STRING,
                    description="Integration name to test",
                    required=True,
                ),
                ToolParameter(
                    name="endpoint",
                    type=ParameterType.STRING,
                    description="Endpoint operation to test",
                    required=True,
                ),
                ToolParameter(
                    name="test_data",
                    type=ParameterType.OBJECT,
                    description="Test data to send to endpoint",
                ),
            ],
            handler=handlers["test_integration_endpoint"],
        ),
    ]
