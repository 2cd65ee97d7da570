"""Security agent tools: package vulnerabilities, permissions, policy compliance and secret scanning."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from ..models.context import RunContext
from ..models.tools import ToolResult
from .definition import ParameterType, Tool, ToolParameter

# Known-vulnerable package versions: name -> version -> advisories
KNOWN_VULNERABILITIES: Dict[str, Dict[str, List[Dict[str, str]]]] = {
    "express": {
        "4.17.1": [
            {
                "severity": "medium",
                "description": "Prototype pollution vulnerability",
                "fix": "Upgrade to express@4.18.2 or later",
            }
        ]
    },
    "lodash": {
        "4.17.15": [
            {
                "severity": "high",
                "description": "Prototype pollution in zipObjectDeep",
                "fix": "Upgrade to lodash@4.17.21 or later",
            }
        ]
    },
}

SECURITY_POLICIES: List[Dict[str, Any]] = [
    {
        "id": "data-encryption",
        "name": "Data Encryption Requirements",
        "description": "All sensitive data must be encrypted at rest and in transit",
        "keywords": ["password", "secret", "token", "key", "api_key"],
    },
    {
        "id": "input-validation",
        "name": "Input Validation",
        "description": "All user inputs must be validated and sanitized",
        "keywords": ["req.body", "req.query", "req.params", "input", "form"],
    },
    {
        "id": "authentication",
        "name": "Authentication Required",
        "description": "All endpoints must require proper authentication",
        "keywords": ["app.get", "app.post", "app.put", "app.delete", "router."],
    },
]

SECRET_PATTERNS = [
    (re.compile(r"password\s*=\s*['\"][^'\"]+['\"]"), "hardcoded password"),
    (re.compile(r"api[_-]?key\s*=\s*['\"][^'\"]+['\"]"), "hardcoded API key"),
    (re.compile(r"secret\s*=\s*['\"][^'\"]+['\"]"), "hardcoded secret"),
    (re.compile(r"token\s*=\s*['\"][^'\"]+['\"]"), "hardcoded token"),
    (re.compile(r"sk_[a-zA-Z0-9]{24,}"), "Stripe secret key"),
    (re.compile(r"pk_[a-zA-Z0-9]{24,}"), "Stripe publishable key"),
]

# Markers that show a keyword is already handled safely
_SAFE_SECRET_MARKERS = ("process.env", "getSecret", "env.", "os.environ", "os.getenv")
_SAFE_INPUT_MARKERS = ("validate", "sanitize", "joi.", "zod.")
_SAFE_AUTH_MARKERS = ("authenticate", "authorize", "jwt", "auth")


def has_proper_security(code: str, keyword: str) -> bool:
    """Whether code that mentions ``keyword`` also shows the matching safeguard."""
    if keyword in ("password", "secret", "token", "api_key"):
        return any(marker in code for marker in _SAFE_SECRET_MARKERS)
    if keyword in ("req.body", "req.query", "req.params"):
        return any(marker in code for marker in _SAFE_INPUT_MARKERS)
    if keyword in ("app.get", "app.post", "app.put", "app.delete", "router."):
        return any(marker in code for marker in _SAFE_AUTH_MARKERS)
    return False


def validate_package_security(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
    vulnerabilities = []
    recommendations = []
    for pkg in arguments["packages"]:
        advisories = KNOWN_VULNERABILITIES.get(pkg["name"], {}).get(pkg["version"])
        if advisories:
            advisory = advisories[0]
            vulnerabilities.append({
                "severity": advisory["severity"],
                "package": pkg["name"],
                "version": pkg["version"],
                "description": advisory["description"],
                "fix": advisory["fix"],
            })
            recommendations.append(f"Update {pkg['name']} to resolve security vulnerabilities")

    return ToolResult(
        success=True,
        data={"vulnerabilities": vulnerabilities, "recommendations": recommendations},
        warnings=[f"Found {len(vulnerabilities)} security vulnerabilities"] if vulnerabilities else None,
    )


def check_permissions(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
    if context is None:
        return ToolResult(success=False, error="Context required for permission validation")

    required = list(arguments["required_permissions"])
    granted = list(context.permissions)
    violations = [perm for perm in required if perm not in granted]

    return ToolResult(
        success=not violations,
        data={
            "required": required,
            "granted": granted,
            "violations": violations,
            "workflow_actions": list(arguments["workflow_actions"]),
        },
        warnings=[f"Missing permissions: {', '.join(violations)}"] if violations else None,
    )


def validate_compliance(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
    code = arguments["workflow_code"]
    policy_ids = arguments.get("policy_ids")
    policies = SECURITY_POLICIES
    if policy_ids is not None:
        policies = [p for p in SECURITY_POLICIES if p["id"] in policy_ids]

    checks = []
    for policy in policies:
        violated = any(
            keyword in code and not has_proper_security(code, keyword)
            for keyword in policy["keywords"]
        )
        description = policy["description"].lower()
        checks.append({
            "policy_id": policy["id"],
            "name": policy["name"],
            "status": "violation" if violated else "compliant",
            "details": f"Code may violate {description}" if violated else f"Code complies with {description}",
        })

    violations = [c for c in checks if c["status"] == "violation"]
    score = round((len(checks) - len(violations)) / len(checks) * 100) if checks else 100

    return ToolResult(
        success=not violations,
        data={"policies": checks, "score": score},
        warnings=[f"{len(violations)} policy violations found"] if violations else None,
        suggestions=[f"Address {v['name']} compliance issues" for v in violations] or None,
    )


def scan_for_secrets(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
    findings = []
    for line_no, line in enumerate(arguments["workflow_code"].split("\n"), start=1):
        for pattern, kind in SECRET_PATTERNS:
            if pattern.search(line):
                findings.append({
                    "type": kind,
                    "line": line_no,
                    "content": line.strip(),
                    "severity": "high",
                })

    return ToolResult(
        success=not findings,
        data={"findings": findings},
        warnings=[f"Found {len(findings)} potential secrets in code"] if findings else None,
        suggestions=[
            "Remove hardcoded secrets and use environment variables",
            "Use secure secret management systems",
            "Implement proper authentication flows",
        ] if findings else None,
    )


def create_security_tools() -> List[Tool]:
    return [
        Tool(
            name="validate_package_security",
            description="Scan workflow packages for known security vulnerabilities",
            parameters=[
                ToolParameter(
                    name="packages",
                    type=ParameterType.ARRAY,
                    description="Package names and versions to validate",
                    required=True,
                    items={
                        "type": "object",
                        "properties": {"name": {"type": "string"}, "version": {"type": "string"}},
                        "required": ["name", "version"],
                    },
                )
            ],
            handler=validate_package_security,
        ),
        Tool(
            name="check_permissions",
            description="Validate user permissions against required workflow operations",
            parameters=[
                ToolParameter(
                    name="required_permissions",
                    type=ParameterType.ARRAY,
                    description="Permission strings required for the workflow",
                    required=True,
                    items={"type": "string"},
                ),
                ToolParameter(
                    name="workflow_actions",
                    type=ParameterType.ARRAY,
                    description="Actions the workflow will perform",
                    required=True,
                    items={"type": "string"},
                ),
            ],
            handler=check_permissions,
        ),
        Tool(
            name="validate_compliance",
            description="Check workflow code against organizational security policies",
            parameters=[
                ToolParameter(
                    name="workflow_code",
                    type=ParameterType.STRING,
                    description="The generated workflow code to validate",
                    required=True,
                ),
                ToolParameter(
                    name="policy_ids",
                    type=ParameterType.ARRAY,
                    description="Specific policy IDs to check (optional)",
                    items={"type": "string"},
                ),
            ],
            handler=validate_compliance,
        ),
        Tool(
            name="scan_for_secrets",
            description="Scan workflow code for hardcoded secrets and sensitive data",
            parameters=[
                ToolParameter(
                    name="workflow_code",
                    type=ParameterType.STRING,
                    description="The workflow code to scan for secrets",
                    required=True,
                )
            ],
            handler=scan_for_secrets,
        ),
    ]
