"""Quality agent tools: code review, performance analysis, test planning and best practices."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from ..models.context import RunContext
from ..models.tools import ToolResult
from .definition import ParameterType, Tool, ToolParameter

# category -> (pattern, message, severity)
CODE_QUALITY_RULES: Dict[str, List[tuple]] = {
    "syntax": [
        (re.compile(r"console\.log\("), "Remove console.log statements", "warning"),
        (re.compile(r"debugger;"), "Remove debugger statements", "error"),
        (re.compile(r"\bvar\s+"), "Use const/let instead of var", "warning"),
        (re.compile(r"(?<![=!<>])==(?!=)\s*(?!null)"), "Use === instead of ==", "warning"),
    ],
    "security": [
        (re.compile(r"eval\s*\("), "Avoid using eval() - security risk", "critical"),
        (re.compile(r"innerHTML\s*="), "Potential XSS risk with innerHTML", "error"),
        (re.compile(r"document\.write\s*\("), "Avoid document.write - security risk", "error"),
    ],
    "performance": [
        (re.compile(r"for\s*\(\s*var\s+\w+\s*=\s*0.*\.length"), "Cache array length in loops", "info"),
        (re.compile(r"\+\s*''"), "Use String() instead of concatenation", "info"),
        (re.compile(r"new\s+RegExp\s*\("), "Use regex literals for better performance", "info"),
    ],
    "style": [
        (re.compile(r"function\s*\("), "Consider using arrow functions", "info"),
    ],
}

_AUTO_FIXES = (
    ("console.log", "Remove console.log statement"),
    ("var ", "Replace var with const or let"),
    ("==", "Replace == with ==="),
    ("debugger", "Remove debugger statement"),
)

BEST_PRACTICES: List[Dict[str, Any]] = [
    {
        "id": "error-handling",
        "name": "Error Handling",
        "description": "Proper error handling with try-catch blocks",
        "check": lambda code: "try" in code and ("catch" in code or "except" in code),
        "recommendation": "Add try-catch blocks for error handling",
    },
    {
        "id": "input-validation",
        "name": "Input Validation",
        "description": "Validate all user inputs",
        "check": lambda code: any(k in code for k in ("validate", "schema", "joi", "zod")),
        "recommendation": "Add input validation using validation libraries",
    },
    {
        "id": "async-await",
        "name": "Modern Async Patterns",
        "description": "Use async/await instead of callbacks",
        "check": lambda code: "async" in code and "await" in code,
        "recommendation": "Use async/await for better code readability",
    },
    {
        "id": "type-safety",
        "name": "Type Safety",
        "description": "Use TypeScript for type safety",
        "check": lambda code: ": " in code and ("interface" in code or "type" in code),
        "recommendation": "Add TypeScript types for better type safety",
    },
    {
        "id": "logging",
        "name": "Proper Logging",
        "description": "Use structured logging instead of console.log",
        "check": lambda code: "logger" in code or "log." in code,
        "recommendation": "Implement structured logging with appropriate log levels",
    },
]

PERFORMANCE_PATTERNS: List[Dict[str, Any]] = [
    {
        "type": "memory",
        "pattern": re.compile(r"new\s+Array\(\d+\)"),
        "description": "Large array allocation detected",
        "impact": "High memory usage",
        "implementation": "Consider using generators or streaming for large datasets",
    },
    {
        "type": "cpu",
        "pattern": re.compile(r"for\s*\([^)]*\)\s*{[^}]*for\s*\([^)]*\)"),
        "description": "Nested loops detected",
        "impact": "O(n²) complexity",
        "implementation": "Consider using Map/Set for lookups or optimize algorithm",
    },
    {
        "type": "network",
        "pattern": re.compile(r"fetch\s*\([^)]*\)\s*\.then[^}]*fetch\s*\("),
        "description": "Sequential API calls detected",
        "impact": "Slow network operations",
        "implementation": "Use Promise.all() for parallel requests",
    },
]

# Test recommendation triggers, checked in order
_TEST_TRIGGERS = [
    (
        re.compile(r"function\s+\w+|const\s+\w+\s*=\s*\(|def\s+\w+"),
        {"type": "unit", "description": "Test individual functions with various input scenarios", "priority": "high"},
    ),
    (
        re.compile(r"fetch\s*\(|axios\.|http\.|requests\."),
        {"type": "integration", "description": "Test API integrations with mock responses", "priority": "high"},
    ),
    (
        re.compile(r"req\.body|formData|input"),
        {"type": "e2e", "description": "Test complete form submission workflow", "priority": "medium"},
    ),
    (
        re.compile(r"validate|schema|joi|zod"),
        {"type": "unit", "description": "Test validation logic with valid and invalid inputs", "priority": "high"},
    ),
    (
        re.compile(r"async|await|Promise"),
        {"type": "performance", "description": "Test async operations for timing and memory usage", "priority": "medium"},
    ),
]

WORKFLOW_TEST_RECOMMENDATIONS: Dict[str, Dict[str, str]] = {
    "form": {
        "type": "e2e",
        "description": "Test form validation and submission flow",
        "priority": "high",
        "template": "Test all form fields, validation rules, and submission handling",
    },
    "api": {
        "type": "integration",
        "description": "Test all API endpoints with various payloads",
        "priority": "high",
        "template": "Test CRUD operations, error handling, and authentication",
    },
    "integration": {
        "type": "integration",
        "description": "Test external service integrations",
        "priority": "high",
        "template": "Mock external services and test error scenarios",
    },
    "dashboard": {
        "type": "performance",
        "description": "Test data loading and rendering performance",
        "priority": "medium",
        "template": "Test with large datasets and measure render times",
    },
}

LARGE_CODE_CHARS = 5000
MANY_DOM_QUERIES = 5


def _auto_fix(matched: str) -> Optional[str]:
    for needle, fix in _AUTO_FIXES:
        if needle in matched:
            return fix
    return None


def review_code(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
    code = arguments["code"]
    language = arguments["language"]
    issues = []

    for category, rules in CODE_QUALITY_RULES.items():
        for pattern, message, severity in rules:
            for match in pattern.finditer(code):
                line_start = code.rfind("\n", 0, match.start()) + 1
                issues.append({
                    "type": category,
                    "severity": severity,
                    "line": code.count("\n", 0, match.start()) + 1,
                    "column": match.start() - line_start,
                    "message": message,
                    "fix": _auto_fix(match.group(0)),
                })

    improvements = []
    if len(code) > LARGE_CODE_CHARS:
        improvements.append({
            "type": "refactor",
            "description": "Consider breaking down large functions into smaller modules",
            "impact": "medium",
            "effort": "moderate",
        })
    if language == "javascript" and "TypeScript" not in code:
        improvements.append({
            "type": "modernize",
            "description": "Consider migrating to TypeScript for better type safety",
            "impact": "high",
            "effort": "significant",
        })
    if "function(" in code and "=>" not in code:
        improvements.append({
            "type": "modernize",
            "description": "Use arrow functions for better readability",
            "impact": "low",
            "effort": "minimal",
        })

    critical = sum(1 for i in issues if i["severity"] == "critical")
    errors = sum(1 for i in issues if i["severity"] == "error")
    others = len(issues) - critical - errors
    score = max(0, 100 - critical * 20 - errors * 10 - others * 5)

    suggestions = [s["description"] for s in improvements]
    if critical:
        suggestions.append("Fix critical security issues immediately")

    return ToolResult(
        success=critical == 0,
        data={"score": score, "issues": issues, "suggestions": improvements},
        warnings=[f"Found {len(issues)} code quality issues"] if issues else None,
        suggestions=suggestions or None,
    )


def analyze_performance(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
    code = arguments["code"]
    optimizations = []

    for pattern in PERFORMANCE_PATTERNS:
        if pattern["pattern"].search(code):
            optimizations.append({
                "type": pattern["type"],
                "description": pattern["description"],
                "impact": pattern["impact"],
                "implementation": pattern["implementation"],
            })

    if code.count("document.querySelector") > MANY_DOM_QUERIES:
        optimizations.append({
            "type": "rendering",
            "description": "Multiple DOM queries detected",
            "impact": "Cache DOM elements to avoid repeated queries",
            "implementation": "Store DOM references in variables",
        })
    if "JSON.parse" in code and "JSON.stringify" in code:
        optimizations.append({
            "type": "cpu",
            "description": "JSON serialization/deserialization detected",
            "impact": "CPU intensive operations",
            "implementation": "Consider using structured cloning or object references",
        })

    high_impact = sum(1 for o in optimizations if "High" in o["impact"] or "O(n²)" in o["impact"])
    score = max(0, 100 - high_impact * 25 - (len(optimizations) - high_impact) * 10)

    return ToolResult(
        success=not optimizations,
        data={"score": score, "optimizations": optimizations},
        warnings=[f"Found {len(optimizations)} performance opportunities"] if optimizations else None,
        suggestions=[o["implementation"] for o in optimizations[:3]] or None,
    )


def generate_test_recommendations(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
    code = arguments["code"]
    recommendations = [dict(rec) for pattern, rec in _TEST_TRIGGERS if pattern.search(code)]

    workflow_specific = WORKFLOW_TEST_RECOMMENDATIONS.get(arguments["workflow_type"])
    if workflow_specific:
        recommendations.append(dict(workflow_specific))

    # Rough estimate, 15 points per recommendation
    coverage = min(90, len(recommendations) * 15)

    return ToolResult(
        success=True,
        data={"coverage": coverage, "recommendations": recommendations},
        suggestions=[r["description"] for r in recommendations[:3]] or None,
    )


def check_best_practices(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
    code = arguments["code"]
    violations = []
    total = len(BEST_PRACTICES)
    followed = 0

    for practice in BEST_PRACTICES:
        if practice["check"](code):
            followed += 1
        else:
            violations.append({
                "practice": practice["name"],
                "description": practice["description"],
                "recommendation": practice["recommendation"],
                "severity": "minor",
            })

    if arguments["language"] in ("javascript", "typescript"):
        total += 1
        if "strict" in code:
            followed += 1
        else:
            violations.append({
                "practice": "Strict Mode",
                "description": "Use strict mode for better error detection",
                "recommendation": 'Add "use strict"; at the top of files',
                "severity": "minor",
            })

    return ToolResult(
        success=not violations,
        data={"score": round(followed / total * 100), "violations": violations},
        warnings=[f"{len(violations)} best practice violations found"] if violations else None,
        suggestions=[v["recommendation"] for v in violations[:3]] or None,
    )


def create_quality_tools() -> List[Tool]:
    code_param = ToolParameter(
        name="code",
        type=ParameterType.STRING,
        description="The code to analyze",
        required=True,
    )
    return [
        Tool(
            name="review_code",
            description="Perform comprehensive code review for bugs, style, and best practices",
            parameters=[
                code_param,
                ToolParameter(
                    name="language",
                    type=ParameterType.STRING,
                    description="Programming language of the code",
                    required=True,
                ),
                ToolParameter(
                    name="framework",
                    type=ParameterType.STRING,
                    description="Framework being used (optional)",
                ),
            ],
            handler=review_code,
        ),
        Tool(
            name="analyze_performance",
            description="Analyze code for performance bottlenecks and optimization opportunities",
            parameters=[
                code_param,
                ToolParameter(
                    name="usage_context",
                    type=ParameterType.STRING,
                    description="Context about the code usage (web, server, etc.)",
                ),
            ],
            handler=analyze_performance,
        ),
        Tool(
            name="generate_test_recommendations",
            description="Generate testing recommendations based on code analysis",
            parameters=[
                code_param,
                ToolParameter(
                    name="workflow_type",
                    type=ParameterType.STRING,
                    description="Type of workflow (form, api, integration, etc.)",
                    required=True,
                ),
            ],
            handler=generate_test_recommendations,
        ),
        Tool(
            name="check_best_practices",
            description="Check code against established best practices and coding standards",
            parameters=[
                code_param,
                ToolParameter(
                    name="language",
                    type=ParameterType.STRING,
                    description="Programming language",
                    required=True,
                ),
            ],
            handler=check_best_practices,
        ),
    ]
