"""Design agent tools: brand compliance, UI consistency, accessibility and recommendations."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from ..models.context import RunContext
from ..models.tools import ToolResult
from .definition import ParameterType, Tool, ToolParameter

BRAND_COLORS = {
    "primary": "#007bff",
    "secondary": "#6c757d",
    "success": "#28a745",
    "danger": "#dc3545",
    "warning": "#ffc107",
    "info": "#17a2b8",
    "light": "#f8f9fa",
    "dark": "#343a40",
}

BRAND_FONT_FAMILY = '"Inter", -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif'

# Component types with brand guidelines
GUIDED_COMPONENTS = {
    "button": {"border_radius": "0.375rem", "padding": "0.5rem 1rem", "font_size": "0.875rem"},
    "card": {"border_radius": "0.5rem", "padding": "1.5rem"},
    "form": {"input_border_radius": "0.375rem", "input_padding": "0.5rem 0.75rem"},
}

BASE_RECOMMENDATIONS = [
    {
        "category": "Layout",
        "description": "Use consistent spacing and alignment throughout the workflow",
        "priority": "medium",
    },
    {
        "category": "Colors",
        "description": "Apply brand colors consistently for actions and states",
        "priority": "high",
    },
]

TYPE_RECOMMENDATIONS: Dict[str, List[Dict[str, str]]] = {
    "form": [
        {
            "category": "Form Design",
            "description": "Group related fields with clear labels and validation",
            "priority": "high",
        },
        {
            "category": "Progress",
            "description": "Show form progress and completion status",
            "priority": "medium",
        },
    ],
    "dashboard": [
        {
            "category": "Data Visualization",
            "description": "Use appropriate charts and clear data hierarchy",
            "priority": "high",
        },
        {
            "category": "Navigation",
            "description": "Implement clear navigation and filtering options",
            "priority": "medium",
        },
    ],
}

_LEADING_NUMBER = re.compile(r"^\s*([-+]?\d*\.?\d+)")


def is_valid_brand_color(color: str) -> bool:
    return color in BRAND_COLORS.values() or color.startswith("var(--") or color == "transparent"


def is_valid_spacing(spacing: str) -> bool:
    """Spacing must sit on the 4px grid (0.25rem steps)."""
    match = _LEADING_NUMBER.match(spacing)
    if not match:
        return False
    return (float(match.group(1)) * 16) % 4 == 0


def _color_violations(component: Dict[str, Any]) -> List[Dict[str, Any]]:
    styles = component.get("styles", {})
    violations = []
    for prop in ("backgroundColor", "color"):
        value = styles.get(prop)
        if value and not is_valid_brand_color(value):
            violations.append({
                "type": "color",
                "component": component["type"],
                "expected": "Brand guideline colors",
                "actual": value,
                "severity": "major",
            })
    return violations


def _typography_violations(component: Dict[str, Any]) -> List[Dict[str, Any]]:
    font = component.get("styles", {}).get("fontFamily")
    if font and font != BRAND_FONT_FAMILY:
        return [{
            "type": "typography",
            "component": component["type"],
            "expected": BRAND_FONT_FAMILY,
            "actual": font,
            "severity": "minor",
        }]
    return []


def _spacing_violations(component: Dict[str, Any]) -> List[Dict[str, Any]]:
    styles = component.get("styles", {})
    violations = []
    for prop in ("margin", "padding"):
        value = styles.get(prop)
        if value and not is_valid_spacing(value):
            violations.append({
                "type": "spacing",
                "component": component["type"],
                "expected": "4px grid system",
                "actual": value,
                "severity": "minor",
            })
    return violations


def validate_brand_compliance(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
    violations: List[Dict[str, Any]] = []
    total_checks = 0
    passed_checks = 0

    # 3 colour, 2 typography and 2 spacing checks per component
    for component in arguments["ui_components"]:
        for check, weight in (
            (_color_violations, 3),
            (_typography_violations, 2),
            (_spacing_violations, 2),
        ):
            found = check(component)
            violations.extend(found)
            total_checks += weight
            passed_checks += weight - len(found)

    score = round(passed_checks / total_checks * 100) if total_checks else 100

    return ToolResult(
        success=not violations,
        data={"score": score, "violations": violations},
        warnings=[f"Found {len(violations)} brand compliance violations"] if violations else None,
        suggestions=[
            "Update component styles to match brand guidelines",
            "Use design system variables instead of hardcoded values",
            "Consult brand guidelines documentation",
        ] if violations else None,
    )


def check_ui_consistency(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
    ui = arguments["workflow_ui"]
    components = ui.get("components", [])
    layout = ui.get("layout", "")

    component_checks = []
    for component in components:
        ctype = component.get("type", "")
        if ctype in GUIDED_COMPONENTS:
            component_checks.append({"component": ctype, "standard": "Brand guidelines", "compliant": True})
        else:
            component_checks.append({"component": ctype, "standard": "No specific guidelines", "compliant": True})

    layout_ok = layout == "standard" or len(components) > 0
    pattern_check = {
        "pattern": "Standard layout",
        "usage": layout,
        "correct": layout_ok,
        "recommendation": None if layout_ok else "Use standard layout patterns for better UX",
    }

    failed = [c for c in component_checks if not c["compliant"]]
    suggestions = [f"Follow {c['component']} component guidelines" for c in failed]
    if not layout_ok:
        suggestions.append(pattern_check["recommendation"])
    issue_count = len(failed) + (0 if layout_ok else 1)

    return ToolResult(
        success=issue_count == 0,
        data={"components": component_checks, "patterns": [pattern_check]},
        warnings=[f"{issue_count} UI consistency issues found"] if issue_count else None,
        suggestions=suggestions or None,
    )


def _accessibility_issues(component: Dict[str, Any]) -> List[Dict[str, Any]]:
    ctype = component.get("type", "")
    props = component.get("props", {})
    class_name = props.get("className") or ""
    issues = []

    if "text-gray-300" in class_name and "bg-gray-200" in class_name:
        issues.append({
            "type": "color-contrast",
            "severity": "serious",
            "element": ctype,
            "description": "Insufficient color contrast between text and background",
            "fix": "Use darker text or lighter background to improve contrast ratio",
        })
    if ctype in ("button", "input") and not props.get("tabIndex"):
        issues.append({
            "type": "keyboard-navigation",
            "severity": "moderate",
            "element": ctype,
            "description": "Component may not be keyboard accessible",
            "fix": "Ensure proper tab order and keyboard event handlers",
        })
    if ctype in ("button", "input") and not props.get("aria-label") and not props.get("children"):
        issues.append({
            "type": "screen-reader",
            "severity": "serious",
            "element": ctype,
            "description": "Missing accessible name for screen readers",
            "fix": "Add aria-label or descriptive text content",
        })
    if ctype == "modal" and not props.get("autoFocus"):
        issues.append({
            "type": "focus-management",
            "severity": "moderate",
            "element": ctype,
            "description": "Modal should manage focus properly",
            "fix": "Implement focus trapping and restoration",
        })
    return issues


def validate_accessibility(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
    issues: List[Dict[str, Any]] = []
    total_checks = 0
    passed_checks = 0
    for component in arguments["ui_components"]:
        found = _accessibility_issues(component)
        issues.extend(found)
        # contrast, keyboard, screen reader, focus
        failed_kinds = {issue["type"] for issue in found}
        total_checks += 4
        passed_checks += 4 - len(failed_kinds)

    score = round(passed_checks / total_checks * 100) if total_checks else 100

    return ToolResult(
        success=not issues,
        data={"score": score, "issues": issues},
        warnings=[f"Found {len(issues)} accessibility issues"] if issues else None,
        suggestions=[
            "Add proper ARIA labels and roles",
            "Ensure sufficient color contrast ratios",
            "Implement proper keyboard navigation",
            "Test with screen readers",
        ] if issues else None,
    )


def generate_design_recommendations(arguments: Dict[str, Any], context: Optional[RunContext] = None) -> ToolResult:
    recommendations = BASE_RECOMMENDATIONS + TYPE_RECOMMENDATIONS.get(arguments["workflow_type"], [])
    return ToolResult(
        success=True,
        data={
            "recommendations": recommendations,
            "current_issues": list(arguments.get("current_issues") or []),
        },
        suggestions=[rec["description"] for rec in recommendations],
    )


_COMPONENT_ITEM = {
    "type": "object",
    "properties": {"type": {"type": "string"}},
    "required": ["type"],
}


def create_design_tools() -> List[Tool]:
    return [
        Tool(
            name="validate_brand_compliance",
            description="Check UI components against brand guidelines for color, typography, and spacing",
            parameters=[
                ToolParameter(
                    name="ui_components",
                    type=ParameterType.ARRAY,
                    description="UI components ({type, styles, id?}) to validate",
                    required=True,
                    items=_COMPONENT_ITEM,
                )
            ],
            handler=validate_brand_compliance,
        ),
        Tool(
            name="check_ui_consistency",
            description="Validate UI components follow established design patterns and consistency rules",
            parameters=[
                ToolParameter(
                    name="workflow_ui",
                    type=ParameterType.OBJECT,
                    description="The workflow UI structure ({components, layout}) to validate",
                    required=True,
                    properties={
                        "components": {"type": "array", "items": _COMPONENT_ITEM},
                        "layout": {"type": "string"},
                    },
                )
            ],
            handler=check_ui_consistency,
        ),
        Tool(
            name="validate_accessibility",
            description="Check UI components for accessibility compliance (WCAG guidelines)",
            parameters=[
                ToolParameter(
                    name="ui_components",
                    type=ParameterType.ARRAY,
                    description="UI components ({type, props, content?}) to check",
                    required=True,
                    items=_COMPONENT_ITEM,
                )
            ],
            handler=validate_accessibility,
        ),
        Tool(
            name="generate_design_recommendations",
            description="Generate design improvement recommendations based on UI analysis",
            parameters=[
                ToolParameter(
                    name="workflow_type",
                    type=ParameterType.STRING,
                    description="Type of workflow (form, dashboard, report, etc.)",
                    required=True,
                ),
                ToolParameter(
                    name="current_issues",
                    type=ParameterType.ARRAY,
                    description="Current design issues found",
                    items={"type": "string"},
                ),
            ],
            handler=generate_design_recommendations,
        ),
    ]
