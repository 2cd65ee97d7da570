"""Result models returned by the high-level client."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .orchestration import ValidationResult


class WorkflowBuildResult(BaseModel):
    """Outcome of building a workflow, with findings split by category."""

    success: bool
    workflow_code: Optional[str] = None
    validation_results: List[ValidationResult] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    security_issues: List[ValidationResult] = Field(default_factory=list)
    design_issues: List[ValidationResult] = Field(default_factory=list)
    integration_issues: List[ValidationResult] = Field(default_factory=list)
    quality_issues: List[ValidationResult] = Field(default_factory=list)
    total_cost: float = 0.0
    execution_time_ms: int = 0


class RealTimeValidation(BaseModel):
    is_valid: bool
    issues: List[ValidationResult] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    execution_time_ms: int = 0


class IntegrationSuggestion(BaseModel):
    integration_id: str
    name: str
    category: str
    score: int
    reasons: List[str] = Field(default_factory=list)
    required_scopes: List[str] = Field(default_factory=list)
    available_operations: List[str] = Field(default_factory=list)


class IntegrationSuggestions(BaseModel):
    suggestions: List[IntegrationSuggestion] = Field(default_factory=list)
    execution_time_ms: int = 0


class SecurityScanReport(BaseModel):
    """Combined result of the package, compliance and secret scans.

    ``security_score`` is the percentage of the three scans that passed.
    """

    security_score: int = Field(..., ge=0, le=100)
    vulnerabilities: List[Dict[str, Any]] = Field(default_factory=list)
    compliance_issues: List[Dict[str, Any]] = Field(default_factory=list)
    secrets: List[Dict[str, Any]] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    execution_time_ms: int = 0
