"""Validation pipeline for Docker Compose documents."""

from composebox.validator.models import (
    DiagnosticCode,
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
)
from composebox.validator.pipeline import validate

__all__ = [
    "DiagnosticCode",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSeverity",
    "validate",
]
