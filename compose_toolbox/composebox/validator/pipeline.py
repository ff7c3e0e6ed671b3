"""Validation pipeline: runs every check pass and orders the findings."""

from __future__ import annotations

import logging
from typing import Callable

from composebox.analyzer.lines import SourceLine, classify_document
from composebox.validator.best_practices import check_best_practices
from composebox.validator.models import (
    DiagnosticCode,
    ValidationIssue,
    ValidationResult,
    make_issue,
)
from composebox.validator.structure import check_structure
from composebox.validator.volume_refs import check_volume_refs
from composebox.validator.yaml_syntax import check_yaml_syntax

logger = logging.getLogger(__name__)

CheckPass = Callable[[list[SourceLine]], list[ValidationIssue]]

# Passes are independent: none of them reads another's output
CHECK_PASSES: list[tuple[str, CheckPass]] = [
    ("yaml_syntax", check_yaml_syntax),
    ("structure", check_structure),
    ("best_practices", check_best_practices),
    ("volume_refs", check_volume_refs),
]


def validate(yaml_str: str) -> ValidationResult:
    """Run the full validation pipeline on a Compose document.

    Never raises: a pass that crashes is logged and reported as a
    ``validator-check-failed`` error instead.
    """
    lines = classify_document(yaml_str)
    issues: list[ValidationIssue] = []

    for name, check in CHECK_PASSES:
        try:
            issues.extend(check(lines))
        except Exception:
            logger.exception("Validation check %s failed", name)
            issues.append(make_issue(DiagnosticCode.validator_check_failed, check=name))

    result = ValidationResult.from_issues(issues)
    logger.debug(
        "Validated %d lines: %d issue(s), valid=%s",
        len(lines),
        len(result.issues),
        result.is_valid,
    )
    return result
