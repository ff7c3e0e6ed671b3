"""Document-wide best-practice suggestions."""

from __future__ import annotations

from composebox.analyzer.lines import LineRole, SourceLine
from composebox.analyzer.sections import find_section
from composebox.validator.models import DiagnosticCode, ValidationIssue, make_issue


def _key_lines(lines: list[SourceLine], key: str) -> list[SourceLine]:
    return [
        line
        for line in lines
        if line.role is LineRole.mapping_key and line.key == key and not line.in_block_scalar
    ]


def check_best_practices(lines: list[SourceLine]) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    last_line = len(lines)

    if find_section(lines, "networks") is None:
        issues.append(make_issue(DiagnosticCode.compose_missing_networks, last_line))
    if find_section(lines, "volumes") is None:
        issues.append(make_issue(DiagnosticCode.compose_missing_volumes, last_line))

    environment = _key_lines(lines, "environment")
    if environment and not _key_lines(lines, "env_file"):
        issues.append(make_issue(DiagnosticCode.compose_hardcoded_env, environment[0].number))

    for line in _key_lines(lines, "image"):
        if ":latest" in (line.value or ""):
            issues.append(make_issue(DiagnosticCode.compose_latest_tag, line.number))

    services = find_section(lines, "services")
    if services is not None and not _key_lines(lines, "healthcheck"):
        issues.append(make_issue(DiagnosticCode.compose_missing_healthcheck, services + 1))

    return issues
