"""Validation data models and the diagnostic catalog."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ValidationSeverity(str, Enum):
    """Severity level for validation issues."""

    error = "error"
    warning = "warning"
    info = "info"


SEVERITY_PRIORITY: dict[ValidationSeverity, int] = {
    ValidationSeverity.error: 0,
    ValidationSeverity.warning: 1,
    ValidationSeverity.info: 2,
}


class DiagnosticCode(str, Enum):
    """Every diagnostic the validator can emit. Values are stable identifiers."""

    # YAML syntax
    yaml_no_tabs = "yaml-no-tabs"
    yaml_mixed_indentation = "yaml-mixed-indentation"
    yaml_indentation = "yaml-indentation"
    yaml_unbalanced_quotes = "yaml-unbalanced-quotes"
    yaml_colon_spacing = "yaml-colon-spacing"
    yaml_missing_colon = "yaml-missing-colon"
    yaml_multiple_sections = "yaml-multiple-sections"
    yaml_list_item_spacing = "yaml-list-item-spacing"
    yaml_duplicate_key = "yaml-duplicate-key"

    # Document structure
    compose_missing_services = "compose-missing-services"
    compose_empty_services = "compose-empty-services"
    compose_misplaced_services = "compose-misplaced-services"
    compose_misplaced_networks = "compose-misplaced-networks"
    compose_misplaced_volumes = "compose-misplaced-volumes"

    # Per-service structure
    service_missing_image_build = "service-missing-image-build"
    service_empty_image = "service-empty-image"
    service_invalid_image_format = "service-invalid-image-format"
    service_double_colon_image = "service-double-colon-image"
    service_missing_restart = "service-missing-restart"
    service_missing_volumes = "service-missing-volumes"
    service_exposed_no_ports = "service-exposed-no-ports"
    service_many_env_vars = "service-many-env-vars"
    service_privileged_mode = "service-privileged-mode"
    service_host_network = "service-host-network"
    service_duplicate_port = "service-duplicate-port"
    service_common_port = "service-common-port"

    # Volume mount syntax
    volume_invalid_comma = "volume-invalid-comma"
    volume_trailing_colon = "volume-trailing-colon"
    volume_leading_colon = "volume-leading-colon"
    volume_too_many_parts = "volume-too-many-parts"
    volume_empty_segment = "volume-empty-segment"
    volume_relative_container_path = "volume-relative-container-path"
    volume_missing_container_path = "volume-missing-container-path"

    # Best practices
    compose_missing_networks = "compose-missing-networks"
    compose_missing_volumes = "compose-missing-volumes"
    compose_hardcoded_env = "compose-hardcoded-env"
    compose_latest_tag = "compose-latest-tag"
    compose_missing_healthcheck = "compose-missing-healthcheck"

    # Volume cross-references
    compose_unused_volume = "compose-unused-volume"
    compose_undefined_volume = "compose-undefined-volume"
    service_empty_volumes = "service-empty-volumes"

    validator_check_failed = "validator-check-failed"


@dataclass(frozen=True)
class DiagnosticRule:
    severity: ValidationSeverity
    message: str
    suggestion: str | None = None


_E = ValidationSeverity.error
_W = ValidationSeverity.warning
_I = ValidationSeverity.info

CATALOG: dict[DiagnosticCode, DiagnosticRule] = {
    DiagnosticCode.yaml_no_tabs: DiagnosticRule(
        _E, "YAML does not allow tabs for indentation. Use spaces instead.",
    ),
    DiagnosticCode.yaml_mixed_indentation: DiagnosticRule(
        _E, "Indentation mixes spaces and tabs.",
    ),
    DiagnosticCode.yaml_indentation: DiagnosticRule(
        _W, "Inconsistent indentation. Docker Compose typically uses 2-space indentation.",
    ),
    DiagnosticCode.yaml_unbalanced_quotes: DiagnosticRule(
        _E, "Unbalanced {quote} quote on this line.",
    ),
    DiagnosticCode.yaml_colon_spacing: DiagnosticRule(
        _E, 'Missing space after colon in "{key}:".',
        suggestion='Write "{key}: value".',
    ),
    DiagnosticCode.yaml_missing_colon: DiagnosticRule(
        _E, 'Missing colon after key "{key}".',
    ),
    DiagnosticCode.yaml_multiple_sections: DiagnosticRule(
        _E, "Multiple top-level keys on one line: {keys}. Put each on its own line.",
    ),
    DiagnosticCode.yaml_list_item_spacing: DiagnosticRule(
        _E, 'List item dash must be followed by a space: "{text}".',
    ),
    DiagnosticCode.yaml_duplicate_key: DiagnosticRule(
        _E, 'Duplicate key "{key}" found (previously defined on line {previous_line}).',
    ),
    DiagnosticCode.compose_missing_services: DiagnosticRule(
        _E, "Missing required 'services:' section",
    ),
    DiagnosticCode.compose_empty_services: DiagnosticRule(
        _E, "Services section is empty. At least one service is required.",
    ),
    DiagnosticCode.compose_misplaced_services: DiagnosticRule(
        _E, "'services:' must be a top-level key (no indentation).",
    ),
    DiagnosticCode.compose_misplaced_networks: DiagnosticRule(
        _E, "Network definitions belong in a top-level 'networks:' section.",
    ),
    DiagnosticCode.compose_misplaced_volumes: DiagnosticRule(
        _E, "Volume definitions belong in a top-level 'volumes:' section.",
    ),
    DiagnosticCode.service_missing_image_build: DiagnosticRule(
        _E, 'Service "{service}" must have either "image" or "build" specified',
    ),
    DiagnosticCode.service_empty_image: DiagnosticRule(
        _E, 'Service "{service}" has empty image name',
    ),
    DiagnosticCode.service_invalid_image_format: DiagnosticRule(
        _E, 'Service "{service}" has invalid image format: trailing colon without tag',
        suggestion="Either remove the colon or specify a tag.",
    ),
    DiagnosticCode.service_double_colon_image: DiagnosticRule(
        _E, 'Service "{service}" has invalid image format: double colon',
    ),
    DiagnosticCode.service_missing_restart: DiagnosticRule(
        _I, 'Service "{service}" has no restart policy.',
        suggestion='Consider adding "restart: unless-stopped" for production.',
    ),
    DiagnosticCode.service_missing_volumes: DiagnosticRule(
        _I, 'Service "{service}" has no volume mappings. Did you forget to add persistent storage?',
    ),
    DiagnosticCode.service_exposed_no_ports: DiagnosticRule(
        _W, 'Service "{service}" exposes ports but has no port mappings. Ports won\'t be accessible from host',
    ),
    DiagnosticCode.service_many_env_vars: DiagnosticRule(
        _I, 'Service "{service}" has {count} environment variables.',
        suggestion="Consider using env_file for better organization.",
    ),
    DiagnosticCode.service_privileged_mode: DiagnosticRule(
        _W, 'Service "{service}" runs in privileged mode. This may be a security risk',
    ),
    DiagnosticCode.service_host_network: DiagnosticRule(
        _W, "Service \"{service}\" uses host networking. This bypasses Docker's network isolation",
    ),
    DiagnosticCode.service_duplicate_port: DiagnosticRule(
        _E, 'Service "{service}" has duplicate host port {port}',
    ),
    DiagnosticCode.service_common_port: DiagnosticRule(
        _I, 'Service "{service}" uses port {port} ({protocol}). Ensure this doesn\'t conflict with existing services',
    ),
    DiagnosticCode.volume_invalid_comma: DiagnosticRule(
        _E, 'Volume mapping "{mount}" contains a comma in its path. Separate host and container paths with ":".',
    ),
    DiagnosticCode.volume_trailing_colon: DiagnosticRule(
        _E, 'Volume mapping "{mount}" ends with a colon. Specify the container path after it.',
    ),
    DiagnosticCode.volume_leading_colon: DiagnosticRule(
        _E, 'Volume mapping "{mount}" starts with a colon. Specify the host path or volume name before it.',
    ),
    DiagnosticCode.volume_too_many_parts: DiagnosticRule(
        _E, 'Volume mapping "{mount}" has too many parts. Expected host:container[:mode].',
    ),
    DiagnosticCode.volume_empty_segment: DiagnosticRule(
        _E, 'Volume mapping "{mount}" has an empty segment.',
    ),
    DiagnosticCode.volume_relative_container_path: DiagnosticRule(
        _W, 'Container path "{path}" in volume mapping "{mount}" should be absolute.',
    ),
    DiagnosticCode.volume_missing_container_path: DiagnosticRule(
        _E, 'Volume mapping "{mount}" has no container path.',
        suggestion="Use host:container, for example ./data:/data.",
    ),
    DiagnosticCode.compose_missing_networks: DiagnosticRule(
        _I, "No custom networks defined. Consider using custom networks for better service isolation",
    ),
    DiagnosticCode.compose_missing_volumes: DiagnosticRule(
        _I, "No named volumes defined. Consider using named volumes for persistent data",
    ),
    DiagnosticCode.compose_hardcoded_env: DiagnosticRule(
        _I, "Consider using .env files for environment variables instead of hardcoding them",
    ),
    DiagnosticCode.compose_latest_tag: DiagnosticRule(
        _W, "Using 'latest' tag is not recommended for production. Use specific version tags",
    ),
    DiagnosticCode.compose_missing_healthcheck: DiagnosticRule(
        _I, "No health checks defined. Consider adding health checks for better reliability",
    ),
    DiagnosticCode.compose_unused_volume: DiagnosticRule(
        _W, 'Volume "{volume}" is defined but not used by any service.',
    ),
    DiagnosticCode.compose_undefined_volume: DiagnosticRule(
        _E, 'Volume "{volume}" is used but not defined in the top-level volumes section.',
    ),
    DiagnosticCode.service_empty_volumes: DiagnosticRule(
        _W, 'Service "{service}" has an empty volumes section.',
    ),
    DiagnosticCode.validator_check_failed: DiagnosticRule(
        _E, "Internal error while running {check} check.",
    ),
}


class ValidationIssue(BaseModel):
    """A single validation finding. Serialized with ``type`` for the severity."""

    model_config = ConfigDict(frozen=True)

    severity: ValidationSeverity = Field(serialization_alias="type")
    code: DiagnosticCode
    message: str
    line: int | None = None
    start_line: int | None = None
    end_line: int | None = None
    start_column: int | None = None
    end_column: int | None = None
    suggestion: str | None = None

    @property
    def priority(self) -> int:
        return SEVERITY_PRIORITY[self.severity]


def make_issue(
    code: DiagnosticCode,
    line: int | None = None,
    *,
    end_line: int | None = None,
    column: int | None = None,
    **params: object,
) -> ValidationIssue:
    """Build an issue from the catalog entry for ``code``."""
    rule = CATALOG[code]
    return ValidationIssue(
        severity=rule.severity,
        code=code,
        message=rule.message.format(**params),
        line=line,
        start_line=line if end_line is not None else None,
        end_line=end_line,
        start_column=column,
        end_column=column,
        suggestion=rule.suggestion.format(**params) if rule.suggestion else None,
    )


def issue_sort_key(issue: ValidationIssue) -> tuple[int, float]:
    """Priority first, then line; issues without a line go last in their band."""
    return (issue.priority, issue.line if issue.line is not None else float("inf"))


class ValidationResult(BaseModel):
    """Aggregated result from the validation pipeline."""

    is_valid: bool = True
    has_errors: bool = False
    has_warnings: bool = False
    issues: list[ValidationIssue] = Field(default_factory=list)

    @classmethod
    def from_issues(cls, issues: list[ValidationIssue]) -> ValidationResult:
        ordered = sorted(issues, key=issue_sort_key)
        has_errors = any(i.severity is ValidationSeverity.error for i in ordered)
        return cls(
            is_valid=not has_errors,
            has_errors=has_errors,
            has_warnings=any(i.severity is ValidationSeverity.warning for i in ordered),
            issues=ordered,
        )

    def count(self, severity: ValidationSeverity) -> int:
        return sum(1 for i in self.issues if i.severity is severity)
