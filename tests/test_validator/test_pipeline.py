"""Tests for the validation pipeline."""

from __future__ import annotations

import pytest

from composebox.validator import (
    DiagnosticCode,
    ValidationResult,
    ValidationSeverity,
    validate,
)
import composebox.validator.pipeline as pipeline
from composebox.validator.models import SEVERITY_PRIORITY, make_issue


def _codes(result: ValidationResult) -> list[DiagnosticCode]:
    return [i.code for i in result.issues]


# ---------------------------------------------------------------------------
# Worked scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_single_latest_service(self) -> None:
        result = validate("services:\n  web:\n    image: nginx:latest\n")
        assert [(i.code, i.severity) for i in result.issues] == [
            (DiagnosticCode.compose_latest_tag, ValidationSeverity.warning),
            (DiagnosticCode.compose_missing_healthcheck, ValidationSeverity.info),
            (DiagnosticCode.service_missing_restart, ValidationSeverity.info),
            (DiagnosticCode.service_missing_volumes, ValidationSeverity.info),
            (DiagnosticCode.compose_missing_networks, ValidationSeverity.info),
            (DiagnosticCode.compose_missing_volumes, ValidationSeverity.info),
        ]
        assert result.is_valid is True
        assert result.has_errors is False
        assert result.has_warnings is True

    def test_empty_document(self) -> None:
        result = validate("")
        assert result.issues[0].code is DiagnosticCode.compose_missing_services
        assert result.issues[0].severity is ValidationSeverity.error
        assert result.is_valid is False
        assert result.has_errors is True

    def test_duplicate_service_names(self) -> None:
        doc = "services:\n  web:\n    image: nginx:1.25\n  web:\n    image: httpd:2.4\n"
        result = validate(doc)
        duplicates = [i for i in result.issues if i.code is DiagnosticCode.yaml_duplicate_key]
        assert [i.line for i in duplicates] == [4]
        assert result.issues[0] == duplicates[0]
        assert result.is_valid is False

    def test_duplicate_and_common_ports(self) -> None:
        doc = "\n".join([
            "services:",
            "  app:",
            "    image: app:1.0",
            '    ports: ["8080:80", "8080:90"]',
            "  proxy:",
            "    image: caddy:2",
            "    ports:",
            '      - "443:443"',
            "",
        ])
        result = validate(doc)
        duplicates = [i for i in result.issues if i.code is DiagnosticCode.service_duplicate_port]
        assert len(duplicates) == 1
        assert "8080" in duplicates[0].message
        common = [i for i in result.issues if i.code is DiagnosticCode.service_common_port]
        assert [(i.line, i.severity) for i in common] == [(8, ValidationSeverity.info)]
        assert "443" in common[0].message

    def test_unused_and_undefined_volumes(self) -> None:
        doc = "\n".join([
            "services:",
            "  app:",
            "    image: app:1.0",
            "    volumes:",
            "      - orphan:/data",
            "volumes:",
            "  cache:",
            "",
        ])
        result = validate(doc)
        unused = [i for i in result.issues if i.code is DiagnosticCode.compose_unused_volume]
        undefined = [i for i in result.issues if i.code is DiagnosticCode.compose_undefined_volume]
        assert [(i.line, i.severity) for i in unused] == [(7, ValidationSeverity.warning)]
        assert '"cache"' in unused[0].message
        assert [(i.line, i.severity) for i in undefined] == [(5, ValidationSeverity.error)]
        assert '"orphan"' in undefined[0].message

    def test_empty_mapping_volume_declaration_is_valid(self) -> None:
        doc = "\n".join([
            "services:",
            "  db:",
            "    image: postgres:15",
            "    volumes:",
            "      - db_data:/var/lib/postgresql/data",
            "volumes:",
            "  db_data: {}",
            "",
        ])
        result = validate(doc)
        assert DiagnosticCode.compose_undefined_volume not in _codes(result)
        assert result.is_valid is True

    def test_commented_services_header(self) -> None:
        result = validate("services:  # app\n  web:\n    image: nginx:1.25\n")
        assert DiagnosticCode.compose_missing_services not in _codes(result)
        assert result.is_valid is True

    def test_full_stack(self, full_stack_yaml: str) -> None:
        result = validate(full_stack_yaml)
        assert [(i.code, i.line) for i in result.issues] == [
            (DiagnosticCode.service_common_port, 8),
        ]
        assert result.is_valid is True
        assert result.has_warnings is False


# ---------------------------------------------------------------------------
# Result properties
# ---------------------------------------------------------------------------

MESSY = "\n".join([
    "version: '3'",
    "services:",
    "  web:",
    "    image:nginx",
    "   ports:",
    '      - "80:80"',
    "\t- broken",
    "  web:",
    "    image: nginx:latest",
    "    volumes:",
    "      - ./data:",
    "      - orphan:/x",
    "volumes:",
    "  unused:",
    "",
])


class TestResult:
    def test_sorted_by_priority_then_line(self) -> None:
        issues = validate(MESSY).issues
        keys = [
            (SEVERITY_PRIORITY[i.severity], i.line if i.line is not None else float("inf"))
            for i in issues
        ]
        assert keys == sorted(keys)

    def test_idempotent(self) -> None:
        assert validate(MESSY) == validate(MESSY)

    def test_is_valid_tracks_errors(self) -> None:
        result = validate(MESSY)
        assert result.is_valid is (result.count(ValidationSeverity.error) == 0)
        assert result.count(ValidationSeverity.error) > 0

    @pytest.mark.parametrize(
        "doc",
        [
            "\x00\x01",
            "services:\n  - \n  :\n",
            ":::\n'\"\n\t\t\n",
            "services:\n  web:\n    volumes: [\n",
            "a: |\n" * 50,
        ],
    )
    def test_never_raises(self, doc: str) -> None:
        result = validate(doc)
        assert DiagnosticCode.validator_check_failed not in _codes(result)

    def test_serializes_severity_as_type(self) -> None:
        data = validate("services:\n  web:\n    image: nginx:latest\n").model_dump(
            mode="json", by_alias=True,
        )
        assert data["issues"][0]["type"] == "warning"
        assert data["issues"][0]["code"] == "compose-latest-tag"
        assert data["is_valid"] is True


class TestFailingCheck:
    def test_crashing_pass_becomes_an_issue(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _boom(lines):
            raise RuntimeError("boom")

        monkeypatch.setattr(
            pipeline,
            "CHECK_PASSES",
            [("boom", _boom), *pipeline.CHECK_PASSES],
        )
        result = validate("services:\n  web:\n    image: nginx:1.25\n")
        failed = [i for i in result.issues if i.code is DiagnosticCode.validator_check_failed]
        assert len(failed) == 1
        assert failed[0].message == "Internal error while running boom check."
        assert failed[0].line is None
        assert result.is_valid is False


class TestMakeIssue:
    def test_catalog_formats_message_and_suggestion(self) -> None:
        issue = make_issue(DiagnosticCode.service_many_env_vars, 3, service="api", count=9)
        assert issue.message == 'Service "api" has 9 environment variables.'
        assert issue.suggestion == "Consider using env_file for better organization."
        assert issue.severity is ValidationSeverity.info
        assert issue.start_line is None

    def test_range(self) -> None:
        issue = make_issue(DiagnosticCode.compose_misplaced_volumes, 4, end_line=7)
        assert (issue.line, issue.start_line, issue.end_line) == (4, 4, 7)
