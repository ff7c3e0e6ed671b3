"""Tests for the template store."""

from __future__ import annotations

from pathlib import Path

import pytest

import composebox.templates.store as store_module
from composebox.templates.store import (
    DEFAULT_CUSTOM_TEMPLATES_PATH,
    DEFAULT_STARTUP_TEMPLATE_PATH,
    FALLBACK_STARTUP_TEMPLATE,
    QUICK_TEMPLATES,
    TemplateStore,
    load_custom_templates,
    load_startup_template,
    parse_custom_templates,
)
from composebox.validator import validate


class TestQuickTemplates:
    def test_expected_keys(self) -> None:
        assert set(QUICK_TEMPLATES) == {
            "service", "database", "network", "volume", "environment", "ports",
        }

    @pytest.mark.parametrize("key", sorted(QUICK_TEMPLATES))
    def test_snippets_have_no_syntax_errors(self, key: str) -> None:
        result = validate(QUICK_TEMPLATES[key].code)
        syntax = [i for i in result.issues if i.code.value.startswith("yaml-")]
        assert syntax == []

    def test_store_returns_copy(self) -> None:
        store = TemplateStore()
        templates = store.quick_templates()
        templates.pop("service")
        assert "service" in store.quick_templates()


class TestCustomTemplates:
    def test_list_document(self) -> None:
        templates = parse_custom_templates(
            "- name: Redis\n"
            "  icon: Database\n"
            "  code: |\n"
            "    redis:\n"
            "      image: redis:7\n"
        )
        assert len(templates) == 1
        assert templates[0].name == "Redis"
        assert templates[0].description is None
        assert templates[0].code == "redis:\n  image: redis:7"

    def test_templates_key(self) -> None:
        templates = parse_custom_templates(
            "templates:\n"
            "  - name: A\n"
            "    icon: Box\n"
            "    description: first\n"
            "    code: 'a: 1'\n"
        )
        assert [(t.name, t.description, t.code) for t in templates] == [("A", "first", "a: 1")]

    def test_incomplete_entries_skipped(self) -> None:
        templates = parse_custom_templates(
            "- name: no-code\n"
            "  icon: Box\n"
            "- name: blank\n"
            "  icon: Box\n"
            "  code: '  '\n"
            "- just a string\n"
            "- name: ok\n"
            "  icon: Box\n"
            "  code: x\n"
        )
        assert [t.name for t in templates] == ["ok"]

    def test_invalid_yaml(self) -> None:
        assert parse_custom_templates("- name: [unclosed\n") == []

    def test_non_list_document(self) -> None:
        assert parse_custom_templates("just: a mapping\n") == []
        assert parse_custom_templates("") == []

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_custom_templates(tmp_path / "absent.yml") == []

    def test_bundled_file(self) -> None:
        names = [t.name for t in load_custom_templates(DEFAULT_CUSTOM_TEMPLATES_PATH)]
        assert names == ["Redis Cache", "Reverse Proxy"]

    def test_store_rereads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.yml"
        path.write_text("- {name: A, icon: Box, code: a}\n")
        store = TemplateStore(custom_templates_path=path)
        assert [t.name for t in store.custom_templates()] == ["A"]
        path.write_text("- {name: B, icon: Box, code: b}\n")
        assert [t.name for t in store.custom_templates()] == ["B"]


class TestStartupTemplate:
    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "startup.yml"
        path.write_text("services:\n  web:\n    image: nginx\n")
        template = load_startup_template(path)
        assert template.success is True
        assert template.error is None
        assert template.content == "services:\n  web:\n    image: nginx\n"

    def test_fallback_when_missing(self, tmp_path: Path) -> None:
        template = load_startup_template(tmp_path / "absent.yml")
        assert template.success is False
        assert template.content == FALLBACK_STARTUP_TEMPLATE
        assert template.error == "Failed to load startup template file, using fallback"

    def test_bundled_startup_template_is_valid(self) -> None:
        template = load_startup_template(DEFAULT_STARTUP_TEMPLATE_PATH)
        assert template.success is True
        assert validate(template.content).is_valid is True

    def test_bundled_files_ship_inside_the_package(self) -> None:
        package_dir = Path(store_module.__file__).resolve().parent.parent
        for path in (DEFAULT_CUSTOM_TEMPLATES_PATH, DEFAULT_STARTUP_TEMPLATE_PATH):
            assert path.is_relative_to(package_dir)
            assert path.is_file()

    def test_fallback_is_valid(self) -> None:
        assert validate(FALLBACK_STARTUP_TEMPLATE).is_valid is True
