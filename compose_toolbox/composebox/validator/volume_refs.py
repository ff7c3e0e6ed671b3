"""Volume cross-reference check between services and the top-level section."""

from __future__ import annotations

from composebox.analyzer.lines import KEY_RE, LineRole, SourceLine, is_mapping_entry, unquote
from composebox.analyzer.sections import (
    VOLUME_NAME_RE,
    Block,
    locate_section,
    service_blocks,
)
from composebox.validator.models import DiagnosticCode, ValidationIssue, make_issue
from composebox.validator.volume_mounts import named_volume, named_volume_source


def _long_syntax_sources(volumes: Block) -> list[tuple[str, int]]:
    """``source:`` values of long-syntax mounts that name a volume."""
    found: list[tuple[str, int]] = []
    for line in volumes.content():
        text = line.item if line.role is LineRole.list_item else line.trimmed
        match = KEY_RE.match(text)
        if not match or match.group("key") != "source" or not match.group("value"):
            continue
        name = named_volume(unquote(match.group("value")))
        if name:
            found.append((name, line.number))
    return found


def _declared_volumes(lines: list[SourceLine]) -> list[tuple[str, int]]:
    """Names declared in the top-level ``volumes:`` section, with their lines.

    Any two-space key counts, so ``data: {}`` declares ``data`` as well.
    """
    section = locate_section(lines, "volumes")
    if section is None:
        return []

    declared: list[tuple[str, int]] = []
    for line in lines[section.start + 1:section.end]:
        if line.in_block_scalar or line.tab_indent:
            continue
        if line.role is LineRole.mapping_key and line.indent == 2 and line.key:
            declared.append((unquote(line.key), line.number))
        elif VOLUME_NAME_RE.match(line.raw.rstrip()):
            declared.append((line.trimmed.rstrip(":"), line.number))
    return declared


def _mount_references(volumes: Block) -> list[tuple[str, int]]:
    """Named volumes used by one service volumes block, with their lines."""
    references: list[tuple[str, int]] = []
    for line, text in volumes.entries():
        mount = unquote(text)
        if is_mapping_entry(mount):
            continue
        name = named_volume_source(mount)
        if name:
            references.append((name, line.number))
    references.extend(_long_syntax_sources(volumes))
    return references


def check_volume_refs(lines: list[SourceLine]) -> list[ValidationIssue]:
    """Compare declared named volumes with the ones services mount.

    A mount source counts as a named volume only when it does not look like
    a filesystem path (``./``, ``../``, ``/``, ``~``, ``$`` or a drive letter).
    """
    issues: list[ValidationIssue] = []
    declared = _declared_volumes(lines)
    declared_names = {name for name, _ in declared}

    references: list[tuple[str, int]] = []
    for service in service_blocks(lines):
        volumes = service.child("volumes")
        if volumes is None:
            continue
        if not volumes.entries():
            issues.append(
                make_issue(
                    DiagnosticCode.service_empty_volumes,
                    volumes.header.number,
                    service=service.name,
                )
            )
        references.extend(_mount_references(volumes))

    referenced_names = {name for name, _ in references}
    for name, line in declared:
        if name not in referenced_names:
            issues.append(make_issue(DiagnosticCode.compose_unused_volume, line, volume=name))

    for name, line in references:
        if name not in declared_names:
            issues.append(make_issue(DiagnosticCode.compose_undefined_volume, line, volume=name))

    return issues
