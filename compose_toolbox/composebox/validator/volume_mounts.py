"""Short-syntax volume mount checks (``host:container[:mode]``)."""

from __future__ import annotations

import re

from composebox.analyzer.lines import is_mapping_entry, unquote
from composebox.analyzer.sections import Block
from composebox.validator.models import DiagnosticCode, ValidationIssue, make_issue

DRIVE_RE = re.compile(r"^[A-Za-z]:[\\/]")
NAMED_VOLUME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")

# Sources starting like this are filesystem paths or interpolations, not volume names
BIND_PREFIXES = ("./", "../", "/", "~", "$", "\\")


def split_mount(mount: str) -> list[str]:
    """Split on ``:`` while keeping a Windows drive letter with its path."""
    if DRIVE_RE.match(mount):
        parts = mount[2:].split(":")
        parts[0] = mount[:2] + parts[0]
        return parts
    return mount.split(":")


def is_bind_source(source: str) -> bool:
    return source in (".", "..") or source.startswith(BIND_PREFIXES) or bool(DRIVE_RE.match(source))


def named_volume(source: str) -> str | None:
    """Return ``source`` when it names a volume rather than a host path."""
    source = source.strip()
    if not source or is_bind_source(source) or not NAMED_VOLUME_RE.match(source):
        return None
    return source


def named_volume_source(mount: str) -> str | None:
    """Volume name referenced by a short-syntax mount, if any."""
    parts = split_mount(mount)
    if len(parts) < 2:
        return None
    return named_volume(parts[0])


def check_mount(mount: str, line: int) -> list[ValidationIssue]:
    """Check one mount string; at most one syntax error is reported per mount."""
    parts = split_mount(mount)

    if len(parts) == 1:
        if mount.startswith(("/", "$")):
            # anonymous volume
            return []
        return [make_issue(DiagnosticCode.volume_missing_container_path, line, mount=mount)]

    if "," in parts[0] or "," in parts[1]:
        code = DiagnosticCode.volume_invalid_comma
    elif mount.endswith(":"):
        code = DiagnosticCode.volume_trailing_colon
    elif mount.startswith(":"):
        code = DiagnosticCode.volume_leading_colon
    elif len(parts) > 3:
        code = DiagnosticCode.volume_too_many_parts
    elif any(not part.strip() for part in parts):
        code = DiagnosticCode.volume_empty_segment
    else:
        container = parts[1].strip()
        if not container.startswith(("/", "$")) and not DRIVE_RE.match(container):
            return [
                make_issue(
                    DiagnosticCode.volume_relative_container_path,
                    line,
                    mount=mount,
                    path=container,
                )
            ]
        return []
    return [make_issue(code, line, mount=mount)]


def check_volume_mounts(volumes: Block) -> list[ValidationIssue]:
    """Validate every short-syntax entry of a service ``volumes:`` block."""
    issues: list[ValidationIssue] = []
    for line, text in volumes.entries():
        mount = unquote(text)
        if not mount or is_mapping_entry(mount):
            continue
        issues.extend(check_mount(mount, line.number))
    return issues
