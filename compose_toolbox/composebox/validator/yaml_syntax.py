"""Line-level YAML syntax checks.

These work on the classified lines directly instead of a YAML parser, so they
still report precise line numbers for documents a real parser would reject
outright.
"""

from __future__ import annotations

import re

from composebox.analyzer.lines import LineRole, SourceLine, strip_inline_comment
from composebox.validator.models import DiagnosticCode, ValidationIssue, make_issue

TOP_LEVEL_KEYWORDS_RE = re.compile(r"(?<![\w.-])(version|services|networks|volumes|name):")

# "key:value" with nothing between the colon and the value
GLUED_COLON_RE = re.compile(r"^(?P<key>[A-Za-z_][A-Za-z0-9_.-]*):(?P<rest>\S.*)$")
URL_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
PORT_PAIR_RE = re.compile(r"^[\d.]+(?::[\d.]+)+")

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")

_QUOTE_OPENERS = " \t[{,:=-"


def unbalanced_quote(text: str) -> str | None:
    """Return the quote character left open at end of line, if any.

    A quote only opens at the start of a token, so apostrophes inside plain
    words (``it's``) are ignored. Escapes follow YAML: ``\\"`` inside double
    quotes and ``''`` inside single quotes.
    """
    quote: str | None = None
    i = 0
    while i < len(text):
        ch = text[i]
        if quote == '"':
            if ch == "\\":
                i += 2
                continue
            if ch == '"':
                quote = None
        elif quote == "'":
            if ch == "'":
                if i + 1 < len(text) and text[i + 1] == "'":
                    i += 2
                    continue
                quote = None
        elif ch == "#" and (i == 0 or text[i - 1] in " \t"):
            break
        elif ch in "\"'" and (i == 0 or text[i - 1] in _QUOTE_OPENERS):
            quote = ch
        i += 1
    return quote


def _check_indentation(line: SourceLine) -> list[ValidationIssue]:
    if line.mixed_indent:
        return [make_issue(DiagnosticCode.yaml_mixed_indentation, line.number)]
    if line.tab_indent:
        return [make_issue(DiagnosticCode.yaml_no_tabs, line.number)]
    if line.role is not LineRole.comment and not line.in_block_scalar and line.indent % 2:
        return [make_issue(DiagnosticCode.yaml_indentation, line.number)]
    return []


def _check_content(line: SourceLine) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    text = strip_inline_comment(line.trimmed)

    quote = unbalanced_quote(line.trimmed)
    if quote:
        issues.append(
            make_issue(
                DiagnosticCode.yaml_unbalanced_quotes,
                line.number,
                quote="double" if quote == '"' else "single",
            )
        )

    keywords = TOP_LEVEL_KEYWORDS_RE.findall(text)
    if len(keywords) >= 2:
        issues.append(
            make_issue(
                DiagnosticCode.yaml_multiple_sections,
                line.number,
                keys=", ".join(f"{k}:" for k in keywords),
            )
        )

    if line.role is LineRole.list_item:
        if len(text) > 1 and text[1] not in " \t" and not text.startswith("---"):
            issues.append(
                make_issue(DiagnosticCode.yaml_list_item_spacing, line.number, text=text)
            )
        return issues

    if line.role is LineRole.unknown:
        glued = GLUED_COLON_RE.match(text)
        if glued and not URL_SCHEME_RE.match(text) and not PORT_PAIR_RE.match(text):
            issues.append(
                make_issue(
                    DiagnosticCode.yaml_colon_spacing,
                    line.number,
                    column=line.raw.index(":") + 1,
                    key=glued.group("key"),
                )
            )
        elif ":" not in text and "=" not in text and IDENTIFIER_RE.match(text):
            issues.append(make_issue(DiagnosticCode.yaml_missing_colon, line.number, key=text))

    return issues


def check_duplicate_keys(lines: list[SourceLine]) -> list[ValidationIssue]:
    """Flag a key repeated at the same indent within one contiguous block.

    Each repeat is reported at its own line and points back at the previous
    occurrence. A block ends at the first content line indented less than it.
    """
    issues: list[ValidationIssue] = []
    # One frame per open indentation level: (indent, key -> latest line number)
    frames: list[tuple[int, dict[str, int]]] = []

    for line in lines:
        if not line.is_content or line.in_block_scalar:
            continue
        while frames and frames[-1][0] > line.indent:
            frames.pop()
        if line.role is not LineRole.mapping_key or line.key is None:
            continue
        if not frames or frames[-1][0] != line.indent:
            frames.append((line.indent, {}))

        seen = frames[-1][1]
        if line.key in seen:
            issues.append(
                make_issue(
                    DiagnosticCode.yaml_duplicate_key,
                    line.number,
                    key=line.key,
                    previous_line=seen[line.key],
                )
            )
        seen[line.key] = line.number

    return issues


def check_yaml_syntax(lines: list[SourceLine]) -> list[ValidationIssue]:
    """Run every per-line syntax check plus duplicate-key detection."""
    issues: list[ValidationIssue] = []
    for line in lines:
        if line.role is LineRole.blank:
            continue
        issues.extend(_check_indentation(line))
        if line.role is LineRole.comment or line.in_block_scalar:
            continue
        issues.extend(_check_content(line))
    issues.extend(check_duplicate_keys(lines))
    return issues
