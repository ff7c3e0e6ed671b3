"""Line classification for Compose documents.

Every other analyzer and validator component works on the ``SourceLine``
records produced here, so each physical line is classified exactly once.
Classification is lenient: it describes what a line looks like and never
rejects anything. Strictness lives in the validator.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum


class LineRole(str, Enum):
    """Structural role of a single line."""

    comment = "comment"
    blank = "blank"
    list_item = "list_item"
    mapping_key = "mapping_key"
    unknown = "unknown"


# "key:" or "key: value"; a colon glued to the value ("key:value") is not a key
KEY_RE = re.compile(r"^(?P<key>[A-Za-z0-9_.$/{}\"'-]+)\s*:(?:[ \t]+(?P<value>.*))?$")

# Block scalar indicators: |, >, |-, >+, |2 ...
BLOCK_SCALAR_RE = re.compile(r"^[|>][-+0-9]*$")


@dataclass(frozen=True)
class SourceLine:
    """One classified line of a document."""

    number: int  # 1-based
    raw: str
    indent: int
    trimmed: str
    role: LineRole
    key: str | None = None
    value: str | None = None
    tab_indent: bool = False
    mixed_indent: bool = False
    in_block_scalar: bool = False

    @property
    def is_content(self) -> bool:
        """True for lines that carry YAML content (not blank, not a comment)."""
        return self.role not in (LineRole.blank, LineRole.comment)

    @property
    def item(self) -> str:
        """Text after the list dash, without a trailing comment."""
        if self.role is not LineRole.list_item:
            return ""
        return strip_inline_comment(self.trimmed[1:]).strip()


def strip_inline_comment(text: str) -> str:
    """Drop a trailing ``# comment`` that sits outside of quotes."""
    quote: str | None = None
    for i, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'" and (i == 0 or text[i - 1] in " \t[,:=-"):
            quote = ch
        elif ch == "#" and (i == 0 or text[i - 1] in " \t"):
            return text[:i].rstrip()
    return text.rstrip()


def unquote(text: str) -> str:
    """Remove one pair of matching surrounding quotes."""
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return text


def classify_line(raw: str, number: int) -> SourceLine:
    """Classify a single raw line (without its newline)."""
    raw = raw.rstrip("\r")
    trimmed = raw.strip()
    indent = len(raw) - len(raw.lstrip(" "))
    leading = raw[: len(raw) - len(raw.lstrip(" \t"))]
    tab_indent = "\t" in leading
    mixed_indent = tab_indent and " " in leading

    key: str | None = None
    value: str | None = None
    if not trimmed:
        role = LineRole.blank
    elif trimmed.startswith("#"):
        role = LineRole.comment
    elif trimmed.startswith("-"):
        role = LineRole.list_item
    else:
        match = KEY_RE.match(trimmed)
        if match:
            role = LineRole.mapping_key
            key = match.group("key")
            value = strip_inline_comment(match.group("value") or "").strip()
        else:
            role = LineRole.unknown

    return SourceLine(
        number=number,
        raw=raw,
        indent=indent,
        trimmed=trimmed,
        role=role,
        key=key,
        value=value,
        tab_indent=tab_indent,
        mixed_indent=mixed_indent,
    )


def _opens_block_scalar(line: SourceLine) -> bool:
    if line.role is LineRole.mapping_key:
        return bool(line.value and BLOCK_SCALAR_RE.match(line.value))
    if line.role is LineRole.list_item:
        match = KEY_RE.match(line.item)
        if match and match.group("value"):
            return bool(BLOCK_SCALAR_RE.match(strip_inline_comment(match.group("value"))))
        return bool(BLOCK_SCALAR_RE.match(line.item))
    return False


def classify_document(text: str) -> list[SourceLine]:
    """Split ``text`` on newlines and classify every line.

    Lines that belong to a ``|`` or ``>`` block scalar are flagged with
    ``in_block_scalar`` so checks can treat them as opaque text.
    """
    lines = [classify_line(raw, i + 1) for i, raw in enumerate(text.split("\n"))]

    scalar_indent: int | None = None
    for i, line in enumerate(lines):
        if scalar_indent is not None:
            if line.role is LineRole.blank or line.indent > scalar_indent:
                lines[i] = replace(line, in_block_scalar=True)
                continue
            scalar_indent = None
        if _opens_block_scalar(line):
            scalar_indent = line.indent
    return lines


def is_mapping_entry(text: str) -> bool:
    """True for list entries that hold a mapping (``- target: 80``)."""
    match = KEY_RE.match(text)
    return bool(match and match.group("value") is not None)
