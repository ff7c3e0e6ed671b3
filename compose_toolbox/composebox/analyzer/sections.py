"""Section and block location over classified lines.

Compose documents are handled as flat line lists. Top-level sections are
found at indent 0 and end at the next line that starts at column 0 with a
letter. Named entries inside a section (services, networks, volumes) sit at
exactly two spaces. Everything below that is handled by ``block_at``, the
one "lines owned by this key" primitive shared by the parser and the
validator.

Known limitation: documents whose base indentation is wider than two spaces
are mis-segmented.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from composebox.analyzer.lines import LineRole, SourceLine, strip_inline_comment

SERVICE_HEADER_RE = re.compile(r"^ {2}[A-Za-z][A-Za-z0-9_-]*:$")
NETWORK_NAME_RE = re.compile(r"^ {2}[A-Za-z][A-Za-z0-9_-]*:?$")
VOLUME_NAME_RE = re.compile(r"^ {2}[A-Za-z][A-Za-z0-9_.-]*:?$")

# Any key at the named-entry level ends the previous entry's scope
ENTRY_LEVEL_RE = re.compile(r"^ {2}[A-Za-z]")
TOP_LEVEL_RE = re.compile(r"^[A-Za-z]")


@dataclass(frozen=True)
class Section:
    """Line range of a top-level section; ``start`` is the header index."""

    name: str
    start: int
    end: int

    @property
    def line_number(self) -> int:
        return self.start + 1


@dataclass(frozen=True)
class Block:
    """A key line plus the lines it owns."""

    header: SourceLine
    body: list[SourceLine] = field(default_factory=list)

    @property
    def name(self) -> str:
        trimmed = self.header.trimmed
        return trimmed[:-1] if trimmed.endswith(":") else trimmed

    @property
    def value(self) -> str:
        return self.header.value or ""

    @property
    def is_flow_list(self) -> bool:
        value = self.value
        return value.startswith("[") and value.endswith("]")

    def content(self) -> list[SourceLine]:
        """Body lines that carry YAML content."""
        return [line for line in self.body if line.is_content]

    def child_indent(self) -> int | None:
        indents = [
            line.indent
            for line in self.content()
            if not line.in_block_scalar and not line.tab_indent
        ]
        return min(indents) if indents else None

    def children(self) -> list[SourceLine]:
        """Direct child key lines, in source order."""
        indent = self.child_indent()
        return [
            line
            for line in self.content()
            if line.role is LineRole.mapping_key
            and line.indent == indent
            and not line.in_block_scalar
        ]

    def child_blocks(self) -> list[Block]:
        return [
            block_at(self.body, self.body.index(line), len(self.body))
            for line in self.children()
        ]

    def child(self, key: str) -> Block | None:
        """Block of the first direct child named ``key``."""
        for line in self.children():
            if line.key == key:
                return block_at(self.body, self.body.index(line), len(self.body))
        return None

    def has_child(self, key: str) -> bool:
        return any(line.key == key for line in self.children())

    def entries(self) -> list[tuple[SourceLine, str]]:
        """Direct list entries as ``(line, text)`` pairs.

        Items nested below a child key are not direct entries. Simple bracket
        lists (``[a, b]``) on the header are split on commas and reported
        against the header line.
        """
        if self.is_flow_list:
            inner = self.value[1:-1]
            return [
                (self.header, part.strip())
                for part in inner.split(",")
                if part.strip()
            ]

        indent = self.child_indent()
        return [
            (line, line.item)
            for line in self.body
            if line.role is LineRole.list_item
            and line.indent == indent
            and not line.in_block_scalar
        ]


def find_section(lines: list[SourceLine], name: str) -> int | None:
    """Index of the first top-level ``<name>:`` line, or None.

    A trailing comment after the header is allowed.
    """
    header = f"{name}:"
    for i, line in enumerate(lines):
        if line.raw.startswith(header) and strip_inline_comment(line.trimmed) == header:
            return i
    return None


def section_end(lines: list[SourceLine], start: int) -> int:
    """Index of the first line after ``start`` that begins a new top-level key."""
    for j in range(start + 1, len(lines)):
        if TOP_LEVEL_RE.match(lines[j].raw):
            return j
    return len(lines)


def locate_section(lines: list[SourceLine], name: str) -> Section | None:
    start = find_section(lines, name)
    if start is None:
        return None
    return Section(name=name, start=start, end=section_end(lines, start))


def block_at(lines: list[SourceLine], index: int, end: int) -> Block:
    """Collect the lines owned by the key at ``index``.

    A key owns every following line indented deeper than itself, plus list
    items at its own indent (compact sequences), up to ``end``. Blank and
    comment lines never end a block; trailing ones are dropped.
    """
    header = lines[index]
    body: list[SourceLine] = []
    for j in range(index + 1, end):
        line = lines[j]
        if not line.is_content or line.in_block_scalar:
            body.append(line)
        elif line.indent > header.indent:
            body.append(line)
        elif line.indent == header.indent and line.role is LineRole.list_item:
            body.append(line)
        else:
            break
    while body and not body[-1].is_content:
        body.pop()
    return Block(header=header, body=body)


def section_entries(
    lines: list[SourceLine], name: str, pattern: re.Pattern[str],
) -> list[Block]:
    """Named two-space entries of a top-level section, each with its scope.

    An entry's scope runs to the next two-space key or the end of the section.
    Trailing whitespace after a name is ignored.
    """
    section = locate_section(lines, name)
    if section is None:
        return []

    entries: list[Block] = []
    for i in range(section.start + 1, section.end):
        if not pattern.match(lines[i].raw.rstrip()):
            continue
        j = i + 1
        while j < section.end and not ENTRY_LEVEL_RE.match(lines[j].raw):
            j += 1
        entries.append(Block(header=lines[i], body=lines[i + 1:j]))
    return entries


def service_blocks(lines: list[SourceLine]) -> list[Block]:
    return section_entries(lines, "services", SERVICE_HEADER_RE)


def network_blocks(lines: list[SourceLine]) -> list[Block]:
    return section_entries(lines, "networks", NETWORK_NAME_RE)


def volume_blocks(lines: list[SourceLine]) -> list[Block]:
    return section_entries(lines, "volumes", VOLUME_NAME_RE)
