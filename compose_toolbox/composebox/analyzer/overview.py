"""Overview counter for the summary badges.

Counts header lines only; no records are built. Uses the same section
boundaries and name patterns as the structural parser, so the counts match
the parser's list lengths.
"""

from __future__ import annotations

import re

from composebox.analyzer.lines import SourceLine, classify_document
from composebox.analyzer.models import ComposeOverview
from composebox.analyzer.sections import (
    NETWORK_NAME_RE,
    SERVICE_HEADER_RE,
    VOLUME_NAME_RE,
    locate_section,
)


def _count(lines: list[SourceLine], name: str, pattern: re.Pattern[str]) -> int:
    section = locate_section(lines, name)
    if section is None:
        return 0
    return sum(
        1 for line in lines[section.start + 1:section.end] if pattern.match(line.raw.rstrip())
    )


def count_overview(text: str) -> ComposeOverview:
    lines = classify_document(text)
    return ComposeOverview(
        services_count=_count(lines, "services", SERVICE_HEADER_RE),
        networks_count=_count(lines, "networks", NETWORK_NAME_RE),
        volumes_count=_count(lines, "volumes", VOLUME_NAME_RE),
    )
