"""Analyzer entry points called on every edit."""

from __future__ import annotations

import logging

from composebox.analyzer.models import ComposeOverview, ParsedComposeData
from composebox.analyzer.overview import count_overview
from composebox.analyzer.parser import parse_compose

logger = logging.getLogger(__name__)


def analyze_overview(text: str) -> ComposeOverview:
    """Return service/network/volume counts; never raises."""
    try:
        return count_overview(text)
    except Exception:
        logger.exception("Overview count failed, returning zero counts")
        return ComposeOverview()


def analyze_structure(text: str) -> ParsedComposeData:
    """Return the structured model of ``text``; never raises."""
    try:
        return parse_compose(text)
    except Exception:
        logger.exception("Structural parse failed, returning empty structure")
        return ParsedComposeData()
