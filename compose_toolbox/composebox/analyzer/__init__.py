"""Compose document analyzer: line classification, sections, structure."""

from composebox.analyzer.engine import analyze_overview, analyze_structure
from composebox.analyzer.models import (
    ComposeOverview,
    NetworkConfig,
    ParsedComposeData,
    ServiceConfig,
)

__all__ = [
    "ComposeOverview",
    "NetworkConfig",
    "ParsedComposeData",
    "ServiceConfig",
    "analyze_overview",
    "analyze_structure",
]
