"""Shared test fixtures and configuration."""

import os
import sys
from pathlib import Path

# Add compose_toolbox/ to Python path so `from composebox.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "compose_toolbox"))

import pytest

os.environ["COMPOSEBOX_DEV_MODE"] = "true"

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def full_stack_yaml(fixtures_dir: Path) -> str:
    """A multi-service document whose only finding is an info on port 80."""
    return (fixtures_dir / "full-stack.yml").read_text(encoding="utf-8")
