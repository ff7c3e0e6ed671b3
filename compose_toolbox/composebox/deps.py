"""Shared FastAPI dependencies."""

from __future__ import annotations

from composebox.templates.store import TemplateStore

DEFAULT_MAX_DOCUMENT_BYTES = 1024 * 1024

_template_store: TemplateStore | None = None
_max_document_bytes: int = DEFAULT_MAX_DOCUMENT_BYTES


def get_template_store() -> TemplateStore:
    """FastAPI dependency: return the shared TemplateStore."""
    assert _template_store is not None, "TemplateStore not initialised"
    return _template_store


def get_max_document_bytes() -> int:
    """FastAPI dependency: upper bound for a submitted document."""
    return _max_document_bytes
