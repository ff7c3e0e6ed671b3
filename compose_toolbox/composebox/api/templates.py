"""Template API: quick snippets, user snippets and the startup document."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from composebox.deps import get_template_store
from composebox.templates.store import ComposeTemplate, StartupTemplate, TemplateStore

router = APIRouter(prefix="/api/templates", tags=["templates"])


class TemplatesResponse(BaseModel):
    quick: dict[str, ComposeTemplate] = Field(default_factory=dict)
    custom: list[ComposeTemplate] = Field(default_factory=list)


@router.get("", response_model=TemplatesResponse)
async def list_templates(
    store: TemplateStore = Depends(get_template_store),
) -> TemplatesResponse:
    """Return the built-in quick templates and any user-defined ones."""
    return TemplatesResponse(
        quick=store.quick_templates(),
        custom=store.custom_templates(),
    )


@router.get("/custom", response_model=list[ComposeTemplate])
async def list_custom_templates(
    store: TemplateStore = Depends(get_template_store),
) -> list[ComposeTemplate]:
    return store.custom_templates()


@router.get("/startup", response_model=StartupTemplate)
async def startup_template(
    store: TemplateStore = Depends(get_template_store),
) -> StartupTemplate:
    """Return the document the editor opens with."""
    return store.startup_template()
