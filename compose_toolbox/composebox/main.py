"""FastAPI application -- Compose Toolbox entrypoint."""

from __future__ import annotations

import json
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI

import composebox.deps as deps
from composebox.api.analyze import router as analyze_router
from composebox.api.templates import router as templates_router
from composebox.templates.store import (
    DEFAULT_CUSTOM_TEMPLATES_PATH,
    DEFAULT_STARTUP_TEMPLATE_PATH,
    TemplateStore,
)

logger = logging.getLogger(__name__)


def _load_options() -> dict:
    """Load options from the JSON options file or env fallback."""
    opts_path = os.environ.get("COMPOSEBOX_OPTIONS_PATH", "/data/options.json")
    if Path(opts_path).exists():
        return json.loads(Path(opts_path).read_text())
    return {
        "custom_templates_path": os.environ.get(
            "COMPOSEBOX_TEMPLATES_PATH", str(DEFAULT_CUSTOM_TEMPLATES_PATH)
        ),
        "startup_template_path": os.environ.get(
            "COMPOSEBOX_STARTUP_TEMPLATE", str(DEFAULT_STARTUP_TEMPLATE_PATH)
        ),
        "max_document_bytes": int(
            os.environ.get("COMPOSEBOX_MAX_DOCUMENT_BYTES", str(deps.DEFAULT_MAX_DOCUMENT_BYTES))
        ),
    }


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: init shared objects on startup, drop them on shutdown."""
    log_level = logging.DEBUG if os.environ.get("COMPOSEBOX_DEV_MODE") else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    options = _load_options()
    logger.info("Compose Toolbox starting with options: %s", options)

    deps._template_store = TemplateStore(
        custom_templates_path=Path(
            options.get("custom_templates_path", DEFAULT_CUSTOM_TEMPLATES_PATH)
        ),
        startup_template_path=Path(
            options.get("startup_template_path", DEFAULT_STARTUP_TEMPLATE_PATH)
        ),
    )
    deps._max_document_bytes = int(
        options.get("max_document_bytes", deps.DEFAULT_MAX_DOCUMENT_BYTES)
    )
    logger.info(
        "Custom templates: %s", deps._template_store.custom_templates_path,
    )

    yield

    deps._template_store = None
    deps._max_document_bytes = deps.DEFAULT_MAX_DOCUMENT_BYTES


app = FastAPI(
    title="Compose Toolbox",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(analyze_router)
app.include_router(templates_router)


@app.get("/api/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
