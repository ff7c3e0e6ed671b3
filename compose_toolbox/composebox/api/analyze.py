"""Analysis API: overview counts, structure tree and diagnostics."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from composebox.analyzer import (
    ComposeOverview,
    ParsedComposeData,
    analyze_overview,
    analyze_structure,
)
from composebox.deps import get_max_document_bytes
from composebox.validator import ValidationResult, validate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analyze", tags=["analyze"])


class AnalyzeRequest(BaseModel):
    content: str = ""


class AnalyzeResponse(BaseModel):
    overview: ComposeOverview
    structure: ParsedComposeData
    validation: ValidationResult


def _document(
    request: AnalyzeRequest,
    max_bytes: int = Depends(get_max_document_bytes),
) -> str:
    size = len(request.content.encode("utf-8"))
    if size > max_bytes:
        logger.warning("Rejected %d-byte document (limit %d)", size, max_bytes)
        raise HTTPException(
            status_code=413,
            detail=f"Document is {size} bytes; the limit is {max_bytes}.",
        )
    return request.content


@router.post("", response_model=AnalyzeResponse)
async def analyze(content: str = Depends(_document)) -> AnalyzeResponse:
    """Run the overview counter, structural parser and validator together."""
    return AnalyzeResponse(
        overview=analyze_overview(content),
        structure=analyze_structure(content),
        validation=validate(content),
    )


@router.post("/overview", response_model=ComposeOverview)
async def overview(content: str = Depends(_document)) -> ComposeOverview:
    return analyze_overview(content)


@router.post("/structure", response_model=ParsedComposeData)
async def structure(content: str = Depends(_document)) -> ParsedComposeData:
    return analyze_structure(content)


@router.post("/validate", response_model=ValidationResult)
async def validate_document(content: str = Depends(_document)) -> ValidationResult:
    """Return the prioritized diagnostic list for a document."""
    return validate(content)
