"""Subsidy analysis endpoint.

The handler only deals with HTTP concerns (input validation, status codes)
and delegates the analysis itself to ``analyze_subsidy``.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from rvo_agent.models.analysis_models import AnalysisFailure
from rvo_agent.services.subsidy_analyzer import analyze_subsidy

logger = logging.getLogger(__name__)
router = APIRouter()


class AnalyzeRequest(BaseModel):
    """Body of ``POST /analyze``."""

    url: str | None = None


def is_http_url(url: str | None) -> bool:
    """True for non-empty http(s) URLs."""
    return bool(url) and url.strip().lower().startswith(("http://", "https://"))


@router.post("/analyze")
async def analyze(payload: AnalyzeRequest, request: Request):
    """Analyze one subsidy page.

    Returns:
        200 with the analysis result, 400 for a missing or non-http(s) URL,
        500 with ``{url, error, analyzed_at}`` if the analysis failed
    """
    if not payload.url:
        return JSONResponse(status_code=400, content={"error": "URL is required"})
    url = payload.url.strip()
    if not is_http_url(url):
        return JSONResponse(
            status_code=400,
            content={"error": "URL must start with http:// or https://"},
        )

    vocabulary = getattr(request.app.state, "attestation_vocabulary", None)
    result = await analyze_subsidy(url, vocabulary=vocabulary)

    if isinstance(result, AnalysisFailure):
        logger.warning(f"Analysis failed for {url}: {result.error}")
        return JSONResponse(status_code=500, content=result.model_dump(mode="json"))
    return result.model_dump(mode="json")
