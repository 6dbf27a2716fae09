"""Analysis endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from pulseaudit.api.v1.deps import get_fetcher, get_summarizer
from pulseaudit.core.audit import Summarizer, run_analysis
from pulseaudit.core.fetcher import RetryingFetcher
from pulseaudit.errors.exceptions import (
    APIError,
    AuditError,
    ClientRequestError,
    ConnectivityError,
    FetchError,
    RateLimitError,
    SchemaError,
    ValidationError,
)
from pulseaudit.schemas.report import AnalyzeRequest, PerformanceReport

router = APIRouter()


def _status_code_for(error: AuditError) -> int:
    """Map an audit failure onto an HTTP status code."""
    if isinstance(error, (ValidationError, ClientRequestError)):
        return 400
    if isinstance(error, RateLimitError):
        return 429
    if isinstance(error, (ConnectivityError, FetchError)):
        return 503
    if isinstance(error, (SchemaError, APIError)):
        return 502
    return 500


@router.post("/analyze", response_model=PerformanceReport)
async def analyze(
    request: AnalyzeRequest,
    fetcher: RetryingFetcher = Depends(get_fetcher),
    summarizer: Summarizer = Depends(get_summarizer),
) -> PerformanceReport:
    """
    Analyze a URL with PageSpeed Insights and attach AI insights.

    The request blocks until PSI answers or the retry budget is exhausted.
    """
    try:
        return await run_analysis(
            request.url,
            strategy=request.strategy,
            fetcher=fetcher,
            summarizer=summarizer,
        )
    except AuditError as e:
        raise HTTPException(status_code=_status_code_for(e), detail=str(e))
