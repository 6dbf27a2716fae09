"""Main analysis orchestration: fetch, normalize, then summarize."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Callable, Sequence

from pulseaudit.config.settings import get_config
from pulseaudit.core.ai import summarize
from pulseaudit.core.fetcher import RetryingFetcher
from pulseaudit.core.psi import fetch_lighthouse_report
from pulseaudit.errors.exceptions import AuditError
from pulseaudit.schemas.common import AnalysisStatus, Strategy
from pulseaudit.schemas.report import Metric, PerformanceReport
from pulseaudit.services.validators import validate_url

logger = logging.getLogger(__name__)

Summarizer = Callable[[str, Sequence[Metric]], str]


async def run_analysis(
    url: str,
    strategy: Strategy | None = None,
    fetcher: RetryingFetcher | None = None,
    summarizer: Summarizer = summarize,
    on_status: Callable[[AnalysisStatus], None] | None = None,
) -> PerformanceReport:
    """
    Run a complete analysis for one URL.

    Steps run strictly in order: PSI fetch and normalization, then the AI
    narrative. The summarizer is expected to return fallback text rather than
    raise, so only the PSI stage can fail the run.

    Args:
        url: The URL to analyze (scheme optional)
        strategy: Device strategy, defaults to the configured one
        fetcher: Fetcher to use for the PSI call
        summarizer: Callable producing the narrative text
        on_status: Callback invoked on every status change

    Raises:
        ValidationError: If the URL is invalid
        AuditError: If the PSI stage fails
    """

    def report_status(status: AnalysisStatus) -> None:
        if on_status:
            on_status(status)

    try:
        target_url = validate_url(url)
        strategy = strategy or Strategy(get_config().strategy)

        report_status(AnalysisStatus.SCANNING)
        started = time.time()
        normalized = await fetch_lighthouse_report(target_url, strategy, fetcher)
        logger.info(
            f"PSI analysis of {target_url} finished in {time.time() - started:.1f}s "
            f"(performance {normalized.overall_score})"
        )

        report_status(AnalysisStatus.ANALYZING_AI)
        ai_insights = await asyncio.to_thread(summarizer, target_url, normalized.metrics)
    except AuditError as e:
        logger.warning(f"Analysis of {url} failed: {e}")
        report_status(AnalysisStatus.ERROR)
        raise

    report = PerformanceReport(
        id=uuid.uuid4().hex,
        url=target_url,
        timestamp=int(time.time() * 1000),
        strategy=strategy,
        overall_score=normalized.overall_score,
        metrics=normalized.metrics,
        seo_audits=normalized.seo_audits,
        accessibility_audits=normalized.accessibility_audits,
        resource_breakdown=normalized.resource_breakdown,
        ai_insights=ai_insights,
    )
    report_status(AnalysisStatus.COMPLETED)
    return report
