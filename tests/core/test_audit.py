"""Tests for the analysis orchestrator."""

import httpx
import pytest

from pulseaudit.core.audit import run_analysis
from pulseaudit.core.fetcher import RetryingFetcher
from pulseaudit.errors.exceptions import SchemaError, ValidationError
from pulseaudit.schemas.common import AnalysisStatus, Strategy


class _RecordingSummarizer:
    def __init__(self, text: str = "AI says hello") -> None:
        self.text = text
        self.calls: list[tuple[str, list[str]]] = []

    def __call__(self, url, metrics):
        self.calls.append((url, [m.name for m in metrics]))
        return self.text


@pytest.mark.asyncio
async def test_run_analysis_builds_report(psi_document, scripted_client, sleep_recorder):
    client, transport = scripted_client([httpx.Response(200, json=psi_document)])
    fetcher = RetryingFetcher(client=client, sleep=sleep_recorder)
    summarizer = _RecordingSummarizer()
    statuses: list[AnalysisStatus] = []

    report = await run_analysis(
        "  example.com ",
        strategy=Strategy.DESKTOP,
        fetcher=fetcher,
        summarizer=summarizer,
        on_status=statuses.append,
    )

    assert report.url == "https://example.com"
    assert report.strategy == Strategy.DESKTOP
    assert report.overall_score == 87
    assert report.ai_insights == "AI says hello"
    assert len(report.metrics) == 6
    assert len(report.resource_breakdown) == 6
    assert report.id
    assert report.timestamp > 0
    assert statuses == [
        AnalysisStatus.SCANNING,
        AnalysisStatus.ANALYZING_AI,
        AnalysisStatus.COMPLETED,
    ]
    assert summarizer.calls[0][0] == "https://example.com"
    assert transport.requests[0].url.params["strategy"] == "desktop"


@pytest.mark.asyncio
async def test_each_run_produces_a_new_report(psi_document, scripted_client, sleep_recorder):
    client, _ = scripted_client(
        [httpx.Response(200, json=psi_document), httpx.Response(200, json=psi_document)]
    )
    fetcher = RetryingFetcher(client=client, sleep=sleep_recorder)

    first = await run_analysis("example.com", fetcher=fetcher, summarizer=_RecordingSummarizer())
    second = await run_analysis("example.com", fetcher=fetcher, summarizer=_RecordingSummarizer())

    assert first.id != second.id
    assert first.metrics == second.metrics


@pytest.mark.asyncio
async def test_schema_error_reports_error_status(scripted_client, sleep_recorder):
    client, _ = scripted_client([httpx.Response(200, json={"kind": "pagespeedonline#result"})])
    fetcher = RetryingFetcher(client=client, sleep=sleep_recorder)
    summarizer = _RecordingSummarizer()
    statuses: list[AnalysisStatus] = []

    with pytest.raises(SchemaError):
        await run_analysis(
            "example.com", fetcher=fetcher, summarizer=summarizer, on_status=statuses.append
        )

    assert statuses == [AnalysisStatus.SCANNING, AnalysisStatus.ERROR]
    assert summarizer.calls == []


@pytest.mark.asyncio
async def test_invalid_url_fails_before_fetching(scripted_client, sleep_recorder):
    client, transport = scripted_client([])
    fetcher = RetryingFetcher(client=client, sleep=sleep_recorder)
    statuses: list[AnalysisStatus] = []

    with pytest.raises(ValidationError):
        await run_analysis("ftp://example.com", fetcher=fetcher, on_status=statuses.append)

    assert statuses == [AnalysisStatus.ERROR]
    assert transport.requests == []
