"""PulseAudit - PageSpeed Insights audits with resilient fetching and AI insights."""

from pulseaudit.core.audit import run_analysis
from pulseaudit.core.fetcher import RetryingFetcher
from pulseaudit.core.normalizer import normalize
from pulseaudit.schemas.common import AnalysisStatus, MetricCategory, Strategy
from pulseaudit.schemas.report import NormalizedReport, PerformanceReport
from pulseaudit.services.validators import validate_url

__all__ = [
    "run_analysis",
    "normalize",
    "validate_url",
    "RetryingFetcher",
    "NormalizedReport",
    "PerformanceReport",
    "AnalysisStatus",
    "MetricCategory",
    "Strategy",
]
