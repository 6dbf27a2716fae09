"""Report-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field

from pulseaudit.schemas.common import MetricCategory, Strategy


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# === Normalized Lighthouse Models ===


class Metric(_Frozen):
    """A single scored metric extracted from the Lighthouse result."""

    name: str
    value: float
    unit: str
    score: int = Field(ge=0, le=100)
    category: MetricCategory
    description: str


class DetailedAudit(_Frozen):
    """A single SEO or accessibility audit result."""

    id: str
    title: str
    score: int | None = None
    description: str = ""


class ResourceBreakdownEntry(_Frozen):
    """Transfer size for one resource type, in kilobytes."""

    name: str
    value: int
    color: str


class NormalizedReport(_Frozen):
    """Fixed-shape view of a PSI response."""

    overall_score: int
    metrics: list[Metric]
    seo_audits: list[DetailedAudit]
    accessibility_audits: list[DetailedAudit]
    resource_breakdown: list[ResourceBreakdownEntry]


# === Request/Response Models ===


class AnalyzeRequest(BaseModel):
    """Request body for starting an analysis."""

    url: str
    strategy: Strategy | None = None


class PerformanceReport(_Frozen):
    """Complete report for one analysis run, including the AI narrative."""

    id: str
    url: str
    timestamp: int  # epoch milliseconds
    strategy: Strategy
    overall_score: int
    metrics: list[Metric]
    seo_audits: list[DetailedAudit]
    accessibility_audits: list[DetailedAudit]
    resource_breakdown: list[ResourceBreakdownEntry]
    ai_insights: str
