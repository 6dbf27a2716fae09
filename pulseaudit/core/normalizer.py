"""Normalize a raw PageSpeed Insights document into a fixed-shape report."""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, cast

from pulseaudit.errors.exceptions import SchemaError
from pulseaudit.schemas.common import MetricCategory
from pulseaudit.schemas.report import (
    DetailedAudit,
    Metric,
    NormalizedReport,
    ResourceBreakdownEntry,
)

SCHEMA_ERROR_MESSAGE = (
    "Analysis engine failed to return results. "
    "This often happens with sites that use heavy bot protection."
)

SEO_AUDIT_IDS = (
    "viewport",
    "document-title",
    "meta-description",
    "image-alt",
    "link-text",
    "http-status-code",
    "is-crawlable",
)

ACCESSIBILITY_AUDIT_IDS = (
    "color-contrast",
    "document-title",
    "html-has-lang",
    "image-alt",
    "label",
    "link-name",
    "list",
    "listitem",
)

RESOURCE_COLORS = ("#f59e0b", "#10b981", "#3b82f6", "#8b5cf6", "#64748b", "#ec4899")
MAX_RESOURCE_ENTRIES = 6
FALLBACK_RESOURCE_NAME = "Assets"
FALLBACK_RESOURCE_COLOR = "#3b82f6"


# === Type-safe helpers ===


def _get_mapping(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    """Return data[key] if it is a mapping, else an empty one."""
    value = data.get(key)
    if isinstance(value, Mapping):
        return cast(Mapping[str, Any], value)
    return {}


def _safe_float(value: Any) -> float | None:
    """Safely convert value to float or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    return None


def _get_number(data: Mapping[str, Any], key: str) -> float:
    """Read a numeric field, substituting 0 when missing or not a number."""
    value = _safe_float(data.get(key))
    return 0.0 if value is None else value


def _get_text(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def _round_half_up(value: float, places: int = 0) -> Decimal:
    number = Decimal(str(value))
    quantum = Decimal(1).scaleb(-places)
    # quantize needs every integer digit plus the requested places
    with localcontext() as ctx:
        ctx.prec = max(28, number.adjusted() + places + 2)
        return number.quantize(quantum, rounding=ROUND_HALF_UP)


def _to_int(value: float) -> int:
    return int(_round_half_up(value))


def _to_percent(fraction: float) -> int:
    """Convert a 0-1 score to an integer 0-100."""
    return min(100, max(0, _to_int(fraction * 100)))


# === Unit converters ===


def _ms_to_seconds(value: float) -> float:
    return float(_round_half_up(value / 1000, 2))


def _whole_ms(value: float) -> float:
    return float(_to_int(value))


def _unitless_3dp(value: float) -> float:
    return float(_round_half_up(value, 3))


def _fraction_to_percent(value: float) -> float:
    return float(_to_percent(value))


# === Metric definitions ===


@dataclass(frozen=True)
class MetricDefinition:
    """
    How to extract one metric from the Lighthouse result.

    ``source`` is either "audits" (value read from ``numericValue``) or
    "categories" (value derived from the category ``score``).
    """

    name: str
    source: str
    key: str
    unit: str
    category: MetricCategory
    convert: Callable[[float], float]
    fallback_description: str

    @property
    def uses_source_description(self) -> bool:
        return self.source == "audits"


METRIC_DEFINITIONS: tuple[MetricDefinition, ...] = (
    MetricDefinition(
        name="First Contentful Paint",
        source="audits",
        key="first-contentful-paint",
        unit="s",
        category=MetricCategory.SPEED,
        convert=_ms_to_seconds,
        fallback_description=(
            "FCP measures how long it takes for the browser to render "
            "the first piece of DOM content."
        ),
    ),
    MetricDefinition(
        name="Largest Contentful Paint",
        source="audits",
        key="largest-contentful-paint",
        unit="s",
        category=MetricCategory.SPEED,
        convert=_ms_to_seconds,
        fallback_description=(
            "LCP marks the point in the page load timeline when the main "
            "content has likely loaded."
        ),
    ),
    MetricDefinition(
        name="Total Blocking Time",
        source="audits",
        key="total-blocking-time",
        unit="ms",
        category=MetricCategory.SPEED,
        convert=_whole_ms,
        fallback_description=(
            "TBT measures the total amount of time that a page is blocked "
            "from responding to user input."
        ),
    ),
    MetricDefinition(
        name="Cumulative Layout Shift",
        source="audits",
        key="cumulative-layout-shift",
        unit="",
        category=MetricCategory.UX,
        convert=_unitless_3dp,
        fallback_description=(
            "CLS measures the sum total of all individual layout shift scores "
            "for every unexpected layout shift."
        ),
    ),
    MetricDefinition(
        name="SEO Score",
        source="categories",
        key="seo",
        unit="",
        category=MetricCategory.SEO,
        convert=_fraction_to_percent,
        fallback_description=(
            "Lighthouse SEO audit score based on search engine optimization best practices."
        ),
    ),
    MetricDefinition(
        name="Accessibility Score",
        source="categories",
        key="accessibility",
        unit="",
        category=MetricCategory.ACCESSIBILITY,
        convert=_fraction_to_percent,
        fallback_description=(
            "Evaluates how accessible your website is for people with disabilities "
            "or impairments."
        ),
    ),
)


# === Extraction ===


def _extract_metric(
    definition: MetricDefinition,
    audits: Mapping[str, Any],
    categories: Mapping[str, Any],
) -> Metric:
    if definition.source == "audits":
        entry = _get_mapping(audits, definition.key)
        raw_value = _get_number(entry, "numericValue")
    else:
        entry = _get_mapping(categories, definition.key)
        raw_value = _get_number(entry, "score")

    description = None
    if definition.uses_source_description:
        description = _get_text(entry, "description")

    return Metric(
        name=definition.name,
        value=definition.convert(raw_value),
        unit=definition.unit,
        score=_to_percent(_get_number(entry, "score")),
        category=definition.category,
        description=description or definition.fallback_description,
    )


def _extract_audit(audits: Mapping[str, Any], audit_id: str) -> DetailedAudit:
    """Look up one audit; a missing or null score yields score=None."""
    entry = _get_mapping(audits, audit_id)
    raw_score = _safe_float(entry.get("score"))
    return DetailedAudit(
        id=audit_id,
        title=_get_text(entry, "title") or audit_id,
        score=None if raw_score is None else _to_percent(raw_score),
        description=_get_text(entry, "description") or "",
    )


def _extract_audits(audits: Mapping[str, Any], audit_ids: tuple[str, ...]) -> list[DetailedAudit]:
    # A score of 0 is a failing audit and is kept; only missing scores are dropped.
    extracted = [_extract_audit(audits, audit_id) for audit_id in audit_ids]
    return [audit for audit in extracted if audit.score is not None]


def _extract_resource_breakdown(audits: Mapping[str, Any]) -> list[ResourceBreakdownEntry]:
    details = _get_mapping(_get_mapping(audits, "resource-summary"), "details")
    raw_items = details.get("items")
    items: list[Any] = list(raw_items) if isinstance(raw_items, list) else []

    rows = [
        cast(Mapping[str, Any], item)
        for item in items
        if isinstance(item, Mapping) and item.get("resourceType") != "total"
    ]

    breakdown = [
        ResourceBreakdownEntry(
            name=_get_text(row, "label") or _get_text(row, "resourceType") or "Other",
            value=_to_int(_get_number(row, "transferSize") / 1024),
            color=RESOURCE_COLORS[index % len(RESOURCE_COLORS)],
        )
        for index, row in enumerate(rows)
    ][:MAX_RESOURCE_ENTRIES]

    if breakdown:
        return breakdown

    total_bytes = _get_number(_get_mapping(audits, "total-byte-weight"), "numericValue")
    return [
        ResourceBreakdownEntry(
            name=FALLBACK_RESOURCE_NAME,
            value=_to_int(total_bytes / 1024),
            color=FALLBACK_RESOURCE_COLOR,
        )
    ]


def normalize(raw_document: Mapping[str, Any]) -> NormalizedReport:
    """
    Map a decoded PSI response onto a NormalizedReport.

    Only a missing ``lighthouseResult`` is fatal. Every other absent field
    degrades to a default: metric values and scores to 0, descriptions to a
    fixed sentence, audits without a score are dropped and an empty resource
    summary becomes a single synthesized entry.

    Raises:
        SchemaError: If the document has no ``lighthouseResult`` object.
    """
    lighthouse = raw_document.get("lighthouseResult") if isinstance(raw_document, Mapping) else None
    if not isinstance(lighthouse, Mapping):
        raise SchemaError(SCHEMA_ERROR_MESSAGE)

    lighthouse = cast(Mapping[str, Any], lighthouse)
    audits = _get_mapping(lighthouse, "audits")
    categories = _get_mapping(lighthouse, "categories")

    return NormalizedReport(
        overall_score=_to_percent(_get_number(_get_mapping(categories, "performance"), "score")),
        metrics=[_extract_metric(d, audits, categories) for d in METRIC_DEFINITIONS],
        seo_audits=_extract_audits(audits, SEO_AUDIT_IDS),
        accessibility_audits=_extract_audits(audits, ACCESSIBILITY_AUDIT_IDS),
        resource_breakdown=_extract_resource_breakdown(audits),
    )
