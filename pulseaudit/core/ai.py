"""AI narrative generation using Gemini."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from google import genai
from google.genai import types

from pulseaudit.config.settings import get_config
from pulseaudit.schemas.report import Metric

logger = logging.getLogger(__name__)

NO_INSIGHTS_MESSAGE = "Unable to generate AI insights at this time."
ERROR_MESSAGE = "Error generating AI insights. Please check your connectivity and try again."

PROMPT_TEMPLATE = """
Analyze the following performance metrics for the website: {url}

Metrics Data:
{metrics_summary}

Provide a detailed, professional, and actionable audit report.
Structure the response with:
1. A summary of overall site health.
2. Critical Bottlenecks (Focus on Largest Contentful Paint or TBT).
3. Specific Technical Recommendations (e.g., Image optimization, Gzip, JS minification).
4. Strategic SEO/UX improvements.

Keep the tone expert, concise, and helpful for a senior web developer.
"""


def _format_value(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def build_prompt(url: str, metrics: Sequence[Metric]) -> str:
    """Build the Gemini prompt from normalized metrics."""
    metrics_summary = "\n".join(
        f"{m.name}: {_format_value(m.value)}{m.unit} (Score: {m.score})" for m in metrics
    )
    return PROMPT_TEMPLATE.format(url=url, metrics_summary=metrics_summary)


def summarize(url: str, metrics: Sequence[Metric]) -> str:
    """
    Generate a narrative audit summary using Gemini.

    Never raises. Returns a fixed fallback sentence when the API key is
    missing, the model returns no text or the call fails.
    """
    config = get_config()
    if not config.google_api_key:
        logger.info("GOOGLE_API_KEY not set, skipping AI insights")
        return NO_INSIGHTS_MESSAGE

    try:
        client = genai.Client(api_key=config.google_api_key)
        response = client.models.generate_content(  # type: ignore
            model=config.gemini_model,
            contents=build_prompt(url, metrics),
            config=types.GenerateContentConfig(
                thinking_config=types.ThinkingConfig(thinking_budget=0),
            ),
        )
        text = response.text
    except Exception as e:
        logger.error(f"Gemini error: {e}", exc_info=logger.isEnabledFor(logging.DEBUG))
        return ERROR_MESSAGE

    return text or NO_INSIGHTS_MESSAGE
