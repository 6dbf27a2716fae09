"""PSI client - builds PageSpeed Insights requests and interprets responses."""

from __future__ import annotations

import logging
from typing import Any, cast
from urllib.parse import urlencode

import httpx

from pulseaudit.config.settings import get_config
from pulseaudit.core.fetcher import RATE_LIMIT_MESSAGE, RATE_LIMIT_STATUS, RetryingFetcher
from pulseaudit.core.normalizer import normalize
from pulseaudit.errors.exceptions import (
    APIError,
    ClientRequestError,
    FetchError,
    RateLimitError,
    SchemaError,
)
from pulseaudit.schemas.common import Strategy
from pulseaudit.schemas.report import NormalizedReport

logger = logging.getLogger(__name__)

PSI_API_URL = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
PSI_CATEGORIES = ("PERFORMANCE", "SEO", "ACCESSIBILITY", "BEST_PRACTICES")


def build_request_url(
    target_url: str,
    strategy: Strategy = Strategy.MOBILE,
    api_key: str | None = None,
) -> str:
    """Build the runPagespeed URL for every category we report on."""
    params: list[tuple[str, str]] = [("url", target_url)]
    params.extend(("category", category) for category in PSI_CATEGORIES)
    params.append(("strategy", strategy.value))

    # An API key raises the anonymous quota considerably
    if api_key:
        params.append(("key", api_key))

    return f"{PSI_API_URL}?{urlencode(params)}"


def _error_message(response: httpx.Response) -> str:
    """Pull ``error.message`` out of an error body, falling back to the status."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        error = cast(dict[str, Any], body).get("error")
        if isinstance(error, dict):
            message = cast(dict[str, Any], error).get("message")
            if isinstance(message, str) and message:
                return message
    return f"Status: {response.status_code}"


def check_response(response: httpx.Response) -> dict[str, Any]:
    """
    Interpret a PSI response and decode its JSON body.

    Raises:
        ClientRequestError: On 400 or 403
        RateLimitError: On 429
        APIError: On any other non-2xx status
        SchemaError: If a successful body is not a JSON object
    """
    status = response.status_code
    if not response.is_success:
        message = _error_message(response)
        logger.warning(f"PSI API returned error status {status}: {message}")

        if status == 400:
            raise ClientRequestError(
                f"Bad Request: {message}. Ensure the URL is valid and public.", status
            )
        if status == 403:
            raise ClientRequestError(
                "Access Forbidden: Google's crawlers might be blocked, "
                "or the API key is restricted.",
                status,
            )
        if status == RATE_LIMIT_STATUS:
            raise RateLimitError(RATE_LIMIT_MESSAGE, response=response)
        raise APIError(f"PageSpeed API Error: {message}")

    try:
        data = response.json()
    except ValueError as e:
        raise SchemaError(f"Failed to parse PSI response: {e}") from e

    if not isinstance(data, dict):
        raise SchemaError("PSI response is not a JSON object")
    return cast(dict[str, Any], data)


async def fetch_lighthouse_report(
    url: str,
    strategy: Strategy | None = None,
    fetcher: RetryingFetcher | None = None,
) -> NormalizedReport:
    """
    Fetch Lighthouse lab data for a URL from PSI and normalize it.

    Raises:
        FetchError: If the API could not be reached or stayed rate limited
        ClientRequestError: If PSI rejected the request
        APIError: On any other error status
        SchemaError: If the response carries no Lighthouse result
    """
    config = get_config()
    strategy = strategy or Strategy(config.strategy)
    fetcher = fetcher or RetryingFetcher(timeout=config.request_timeout)

    request_url = build_request_url(url, strategy, config.psi_api_key)
    logger.info(f"Requesting PSI analysis for {url} ({strategy.value})")

    try:
        response = await fetcher.fetch(
            request_url,
            max_attempts=config.max_attempts,
            initial_delay=config.initial_delay,
        )
    except httpx.HTTPError as e:
        # Non-transport httpx failures (redirect loops, bad encodings) are not retried
        raise FetchError(f"Failed to fetch PSI data: {e}") from e

    return normalize(check_response(response))
