"""Retrying HTTP fetcher for the rate-limited PageSpeed Insights API."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import NoReturn

import httpx
from tenacity import (
    AsyncRetrying,
    Future,
    RetryCallState,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
)
from tenacity.wait import wait_base

from pulseaudit.errors.exceptions import ConnectivityError, FetchError, RateLimitError

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUS = 429

DEFAULT_MAX_ATTEMPTS = 7
DEFAULT_INITIAL_DELAY = 4.0  # seconds

RATE_LIMIT_MESSAGE = (
    "Maximum rate limit reached. The Google PageSpeed API is extremely congested. "
    "Please wait 2-3 minutes and try again."
)
CONNECTIVITY_MESSAGE = (
    "Network connectivity issue: Unable to reach Google's PageSpeed servers. "
    "Check your connection or VPN settings."
)
EXHAUSTED_MESSAGE = "Connection failed after multiple attempts"


# === Backoff Policies ===


@dataclass(frozen=True)
class BackoffPolicy:
    """How the base delay grows, and how much jitter is added, for one failure kind."""

    name: str
    multiplier: float
    max_jitter: float = 0.0  # seconds, drawn from [0, max_jitter)

    def next_delay(
        self, current_delay: float, rand: Callable[[], float] = random.random
    ) -> tuple[float, float]:
        """Return (seconds to sleep now, base delay for the next retry)."""
        jitter = rand() * self.max_jitter if self.max_jitter else 0.0
        return current_delay + jitter, current_delay * self.multiplier


RATE_LIMIT_POLICY = BackoffPolicy(name="rate_limit", multiplier=2.5, max_jitter=2.0)
TRANSIENT_POLICY = BackoffPolicy(name="transient", multiplier=2.0)


def select_policy(outcome: Future) -> BackoffPolicy:
    """
    Pick the backoff policy for a retryable attempt outcome.

    Only two outcomes are ever retried: a transport exception, or a response
    carrying the rate-limit status.
    """
    if outcome.failed:
        return TRANSIENT_POLICY
    return RATE_LIMIT_POLICY


class _PolicyWait(wait_base):
    """Stateful tenacity wait sharing one base delay across both policies."""

    def __init__(self, initial_delay: float, rand: Callable[[], float]) -> None:
        self.current_delay = initial_delay
        self._rand = rand

    def __call__(self, retry_state: RetryCallState) -> float:
        assert retry_state.outcome is not None
        policy = select_policy(retry_state.outcome)
        sleep_for, self.current_delay = policy.next_delay(self.current_delay, self._rand)
        return sleep_for


def _is_rate_limited(response: httpx.Response) -> bool:
    return response.status_code == RATE_LIMIT_STATUS


def _log_retry(retry_state: RetryCallState) -> None:
    assert retry_state.outcome is not None
    wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
    if retry_state.outcome.failed:
        reason = f"transport error: {retry_state.outcome.exception()}"
    else:
        reason = f"rate limited ({RATE_LIMIT_STATUS})"
    logger.warning(
        f"PSI attempt {retry_state.attempt_number} failed with {reason}. "
        f"Retrying in {wait:.2f}s..."
    )


def _raise_exhausted(retry_state: RetryCallState) -> NoReturn:
    """Turn the last outcome of an exhausted retry loop into a FetchError."""
    outcome = retry_state.outcome
    attempts = retry_state.attempt_number
    if outcome is None:
        raise FetchError(EXHAUSTED_MESSAGE)

    if outcome.failed:
        exc = outcome.exception()
        logger.error(f"PSI request failed after {attempts} attempt(s): {exc}")
        if isinstance(exc, httpx.ConnectError):
            raise ConnectivityError(CONNECTIVITY_MESSAGE) from exc
        raise FetchError(f"{EXHAUSTED_MESSAGE}: {exc}") from exc

    logger.error(f"PSI still rate limited after {attempts} attempt(s)")
    raise RateLimitError(RATE_LIMIT_MESSAGE, response=outcome.result())


# === Fetcher ===


class RetryingFetcher:
    """
    Issues GET requests, retrying transport failures and rate-limit responses.

    Any response that is not a rate-limit response is returned as-is,
    whatever its status code. Interpreting it is the caller's job.

    Usage:
        fetcher = RetryingFetcher()
        response = await fetcher.fetch(url)
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = 60.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rand: Callable[[], float] = random.random,
    ) -> None:
        self._client = client
        self._timeout = timeout
        self._sleep = sleep
        self._rand = rand

    async def fetch(
        self,
        url: str,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
    ) -> httpx.Response:
        """
        Fetch a URL with exponential backoff.

        Args:
            url: Fully-formed request URL
            max_attempts: Total number of attempts, including the first one
            initial_delay: Base delay in seconds before the first retry

        Raises:
            RateLimitError: Every attempt was rate limited
            ConnectivityError: The last attempt could not connect to the host
            FetchError: The last attempt failed with another transport error
        """
        if max_attempts < 1:
            raise FetchError(EXHAUSTED_MESSAGE)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(max_attempts),
            wait=_PolicyWait(initial_delay, self._rand),
            retry=(
                retry_if_exception_type(httpx.TransportError)
                | retry_if_result(_is_rate_limited)
            ),
            sleep=self._sleep,
            before_sleep=_log_retry,
            retry_error_callback=_raise_exhausted,
        )

        if self._client is not None:
            return await retrying(self._client.get, url)

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await retrying(client.get, url)
