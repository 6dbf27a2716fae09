"""API dependencies for dependency injection."""

import httpx
from fastapi import Request

from pulseaudit.config.settings import Config, get_config
from pulseaudit.core.ai import summarize
from pulseaudit.core.audit import Summarizer
from pulseaudit.core.fetcher import RetryingFetcher


def get_settings() -> Config:
    """Get application settings dependency."""
    return get_config()


def get_fetcher(request: Request) -> RetryingFetcher:
    """Get a fetcher bound to the application's shared HTTP client."""
    client: httpx.AsyncClient | None = getattr(request.app.state, "http_client", None)
    return RetryingFetcher(client=client, timeout=get_config().request_timeout)


def get_summarizer() -> Summarizer:
    """Get the AI summarizer dependency."""
    return summarize
