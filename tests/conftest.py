"""Pytest fixtures for pulseaudit tests."""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator, Callable, Generator, Sequence
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio

from pulseaudit.config import settings
from pulseaudit.config.settings import reset_config

FIXTURES_DIR = Path(__file__).parent / "fixtures"

_ENV_KEYS = (
    "PSI_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_MODEL",
    "PSI_STRATEGY",
    "PSI_MAX_ATTEMPTS",
    "PSI_INITIAL_DELAY",
    "PSI_REQUEST_TIMEOUT",
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Give every test a clean environment and a fresh config singleton."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # Never pick up a developer's .env file
    monkeypatch.setattr(settings, "load_dotenv", lambda *args, **kwargs: False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def psi_document() -> dict[str, Any]:
    """A realistic PSI v5 response body."""
    with open(FIXTURES_DIR / "psi_response.json") as f:
        return json.load(f)


class SleepRecorder:
    """Async stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


Outcome = int | httpx.Response | Callable[[httpx.Request], Exception]


class ScriptedTransport(httpx.MockTransport):
    """
    Mock transport replaying a fixed sequence of outcomes.

    Each outcome is a status code, a full response, or a factory building
    the exception to raise for the request.
    """

    def __init__(self, outcomes: Sequence[Outcome]) -> None:
        self.outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.outcomes[len(self.requests) - 1]
        if isinstance(outcome, httpx.Response):
            return outcome
        if isinstance(outcome, int):
            return httpx.Response(outcome)
        raise outcome(request)


ClientFactory = Callable[[Sequence[Outcome]], tuple[httpx.AsyncClient, ScriptedTransport]]


@pytest_asyncio.fixture
async def scripted_client() -> AsyncGenerator[ClientFactory]:
    """Factory building AsyncClients backed by a ScriptedTransport, closed on teardown."""
    clients: list[httpx.AsyncClient] = []

    def factory(outcomes: Sequence[Outcome]) -> tuple[httpx.AsyncClient, ScriptedTransport]:
        transport = ScriptedTransport(outcomes)
        client = httpx.AsyncClient(transport=transport)
        clients.append(client)
        return client, transport

    yield factory

    for client in clients:
        await client.aclose()
