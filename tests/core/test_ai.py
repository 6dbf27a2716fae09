"""Tests for the Gemini summarizer."""

from types import SimpleNamespace
from typing import Any

from pulseaudit.core.ai import ERROR_MESSAGE, NO_INSIGHTS_MESSAGE, build_prompt, summarize
from pulseaudit.core.normalizer import normalize


class _FakeModels:
    def __init__(self, text: str | None = None, error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def generate_content(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


def _install_fake_client(monkeypatch, models: _FakeModels) -> list[str]:
    api_keys: list[str] = []

    def fake_client(api_key: str) -> SimpleNamespace:
        api_keys.append(api_key)
        return SimpleNamespace(models=models)

    monkeypatch.setattr("pulseaudit.core.ai.genai.Client", fake_client)
    return api_keys


def test_build_prompt_lists_metrics(psi_document):
    metrics = normalize(psi_document).metrics
    prompt = build_prompt("https://example.com", metrics)

    assert "https://example.com" in prompt
    assert "First Contentful Paint: 1.23s (Score: 92)" in prompt
    assert "Total Blocking Time: 250ms (Score: 81)" in prompt
    assert "SEO Score: 82 (Score: 82)" in prompt


def test_summarize_without_api_key_returns_fallback(monkeypatch, psi_document):
    models = _FakeModels(text="never used")
    _install_fake_client(monkeypatch, models)

    result = summarize("https://example.com", normalize(psi_document).metrics)

    assert result == NO_INSIGHTS_MESSAGE
    assert models.calls == []


def test_summarize_returns_model_text(monkeypatch, psi_document):
    monkeypatch.setenv("GOOGLE_API_KEY", "test-google-key")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-test")
    models = _FakeModels(text="Site is fast.")
    api_keys = _install_fake_client(monkeypatch, models)

    result = summarize("https://example.com", normalize(psi_document).metrics)

    assert result == "Site is fast."
    assert api_keys == ["test-google-key"]
    assert models.calls[0]["model"] == "gemini-test"
    assert "Largest Contentful Paint" in models.calls[0]["contents"]


def test_summarize_empty_text_returns_fallback(monkeypatch, psi_document):
    monkeypatch.setenv("GOOGLE_API_KEY", "test-google-key")
    _install_fake_client(monkeypatch, _FakeModels(text=None))

    assert summarize("https://example.com", normalize(psi_document).metrics) == NO_INSIGHTS_MESSAGE


def test_summarize_swallows_sdk_errors(monkeypatch, psi_document):
    monkeypatch.setenv("GOOGLE_API_KEY", "test-google-key")
    _install_fake_client(monkeypatch, _FakeModels(error=RuntimeError("quota exceeded")))

    assert summarize("https://example.com", normalize(psi_document).metrics) == ERROR_MESSAGE
