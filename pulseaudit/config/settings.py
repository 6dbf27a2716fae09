"""Centralized configuration loading."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    # API Keys (both optional, PSI works anonymously at a lower quota)
    psi_api_key: str | None
    google_api_key: str | None

    # Gemini
    gemini_model: str

    # PSI request settings
    strategy: str
    max_attempts: int
    initial_delay: float
    request_timeout: float


def _get_optional_key(key: str) -> str | None:
    """Get an optional secret, treating blank values as unset."""
    value = os.getenv(key)
    if not value or not value.strip():
        return None
    return value.strip()


def _get_optional_env(key: str, default: str) -> str:
    """Get optional environment variable with default."""
    value = os.getenv(key)
    return value.strip() if value else default


def load_config() -> Config:
    """Load and validate configuration from environment."""
    load_dotenv()

    strategy = _get_optional_env("PSI_STRATEGY", "mobile").lower()
    if strategy not in ("mobile", "desktop"):
        raise ValueError(f"PSI_STRATEGY must be 'mobile' or 'desktop', got {strategy!r}")

    max_attempts = int(_get_optional_env("PSI_MAX_ATTEMPTS", "7"))
    if max_attempts < 1:
        raise ValueError("PSI_MAX_ATTEMPTS must be at least 1")

    return Config(
        psi_api_key=_get_optional_key("PSI_API_KEY"),
        google_api_key=_get_optional_key("GOOGLE_API_KEY"),
        gemini_model=_get_optional_env("GEMINI_MODEL", "gemini-2.5-flash"),
        strategy=strategy,
        max_attempts=max_attempts,
        initial_delay=float(_get_optional_env("PSI_INITIAL_DELAY", "4.0")),
        request_timeout=float(_get_optional_env("PSI_REQUEST_TIMEOUT", "60")),
    )


# Singleton config instance (lazy loaded)
_config: Config | None = None


def get_config() -> Config:
    """Get the configuration singleton."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset config singleton (useful for testing)."""
    global _config
    _config = None
