"""Health check endpoint."""

from typing import Any

from fastapi import APIRouter, Depends

from pulseaudit.api.v1.deps import get_settings
from pulseaudit.config.settings import Config

router = APIRouter()


@router.get("/health")
async def health_check(config: Config = Depends(get_settings)) -> dict[str, Any]:
    """
    Report liveness and which optional integrations are configured.

    Missing keys do not make the service unhealthy: PSI works anonymously
    at a lower quota and the AI narrative falls back to a fixed sentence.
    """
    return {
        "status": "healthy",
        "alive": True,
        "psi": {
            "api_key_configured": config.psi_api_key is not None,
            "strategy": config.strategy,
            "max_attempts": config.max_attempts,
        },
        "ai": {
            "api_key_configured": config.google_api_key is not None,
            "model": config.gemini_model,
        },
    }
