"""FastAPI application entrypoint with lifecycle management."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from pulseaudit.api.v1 import router as v1_router
from pulseaudit.config.settings import get_config

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Owns the HTTP client shared by every PSI request.
    """
    logger.info("Starting up PulseAudit API...")
    config = get_config()
    app.state.http_client = httpx.AsyncClient(timeout=config.request_timeout)

    if config.psi_api_key is None:
        logger.warning("PSI_API_KEY not set, PageSpeed requests will use the anonymous quota")

    try:
        yield
    finally:
        logger.info("Shutting down PulseAudit API...")
        await app.state.http_client.aclose()
        app.state.http_client = None
        logger.info("PulseAudit API shutdown complete")


app = FastAPI(
    title="PulseAudit API",
    description="Web performance audits using PageSpeed Insights with AI-generated insights",
    version="0.1.0",
    lifespan=lifespan,
)

# Include API v1 routes
app.include_router(v1_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "name": "PulseAudit API",
        "version": "0.1.0",
        "docs": "/docs",
    }
