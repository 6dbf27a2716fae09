"""API v1 package."""

from fastapi import APIRouter

from pulseaudit.api.v1.routes import analyze, health

router = APIRouter(prefix="/v1")
router.include_router(health.router, tags=["health"])
router.include_router(analyze.router, tags=["analyze"])
