"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from shared.config import Settings, get_settings

from ..dependencies import get_container

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str


def check_database() -> bool:
    """Run a one-row query against the users table."""
    try:
        get_container().db.table("users").select("id").limit(1).execute()
    except Exception as e:
        logger.warning("Readiness check failed: %s", e)
        return False
    return True


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=settings.app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    """Report whether the database is reachable."""
    if check_database():
        return ReadinessResponse(status="ready", database="connected")
    return ReadinessResponse(status="not_ready", database="unavailable")
