"""
Health check endpoint.
"""
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from fincopilot.config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the server is running.
    """
    return HealthResponse(
        status="healthy",
        version=get_settings().app_version,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
