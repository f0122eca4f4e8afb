"""
Health check API endpoints.

Routes: GET /z

Dependencies: fastapi
System role: Health check HTTP API
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: str


router = APIRouter(tags=["health"])


@router.get("/z", response_model=HealthResponse)
async def liveness() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc).isoformat())
