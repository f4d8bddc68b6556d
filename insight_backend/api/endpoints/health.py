from fastapi import APIRouter
from datetime import datetime, timezone

from insight_backend.models.health import HealthResponse

router = APIRouter()


def utc_timestamp() -> str:
    """Current UTC time, e.g. 2026-01-13T09:30:00.123Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="ok", time=utc_timestamp())
