"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness check; does not touch the target site or the oracle."""
    return {
        "status": "ok",
        "message": "RVO Agent API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
