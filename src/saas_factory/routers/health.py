"""Health check router."""

from fastapi import APIRouter, Depends

from ..config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint."""
    return {"status": "ok", "service": settings.service_name, "demo_mode": settings.demo_mode}
