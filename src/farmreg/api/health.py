"""
Health check endpoint for monitoring and orchestration.

Reports uptime and the size of the in-memory stores. Used by container
health checks and load balancers.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, status

from farmreg.api.deps import get_registry, get_session_store
from farmreg.core.registry import RegistrationRegistry
from farmreg.core.session_store import SessionStore
from farmreg.models.schemas import HealthResponse

router = APIRouter(tags=["health"])

# Global app start time (set in lifespan)
_app_start_time: datetime | None = None


def set_app_start_time(start_time: datetime) -> None:
    """Called by lifespan to track when app started."""
    global _app_start_time
    _app_start_time = start_time


def get_uptime_seconds() -> int:
    """Calculate seconds since app start."""
    if _app_start_time is None:
        return 0
    return int((datetime.now() - _app_start_time).total_seconds())


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    response_model=HealthResponse,
    summary="Service health",
)
async def health_check(
    store: SessionStore = Depends(get_session_store),
    registry: RegistrationRegistry = Depends(get_registry),
) -> HealthResponse:
    """
    Example response:
        {
            "status": "running",
            "uptime_seconds": 3600,
            "registered_farmers": 12,
            "active_sessions": 3
        }
    """
    return HealthResponse(
        status="running",
        uptime_seconds=get_uptime_seconds(),
        registered_farmers=await registry.count(),
        active_sessions=store.count(),
    )
