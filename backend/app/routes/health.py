"""
LoveStack Backend — Health Check Route
========================================

What:  Liveness/readiness check for Docker and load balancers.
How:   Reads one row of user_profiles on the admin client and reports whether
       Resend credentials are present. Never raises; a failed check is
       reported in the body.

Status levels:
    healthy    Supabase reachable and email configured
    degraded   Supabase reachable, email unconfigured
    unhealthy  Supabase unreachable
"""

import logging
import time

from fastapi import APIRouter, Depends

from app import __version__
from app.container import Container
from app.dependencies import get_container
from app.schemas.api import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module-level: set once at import
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(container: Container = Depends(get_container)) -> HealthResponse:
    database = "disconnected"
    if container.settings.supabase_configured:
        if await container.supabase.health_check():
            database = "connected"
    else:
        logger.warning("Health check: Supabase is not configured")

    email = "configured" if container.resend.has_api_key else "unconfigured"

    if database != "connected":
        overall = "unhealthy"
    elif email != "configured":
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=database,
        email=email,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
