"""
Health check router.

This router provides health check endpoints for monitoring and load balancers.
"""

import logging

from fastapi import APIRouter, Depends

from api.deps import get_settings, get_supabase_client
from backend.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Health"],
)


# =============================================================================
# Health Check Endpoints
# =============================================================================


@router.get("/health")
def health():
    """
    Simple liveness endpoint for the session engine.

    Returns:
        dict: Status indicator for health checks
    """
    return {"status": "ok"}


@router.get("/health/ready")
def readiness(settings: Settings = Depends(get_settings)):
    """
    Readiness endpoint: reports whether the session store is configured.

    Returns:
        dict: Status, environment and database availability
    """
    database = get_supabase_client() is not None
    if not database:
        logger.warning("Readiness check: Supabase credentials not configured")
    return {
        "status": "ok" if database else "degraded",
        "environment": settings.environment,
        "database": database,
    }
