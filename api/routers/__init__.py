"""
Router package for the session engine API.

This package contains all API routers organized by domain:
- health: Health check endpoints
- sessions: Session listing, custom sessions and live session execution
"""

from api.routers.health import router as health_router
from api.routers.sessions import router as sessions_router

__all__ = [
    "health_router",
    "sessions_router",
]
