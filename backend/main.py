"""
FastAPI entry point for the session engine.

``create_app()`` wires Sentry, CORS and the routers around a Settings
instance, so tests can build an isolated app:

    app = create_app(Settings(environment="test", _env_file=None))

Run locally with ``uvicorn backend.main:app --reload``.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)

LOCAL_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
]


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Configuration to use; ``get_settings()`` when omitted.
    """
    settings = settings or get_settings()

    _init_sentry(settings)

    app = FastAPI(
        title="Workout Session Engine API",
        description="Live workout session execution: block timers, rest countdown and schedule persistence",
        version="1.0.0",
        lifespan=_lifespan,
    )
    _configure_cors(app, settings)
    _include_routers(app)
    _log_engine_settings(settings)
    return app


@asynccontextmanager
async def _lifespan(app: FastAPI):
    yield
    # Open days still hold running tickers and queued writes
    from api.deps import close_session_registry

    close_session_registry()


def _init_sentry(settings: Settings) -> None:
    if not settings.sentry_dsn:
        return
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1,
        profiles_sample_rate=0.1,
    )
    logger.info(f"Sentry enabled ({settings.environment})")


def _configure_cors(app: FastAPI, settings: Settings) -> None:
    """Allow the local dev servers plus CORS_ALLOWED_ORIGINS."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=LOCAL_ORIGINS + settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _include_routers(app: FastAPI) -> None:
    from api.routers import health_router, sessions_router

    app.include_router(health_router)
    app.include_router(sessions_router)


def _log_engine_settings(settings: Settings) -> None:
    logger.info(
        f"Session engine: rest preset {settings.default_rest_seconds}s, "
        f"tick {settings.tick_interval_seconds}s, "
        f"inline persistence {'on' if settings.persist_inline else 'off'}"
    )
    if not settings.supabase_url:
        logger.warning("SUPABASE_URL not set: session endpoints will return 503")


app = create_app()
