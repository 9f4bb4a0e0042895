"""Bloom API: FastAPI application entry point.

Run locally:
    uvicorn src.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import Settings, get_settings
from src.middleware.session_gate import SessionGateMiddleware
from src.pages.forms import SingleFlight
from src.routers import (
    catalog,
    cycles,
    health,
    notifications,
    physical_data,
    profile,
    session,
)
from src.services.session import AuthContext, AuthEvent, SessionContext, TokenVerifier
from src.services.supabase import close_pool, init_pool
from src.services.supabase_auth import SupabaseAuthClient

# ---------- Logging ----------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("bloom")


def _log_auth_event(event: AuthEvent, auth: AuthContext) -> None:
    logger.info("Auth event %s for user=%s", event.value, auth.user_id)


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings: Settings = app.state.settings
    logging.getLogger().setLevel(settings.log_level.upper())
    logger.info(
        "Starting Bloom API v%s [%s]",
        settings.app_version,
        settings.environment,
    )
    await init_pool(settings)
    unsubscribe = app.state.session_context.subscribe(_log_auth_event)
    yield
    unsubscribe()
    await app.state.auth_client.aclose()
    await close_pool()
    logger.info("Bloom API shut down")


# ---------- App factory ----------

def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Bloom API",
        description=(
            "Personal menstrual cycle tracker: cycle calendar, physical health "
            "data, exercise and nutrition content, and reminder settings."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    auth_client = SupabaseAuthClient(settings)
    session_context = SessionContext(TokenVerifier(settings), auth_client)

    app.state.settings = settings
    app.state.auth_client = auth_client
    app.state.session_context = session_context
    app.state.form_guard = SingleFlight()

    # ---------- Middleware (the last one added is the outermost) ----------

    # Session gate: resolve the Supabase session or answer 401 + sign-in route
    app.add_middleware(
        SessionGateMiddleware, session_context=session_context, settings=settings
    )

    # CORS wraps the gate so 401 responses still carry CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Health check (outside v1 prefix, always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    v1_prefix = "/api/v1"

    app.include_router(session.router, prefix=v1_prefix)
    app.include_router(profile.router, prefix=v1_prefix)
    app.include_router(cycles.router, prefix=v1_prefix)
    app.include_router(physical_data.router, prefix=v1_prefix)
    app.include_router(notifications.router, prefix=v1_prefix)
    app.include_router(catalog.router, prefix=v1_prefix)

    return app


app = create_app()
