"""Session gate middleware for FastAPI.

Resolves the Supabase session for every request (except public routes) and
sets ``request.state.auth`` for downstream route handlers, which consume it
via ``get_current_user``. A request without a usable session is answered
with 401 and the sign-in route; it never reaches a route or the store.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.config import Settings, get_settings
from src.services.session import SessionContext

logger = logging.getLogger("bloom.auth.gate")

# Paths that do not require a session
PUBLIC_PATHS: set[str] = {
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc",
}


def _is_public(path: str) -> bool:
    return path in PUBLIC_PATHS or path.startswith("/docs") or path.startswith("/redoc")


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.removeprefix("Bearer ").strip() or None


class SessionGateMiddleware(BaseHTTPMiddleware):
    """Resolve the session through SessionContext and populate request.state.auth."""

    def __init__(
        self,
        app: Any,
        session_context: SessionContext,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(app)
        self._sessions = session_context
        self._settings = settings or get_settings()

    def _sign_in_redirect(self) -> Response:
        return Response(
            content=json.dumps(
                {"detail": "Not authenticated", "redirect_to": self._settings.sign_in_path}
            ),
            status_code=401,
            media_type="application/json",
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if _is_public(request.url.path):
            return await call_next(request)

        # OPTIONS requests pass through (CORS preflight)
        if request.method == "OPTIONS":
            return await call_next(request)

        auth = self._sessions.resolve(_bearer_token(request))
        if auth is None:
            logger.debug("No session for %s %s", request.method, request.url.path)
            return self._sign_in_redirect()

        request.state.auth = auth
        return await call_next(request)
