"""Thin async client for the Supabase auth (GoTrue) REST API.

Only sign-out is needed server-side: access tokens are verified locally by
``SessionContext`` and credentials are never handled by this service.
"""

from __future__ import annotations

import logging

import httpx

from src.config import Settings, get_settings

logger = logging.getLogger("bloom.auth.client")


class SupabaseAuthClient:
    """Calls GoTrue on behalf of a signed-in user."""

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=10.0)

    def _headers(self, access_token: str) -> dict[str, str]:
        return {
            "apikey": self._settings.supabase_anon_key,
            "Authorization": f"Bearer {access_token}",
        }

    async def sign_out(self, access_token: str) -> None:
        """Revoke the user's refresh tokens. Raises ``httpx.HTTPError`` on failure."""
        response = await self._http.post(
            f"{self._settings.supabase_auth_url}/logout",
            headers=self._headers(access_token),
        )
        response.raise_for_status()
        logger.debug("GoTrue logout returned %s", response.status_code)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()
