"""Process-wide observable auth session state.

``SessionContext`` is created once per app and injected wherever the current
session matters:

- the session gate middleware calls :meth:`SessionContext.resolve` for every
  request; any verification failure resolves to "no session",
- the sign-out route calls :meth:`SessionContext.sign_out`, which revokes the
  session at the auth provider and locally, then notifies subscribers,
- components holding per-user state :meth:`subscribe` at startup and drop it
  when a user signs out; the returned callable unsubscribes at shutdown.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

import httpx
import jwt as pyjwt
from jwt import PyJWKClient

from src.config import Settings, get_settings
from src.services.supabase_auth import SupabaseAuthClient

logger = logging.getLogger("bloom.auth")


@dataclass(frozen=True)
class AuthContext:
    """Authenticated user context extracted from a Supabase access token."""

    user_id: uuid.UUID  # auth.users id; also the profiles primary key
    email: str | None = None
    display_name: str | None = None  # user_metadata.name set at sign-up
    session_id: str | None = None
    expires_at: datetime | None = None
    access_token: str = field(default="", repr=False)

    @property
    def revocation_key(self) -> str:
        return self.session_id or f"{self.user_id}:{self.access_token[-16:]}"


class AuthEvent(str, Enum):
    SIGNED_OUT = "SIGNED_OUT"


AuthListener = Callable[[AuthEvent, AuthContext], None]


class TokenVerifier:
    """Verify Supabase-issued access tokens.

    Projects using the legacy shared secret sign with HS256; projects on
    asymmetric signing keys publish them at the auth JWKS endpoint.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._jwks_client: PyJWKClient | None = None
        if not self._settings.supabase_jwt_secret:
            self._jwks_client = PyJWKClient(
                self._settings.supabase_jwks_url,
                cache_keys=True,
                lifespan=3600,
            )

    def verify(self, token: str) -> dict[str, Any]:
        if self._jwks_client is None:
            return pyjwt.decode(
                token,
                self._settings.supabase_jwt_secret,
                algorithms=["HS256"],
                audience=self._settings.supabase_jwt_audience,
            )
        signing_key = self._jwks_client.get_signing_key_from_jwt(token)
        return pyjwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256", "ES256"],
            audience=self._settings.supabase_jwt_audience,
        )


class SessionContext:
    """Shared session resolver with sign-out notifications."""

    def __init__(
        self,
        verifier: TokenVerifier,
        auth_client: SupabaseAuthClient,
    ) -> None:
        self._verifier = verifier
        self._auth_client = auth_client
        self._listeners: list[AuthListener] = []
        # revocation key -> token expiry (unix seconds)
        self._revoked: dict[str, float] = {}

    # ---------- Resolution ----------

    def resolve(self, token: str | None) -> AuthContext | None:
        """Return the session for ``token``, or None if there is none."""
        if not token:
            return None
        try:
            claims = self._verifier.verify(token)
            auth = _context_from_claims(claims, token)
        except pyjwt.ExpiredSignatureError:
            logger.info("Access token expired")
            return None
        except (pyjwt.PyJWTError, ValueError) as exc:
            logger.warning("Access token rejected: %s", exc)
            return None

        if auth.revocation_key in self._revoked:
            logger.info("Rejected signed-out session for user=%s", auth.user_id)
            return None
        return auth

    # ---------- Subscriptions ----------

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register ``listener`` for auth events; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: AuthEvent, auth: AuthContext) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, auth)
            except Exception:
                logger.exception("Auth listener failed for event=%s", event.value)

    # ---------- Sign-out ----------

    async def sign_out(self, auth: AuthContext) -> None:
        """Sign the session out everywhere and notify subscribers.

        The session is revoked locally even when the auth provider call fails,
        so this process stops honouring the token either way.
        """
        try:
            await self._auth_client.sign_out(auth.access_token)
        except httpx.HTTPError as exc:
            logger.warning("Auth provider sign-out failed for user=%s: %s", auth.user_id, exc)

        self._revoke(auth)
        logger.info("Signed out user=%s session=%s", auth.user_id, auth.session_id)
        self._emit(AuthEvent.SIGNED_OUT, auth)

    def is_revoked(self, auth: AuthContext) -> bool:
        return auth.revocation_key in self._revoked

    def _revoke(self, auth: AuthContext) -> None:
        now = time.time()
        # Expired tokens fail verification anyway; no need to remember them
        self._revoked = {k: exp for k, exp in self._revoked.items() if exp > now}
        expiry = auth.expires_at.timestamp() if auth.expires_at else now + 3600
        self._revoked[auth.revocation_key] = expiry


def _context_from_claims(claims: dict[str, Any], token: str) -> AuthContext:
    metadata = claims.get("user_metadata") or {}
    exp = claims.get("exp")
    return AuthContext(
        user_id=uuid.UUID(str(claims.get("sub", ""))),
        email=claims.get("email"),
        display_name=metadata.get("name"),
        session_id=claims.get("session_id"),
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
        access_token=token,
    )
