"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from src.config import Settings
from src.pages.forms import SingleFlight
from src.services.session import AuthContext, SessionContext
from src.services.supabase import DataStore, SupabaseStore


async def get_current_user(request: Request) -> AuthContext:
    """Extract the authenticated user from the request state.

    The session gate middleware sets ``request.state.auth`` before routes run.
    """
    auth: AuthContext | None = getattr(request.state, "auth", None)
    if auth is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return auth


async def get_store(user: Annotated[AuthContext, Depends(get_current_user)]) -> DataStore:
    """A store bound to the caller's RLS identity."""
    return SupabaseStore(user_id=user.user_id)


def get_app_settings(request: Request) -> Settings:
    """The settings this app was built with, shared with the session gate."""
    return request.app.state.settings


def get_session_context(request: Request) -> SessionContext:
    return request.app.state.session_context


def get_form_guard(request: Request) -> SingleFlight:
    return request.app.state.form_guard


# Annotated shortcuts for route signatures
CurrentUser = Annotated[AuthContext, Depends(get_current_user)]
Store = Annotated[DataStore, Depends(get_store)]
Sessions = Annotated[SessionContext, Depends(get_session_context)]
FormGuard = Annotated[SingleFlight, Depends(get_form_guard)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
