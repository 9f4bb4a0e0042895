"""Session and dashboard endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from src.dependencies import AppSettings, CurrentUser, Sessions
from src.models.users import SessionRead, SignOutResponse
from src.pages.dashboard import DashboardState, build_dashboard

router = APIRouter(tags=["session"])


@router.get("/session", response_model=SessionRead)
async def get_session(user: CurrentUser) -> Any:
    """The session resolved by the gate for this request."""
    return SessionRead(
        user_id=user.user_id,
        email=user.email,
        display_name=user.display_name,
        session_id=user.session_id,
        expires_at=user.expires_at,
    )


@router.post("/session/sign-out", response_model=SignOutResponse)
async def sign_out(user: CurrentUser, sessions: Sessions, settings: AppSettings) -> Any:
    await sessions.sign_out(user)
    return SignOutResponse(message="Logged out successfully", redirect_to=settings.sign_in_path)


@router.get("/dashboard", response_model=DashboardState)
async def get_dashboard(user: CurrentUser) -> Any:
    return build_dashboard(user)
