"""Profile endpoints for the signed-in user."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body

from src.dependencies import CurrentUser, FormGuard, Store
from src.pages.profile import ProfileForm, ProfileState
from src.routers.submit import SUBMIT_ERRORS, SubmitResponse, submit_response

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileState)
async def get_profile(user: CurrentUser, store: Store, guard: FormGuard) -> Any:
    """Profile form state; defaults when the profile has never been saved."""
    return await ProfileForm(store, user, guard).load()


@router.put("", response_model=SubmitResponse[ProfileState], responses=SUBMIT_ERRORS)
async def save_profile(
    user: CurrentUser,
    store: Store,
    guard: FormGuard,
    draft: dict[str, Any] = Body(...),
) -> Any:
    result = await ProfileForm(store, user, guard).submit(draft)
    return submit_response(result)
