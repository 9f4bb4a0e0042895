"""Notification settings endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body

from src.dependencies import CurrentUser, FormGuard, Store
from src.pages.notifications import NotificationSettingsForm, NotificationSettingsState
from src.routers.submit import SUBMIT_ERRORS, SubmitResponse, submit_response

router = APIRouter(prefix="/notification-settings", tags=["notifications"])


@router.get("", response_model=NotificationSettingsState)
async def get_notification_settings(user: CurrentUser, store: Store, guard: FormGuard) -> Any:
    return await NotificationSettingsForm(store, user, guard).load()


@router.put("", response_model=SubmitResponse[NotificationSettingsState], responses=SUBMIT_ERRORS)
async def save_notification_settings(
    user: CurrentUser,
    store: Store,
    guard: FormGuard,
    draft: dict[str, Any] = Body(...),
) -> Any:
    result = await NotificationSettingsForm(store, user, guard).submit(draft)
    return submit_response(result)
