"""Cycle calendar endpoints: history with highlighted days, and new cycles."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body

from src.dependencies import AppSettings, CurrentUser, FormGuard, Store
from src.pages.calendar import CalendarState, CycleForm
from src.routers.submit import SUBMIT_ERRORS, SubmitResponse, submit_response

router = APIRouter(prefix="/cycles", tags=["cycles"])


@router.get("", response_model=CalendarState)
async def get_calendar(
    user: CurrentUser, store: Store, guard: FormGuard, settings: AppSettings
) -> Any:
    return await CycleForm(store, user, guard, settings.recent_cycles_limit).load()


@router.post(
    "", response_model=SubmitResponse[CalendarState], status_code=201, responses=SUBMIT_ERRORS
)
async def record_cycle(
    user: CurrentUser,
    store: Store,
    guard: FormGuard,
    settings: AppSettings,
    draft: dict[str, Any] = Body(...),
) -> Any:
    form = CycleForm(store, user, guard, settings.recent_cycles_limit)
    return submit_response(await form.submit(draft))
