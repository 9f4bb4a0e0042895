"""Physical data endpoints: latest sample and new samples."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body

from src.dependencies import CurrentUser, FormGuard, Store
from src.pages.physical_data import PhysicalDataForm, PhysicalDataState
from src.routers.submit import SUBMIT_ERRORS, SubmitResponse, submit_response

router = APIRouter(prefix="/physical-data", tags=["physical data"])


@router.get("", response_model=PhysicalDataState)
async def get_physical_data(user: CurrentUser, store: Store, guard: FormGuard) -> Any:
    return await PhysicalDataForm(store, user, guard).load()


@router.post(
    "", response_model=SubmitResponse[PhysicalDataState], status_code=201, responses=SUBMIT_ERRORS
)
async def record_physical_data(
    user: CurrentUser,
    store: Store,
    guard: FormGuard,
    draft: dict[str, Any] = Body(...),
) -> Any:
    result = await PhysicalDataForm(store, user, guard).submit(draft)
    return submit_response(result)
