"""Translate page form results into HTTP responses."""

from __future__ import annotations

from typing import Generic, TypeVar

from fastapi import HTTPException
from pydantic import BaseModel

from src.models.base import BloomBase, ErrorDetail
from src.pages.forms import SubmitResult, SubmitStatus, Toast

StateT = TypeVar("StateT", bound=BaseModel)

SAVE_IN_PROGRESS = "Save already in progress"

_STATUS_CODES: dict[SubmitStatus, int] = {
    SubmitStatus.invalid: 422,
    SubmitStatus.busy: 409,
    SubmitStatus.failed: 502,
}

# OpenAPI docs for the error statuses a submit route can return
SUBMIT_ERRORS: dict[int | str, dict] = {
    code: {"model": ErrorDetail} for code in _STATUS_CODES.values()
}


class SubmitResponse(BloomBase, Generic[StateT]):
    toast: Toast
    state: StateT


def submit_response(result: SubmitResult[StateT]) -> dict:
    """Return the success body, or raise with the result's toast message."""
    if result.ok:
        return {"toast": result.toast, "state": result.state}
    detail = result.toast.message if result.toast else SAVE_IN_PROGRESS
    raise HTTPException(status_code=_STATUS_CODES[result.status], detail=detail)
