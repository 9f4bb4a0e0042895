"""Entity form pattern shared by the profile, cycle, physical data and
notification settings pages.

A form submit is:

1. rejected as ``busy`` when a submit for the same form and user is still in
   flight (see :class:`SingleFlight`); nothing is queued,
2. validated against the form's pydantic schema; the first violated rule is
   reported and the store is never called,
3. written with exactly one store call scoped to the current user,
4. followed by ``after_save`` to rebuild the page state.

Store failures are logged and reported with the form's generic failure
message. The caller keeps its draft; nothing here clears it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Generic, Hashable, Literal, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from src.models.base import BloomBase, first_error_message
from src.services.session import AuthContext
from src.services.supabase import DataStore, StoreError

logger = logging.getLogger("bloom.pages.forms")

InputT = TypeVar("InputT", bound=BaseModel)
StateT = TypeVar("StateT", bound=BaseModel)


class Toast(BloomBase):
    """A user-facing notification."""

    level: Literal["success", "error"]
    message: str

    @classmethod
    def success(cls, message: str) -> "Toast":
        return cls(level="success", message=message)

    @classmethod
    def error(cls, message: str) -> "Toast":
        return cls(level="error", message=message)


class SubmitStatus(str, Enum):
    saved = "saved"
    invalid = "invalid"
    busy = "busy"
    failed = "failed"


@dataclass
class SubmitResult(Generic[StateT]):
    status: SubmitStatus
    toast: Toast | None = None
    state: StateT | None = None

    @property
    def ok(self) -> bool:
        return self.status is SubmitStatus.saved


class SingleFlight:
    """Allow at most one in-flight operation per key.

    All callers run on one event loop, so the membership check and the add in
    :meth:`try_acquire` cannot interleave with another coroutine.
    """

    def __init__(self) -> None:
        self._in_flight: set[Hashable] = set()

    def in_flight(self, key: Hashable) -> bool:
        return key in self._in_flight

    def try_acquire(self, key: Hashable) -> bool:
        if key in self._in_flight:
            return False
        self._in_flight.add(key)
        return True

    def release(self, key: Hashable) -> None:
        self._in_flight.discard(key)


class EntityForm(Generic[InputT, StateT]):
    """Base class for a page form backed by one store table."""

    form_name: ClassVar[str]
    schema: ClassVar[type[BaseModel]]
    success_message: ClassVar[str]
    failure_message: ClassVar[str]

    def __init__(self, store: DataStore, user: AuthContext, guard: SingleFlight) -> None:
        self._store = store
        self._user = user
        self._guard = guard

    @property
    def guard_key(self) -> tuple[str, Any]:
        return (self.form_name, self._user.user_id)

    async def load(self) -> StateT:
        raise NotImplementedError

    async def write(self, values: InputT) -> BaseModel:
        """Perform the single store write for validated ``values``."""
        raise NotImplementedError

    async def after_save(self, row: BaseModel) -> StateT:
        raise NotImplementedError

    async def submit(self, draft: Mapping[str, Any]) -> SubmitResult[StateT]:
        key = self.guard_key
        if not self._guard.try_acquire(key):
            logger.info("Ignoring %s submit for user=%s: save in progress", self.form_name, self._user.user_id)
            return SubmitResult(SubmitStatus.busy)
        try:
            return await self._submit(draft)
        finally:
            self._guard.release(key)

    async def _submit(self, draft: Mapping[str, Any]) -> SubmitResult[StateT]:
        try:
            values = self.schema.model_validate(dict(draft))
        except ValidationError as exc:
            return SubmitResult(SubmitStatus.invalid, toast=Toast.error(first_error_message(exc)))

        try:
            row = await self.write(values)  # type: ignore[arg-type]
        except StoreError as exc:
            logger.error(
                "%s save failed for user=%s: %s (code=%s)",
                self.form_name, self._user.user_id, exc.message, exc.code,
            )
            return SubmitResult(SubmitStatus.failed, toast=Toast.error(self.failure_message))

        logger.info("%s saved for user=%s", self.form_name, self._user.user_id)
        state = await self.after_save(row)
        return SubmitResult(SubmitStatus.saved, toast=Toast.success(self.success_message), state=state)
