"""Physical data page: append-only health samples, form seeded from the latest."""

from __future__ import annotations

import logging
from datetime import datetime

from pydantic import Field

from src.models.base import BloomBase
from src.models.tracking import PhysicalDataCreate, PhysicalDataDraft, PhysicalDataRead
from src.pages.forms import EntityForm, Toast
from src.services.supabase import StoreError
from src.services.tables import PHYSICAL_DATA

logger = logging.getLogger("bloom.pages.physical_data")


class PhysicalDataState(BloomBase):
    draft: PhysicalDataDraft = Field(default_factory=PhysicalDataDraft)
    last_recorded_at: datetime | None = None
    toast: Toast | None = None


class PhysicalDataForm(EntityForm[PhysicalDataCreate, PhysicalDataState]):
    form_name = "physical_data"
    schema = PhysicalDataCreate
    success_message = "Physical data recorded successfully!"
    failure_message = "Failed to save physical data"

    async def latest(self) -> PhysicalDataRead | None:
        return await self._store.maybe_single(
            PHYSICAL_DATA,
            eq={"user_id": self._user.user_id},
            order_by="recorded_at",
            ascending=False,
        )

    async def load(self) -> PhysicalDataState:
        try:
            latest = await self.latest()
        except StoreError as exc:
            logger.error("Loading physical data for user=%s failed: %s", self._user.user_id, exc.message)
            return PhysicalDataState(toast=Toast.error("Failed to load physical data"))
        if latest is None:
            return PhysicalDataState()
        return PhysicalDataState(
            draft=PhysicalDataDraft.model_validate(latest.model_dump()),
            last_recorded_at=latest.recorded_at,
        )

    async def write(self, values: PhysicalDataCreate) -> PhysicalDataRead:
        # recorded_at is stamped by the database default
        return await self._store.insert(
            PHYSICAL_DATA,
            {"user_id": self._user.user_id, **values.model_dump()},
        )

    async def after_save(self, row: PhysicalDataRead) -> PhysicalDataState:  # type: ignore[override]
        return await self.load()
