"""Cycle calendar page: cycle history list, highlighted calendar days and the
"add cycle" form."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Iterable

from pydantic import Field

from src.models.base import BloomBase
from src.models.tracking import (
    MAX_CYCLE_SPAN_DAYS,
    CycleCreate,
    CycleDraft,
    CycleEntry,
    CycleRead,
)
from src.pages.forms import EntityForm, SingleFlight, Toast
from src.pages.lists import EntityList
from src.services.session import AuthContext
from src.services.supabase import DataStore
from src.services.tables import MENSTRUAL_CYCLES

logger = logging.getLogger("bloom.pages.calendar")

DEFAULT_RECENT_LIMIT = 5
NO_CYCLES_MESSAGE = "No cycles recorded yet. Add your first cycle to get started!"


def format_day(d: date) -> str:
    """``Jan 1, 2024`` on every platform (no ``%-d``)."""
    return f"{d:%b} {d.day}, {d.year}"


def format_cycle_label(cycle: CycleRead) -> str:
    label = format_day(cycle.start_date)
    if cycle.end_date:
        label += f" - {format_day(cycle.end_date)}"
    return label


def expand_cycle_dates(cycles: Iterable[CycleRead]) -> list[date]:
    """Every calendar day covered by ``cycles``, sorted and de-duplicated.

    A cycle covers start_date..end_date inclusive, or only start_date when the
    end is unknown. A stored end before its start, or a span longer than
    ``MAX_CYCLE_SPAN_DAYS``, covers no days.
    """
    days: set[date] = set()
    for cycle in cycles:
        end = cycle.end_date or cycle.start_date
        if end < cycle.start_date:
            logger.warning(
                "Cycle %s ends (%s) before it starts (%s); not highlighted",
                cycle.id, end, cycle.start_date,
            )
            continue
        span = (end - cycle.start_date).days
        if span >= MAX_CYCLE_SPAN_DAYS:
            logger.warning(
                "Cycle %s spans %d days; not highlighted", cycle.id, span + 1,
            )
            continue
        # Offsets from the start never step past `end`, even at date.max
        days.update(cycle.start_date + timedelta(days=i) for i in range(span + 1))
    return sorted(days)


class CycleHistory(EntityList[CycleRead]):
    table = MENSTRUAL_CYCLES
    order_by = "start_date"
    ascending = False
    empty_message = NO_CYCLES_MESSAGE
    failure_message = "Failed to load cycle data"

    def __init__(self, store: DataStore, user: AuthContext) -> None:
        super().__init__(store)
        self._user_id = user.user_id

    def filters(self) -> dict[str, Any]:
        return {"user_id": self._user_id}


class CalendarState(BloomBase):
    recent_cycles: list[CycleEntry] = Field(default_factory=list)
    highlighted_dates: list[date] = Field(default_factory=list)
    total_cycles: int = 0
    empty_message: str | None = None
    draft: CycleDraft = Field(default_factory=CycleDraft)
    toast: Toast | None = None


async def load_calendar(
    store: DataStore,
    user: AuthContext,
    recent_limit: int = DEFAULT_RECENT_LIMIT,
) -> CalendarState:
    page = await CycleHistory(store, user).load()
    cycles: list[CycleRead] = page.items
    return CalendarState(
        recent_cycles=[
            CycleEntry(
                id=c.id,
                label=format_cycle_label(c),
                duration=f"Duration: {c.cycle_length} days" if c.cycle_length else None,
            )
            for c in cycles[:recent_limit]
        ],
        highlighted_dates=expand_cycle_dates(cycles),
        total_cycles=len(cycles),
        empty_message=page.empty_message,
        toast=page.toast,
    )


class CycleForm(EntityForm[CycleCreate, CalendarState]):
    form_name = "cycle"
    schema = CycleCreate
    success_message = "Cycle recorded successfully!"
    failure_message = "Failed to record cycle"

    def __init__(
        self,
        store: DataStore,
        user: AuthContext,
        guard: SingleFlight,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
    ) -> None:
        super().__init__(store, user, guard)
        self._recent_limit = recent_limit

    async def load(self) -> CalendarState:
        return await load_calendar(self._store, self._user, self._recent_limit)

    async def write(self, values: CycleCreate) -> CycleRead:
        return await self._store.insert(
            MENSTRUAL_CYCLES,
            {"user_id": self._user.user_id, **values.model_dump()},
        )

    async def after_save(self, row: CycleRead) -> CalendarState:  # type: ignore[override]
        # Re-fetch so the list and highlighted days include the new cycle
        return await self.load()
