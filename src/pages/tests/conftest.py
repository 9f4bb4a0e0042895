"""Shared fixtures for the page controller tests.

``FakeStore`` is an in-memory stand-in for ``SupabaseStore`` with the same
filter, ordering (NULLS LAST) and upsert-on-conflict semantics, and it records
every call so tests can assert that nothing was written.
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Any, Mapping
from uuid import UUID

import pytest

from src.pages.forms import SingleFlight
from src.services.session import AuthContext
from src.services.supabase import RowNotFoundError, StoreError, Table

# Canonical test user
TEST_USER_ID = UUID("12345678-1234-5678-1234-567812345678")
OTHER_USER_ID = UUID("87654321-4321-8765-4321-876543218765")

WRITE_OPS = {"insert", "update", "upsert"}


class FakeStore:
    """In-memory DataStore."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.calls: list[tuple[str, str]] = []
        # operation names ("select", "insert", ...) or table names that fail
        self.fail_on: set[str] = set()

    # ---------- helpers ----------

    def seed(self, table: Table[Any], *rows: Mapping[str, Any]) -> None:
        for row in rows:
            self.tables[table.name].append({**self._defaults(table.name), **row})

    def rows(self, table: Table[Any]) -> list[dict[str, Any]]:
        return self.tables[table.name]

    @property
    def writes(self) -> list[tuple[str, str]]:
        return [c for c in self.calls if c[0] in WRITE_OPS]

    def _record(self, op: str, table: Table[Any]) -> None:
        self.calls.append((op, table.name))
        if op in self.fail_on or table.name in self.fail_on:
            raise StoreError("connection reset by peer", "08006")

    @staticmethod
    def _defaults(table_name: str) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        row: dict[str, Any] = {"id": uuid.uuid4(), "created_at": now, "updated_at": now}
        if table_name == "physical_data":
            row["recorded_at"] = now
        if table_name in ("exercise_videos", "food_videos", "suggested_foods"):
            row["is_active"] = True
        return row

    @staticmethod
    def _matches(row: Mapping[str, Any], eq: Mapping[str, Any] | None) -> bool:
        return all(row.get(k) == v for k, v in (eq or {}).items())

    # ---------- DataStore ----------

    async def select(
        self,
        table: Table[Any],
        *,
        eq: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        ascending: bool = True,
        limit: int | None = None,
    ) -> list[Any]:
        self._record("select", table)
        rows = [r for r in self.tables[table.name] if self._matches(r, eq)]
        if order_by:
            present = [r for r in rows if r.get(order_by) is not None]
            missing = [r for r in rows if r.get(order_by) is None]
            present.sort(key=lambda r: r[order_by], reverse=not ascending)
            rows = present + missing
        if limit is not None:
            rows = rows[:limit]
        return [table.decode(r) for r in rows]

    async def maybe_single(
        self,
        table: Table[Any],
        *,
        eq: Mapping[str, Any],
        order_by: str | None = None,
        ascending: bool = True,
    ) -> Any:
        rows = await self.select(table, eq=eq, order_by=order_by, ascending=ascending, limit=1)
        return rows[0] if rows else None

    async def single(self, table: Table[Any], *, eq: Mapping[str, Any]) -> Any:
        row = await self.maybe_single(table, eq=eq)
        if row is None:
            raise RowNotFoundError(table.name)
        return row

    async def insert(self, table: Table[Any], values: Mapping[str, Any]) -> Any:
        self._record("insert", table)
        row = {**self._defaults(table.name), **values}
        self.tables[table.name].append(row)
        return table.decode(row)

    async def update(
        self, table: Table[Any], values: Mapping[str, Any], *, eq: Mapping[str, Any]
    ) -> list[Any]:
        self._record("update", table)
        updated = []
        for row in self.tables[table.name]:
            if self._matches(row, eq):
                row.update(values, updated_at=datetime.now(timezone.utc))
                updated.append(table.decode(row))
        return updated

    async def upsert(
        self, table: Table[Any], values: Mapping[str, Any], *, on_conflict: str
    ) -> Any:
        self._record("upsert", table)
        for row in self.tables[table.name]:
            if row.get(on_conflict) == values[on_conflict]:
                row.update(values, updated_at=datetime.now(timezone.utc))
                return table.decode(row)
        row = {**self._defaults(table.name), **values}
        self.tables[table.name].append(row)
        return table.decode(row)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def user() -> AuthContext:
    return AuthContext(
        user_id=TEST_USER_ID,
        email="ada@example.com",
        display_name="Ada Lovelace",
        session_id="session-1",
        access_token="token-1",
    )


@pytest.fixture
def guard() -> SingleFlight:
    return SingleFlight()


def cycle_row(start: date, end: date | None = None, user_id: UUID = TEST_USER_ID, **extra: Any) -> dict:
    return {"user_id": user_id, "start_date": start, "end_date": end, **extra}
