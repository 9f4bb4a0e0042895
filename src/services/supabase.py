"""Supabase data store with RLS context.

Every statement runs in a transaction where ``request.jwt.claims`` and the
``authenticated`` role are set locally, so the Supabase Row-Level Security
policies (``auth.uid() = user_id``) see the same identity PostgREST would.

Uses ``asyncpg`` for direct database access. ``SupabaseStore`` mirrors the
small slice of the PostgREST query surface the pages need: equality filters,
a single ordering key and a limit for reads, plus insert / update / upsert.
Rows are decoded into the table's pydantic model before they leave the store.
"""

from __future__ import annotations

import json
import logging
import re
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Generic, Mapping, Protocol, TypeVar

import asyncpg
from pydantic import BaseModel, ValidationError

from src.config import Settings, get_settings

logger = logging.getLogger("bloom.db")

# PostgREST's code for ``.single()`` matching zero rows
NOT_FOUND_CODE = "PGRST116"
DECODE_ERROR_CODE = "decode_error"

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")

RowT = TypeVar("RowT", bound=BaseModel)

# Module-level connection pool, initialized once at app startup
_pool: asyncpg.Pool | None = None


# ---------- Errors ----------

class StoreError(Exception):
    """A failed store call. ``code`` is the SQLSTATE or PostgREST-style code."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class RowNotFoundError(StoreError):
    def __init__(self, table: str) -> None:
        super().__init__(f"No rows found in {table}", NOT_FOUND_CODE)
        self.table = table


# ---------- Tables ----------

@dataclass(frozen=True)
class Table(Generic[RowT]):
    """A store table and the model its rows decode into."""

    name: str
    row_model: type[RowT]

    def decode(self, row: Mapping[str, Any]) -> RowT:
        try:
            return self.row_model.model_validate(dict(row))
        except ValidationError as exc:
            raise StoreError(
                f"Row from {self.name} failed to decode: {exc.error_count()} error(s)",
                DECODE_ERROR_CODE,
            ) from exc


class DataStore(Protocol):
    """Interface the page controllers depend on."""

    async def select(
        self,
        table: Table[RowT],
        *,
        eq: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        ascending: bool = True,
        limit: int | None = None,
    ) -> list[RowT]: ...

    async def maybe_single(
        self,
        table: Table[RowT],
        *,
        eq: Mapping[str, Any],
        order_by: str | None = None,
        ascending: bool = True,
    ) -> RowT | None: ...

    async def single(self, table: Table[RowT], *, eq: Mapping[str, Any]) -> RowT: ...

    async def insert(self, table: Table[RowT], values: Mapping[str, Any]) -> RowT: ...

    async def update(
        self, table: Table[RowT], values: Mapping[str, Any], *, eq: Mapping[str, Any]
    ) -> list[RowT]: ...

    async def upsert(
        self, table: Table[RowT], values: Mapping[str, Any], *, on_conflict: str
    ) -> RowT: ...


# ---------- Pool ----------

async def init_pool(settings: Settings | None = None) -> asyncpg.Pool:
    """Create the asyncpg connection pool. Call once at app startup."""
    global _pool
    s = settings or get_settings()
    _pool = await asyncpg.create_pool(
        s.supabase_db_url,
        min_size=1,
        max_size=10,
        command_timeout=30,
    )
    logger.info("Database pool initialized (min=1, max=10)")
    return _pool


async def close_pool() -> None:
    """Drain the pool. Call at app shutdown."""
    global _pool
    if _pool:
        await _pool.close()
        _pool = None
        logger.info("Database pool closed")


def get_pool() -> asyncpg.Pool:
    if _pool is None:
        raise StoreError("Database pool not initialized; call init_pool() first")
    return _pool


@asynccontextmanager
async def get_connection(
    user_id: uuid.UUID | None = None,
) -> AsyncGenerator[asyncpg.Connection, None]:
    """Acquire a connection with the Supabase auth claims set.

    Usage::

        async with get_connection(user_id=ctx.user_id) as conn:
            rows = await conn.fetch("SELECT * FROM menstrual_cycles")

    ``set_config(..., true)`` and ``SET LOCAL`` are scoped to the current
    transaction so they disappear when the connection returns to the pool.
    """
    pool = get_pool()
    async with pool.acquire() as conn:
        async with conn.transaction():
            if user_id:
                claims = json.dumps({"sub": str(user_id), "role": "authenticated"})
                await conn.execute(
                    "SELECT set_config('request.jwt.claims', $1, true)", claims
                )
                await conn.execute("SET LOCAL ROLE authenticated")
            yield conn


# ---------- SQL helpers ----------

def _ident(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return f'"{name}"'


def _where(eq: Mapping[str, Any] | None, start: int = 1) -> tuple[str, list[Any]]:
    if not eq:
        return "", []
    clauses = []
    params: list[Any] = []
    for i, (column, value) in enumerate(eq.items(), start=start):
        clauses.append(f"{_ident(column)} = ${i}")
        params.append(value)
    return " WHERE " + " AND ".join(clauses), params


def _order(order_by: str | None, ascending: bool) -> str:
    if not order_by:
        return ""
    direction = "ASC" if ascending else "DESC"
    return f" ORDER BY {_ident(order_by)} {direction} NULLS LAST"


class SupabaseStore:
    """Table CRUD run under the RLS identity of ``user_id``."""

    def __init__(self, user_id: uuid.UUID | None = None) -> None:
        self._user_id = user_id

    async def _fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        try:
            async with get_connection(user_id=self._user_id) as conn:
                return await conn.fetch(query, *args)
        except asyncpg.PostgresError as exc:
            raise StoreError(str(exc), getattr(exc, "sqlstate", None)) from exc
        except (OSError, asyncpg.InterfaceError) as exc:
            raise StoreError(f"Database unreachable: {exc}") from exc

    async def select(
        self,
        table: Table[RowT],
        *,
        eq: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        ascending: bool = True,
        limit: int | None = None,
    ) -> list[RowT]:
        where, params = _where(eq)
        query = f"SELECT * FROM {_ident(table.name)}{where}{_order(order_by, ascending)}"
        if limit is not None:
            params.append(limit)
            query += f" LIMIT ${len(params)}"
        rows = await self._fetch(query, *params)
        return [table.decode(r) for r in rows]

    async def maybe_single(
        self,
        table: Table[RowT],
        *,
        eq: Mapping[str, Any],
        order_by: str | None = None,
        ascending: bool = True,
    ) -> RowT | None:
        rows = await self.select(
            table, eq=eq, order_by=order_by, ascending=ascending, limit=1
        )
        return rows[0] if rows else None

    async def single(self, table: Table[RowT], *, eq: Mapping[str, Any]) -> RowT:
        row = await self.maybe_single(table, eq=eq)
        if row is None:
            raise RowNotFoundError(table.name)
        return row

    async def insert(self, table: Table[RowT], values: Mapping[str, Any]) -> RowT:
        columns = list(values)
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
        query = (
            f"INSERT INTO {_ident(table.name)} ({', '.join(_ident(c) for c in columns)}) "
            f"VALUES ({placeholders}) RETURNING *"
        )
        rows = await self._fetch(query, *values.values())
        return table.decode(rows[0])

    async def update(
        self,
        table: Table[RowT],
        values: Mapping[str, Any],
        *,
        eq: Mapping[str, Any],
    ) -> list[RowT]:
        set_clauses = []
        params: list[Any] = []
        for i, (key, value) in enumerate(values.items(), start=1):
            set_clauses.append(f"{_ident(key)} = ${i}")
            params.append(value)
        set_clauses.append('"updated_at" = NOW()')

        where, where_params = _where(eq, start=len(params) + 1)
        query = (
            f"UPDATE {_ident(table.name)} SET {', '.join(set_clauses)}{where} RETURNING *"
        )
        rows = await self._fetch(query, *params, *where_params)
        return [table.decode(r) for r in rows]

    async def upsert(
        self,
        table: Table[RowT],
        values: Mapping[str, Any],
        *,
        on_conflict: str,
    ) -> RowT:
        columns = list(values)
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
        updates = [
            f"{_ident(c)} = EXCLUDED.{_ident(c)}" for c in columns if c != on_conflict
        ]
        updates.append('"updated_at" = NOW()')
        query = (
            f"INSERT INTO {_ident(table.name)} ({', '.join(_ident(c) for c in columns)}) "
            f"VALUES ({placeholders}) "
            f"ON CONFLICT ({_ident(on_conflict)}) DO UPDATE SET {', '.join(updates)} "
            "RETURNING *"
        )
        rows = await self._fetch(query, *values.values())
        return table.decode(rows[0])
