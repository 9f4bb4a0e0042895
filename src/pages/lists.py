"""Read-only list pattern: a fixed filter, a fixed ordering, and a placeholder
message instead of an error when nothing matches."""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from src.models.base import BloomBase
from src.pages.forms import Toast
from src.services.supabase import DataStore, StoreError, Table

logger = logging.getLogger("bloom.pages.lists")

RowT = TypeVar("RowT", bound=BaseModel)


class ListPage(BloomBase, Generic[RowT]):
    items: list[RowT] = []
    empty_message: str | None = None
    toast: Toast | None = None


class EntityList(Generic[RowT]):
    """Fetch every row of ``table`` matching :meth:`filters`, ordered."""

    table: ClassVar[Table[Any]]
    order_by: ClassVar[str]
    ascending: ClassVar[bool] = True
    empty_message: ClassVar[str]
    failure_message: ClassVar[str]

    def __init__(self, store: DataStore) -> None:
        self._store = store

    @property
    def page_model(self) -> type[ListPage[Any]]:
        return ListPage[self.table.row_model]

    def filters(self) -> dict[str, Any]:
        return {}

    async def fetch(self) -> list[RowT]:
        """Fetch rows; store errors propagate."""
        return await self._store.select(
            self.table,
            eq=self.filters(),
            order_by=self.order_by,
            ascending=self.ascending,
        )

    async def load(self) -> ListPage[RowT]:
        """Fetch rows for display; store errors become a failure toast."""
        try:
            rows = await self.fetch()
        except StoreError as exc:
            logger.error("Loading %s failed: %s (code=%s)", self.table.name, exc.message, exc.code)
            return self.page_model(
                empty_message=self.empty_message,
                toast=Toast.error(self.failure_message),
            )
        return self.page_model(
            items=rows,
            empty_message=None if rows else self.empty_message,
        )
