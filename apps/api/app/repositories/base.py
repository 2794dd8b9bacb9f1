"""Table storage interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

Row = dict[str, Any]


class StorageError(Exception):
    """Raised when the storage backend rejects or fails a query."""


class TableClient(ABC):
    """Equality-filtered access to named tables, as exposed by the storage service."""

    @abstractmethod
    async def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any],
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        """Return rows matching every filter, optionally ordered and limited."""

    @abstractmethod
    async def insert(self, table: str, values: Mapping[str, Any]) -> Row:
        """Insert a row and return it as stored (generated columns included)."""

    @abstractmethod
    async def update(self, table: str, *, filters: Mapping[str, Any], values: Mapping[str, Any]) -> list[Row]:
        """Apply ``values`` to rows matching every filter and return the updated rows."""

    @abstractmethod
    async def delete(self, table: str, *, filters: Mapping[str, Any]) -> None:
        """Delete rows matching every filter; matching nothing is not an error."""

    async def select_one(
        self,
        table: str,
        *,
        filters: Mapping[str, Any],
        order_by: str | None = None,
        descending: bool = False,
    ) -> Row | None:
        rows = await self.select(table, filters=filters, order_by=order_by, descending=descending, limit=1)
        return rows[0] if rows else None


__all__ = ["Row", "StorageError", "TableClient"]
