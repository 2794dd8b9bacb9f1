"""Owner-scoped table access.

Every query issued through :class:`OwnerScopedTable` carries the owner filter,
so a row belonging to someone else is indistinguishable from a missing row.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.repositories.base import Row, TableClient

OWNER_COLUMN = "user_id"


class OwnerScopedTable:
    def __init__(self, client: TableClient, table: str, owner_id: str) -> None:
        if not owner_id:
            raise ValueError("owner_id is required for scoped table access")
        self._client = client
        self._table = table
        self._owner_id = owner_id

    @property
    def owner_id(self) -> str:
        return self._owner_id

    def _scope(self, filters: Mapping[str, Any] | None = None) -> dict[str, Any]:
        scoped = dict(filters or {})
        scoped[OWNER_COLUMN] = self._owner_id
        return scoped

    async def list(
        self,
        *,
        order_by: str,
        descending: bool = False,
        filters: Mapping[str, Any] | None = None,
    ) -> list[Row]:
        return await self._client.select(
            self._table,
            filters=self._scope(filters),
            order_by=order_by,
            descending=descending,
        )

    async def get(self, row_id: str) -> Row | None:
        return await self._client.select_one(self._table, filters=self._scope({"id": row_id}))

    async def find(self, **filters: Any) -> Row | None:
        return await self._client.select_one(self._table, filters=self._scope(filters))

    async def insert(self, values: Mapping[str, Any]) -> Row:
        return await self._client.insert(self._table, self._scope(values))

    async def update(self, row_id: str, values: Mapping[str, Any]) -> Row | None:
        changes = {key: value for key, value in values.items() if key not in (OWNER_COLUMN, "id")}
        rows = await self._client.update(self._table, filters=self._scope({"id": row_id}), values=changes)
        return rows[0] if rows else None

    async def delete(self, row_id: str) -> None:
        await self._client.delete(self._table, filters=self._scope({"id": row_id}))


__all__ = ["OWNER_COLUMN", "OwnerScopedTable"]
