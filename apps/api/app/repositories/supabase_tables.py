"""Supabase (PostgREST) table storage adapter."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from supabase import PostgrestAPIError

from app.adapters.supabase.clients import SupabaseClients
from app.repositories.base import Row, StorageError, TableClient


def _filter_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def _apply_filters(query: Any, filters: Mapping[str, Any]) -> Any:
    for column, value in filters.items():
        query = query.eq(column, _filter_value(value))
    return query


async def _execute(query: Any) -> list[Row]:
    try:
        response = await query.execute()
    except PostgrestAPIError as exc:
        raise StorageError(exc.message or str(exc)) from exc
    return list(response.data or [])


class SupabaseTableClient(TableClient):
    def __init__(self, clients: SupabaseClients) -> None:
        self._clients = clients

    async def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any],
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        client = await self._clients.tables()
        query = _apply_filters(client.table(table).select("*"), filters)
        if order_by is not None:
            query = query.order(order_by, desc=descending)
        if limit is not None:
            query = query.limit(limit)
        return await _execute(query)

    async def insert(self, table: str, values: Mapping[str, Any]) -> Row:
        client = await self._clients.tables()
        rows = await _execute(client.table(table).insert(dict(values)))
        if not rows:
            raise StorageError(f"Insert into {table} returned no row")
        return rows[0]

    async def update(self, table: str, *, filters: Mapping[str, Any], values: Mapping[str, Any]) -> list[Row]:
        client = await self._clients.tables()
        return await _execute(_apply_filters(client.table(table).update(dict(values)), filters))

    async def delete(self, table: str, *, filters: Mapping[str, Any]) -> None:
        client = await self._clients.tables()
        await _execute(_apply_filters(client.table(table).delete(), filters))


__all__ = ["SupabaseTableClient"]
