"""In-memory table storage used for local development and tests."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from itertools import count
from typing import Any
from uuid import uuid4

from app.repositories.base import Row, StorageError, TableClient


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _matches(row: Row, filters: Mapping[str, Any]) -> bool:
    return all(row.get(column) == value for column, value in filters.items())


@dataclass(slots=True)
class InMemoryTableClient(TableClient):
    """Simple, deterministic table storage for scaffolding and tests.

    Rows get an ``id`` and ``created_at`` on insert when absent. ``call_count``
    counts every query; ``failure_message`` makes every query raise
    :class:`StorageError` with that message.
    """

    tables: dict[str, list[Row]] = field(default_factory=dict)
    call_count: int = 0
    write_count: int = 0
    failure_message: str | None = None
    _sequence: count = field(default_factory=count)
    _insert_order: dict[str, int] = field(default_factory=dict)

    def _begin(self) -> None:
        self.call_count += 1
        if self.failure_message is not None:
            raise StorageError(self.failure_message)

    def rows(self, table: str) -> list[Row]:
        return self.tables.setdefault(table, [])

    async def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any],
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        self._begin()
        rows = [dict(row) for row in self.rows(table) if _matches(row, filters)]
        if order_by is not None:
            # Insertion order breaks ties so equal timestamps still sort newest-first.
            rows.sort(
                key=lambda row: (
                    row.get(order_by) is None,
                    row.get(order_by) or "",
                    self._insert_order.get(row.get("id"), -1),
                ),
                reverse=descending,
            )
        if limit is not None:
            rows = rows[:limit]
        return rows

    async def insert(self, table: str, values: Mapping[str, Any]) -> Row:
        self._begin()
        row = dict(values)
        row.setdefault("id", str(uuid4()))
        row.setdefault("created_at", _now())
        self._insert_order[row["id"]] = next(self._sequence)
        self.rows(table).append(row)
        self.write_count += 1
        return dict(row)

    async def update(self, table: str, *, filters: Mapping[str, Any], values: Mapping[str, Any]) -> list[Row]:
        self._begin()
        updated: list[Row] = []
        for row in self.rows(table):
            if _matches(row, filters):
                row.update(values)
                updated.append(dict(row))
        self.write_count += len(updated)
        return updated

    async def delete(self, table: str, *, filters: Mapping[str, Any]) -> None:
        self._begin()
        remaining = [row for row in self.rows(table) if not _matches(row, filters)]
        self.write_count += len(self.rows(table)) - len(remaining)
        self.tables[table] = remaining


__all__ = ["InMemoryTableClient"]
