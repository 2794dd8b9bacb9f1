"""Task service layer."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from app.errors import not_found
from app.repositories.base import Row, TableClient
from app.repositories.scoped import OwnerScopedTable
from app.schemas.task import DEFAULT_PRIORITY, DEFAULT_STATUS, CreateTaskRequest, Task
from app.services.common import storage_errors

TASKS_TABLE = "tasks"


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


class TaskService:
    def __init__(self, tables: TableClient) -> None:
        self._tables = tables

    def _scoped(self, owner_id: str) -> OwnerScopedTable:
        return OwnerScopedTable(self._tables, TASKS_TABLE, owner_id)

    async def list_tasks(
        self,
        *,
        owner_id: str,
        status: str | None = None,
        priority: str | None = None,
        category: str | None = None,
    ) -> list[Task]:
        filters = {
            column: value
            for column, value in (("status", status), ("priority", priority), ("category", category))
            if value is not None
        }
        with storage_errors("tasks.list"):
            rows = await self._scoped(owner_id).list(order_by="created_at", descending=True, filters=filters)
        return [self._to_task(row) for row in rows]

    async def get_task(self, *, owner_id: str, task_id: str) -> Task:
        with storage_errors("tasks.get"):
            row = await self._scoped(owner_id).get(task_id)
        if row is None:
            raise not_found("Task")
        return self._to_task(row)

    async def create_task(self, *, owner_id: str, payload: CreateTaskRequest) -> Task:
        values = {
            "title": payload.title,
            "description": payload.description,
            "status": payload.status or DEFAULT_STATUS,
            "priority": payload.priority or DEFAULT_PRIORITY,
            "due_date": _iso(payload.due_date),
            "category": payload.category,
        }
        with storage_errors("tasks.create"):
            row = await self._scoped(owner_id).insert(values)
        return self._to_task(row)

    async def update_task(self, *, owner_id: str, task_id: str, changes: dict[str, Any]) -> Task:
        """Apply only the provided fields; ``updated_at`` is always refreshed."""
        values = dict(changes)
        if "due_date" in values:
            values["due_date"] = _iso(values["due_date"])
        values["updated_at"] = datetime.now(UTC).isoformat()

        with storage_errors("tasks.update"):
            row = await self._scoped(owner_id).update(task_id, values)
        if row is None:
            raise not_found("Task")
        return self._to_task(row)

    async def delete_task(self, *, owner_id: str, task_id: str) -> None:
        with storage_errors("tasks.delete"):
            await self._scoped(owner_id).delete(task_id)

    @staticmethod
    def _to_task(row: Row) -> Task:
        return Task.model_validate(row)
