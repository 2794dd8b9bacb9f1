"""Category service layer."""

from __future__ import annotations

from app.errors import ApiError, not_found
from app.repositories.base import Row, TableClient
from app.repositories.scoped import OwnerScopedTable
from app.schemas.category import Category
from app.services.common import storage_errors

CATEGORIES_TABLE = "categories"


def _conflict() -> ApiError:
    return ApiError(status_code=409, message="Category already exists")


class CategoryService:
    """Per-owner categories with unique names.

    The duplicate check and the write are separate queries; concurrent requests
    for the same name can both pass the check unless the table carries a
    ``unique (user_id, name)`` constraint.
    """

    def __init__(self, tables: TableClient) -> None:
        self._tables = tables

    def _scoped(self, owner_id: str) -> OwnerScopedTable:
        return OwnerScopedTable(self._tables, CATEGORIES_TABLE, owner_id)

    async def list_categories(self, *, owner_id: str) -> list[Category]:
        with storage_errors("categories.list"):
            rows = await self._scoped(owner_id).list(order_by="name")
        return [self._to_category(row) for row in rows]

    async def get_category(self, *, owner_id: str, category_id: str) -> Category:
        with storage_errors("categories.get"):
            row = await self._scoped(owner_id).get(category_id)
        if row is None:
            raise not_found("Category")
        return self._to_category(row)

    async def create_category(self, *, owner_id: str, name: str) -> Category:
        scoped = self._scoped(owner_id)
        with storage_errors("categories.create"):
            if await scoped.find(name=name) is not None:
                raise _conflict()
            row = await scoped.insert({"name": name})
        return self._to_category(row)

    async def rename_category(self, *, owner_id: str, category_id: str, name: str) -> Category:
        scoped = self._scoped(owner_id)
        with storage_errors("categories.rename"):
            existing = await scoped.find(name=name)
            if existing is not None and str(existing["id"]) != category_id:
                raise _conflict()
            row = await scoped.update(category_id, {"name": name})
        if row is None:
            raise not_found("Category")
        return self._to_category(row)

    async def delete_category(self, *, owner_id: str, category_id: str) -> None:
        with storage_errors("categories.delete"):
            await self._scoped(owner_id).delete(category_id)

    @staticmethod
    def _to_category(row: Row) -> Category:
        return Category.model_validate(row)
