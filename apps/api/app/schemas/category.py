"""Category API schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints

CategoryName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class Category(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    user_id: str
    name: str
    created_at: datetime | None = None


class CategoryRequest(BaseModel):
    name: CategoryName


class CategoryEnvelope(BaseModel):
    category: Category


class CategoryList(BaseModel):
    categories: list[Category]
