"""Task API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_STATUS = "pending"
DEFAULT_PRIORITY = "medium"


class Task(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    user_id: str
    title: str
    description: str | None = None
    status: str = DEFAULT_STATUS
    priority: str = DEFAULT_PRIORITY
    due_date: datetime | None = None
    category: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class CreateTaskRequest(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None
    status: str | None = None
    priority: str | None = None
    due_date: datetime | None = None
    category: str | None = None


class UpdateTaskRequest(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    title: str = Field(default=None, min_length=1)
    description: str | None = None
    status: str = Field(default=None, min_length=1)
    priority: str = Field(default=None, min_length=1)
    due_date: datetime | None = None
    category: str | None = None


class TaskEnvelope(BaseModel):
    task: Task


class TaskList(BaseModel):
    tasks: list[Task]
