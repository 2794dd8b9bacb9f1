"""Task routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from app.routes.dependencies import get_authenticated_identity, get_task_service
from app.schemas.auth import Identity
from app.schemas.error import ErrorResponse, MessageResponse
from app.schemas.task import CreateTaskRequest, TaskEnvelope, TaskList, UpdateTaskRequest
from app.services.tasks import TaskService

router = APIRouter(
    prefix="/tasks",
    tags=["Tasks"],
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


@router.get("", response_model=TaskList)
async def list_tasks(
    identity: Annotated[Identity, Depends(get_authenticated_identity)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskList:
    return TaskList(tasks=await service.list_tasks(owner_id=identity.id))


@router.get("/status/{status}", response_model=TaskList)
async def list_tasks_by_status(
    task_status: Annotated[str, Path(alias="status")],
    identity: Annotated[Identity, Depends(get_authenticated_identity)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskList:
    return TaskList(tasks=await service.list_tasks(owner_id=identity.id, status=task_status))


@router.get("/priority/{priority}", response_model=TaskList)
async def list_tasks_by_priority(
    priority: str,
    identity: Annotated[Identity, Depends(get_authenticated_identity)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskList:
    return TaskList(tasks=await service.list_tasks(owner_id=identity.id, priority=priority))


@router.get("/category/{category}", response_model=TaskList)
async def list_tasks_by_category(
    category: str,
    identity: Annotated[Identity, Depends(get_authenticated_identity)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskList:
    return TaskList(tasks=await service.list_tasks(owner_id=identity.id, category=category))


@router.get("/{task_id}", response_model=TaskEnvelope, responses={404: {"model": ErrorResponse}})
async def get_task(
    task_id: str,
    identity: Annotated[Identity, Depends(get_authenticated_identity)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskEnvelope:
    return TaskEnvelope(task=await service.get_task(owner_id=identity.id, task_id=task_id))


@router.post(
    "",
    response_model=TaskEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_task(
    payload: CreateTaskRequest,
    identity: Annotated[Identity, Depends(get_authenticated_identity)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskEnvelope:
    return TaskEnvelope(task=await service.create_task(owner_id=identity.id, payload=payload))


@router.put(
    "/{task_id}",
    response_model=TaskEnvelope,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_task(
    task_id: str,
    payload: UpdateTaskRequest,
    identity: Annotated[Identity, Depends(get_authenticated_identity)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> TaskEnvelope:
    task = await service.update_task(
        owner_id=identity.id,
        task_id=task_id,
        changes=payload.model_dump(exclude_unset=True),
    )
    return TaskEnvelope(task=task)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    identity: Annotated[Identity, Depends(get_authenticated_identity)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> MessageResponse:
    await service.delete_task(owner_id=identity.id, task_id=task_id)
    return MessageResponse(message="Task deleted successfully")
