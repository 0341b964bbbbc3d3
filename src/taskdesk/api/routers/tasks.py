"""Routes handling an owner's task CRUD operations."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from ...deps import CurrentUserDependency, StoreDependency
from ...schemas import (
    MessageResponse,
    TaskCreate,
    TaskListQuery,
    TaskListResponse,
    TaskRead,
    TaskStatistics,
    TaskUpdate,
)
from ...services import TaskService
from ..responses import flag_storage_failure

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get(
    "",
    response_model=TaskListResponse,
    summary="List the caller's tasks, newest first",
)
async def list_tasks(
    store: StoreDependency,
    current_user: CurrentUserDependency,
    query: Annotated[TaskListQuery, Query()],
) -> TaskListResponse:
    tasks = TaskService(store).list_tasks(current_user.id, query.to_filters())
    return TaskListResponse(data=[TaskRead.model_validate(task) for task in tasks])


@router.get(
    "/statistics",
    response_model=TaskStatistics,
    summary="Aggregate statistics over the caller's tasks",
)
async def get_task_statistics(
    store: StoreDependency,
    current_user: CurrentUserDependency,
) -> TaskStatistics:
    return TaskService(store).statistics(current_user.id)


@router.get(
    "/{task_id}",
    response_model=TaskRead,
    summary="Retrieve one of the caller's tasks",
)
async def get_task(
    task_id: int,
    store: StoreDependency,
    current_user: CurrentUserDependency,
) -> TaskRead:
    return TaskRead.model_validate(TaskService(store).get_task(task_id, current_user.id))


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task owned by the caller",
)
async def create_task(
    payload: TaskCreate,
    response: Response,
    store: StoreDependency,
    current_user: CurrentUserDependency,
) -> TaskRead:
    task = TaskService(store).create_task(owner_id=current_user.id, draft=payload)
    flag_storage_failure(response, store)
    return TaskRead.model_validate(task)


@router.put("/{task_id}", response_model=TaskRead, summary="Update one of the caller's tasks")
@router.patch("/{task_id}", response_model=TaskRead, summary="Partially update one of the caller's tasks")
async def update_task(
    task_id: int,
    payload: TaskUpdate,
    response: Response,
    store: StoreDependency,
    current_user: CurrentUserDependency,
) -> TaskRead:
    task = TaskService(store).update_task(task_id, current_user.id, payload)
    flag_storage_failure(response, store)
    return TaskRead.model_validate(task)


@router.delete(
    "/{task_id}",
    response_model=MessageResponse,
    summary="Delete one of the caller's tasks",
)
async def delete_task(
    task_id: int,
    response: Response,
    store: StoreDependency,
    current_user: CurrentUserDependency,
) -> MessageResponse:
    TaskService(store).delete_task(task_id, current_user.id)
    flag_storage_failure(response, store)
    return MessageResponse(message="Task deleted successfully.")
