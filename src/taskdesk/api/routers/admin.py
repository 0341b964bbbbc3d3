"""Administrative routes over every user and task."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, Response

from ...deps import AdminDependency, StoreDependency
from ...schemas import (
    AdminTaskListResponse,
    AdminTaskQuery,
    AdminUserListResponse,
    AdminUserQuery,
    DeletedTaskResponse,
    DeletedUserResponse,
    SystemStatistics,
    UserDetail,
)
from ...schemas.admin import DeletedTask, DeletedUser
from ...services import AdminService
from ..responses import flag_storage_failure

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/stats",
    response_model=SystemStatistics,
    response_model_by_alias=True,
    summary="System-wide statistics",
)
async def read_statistics(store: StoreDependency, admin: AdminDependency) -> SystemStatistics:
    return AdminService(store).statistics()


@router.get("/users", response_model=AdminUserListResponse, summary="List users with activity counters")
async def list_users(
    store: StoreDependency,
    admin: AdminDependency,
    query: Annotated[AdminUserQuery, Query()],
) -> AdminUserListResponse:
    return AdminUserListResponse(data=AdminService(store).list_users(query))


@router.get("/users/{user_id}", response_model=UserDetail, summary="Describe one user and their tasks")
async def read_user(user_id: int, store: StoreDependency, admin: AdminDependency) -> UserDetail:
    return AdminService(store).user_detail(user_id)


@router.delete(
    "/users/{user_id}",
    response_model=DeletedUserResponse,
    summary="Delete a user together with all of their tasks",
)
async def delete_user(
    user_id: int,
    response: Response,
    store: StoreDependency,
    admin: AdminDependency,
) -> DeletedUserResponse:
    user = AdminService(store).delete_user(admin, user_id)
    flag_storage_failure(response, store)
    return DeletedUserResponse(deleted_user=DeletedUser(id=user.id, username=user.username, email=user.email))


@router.get("/tasks", response_model=AdminTaskListResponse, summary="List every task with its owner")
async def list_tasks(
    store: StoreDependency,
    admin: AdminDependency,
    query: Annotated[AdminTaskQuery, Query()],
) -> AdminTaskListResponse:
    return AdminTaskListResponse(data=AdminService(store).list_tasks(query))


@router.delete(
    "/tasks/{task_id}",
    response_model=DeletedTaskResponse,
    summary="Delete any task",
)
async def delete_task(
    task_id: int,
    response: Response,
    store: StoreDependency,
    admin: AdminDependency,
) -> DeletedTaskResponse:
    task = AdminService(store).delete_task(task_id)
    flag_storage_failure(response, store)
    return DeletedTaskResponse(deleted_task=DeletedTask(id=task.id, title=task.title, user_id=task.user_id))
