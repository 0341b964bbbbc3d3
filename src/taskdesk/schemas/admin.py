"""Schemas for the admin console: statistics, listings and deletions."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models import TaskPriority, TaskStatus
from ..models.common import blank_to_none
from .task import TaskRead, all_means_unfiltered
from .user import UserPublic

SortOrder = Literal["asc", "desc"]
TaskSortField = Literal[
    "id",
    "user_id",
    "title",
    "status",
    "priority",
    "due_date",
    "estimated_hours",
    "created_at",
    "updated_at",
    "completed_at",
    "username",
    "user_email",
]
UserSortField = Literal[
    "id",
    "username",
    "email",
    "created_at",
    "task_count",
    "completed_tasks",
    "last_active",
]


class RecentRegistration(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime
    task_count: int = Field(ge=0)


class ActiveUserSummary(BaseModel):
    id: int
    username: str
    email: str
    total_tasks: int = Field(ge=0)
    completed_tasks: int = Field(ge=0)
    completion_rate: float = Field(ge=0, le=1)


class SystemStatistics(BaseModel):
    """System-wide aggregates.

    Top-level keys are serialised in camelCase, which is the shape existing
    dashboards consume.
    """

    model_config = ConfigDict(populate_by_name=True)

    total_users: int = Field(alias="totalUsers", ge=0)
    total_tasks: int = Field(alias="totalTasks", ge=0)
    active_users: int = Field(alias="activeUsers", ge=0)
    tasks_by_status: dict[str, int] = Field(alias="tasksByStatus")
    tasks_by_priority: dict[str, int] = Field(alias="tasksByPriority")
    recent_registrations: list[RecentRegistration] = Field(alias="recentRegistrations")
    top_active_users: list[ActiveUserSummary] = Field(alias="topActiveUsers")


class UserStatistics(BaseModel):
    total_tasks: int = Field(ge=0)
    completed_tasks: int = Field(ge=0)
    in_progress_tasks: int = Field(ge=0)
    pending_tasks: int = Field(ge=0)
    cancelled_tasks: int = Field(ge=0)
    completion_rate: float = Field(ge=0, le=1)
    avg_completion_hours: float | None = None


class UserDetail(UserPublic):
    """A single user with task statistics and their most recent tasks."""

    statistics: UserStatistics
    recent_tasks: list[TaskRead]


class AdminTaskRow(TaskRead):
    """Task enriched with its owner's identity."""

    username: str | None = None
    user_email: str | None = None


class AdminUserRow(UserPublic):
    """User enriched with activity counters."""

    task_count: int = Field(ge=0)
    completed_tasks: int = Field(ge=0)
    last_active: datetime


class AdminTaskQuery(BaseModel):
    """Filters and ordering for the cross-user task listing."""

    user_id: int | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search: str | None = None
    sort: TaskSortField = "created_at"
    order: SortOrder = "desc"

    @field_validator("status", "priority", mode="before")
    @classmethod
    def _normalise_filters(cls, value: object) -> object:
        return all_means_unfiltered(value)

    @field_validator("user_id", "search", mode="before")
    @classmethod
    def _blank_values(cls, value: object) -> object:
        return blank_to_none(value)


class AdminUserQuery(BaseModel):
    """Search and ordering for the user listing."""

    search: str | None = None
    sort: UserSortField = "created_at"
    order: SortOrder = "desc"

    @field_validator("search", mode="before")
    @classmethod
    def _blank_search(cls, value: object) -> object:
        return blank_to_none(value)


class AdminTaskListResponse(BaseModel):
    data: list[AdminTaskRow]


class AdminUserListResponse(BaseModel):
    data: list[AdminUserRow]


class DeletedUser(BaseModel):
    id: int
    username: str
    email: str


class DeletedUserResponse(BaseModel):
    message: str = "User deleted successfully."
    deleted_user: DeletedUser


class DeletedTask(BaseModel):
    id: int
    title: str
    user_id: int


class DeletedTaskResponse(BaseModel):
    message: str = "Task deleted successfully."
    deleted_task: DeletedTask


__all__ = [
    "ActiveUserSummary",
    "AdminTaskListResponse",
    "AdminTaskQuery",
    "AdminTaskRow",
    "AdminUserListResponse",
    "AdminUserQuery",
    "AdminUserRow",
    "DeletedTask",
    "DeletedTaskResponse",
    "DeletedUser",
    "DeletedUserResponse",
    "RecentRegistration",
    "SortOrder",
    "SystemStatistics",
    "TaskSortField",
    "UserDetail",
    "UserSortField",
    "UserStatistics",
]
