"""Task-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models import TaskDraft, TaskFilters, TaskPatch, TaskPriority, TaskStatus
from ..models.common import blank_to_none

TASK_READ_EXAMPLE = {
    "id": 1718000000000,
    "user_id": 1717000000000,
    "title": "Draft product documentation",
    "description": "Outline sections for the public API guide.",
    "status": TaskStatus.PENDING.value,
    "priority": TaskPriority.HIGH.value,
    "due_date": "2024-06-30T17:00:00Z",
    "estimated_hours": 3.5,
    "tags": ["docs", "api"],
    "created_at": "2024-06-10T06:13:20Z",
    "updated_at": "2024-06-10T06:13:20Z",
    "completed_at": None,
}

TASK_STATISTICS_EXAMPLE = {
    "total": 3,
    "by_status": {
        TaskStatus.PENDING.value: 1,
        TaskStatus.IN_PROGRESS.value: 1,
        TaskStatus.COMPLETED.value: 1,
        TaskStatus.CANCELLED.value: 0,
    },
    "by_priority": {
        TaskPriority.LOW.value: 0,
        TaskPriority.MEDIUM.value: 2,
        TaskPriority.HIGH.value: 1,
        TaskPriority.URGENT.value: 0,
    },
    "completion_rate": 0.3333333333333333,
    "overdue": 1,
}


def all_means_unfiltered(value: object) -> object:
    if isinstance(value, str) and value.strip().lower() in {"", "all"}:
        return None
    return value


class TaskCreate(TaskDraft):
    """Payload for creating a new task."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Draft product documentation",
                "description": "Outline sections for the public API guide.",
                "priority": TaskPriority.HIGH.value,
                "due_date": "2024-06-30T17:00:00Z",
                "estimated_hours": 3.5,
                "tags": ["docs", "api"],
            }
        }
    )


class TaskUpdate(TaskPatch):
    """Payload for partially updating an existing task."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Update API documentation",
                "status": TaskStatus.IN_PROGRESS.value,
            }
        }
    )


class TaskRead(BaseModel):
    """Public representation of a task."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={"example": TASK_READ_EXAMPLE},
    )

    id: int
    user_id: int
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None = None
    estimated_hours: float | None = None
    tags: list[str]
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None


class TaskListQuery(BaseModel):
    """Query parameters narrowing an owner's task listing."""

    status: TaskStatus | None = Field(default=None, description="Status filter; 'all' disables it.")
    priority: TaskPriority | None = Field(default=None, description="Priority filter; 'all' disables it.")
    search: str | None = Field(default=None, description="Case-insensitive text over title, description and tags.")

    @field_validator("status", "priority", mode="before")
    @classmethod
    def _normalise_filters(cls, value: object) -> object:
        return all_means_unfiltered(value)

    @field_validator("search", mode="before")
    @classmethod
    def _blank_search(cls, value: object) -> object:
        return blank_to_none(value)

    def to_filters(self) -> TaskFilters:
        return TaskFilters(status=self.status, priority=self.priority, search=self.search)


class TaskListResponse(BaseModel):
    """Collection of tasks, newest first."""

    data: list[TaskRead]


class TaskStatistics(BaseModel):
    """Aggregated statistics describing an owner's task distribution."""

    model_config = ConfigDict(json_schema_extra={"example": TASK_STATISTICS_EXAMPLE})

    total: int = Field(ge=0)
    by_status: dict[str, int] = Field(default_factory=dict)
    by_priority: dict[str, int] = Field(default_factory=dict)
    completion_rate: float = Field(ge=0, le=1)
    overdue: int = Field(ge=0)


__all__ = [
    "TaskCreate",
    "TaskListQuery",
    "TaskListResponse",
    "TaskRead",
    "TaskStatistics",
    "TaskUpdate",
    "all_means_unfiltered",
]
