"""Domain models exposed for the task service."""

from __future__ import annotations

from .common import utcnow
from .task import Task, TaskDraft, TaskFilters, TaskPatch, TaskPriority, TaskStatus
from .user import User, UserRole

__all__ = [
    "Task",
    "TaskDraft",
    "TaskFilters",
    "TaskPatch",
    "TaskPriority",
    "TaskStatus",
    "User",
    "UserRole",
    "utcnow",
]
