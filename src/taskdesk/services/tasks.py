"""Service layer encapsulating owner-scoped task operations."""

from __future__ import annotations

from ..db.store import RecordStore
from ..errors import NotFoundError
from ..models import Task, TaskDraft, TaskFilters, TaskPatch
from ..repositories import TaskRepository
from ..schemas.task import TaskStatistics
from .aggregation import task_statistics


class TaskService:
    """High-level orchestration for a single owner's tasks.

    A task that exists but belongs to another user is reported exactly like a
    missing one.
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self._repository = TaskRepository(store)

    @property
    def repository(self) -> TaskRepository:
        return self._repository

    @staticmethod
    def _not_found(task_id: int) -> NotFoundError:
        return NotFoundError("Task not found.", details={"task_id": task_id})

    def create_task(self, *, owner_id: int, draft: TaskDraft) -> Task:
        return self._repository.create(user_id=owner_id, draft=draft)

    def list_tasks(self, owner_id: int, filters: TaskFilters | None = None) -> list[Task]:
        return self._repository.list_for_owner(owner_id, filters)

    def get_task(self, task_id: int, owner_id: int) -> Task:
        task = self._repository.get_for_owner(task_id, owner_id)
        if task is None:
            raise self._not_found(task_id)
        return task

    def update_task(self, task_id: int, owner_id: int, patch: TaskPatch) -> Task:
        task = self._repository.update_for_owner(task_id, owner_id, patch)
        if task is None:
            raise self._not_found(task_id)
        return task

    def delete_task(self, task_id: int, owner_id: int) -> None:
        if not self._repository.delete_for_owner(task_id, owner_id):
            raise self._not_found(task_id)

    def statistics(self, owner_id: int) -> TaskStatistics:
        """Return the owner's task distribution as of the store clock."""
        return task_statistics(self._repository.list_for_owner(owner_id), self._store.now())


__all__ = ["TaskService"]
