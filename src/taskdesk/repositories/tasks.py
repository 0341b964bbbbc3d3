"""Repository for task records."""

from __future__ import annotations

from ..models import Task, TaskDraft, TaskFilters, TaskPatch, TaskStatus
from .base import BaseRepository


def matches_search(task: Task, term: str) -> bool:
    """Case-insensitive substring match over title, description and tags."""
    needle = term.lower()
    if needle in task.title.lower():
        return True
    if task.description and needle in task.description.lower():
        return True
    return any(needle in tag.lower() for tag in task.tags)


class TaskRepository(BaseRepository):
    """Owner-scoped task persistence.

    Every owner-facing lookup matches on both the task id and the owning user
    id, so a task that belongs to somebody else looks exactly like a missing one.
    """

    def create(self, *, user_id: int, draft: TaskDraft) -> Task:
        now = self.store.now()
        task = Task(
            id=self.store.next_id("task"),
            user_id=user_id,
            title=draft.title,
            description=draft.description,
            status=draft.status,
            priority=draft.priority,
            due_date=draft.due_date,
            estimated_hours=draft.estimated_hours,
            tags=list(draft.tags),
            created_at=now,
            updated_at=now,
            completed_at=now if draft.status is TaskStatus.COMPLETED else None,
        )
        self.store.tasks.append(task)
        self.store.commit()
        return task

    def get(self, task_id: int) -> Task | None:
        return next((task for task in self.store.tasks if task.id == task_id), None)

    def get_for_owner(self, task_id: int, user_id: int) -> Task | None:
        return next(
            (task for task in self.store.tasks if task.id == task_id and task.user_id == user_id),
            None,
        )

    def list(self) -> list[Task]:
        return list(self.store.tasks)

    def list_for_owner(self, user_id: int, filters: TaskFilters | None = None) -> list[Task]:
        """Return the owner's tasks, newest first, narrowed by ``filters``."""
        filters = filters or TaskFilters()
        tasks = [task for task in self.store.tasks if task.user_id == user_id]
        if filters.status is not None:
            tasks = [task for task in tasks if task.status is filters.status]
        if filters.priority is not None:
            tasks = [task for task in tasks if task.priority is filters.priority]
        if filters.search:
            tasks = [task for task in tasks if matches_search(task, filters.search)]
        return sorted(tasks, key=lambda task: task.created_at, reverse=True)

    def update_for_owner(self, task_id: int, user_id: int, patch: TaskPatch) -> Task | None:
        task = self.get_for_owner(task_id, user_id)
        if task is None:
            return None

        changes = patch.changes()
        previous_status = task.status
        for name, value in changes.items():
            setattr(task, name, list(value) if name == "tags" else value)
        task.updated_at = self.store.now_after(task.updated_at)

        if "status" in changes:
            if task.status is not TaskStatus.COMPLETED:
                task.completed_at = None
            elif previous_status is not TaskStatus.COMPLETED or task.completed_at is None:
                task.completed_at = task.updated_at

        self.store.commit()
        return task

    def delete_for_owner(self, task_id: int, user_id: int) -> bool:
        task = self.get_for_owner(task_id, user_id)
        if task is None:
            return False
        self.store.tasks.remove(task)
        self.store.commit()
        return True

    def delete(self, task_id: int) -> Task | None:
        """Remove any task regardless of owner; the admin path."""
        task = self.get(task_id)
        if task is None:
            return None
        self.store.tasks.remove(task)
        self.store.commit()
        return task
