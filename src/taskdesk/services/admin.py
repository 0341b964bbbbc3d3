"""Administrative workflows spanning every user and task."""

from __future__ import annotations

import logging

from ..db.store import RecordStore
from ..errors import ForbiddenError, NotFoundError
from ..models import Task, User
from ..repositories import TaskRepository, UserRepository
from ..schemas.admin import (
    AdminTaskQuery,
    AdminTaskRow,
    AdminUserQuery,
    AdminUserRow,
    SystemStatistics,
    UserDetail,
)
from . import aggregation
from .auth import Principal

logger = logging.getLogger(__name__)


class AdminService:
    """Read any record, delete users (with their tasks) and delete any task."""

    def __init__(self, store: RecordStore) -> None:
        self._users = UserRepository(store)
        self._tasks = TaskRepository(store)

    def statistics(self) -> SystemStatistics:
        return aggregation.system_statistics(self._users.list(), self._tasks.list())

    def user_detail(self, user_id: int) -> UserDetail:
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError("User not found.", details={"user_id": user_id})
        return aggregation.user_detail(user, self._tasks.list())

    def list_tasks(self, query: AdminTaskQuery) -> list[AdminTaskRow]:
        return aggregation.admin_task_rows(self._users.list(), self._tasks.list(), query)

    def list_users(self, query: AdminUserQuery) -> list[AdminUserRow]:
        return aggregation.admin_user_rows(self._users.list(), self._tasks.list(), query)

    def delete_user(self, principal: Principal, user_id: int) -> User:
        if user_id == principal.id:
            raise ForbiddenError("Administrators cannot delete their own account.")
        user = self._users.delete_cascade(user_id)
        if user is None:
            raise NotFoundError("User not found.", details={"user_id": user_id})
        logger.info("Admin deleted user.", extra={"user_id": user_id, "admin": principal.username})
        return user

    def delete_task(self, task_id: int) -> Task:
        task = self._tasks.delete(task_id)
        if task is None:
            raise NotFoundError("Task not found.", details={"task_id": task_id})
        logger.info("Admin deleted task.", extra={"task_id": task_id, "user_id": task.user_id})
        return task


__all__ = ["AdminService"]
