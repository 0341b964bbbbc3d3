"""Read-only statistics and listings computed over users and tasks.

Every function here is pure: inputs are never mutated, the only clock input is
an explicit ``now`` argument, and sorting is stable so that equal keys keep the
order in which records were stored.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from ..models import Task, TaskPriority, TaskStatus, User
from ..schemas.admin import (
    ActiveUserSummary,
    AdminTaskQuery,
    AdminTaskRow,
    AdminUserQuery,
    AdminUserRow,
    RecentRegistration,
    SystemStatistics,
    UserDetail,
    UserStatistics,
)
from ..schemas.task import TaskRead, TaskStatistics

RECENT_REGISTRATIONS_LIMIT = 5
TOP_ACTIVE_USERS_LIMIT = 10
RECENT_TASKS_LIMIT = 10

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_STATUS_ORDER = {status: index for index, status in enumerate(TaskStatus)}
_PRIORITY_ORDER = {priority: index for index, priority in enumerate(TaskPriority)}
_OPEN_STATUSES = frozenset({TaskStatus.PENDING, TaskStatus.IN_PROGRESS})

_DATE_FIELDS = frozenset({"created_at", "updated_at", "due_date", "completed_at", "last_active"})
_TEXT_FIELDS = frozenset({"title", "username", "email", "user_email"})


def _histogram(values: Sequence[Any], members: type[TaskStatus] | type[TaskPriority]) -> dict[str, int]:
    counts = Counter(values)
    return {member.value: counts.get(member, 0) for member in members}


def _completed(tasks: Sequence[Task]) -> int:
    return sum(1 for task in tasks if task.status is TaskStatus.COMPLETED)


def _rate(part: int, whole: int) -> float:
    return part / whole if whole else 0.0


def _group_by_owner(tasks: Sequence[Task]) -> dict[int, list[Task]]:
    grouped: dict[int, list[Task]] = {}
    for task in tasks:
        grouped.setdefault(task.user_id, []).append(task)
    return grouped


def _newest_first(tasks: Sequence[Task]) -> list[Task]:
    return sorted(tasks, key=lambda task: task.created_at, reverse=True)


def _sort_key(field: str) -> Callable[[Any], Any]:
    """Build a total-order key for ``field`` on a row model."""

    def key(row: Any) -> Any:
        value = getattr(row, field)
        if field in _DATE_FIELDS:
            return value or _EPOCH
        if field == "status":
            return _STATUS_ORDER[value]
        if field == "priority":
            return _PRIORITY_ORDER[value]
        if field in _TEXT_FIELDS:
            return (value or "").casefold()
        # Missing numbers sort lowest.
        return (value is not None, value or 0)

    return key


def _ordered(rows: list[Any], field: str, order: str) -> list[Any]:
    return sorted(rows, key=_sort_key(field), reverse=order == "desc")


def system_statistics(users: Sequence[User], tasks: Sequence[Task]) -> SystemStatistics:
    """Summarise the whole system for the admin dashboard."""

    by_owner = _group_by_owner(tasks)
    recent = sorted(users, key=lambda user: user.created_at, reverse=True)[:RECENT_REGISTRATIONS_LIMIT]
    active = []
    for user in users:
        owned = by_owner.get(user.id, [])
        completed = _completed(owned)
        active.append(
            ActiveUserSummary(
                id=user.id,
                username=user.username,
                email=user.email,
                total_tasks=len(owned),
                completed_tasks=completed,
                completion_rate=_rate(completed, len(owned)),
            )
        )
    active.sort(key=lambda summary: summary.total_tasks, reverse=True)

    return SystemStatistics(
        total_users=len(users),
        total_tasks=len(tasks),
        active_users=sum(1 for user in users if by_owner.get(user.id)),
        tasks_by_status=_histogram([task.status for task in tasks], TaskStatus),
        tasks_by_priority=_histogram([task.priority for task in tasks], TaskPriority),
        recent_registrations=[
            RecentRegistration(
                id=user.id,
                username=user.username,
                email=user.email,
                created_at=user.created_at,
                task_count=len(by_owner.get(user.id, [])),
            )
            for user in recent
        ],
        top_active_users=active[:TOP_ACTIVE_USERS_LIMIT],
    )


def user_detail(user: User, tasks: Sequence[Task]) -> UserDetail:
    """Describe ``user`` with statistics over the tasks they own."""

    owned = [task for task in tasks if task.user_id == user.id]
    statuses = Counter(task.status for task in owned)
    durations = [
        (task.completed_at - task.created_at).total_seconds() / 3600
        for task in owned
        if task.status is TaskStatus.COMPLETED and task.completed_at is not None
    ]
    statistics = UserStatistics(
        total_tasks=len(owned),
        completed_tasks=statuses[TaskStatus.COMPLETED],
        in_progress_tasks=statuses[TaskStatus.IN_PROGRESS],
        pending_tasks=statuses[TaskStatus.PENDING],
        cancelled_tasks=statuses[TaskStatus.CANCELLED],
        completion_rate=_rate(statuses[TaskStatus.COMPLETED], len(owned)),
        avg_completion_hours=sum(durations) / len(durations) if durations else None,
    )
    return UserDetail(
        id=user.id,
        username=user.username,
        email=user.email,
        created_at=user.created_at,
        statistics=statistics,
        recent_tasks=[TaskRead.model_validate(task) for task in _newest_first(owned)[:RECENT_TASKS_LIMIT]],
    )


def task_statistics(tasks: Sequence[Task], now: datetime) -> TaskStatistics:
    """Owner-facing summary; a task is overdue when open and due before ``now``."""

    overdue = sum(
        1 for task in tasks if task.status in _OPEN_STATUSES and task.due_date is not None and task.due_date < now
    )
    return TaskStatistics(
        total=len(tasks),
        by_status=_histogram([task.status for task in tasks], TaskStatus),
        by_priority=_histogram([task.priority for task in tasks], TaskPriority),
        completion_rate=_rate(_completed(tasks), len(tasks)),
        overdue=overdue,
    )


def admin_task_rows(
    users: Sequence[User],
    tasks: Sequence[Task],
    query: AdminTaskQuery,
) -> list[AdminTaskRow]:
    """Every task joined with its owner, filtered and ordered per ``query``."""

    owners = {user.id: user for user in users}
    rows: list[AdminTaskRow] = []
    for task in tasks:
        if query.user_id is not None and task.user_id != query.user_id:
            continue
        if query.status is not None and task.status is not query.status:
            continue
        if query.priority is not None and task.priority is not query.priority:
            continue
        owner = owners.get(task.user_id)
        if query.search:
            needle = query.search.lower()
            in_owner = owner is not None and needle in owner.username.lower()
            in_task = needle in task.title.lower() or (
                task.description is not None and needle in task.description.lower()
            )
            if not (in_owner or in_task):
                continue
        rows.append(
            AdminTaskRow(
                **task.model_dump(),
                username=owner.username if owner else None,
                user_email=owner.email if owner else None,
            )
        )
    return _ordered(rows, query.sort, query.order)


def admin_user_rows(
    users: Sequence[User],
    tasks: Sequence[Task],
    query: AdminUserQuery,
) -> list[AdminUserRow]:
    """Every user with activity counters, filtered and ordered per ``query``."""

    by_owner = _group_by_owner(tasks)
    needle = query.search.lower() if query.search else None
    rows: list[AdminUserRow] = []
    for user in users:
        if needle and needle not in user.username.lower() and needle not in user.email.lower():
            continue
        owned = by_owner.get(user.id, [])
        rows.append(
            AdminUserRow(
                id=user.id,
                username=user.username,
                email=user.email,
                created_at=user.created_at,
                task_count=len(owned),
                completed_tasks=_completed(owned),
                last_active=max((task.updated_at for task in owned), default=user.created_at),
            )
        )
    return _ordered(rows, query.sort, query.order)


__all__ = [
    "RECENT_REGISTRATIONS_LIMIT",
    "RECENT_TASKS_LIMIT",
    "TOP_ACTIVE_USERS_LIMIT",
    "admin_task_rows",
    "admin_user_rows",
    "system_statistics",
    "task_statistics",
    "user_detail",
]
