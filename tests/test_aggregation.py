from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from taskdesk.models import Task, TaskPriority, TaskStatus, User
from taskdesk.schemas import AdminTaskQuery, AdminUserQuery
from taskdesk.services.aggregation import (
    admin_task_rows,
    admin_user_rows,
    system_statistics,
    task_statistics,
    user_detail,
)

BASE = datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc)


def _user(user_id: int, username: str, *, days: int = 0) -> User:
    return User(
        id=user_id,
        username=username,
        email=f"{username.lower()}@example.com",
        password_hash="hash",
        created_at=BASE + timedelta(days=days),
    )


def _task(task_id: int, user_id: int, title: str, *, hours: int = 0, **fields) -> Task:
    created = BASE + timedelta(hours=hours)
    fields.setdefault("updated_at", created)
    return Task(id=task_id, user_id=user_id, title=title, created_at=created, **fields)


@pytest.fixture
def users() -> list[User]:
    return [_user(1, "alice", days=0), _user(2, "Bob", days=1)]


@pytest.fixture
def tasks() -> list[Task]:
    return [
        _task(10, 1, "Write report", hours=1, priority=TaskPriority.HIGH),
        _task(
            11,
            1,
            "buy milk",
            hours=2,
            status=TaskStatus.COMPLETED,
            completed_at=BASE + timedelta(hours=4),
            updated_at=BASE + timedelta(hours=4),
        ),
        _task(12, 1, "Gym", hours=3, priority=TaskPriority.LOW, due_date=BASE),
    ]


def test_system_statistics_counts(users: list[User], tasks: list[Task]) -> None:
    stats = system_statistics(users, tasks)

    assert stats.total_users == 2
    assert stats.active_users == 1
    assert stats.total_tasks == 3
    assert stats.tasks_by_status == {"pending": 2, "in_progress": 0, "completed": 1, "cancelled": 0}
    assert stats.tasks_by_priority == {"low": 1, "medium": 1, "high": 1, "urgent": 0}
    assert [entry.username for entry in stats.recent_registrations] == ["Bob", "alice"]
    assert stats.recent_registrations[1].task_count == 3
    top = stats.top_active_users[0]
    assert (top.username, top.total_tasks, top.completed_tasks) == ("alice", 3, 1)
    assert top.completion_rate == pytest.approx(1 / 3)
    assert stats.top_active_users[1].completion_rate == 0


def test_system_statistics_uses_camel_case_on_the_wire(users: list[User], tasks: list[Task]) -> None:
    payload = system_statistics(users, tasks).model_dump(by_alias=True)
    assert {
        "totalUsers",
        "totalTasks",
        "activeUsers",
        "tasksByStatus",
        "tasksByPriority",
        "recentRegistrations",
        "topActiveUsers",
    } == set(payload)


def test_system_statistics_limits_lists() -> None:
    many = [_user(index, f"user{index}", days=index) for index in range(1, 13)]
    stats = system_statistics(many, [])
    assert len(stats.recent_registrations) == 5
    assert stats.recent_registrations[0].id == 12
    assert len(stats.top_active_users) == 10


def test_user_detail_statistics(users: list[User], tasks: list[Task]) -> None:
    detail = user_detail(users[0], tasks)

    assert detail.statistics.total_tasks == 3
    assert detail.statistics.completed_tasks == 1
    assert detail.statistics.pending_tasks == 2
    assert detail.statistics.in_progress_tasks == 0
    assert detail.statistics.cancelled_tasks == 0
    assert detail.statistics.avg_completion_hours == pytest.approx(2.0)
    assert [task.id for task in detail.recent_tasks] == [12, 11, 10]
    assert "password_hash" not in detail.model_dump()


def test_user_detail_without_tasks(users: list[User], tasks: list[Task]) -> None:
    detail = user_detail(users[1], tasks)
    assert detail.statistics.total_tasks == 0
    assert detail.statistics.completion_rate == 0
    assert detail.statistics.avg_completion_hours is None
    assert detail.recent_tasks == []


def test_task_statistics_counts_open_overdue_tasks(tasks: list[Task]) -> None:
    now = BASE + timedelta(days=1)
    overdue_but_done = _task(
        13,
        1,
        "Closed",
        status=TaskStatus.CANCELLED,
        due_date=BASE,
    )
    stats = task_statistics([*tasks, overdue_but_done], now)

    assert stats.total == 4
    assert stats.overdue == 1
    assert stats.by_status["cancelled"] == 1
    assert stats.completion_rate == pytest.approx(0.25)
    assert task_statistics([], now).completion_rate == 0


def test_admin_task_rows_join_owner_and_default_order(users: list[User], tasks: list[Task]) -> None:
    orphan = _task(20, 99, "Orphan", hours=5)
    rows = admin_task_rows(users, [*tasks, orphan], AdminTaskQuery())

    assert [row.id for row in rows] == [20, 12, 11, 10]
    assert rows[0].username is None and rows[0].user_email is None
    assert rows[1].username == "alice"
    assert rows[1].user_email == "alice@example.com"


def test_admin_task_rows_filters(users: list[User], tasks: list[Task]) -> None:
    by_owner_name = admin_task_rows(users, tasks, AdminTaskQuery(search="ALICE"))
    assert len(by_owner_name) == 3

    by_description = admin_task_rows(users, tasks, AdminTaskQuery(search="milk"))
    assert [row.id for row in by_description] == [11]

    completed = admin_task_rows(users, tasks, AdminTaskQuery(status="completed"))
    assert [row.id for row in completed] == [11]

    everything = admin_task_rows(users, tasks, AdminTaskQuery(status="all", priority="all"))
    assert len(everything) == 3

    assert admin_task_rows(users, tasks, AdminTaskQuery(user_id=2)) == []


def test_admin_task_rows_sort_both_directions(users: list[User], tasks: list[Task]) -> None:
    ascending = admin_task_rows(users, tasks, AdminTaskQuery(sort="priority", order="asc"))
    assert [row.priority for row in ascending] == [TaskPriority.LOW, TaskPriority.MEDIUM, TaskPriority.HIGH]

    descending = admin_task_rows(users, tasks, AdminTaskQuery(sort="priority", order="desc"))
    assert [row.id for row in descending] == [row.id for row in reversed(ascending)]

    by_title = admin_task_rows(users, tasks, AdminTaskQuery(sort="title", order="asc"))
    assert [row.title for row in by_title] == ["buy milk", "Gym", "Write report"]

    # Missing due dates sort as the epoch, ahead of any real date.
    by_due = admin_task_rows(users, tasks, AdminTaskQuery(sort="due_date", order="asc"))
    assert [row.id for row in by_due] == [10, 11, 12]

    by_hours = admin_task_rows(users, tasks, AdminTaskQuery(sort="estimated_hours", order="desc"))
    assert [row.id for row in by_hours] == [10, 11, 12]


def test_ties_keep_stored_order(users: list[User]) -> None:
    same_time = [_task(task_id, 1, f"t{task_id}") for task_id in (5, 3, 4)]
    for order in ("asc", "desc"):
        rows = admin_task_rows(users, same_time, AdminTaskQuery(sort="created_at", order=order))
        assert [row.id for row in rows] == [5, 3, 4]


def test_admin_user_rows(users: list[User], tasks: list[Task]) -> None:
    rows = admin_user_rows(users, tasks, AdminUserQuery())
    assert [row.username for row in rows] == ["Bob", "alice"]

    alice = rows[1]
    assert alice.task_count == 3
    assert alice.completed_tasks == 1
    assert alice.last_active == BASE + timedelta(hours=4)
    assert rows[0].last_active == users[1].created_at
    assert "password_hash" not in alice.model_dump()

    by_name = admin_user_rows(users, tasks, AdminUserQuery(sort="username", order="asc"))
    assert [row.username for row in by_name] == ["alice", "Bob"]

    by_count = admin_user_rows(users, tasks, AdminUserQuery(sort="task_count", order="desc"))
    assert [row.id for row in by_count] == [1, 2]

    searched = admin_user_rows(users, tasks, AdminUserQuery(search="BOB@"))
    assert [row.id for row in searched] == [2]


def test_aggregation_does_not_mutate_inputs(users: list[User], tasks: list[Task]) -> None:
    users_before = [user.model_copy(deep=True) for user in users]
    tasks_before = [task.model_copy(deep=True) for task in tasks]

    system_statistics(users, tasks)
    user_detail(users[0], tasks)
    admin_task_rows(users, tasks, AdminTaskQuery(sort="title", order="asc"))
    admin_user_rows(users, tasks, AdminUserQuery(sort="username", order="asc"))

    assert users == users_before
    assert tasks == tasks_before


def test_identical_inputs_give_identical_outputs(users: list[User], tasks: list[Task]) -> None:
    query = AdminTaskQuery(sort="status", order="desc")
    assert admin_task_rows(users, tasks, query) == admin_task_rows(users, tasks, query)
    assert system_statistics(users, tasks) == system_statistics(users, tasks)


def test_unknown_sort_fields_are_rejected() -> None:
    with pytest.raises(ValidationError):
        AdminTaskQuery(sort="password_hash")
    with pytest.raises(ValidationError):
        AdminUserQuery(sort="password_hash")
    with pytest.raises(ValidationError):
        AdminUserQuery(order="sideways")
