from __future__ import annotations

from collections.abc import Callable

from httpx import AsyncClient

from taskdesk.db import RecordStore


async def _seed(client: AsyncClient, registered_user: Callable):
    alice = await registered_user(username="alice")
    bob = await registered_user(username="bob")
    for payload in (
        {"title": "Write report", "priority": "high"},
        {"title": "Groceries", "description": "buy milk", "status": "completed"},
        {"title": "Gym", "priority": "low"},
    ):
        response = await client.post("/api/tasks", json=payload, headers=alice.headers)
        assert response.status_code == 201
    return alice, bob


async def test_system_statistics(
    client: AsyncClient,
    registered_user: Callable,
    admin_headers: dict[str, str],
) -> None:
    await _seed(client, registered_user)

    response = await client.get("/api/admin/stats", headers=admin_headers)

    assert response.status_code == 200
    stats = response.json()
    assert stats["totalUsers"] == 2
    assert stats["activeUsers"] == 1
    assert stats["totalTasks"] == 3
    assert stats["tasksByStatus"]["completed"] == 1
    assert stats["tasksByPriority"] == {"low": 1, "medium": 1, "high": 1, "urgent": 0}
    assert [entry["username"] for entry in stats["recentRegistrations"]] == ["bob", "alice"]
    assert stats["topActiveUsers"][0]["username"] == "alice"
    assert stats["topActiveUsers"][0]["total_tasks"] == 3


async def test_admin_routes_require_admin_role(client: AsyncClient, registered_user: Callable) -> None:
    user = await registered_user()

    for path in ("/api/admin/stats", "/api/admin/users", "/api/admin/tasks"):
        response = await client.get(path, headers=user.headers)
        assert response.status_code == 403
        assert response.json()["code"] == "forbidden"

    assert (await client.get("/api/admin/stats")).status_code == 401


async def test_admin_cannot_delete_itself(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    response = await client.delete("/api/admin/users/0", headers=admin_headers)
    assert response.status_code == 403


async def test_delete_user_cascades(
    client: AsyncClient,
    registered_user: Callable,
    admin_headers: dict[str, str],
    store: RecordStore,
) -> None:
    alice, bob = await _seed(client, registered_user)
    await client.post("/api/tasks", json={"title": "Bob's"}, headers=bob.headers)

    response = await client.delete(f"/api/admin/users/{alice.id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {
        "message": "User deleted successfully.",
        "deleted_user": {"id": alice.id, "username": "alice", "email": "alice@example.com"},
    }
    assert [user.id for user in store.users] == [bob.id]
    assert [task.title for task in store.tasks] == ["Bob's"]
    assert (await client.delete(f"/api/admin/users/{alice.id}", headers=admin_headers)).status_code == 404
    assert (await client.get(f"/api/admin/users/{alice.id}", headers=admin_headers)).status_code == 404


async def test_user_listing_and_detail(
    client: AsyncClient,
    registered_user: Callable,
    admin_headers: dict[str, str],
) -> None:
    alice, bob = await _seed(client, registered_user)

    listing = await client.get("/api/admin/users", params={"sort": "username", "order": "asc"}, headers=admin_headers)
    assert listing.status_code == 200
    rows = listing.json()["data"]
    assert [row["username"] for row in rows] == ["alice", "bob"]
    assert rows[0]["task_count"] == 3
    assert rows[0]["completed_tasks"] == 1
    assert all("password_hash" not in row for row in rows)

    searched = await client.get("/api/admin/users", params={"search": "BOB"}, headers=admin_headers)
    assert [row["id"] for row in searched.json()["data"]] == [bob.id]

    detail = await client.get(f"/api/admin/users/{alice.id}", headers=admin_headers)
    assert detail.status_code == 200
    body = detail.json()
    assert body["username"] == "alice"
    assert body["statistics"]["total_tasks"] == 3
    assert body["statistics"]["completed_tasks"] == 1
    assert [task["title"] for task in body["recent_tasks"]] == ["Gym", "Groceries", "Write report"]
    assert "password_hash" not in body


async def test_task_listing_filters_and_sorting(
    client: AsyncClient,
    registered_user: Callable,
    admin_headers: dict[str, str],
) -> None:
    alice, bob = await _seed(client, registered_user)
    await client.post("/api/tasks", json={"title": "Bob's", "priority": "urgent"}, headers=bob.headers)

    listing = await client.get("/api/admin/tasks", headers=admin_headers)
    rows = listing.json()["data"]
    assert [row["title"] for row in rows] == ["Bob's", "Gym", "Groceries", "Write report"]
    assert rows[0]["username"] == "bob"
    assert rows[0]["user_email"] == "bob@example.com"

    by_priority = await client.get(
        "/api/admin/tasks",
        params={"sort": "priority", "order": "asc"},
        headers=admin_headers,
    )
    assert [row["priority"] for row in by_priority.json()["data"]] == ["low", "medium", "high", "urgent"]

    owned = await client.get("/api/admin/tasks", params={"user_id": alice.id, "status": "all"}, headers=admin_headers)
    assert len(owned.json()["data"]) == 3

    by_owner_name = await client.get("/api/admin/tasks", params={"search": "bob"}, headers=admin_headers)
    assert [row["title"] for row in by_owner_name.json()["data"]] == ["Bob's"]

    invalid = await client.get("/api/admin/tasks", params={"sort": "password_hash"}, headers=admin_headers)
    assert invalid.status_code == 400


async def test_admin_deletes_any_task(
    client: AsyncClient,
    registered_user: Callable,
    admin_headers: dict[str, str],
) -> None:
    alice, _ = await _seed(client, registered_user)
    task_id = (await client.get("/api/tasks", headers=alice.headers)).json()["data"][0]["id"]

    deleted = await client.delete(f"/api/admin/tasks/{task_id}", headers=admin_headers)

    assert deleted.status_code == 200
    assert deleted.json()["deleted_task"] == {"id": task_id, "title": "Gym", "user_id": alice.id}
    assert (await client.get(f"/api/tasks/{task_id}", headers=alice.headers)).status_code == 404
    assert (await client.delete(f"/api/admin/tasks/{task_id}", headers=admin_headers)).status_code == 404
