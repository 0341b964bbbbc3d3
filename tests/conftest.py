from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from itertools import count

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from taskdesk.core.config import Settings
from taskdesk.db import MemoryBackend, RecordStore
from taskdesk.main import create_app

ADMIN_USERNAME = "root"
ADMIN_PASSWORD = "root-secret"
START = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class TickingClock:
    """Deterministic clock that moves forward by ``step`` on every reading."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(seconds=1)) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = value + self.step
        return value


@dataclass(slots=True)
class RegisteredUser:
    id: int
    username: str
    email: str
    password: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def store(backend: MemoryBackend, clock: TickingClock) -> RecordStore:
    return RecordStore(backend, clock=clock)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="test",
        storage_backend="memory",
        jwt_secret_key="test-secret-key",
        admin_accounts=[{"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD}],
    )


@pytest.fixture
def app(settings: Settings, store: RecordStore) -> FastAPI:
    return create_app(settings=settings, store=store)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as http_client:
        yield http_client


@pytest_asyncio.fixture
async def registered_user(client: AsyncClient) -> Callable[..., "RegisteredUser"]:
    counter = count(1)

    async def _factory(
        *,
        username: str | None = None,
        email: str | None = None,
        password: str = "strong-pass",
    ) -> RegisteredUser:
        suffix = next(counter)
        actual_username = username or f"user{suffix}"
        actual_email = email or f"{actual_username}@example.com"
        response = await client.post(
            "/api/auth/register",
            json={"username": actual_username, "email": actual_email, "password": password},
        )
        assert response.status_code == 201, response.text
        user_id = response.json()["user_id"]

        login = await client.post("/api/auth/login", json={"email": actual_email, "password": password})
        assert login.status_code == 200, login.text
        return RegisteredUser(
            id=user_id,
            username=actual_username,
            email=actual_email,
            password=password,
            token=login.json()["token"],
        )

    return _factory


@pytest_asyncio.fixture
async def admin_headers(client: AsyncClient) -> dict[str, str]:
    response = await client.post(
        "/api/auth/admin-login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}
