from __future__ import annotations

import logging

from fastapi import FastAPI, status
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from taskdesk.core.logging import RequestContextFilter
from taskdesk.errors import ApplicationError, ConflictError, StorageError


async def test_application_error_response_schema(app: FastAPI) -> None:
    @app.get("/error/application")
    async def trigger_application_error() -> None:  # pragma: no cover - defined in test
        raise ApplicationError(
            "Example failure",
            code="example_error",
            status_code=status.HTTP_418_IM_A_TEAPOT,
            details={"foo": "bar"},
        )

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/error/application")

    assert response.status_code == status.HTTP_418_IM_A_TEAPOT
    payload = response.json()
    request_id = response.headers["X-Request-ID"]
    assert payload == {
        "code": "example_error",
        "message": "Example failure",
        "details": {"foo": "bar", "request_id": request_id},
    }


async def test_domain_error_defaults(app: FastAPI) -> None:
    @app.get("/error/conflict")
    async def trigger_conflict() -> None:  # pragma: no cover - defined in test
        raise ConflictError()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/error/conflict", headers={"X-Request-ID": "fixed-id"})

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.headers["X-Request-ID"] == "fixed-id"
    assert response.json() == {
        "code": "conflict",
        "message": "Resource already exists.",
        "details": {"request_id": "fixed-id"},
    }


async def test_validation_error_response_schema(app: FastAPI) -> None:
    class ExamplePayload(BaseModel):
        name: str

    @app.post("/error/validation")
    async def create_item(_: ExamplePayload) -> None:  # pragma: no cover - defined in test
        return None

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/error/validation", json={})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    payload = response.json()
    request_id = response.headers["X-Request-ID"]
    assert payload["code"] == "validation_error"
    assert payload["message"] == "Request validation failed."
    assert "errors" in payload["details"]
    assert payload["details"]["request_id"] == request_id


async def test_not_found_error_response_schema(app: FastAPI) -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/error/not-found")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    payload = response.json()
    request_id = response.headers["X-Request-ID"]
    assert payload["code"] == "not_found"
    assert payload["message"]
    assert payload["details"]["request_id"] == request_id


async def test_unhandled_error_hides_internal_details(app: FastAPI) -> None:
    @app.get("/error/unhandled")
    async def trigger_unhandled_error() -> None:  # pragma: no cover - defined in test
        raise RuntimeError("Sensitive detail")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/error/unhandled")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    payload = response.json()
    assert payload["code"] == "server_error"
    assert payload["message"] == "Internal server error."
    assert "Sensitive" not in response.text


def test_storage_error_is_a_server_side_error() -> None:
    error = StorageError(details={"location": "memory"})
    assert error.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert error.code == "storage_error"
    assert error.message == "Failed to persist data."


class _InMemoryHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.INFO)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


async def test_request_id_attached_to_logs(app: FastAPI) -> None:
    logger = logging.getLogger("tests.error_handling")
    handler = _InMemoryHandler()
    handler.addFilter(RequestContextFilter())
    logger.addHandler(handler)
    original_level = logger.level
    logger.setLevel(logging.INFO)

    @app.get("/log")
    async def emit_log() -> dict[str, str]:  # pragma: no cover - defined in test
        logger.info("Log entry")
        return {"status": "ok"}

    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/log")
    finally:
        logger.removeHandler(handler)
        logger.setLevel(original_level)
        handler.close()

    request_id = response.headers["X-Request-ID"]
    matching = [record for record in handler.records if record.getMessage() == "Log entry"]
    assert matching
    assert getattr(matching[0], "request_id", None) == request_id
