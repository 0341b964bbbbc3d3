"""Construction of the record store and its request-scoped access."""

from __future__ import annotations

from starlette.requests import Request

from ..core.config import Settings
from .backends import JsonFileBackend, MemoryBackend
from .base import SnapshotBackend
from .store import RecordStore


def build_backend(settings: Settings) -> SnapshotBackend:
    """Select the snapshot backend named by ``settings.storage_backend``."""
    if settings.storage_backend == "memory":
        return MemoryBackend()
    return JsonFileBackend(settings.data_file)


def build_store(settings: Settings) -> RecordStore:
    return RecordStore(build_backend(settings))


def get_store(request: Request) -> RecordStore:
    """Return the store owned by the running application."""
    return request.app.state.store


__all__ = ["build_backend", "build_store", "get_store"]
