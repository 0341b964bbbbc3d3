"""Record store and snapshot persistence."""

from __future__ import annotations

from .backends import JsonFileBackend, MemoryBackend
from .base import SnapshotBackend
from .session import build_backend, build_store, get_store
from .store import RecordStore

__all__ = [
    "JsonFileBackend",
    "MemoryBackend",
    "RecordStore",
    "SnapshotBackend",
    "build_backend",
    "build_store",
    "get_store",
]
