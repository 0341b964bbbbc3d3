"""Base repository bound to a record store."""

from __future__ import annotations

from ..db.store import RecordStore


class BaseRepository:
    """Provide shared access to the store for concrete repositories."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    @property
    def store(self) -> RecordStore:
        """Return the store associated with the repository."""
        return self._store
