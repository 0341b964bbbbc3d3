"""In-memory record store mirrored to a durable snapshot."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Literal

from ..errors import StorageError
from ..models import Task, User, utcnow
from .base import SnapshotBackend, SnapshotDocument

logger = logging.getLogger(__name__)

EntityKind = Literal["user", "task"]

_ONE_TICK = timedelta(microseconds=1)


class RecordStore:
    """Authoritative state for users and tasks.

    Every mutation goes through a repository that finishes with ``commit()``,
    which rewrites the whole snapshot. There are no awaits inside a mutation,
    so a single worker never observes a half-applied change.
    """

    def __init__(
        self,
        backend: SnapshotBackend,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._backend = backend
        self._clock = clock
        self.users: list[User] = []
        self.tasks: list[Task] = []
        self.last_error: StorageError | None = None
        self._last_ids: dict[EntityKind, int] = {"user": 0, "task": 0}
        self._load()

    @property
    def backend(self) -> SnapshotBackend:
        return self._backend

    def _load(self) -> None:
        try:
            document = self._backend.load()
        except (OSError, ValueError):
            logger.exception(
                "Snapshot could not be read; starting empty.",
                extra={"location": self._backend.describe()},
            )
            return
        if document is None:
            logger.info("No snapshot found; starting empty.", extra={"location": self._backend.describe()})
            return

        try:
            users = [User.model_validate(item) for item in self._collection(document, "users")]
            tasks = [Task.model_validate(item) for item in self._collection(document, "tasks")]
        except ValueError:
            logger.exception(
                "Snapshot is corrupt; starting empty.",
                extra={"location": self._backend.describe()},
            )
            return

        self.users = users
        self.tasks = tasks
        self._last_ids["user"] = max((user.id for user in users), default=0)
        self._last_ids["task"] = max((task.id for task in tasks), default=0)
        logger.info(
            "Snapshot loaded.",
            extra={"location": self._backend.describe(), "users": len(users), "tasks": len(tasks)},
        )

    @staticmethod
    def _collection(document: SnapshotDocument, key: str) -> list[object]:
        value = document.get(key, [])
        if not isinstance(value, list):
            raise ValueError(f"Snapshot field '{key}' must be a list.")
        return value

    def now(self) -> datetime:
        return self._clock()

    def now_after(self, previous: datetime) -> datetime:
        """Return the current time, nudged forward so it is later than ``previous``."""
        current = self._clock()
        if current <= previous:
            current = previous + _ONE_TICK
        return current

    def next_id(self, kind: EntityKind) -> int:
        """Issue a millisecond-clock id that is never reused for ``kind``."""
        candidate = int(self._clock().timestamp() * 1000)
        issued = max(candidate, self._last_ids[kind] + 1)
        self._last_ids[kind] = issued
        return issued

    def snapshot(self) -> SnapshotDocument:
        return {
            "users": [user.model_dump(mode="json") for user in self.users],
            "tasks": [task.model_dump(mode="json") for task in self.tasks],
        }

    def commit(self) -> bool:
        """Write the full state to the backend.

        A failed write keeps the in-memory change, is logged, and is exposed via
        ``last_error`` until the next successful commit.
        """
        try:
            self._backend.save(self.snapshot())
        except (OSError, TypeError, ValueError) as exc:
            error = StorageError(details={"location": self._backend.describe()})
            error.__cause__ = exc
            self.last_error = error
            logger.warning(
                "Snapshot write failed; in-memory state kept.",
                exc_info=exc,
                extra={"location": self._backend.describe()},
            )
            return False
        self.last_error = None
        return True


__all__ = ["EntityKind", "RecordStore"]
