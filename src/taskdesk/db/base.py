"""Persistence abstractions used by the record store."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

__all__ = ["SnapshotBackend", "SnapshotDocument"]

SnapshotDocument = dict[str, Any]


@runtime_checkable
class SnapshotBackend(Protocol):
    """Protocol describing where the durable snapshot lives."""

    def load(self) -> SnapshotDocument | None:  # pragma: no cover - interface definition
        """Return the stored document, or ``None`` when nothing was saved yet.

        Raises ``ValueError`` when stored content cannot be decoded.
        """

    def save(self, document: SnapshotDocument) -> None:  # pragma: no cover - interface definition
        """Overwrite the stored document with ``document``."""

    def describe(self) -> str:  # pragma: no cover - interface definition
        """Return a short human-readable location for log messages."""
