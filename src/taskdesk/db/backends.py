"""Concrete snapshot backends."""

from __future__ import annotations

import copy
import json
import os
import tempfile
from pathlib import Path

from .base import SnapshotDocument


class JsonFileBackend:
    """Keep the snapshot as a single JSON document on disk."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def describe(self) -> str:
        return str(self._path)

    def load(self) -> SnapshotDocument | None:
        if not self._path.exists():
            return None
        raw = self._path.read_text(encoding="utf-8")
        document = json.loads(raw)
        if not isinstance(document, dict):
            raise ValueError("Snapshot root must be a JSON object.")
        return document

    def save(self, document: SnapshotDocument) -> None:
        """Write to a sibling temp file, then swap it into place."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(document, ensure_ascii=False, indent=2)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class MemoryBackend:
    """Hold the snapshot in memory; used in tests and throwaway deployments."""

    def __init__(self, initial: SnapshotDocument | None = None) -> None:
        self._document = copy.deepcopy(initial) if initial is not None else None
        self.saves = 0

    @property
    def document(self) -> SnapshotDocument | None:
        return copy.deepcopy(self._document)

    def describe(self) -> str:
        return "memory"

    def load(self) -> SnapshotDocument | None:
        return copy.deepcopy(self._document)

    def save(self, document: SnapshotDocument) -> None:
        self._document = copy.deepcopy(document)
        self.saves += 1


__all__ = ["JsonFileBackend", "MemoryBackend"]
