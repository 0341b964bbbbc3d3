"""Helpers shared by routers when shaping responses."""

from __future__ import annotations

from fastapi import Response

from ..db.store import RecordStore

STORAGE_WARNING_HEADER = "X-Storage-Warning"


def flag_storage_failure(response: Response, store: RecordStore) -> None:
    """Tell the client when the last durable write did not succeed."""
    if store.last_error is not None:
        response.headers[STORAGE_WARNING_HEADER] = store.last_error.message


__all__ = ["STORAGE_WARNING_HEADER", "flag_storage_failure"]
