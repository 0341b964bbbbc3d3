"""Shared model helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BeforeValidator


def utcnow() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Naive inputs are read as UTC so every stored instant is comparable.
UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]
OptionalUtcDatetime = Annotated[datetime | None, BeforeValidator(blank_to_none), AfterValidator(_as_utc)]


__all__ = ["OptionalUtcDatetime", "UtcDatetime", "blank_to_none", "utcnow"]
