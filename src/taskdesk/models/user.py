"""User domain models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .common import UtcDatetime


class UserRole(str, Enum):
    """Roles a principal can act under."""

    USER = "user"
    ADMIN = "admin"


class User(BaseModel):
    """Registered account as held by the record store."""

    model_config = ConfigDict(extra="ignore")

    id: int
    username: str
    email: str
    password_hash: str
    created_at: UtcDatetime


__all__ = ["User", "UserRole"]
