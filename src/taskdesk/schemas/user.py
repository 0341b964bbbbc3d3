"""User-facing Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from ..models import UserRole


class UserPublic(BaseModel):
    """User without the credential blob."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    created_at: datetime


class PrincipalRead(BaseModel):
    """Identity attached to an issued token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str | None = None
    role: UserRole = UserRole.USER


__all__ = ["PrincipalRead", "UserPublic"]
