"""Schemas describing authentication payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from ..models import UserRole
from .user import PrincipalRead


class RegisterRequest(BaseModel):
    """Incoming payload for registering a new user."""

    username: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]
    # Normalised by the auth service so login and registration agree.
    email: str = Field(min_length=1)
    # Kept byte-exact; surrounding spaces are part of the secret.
    password: str = Field(min_length=1)


class RegisterResponse(BaseModel):
    message: str = "User registered successfully."
    user_id: int


class LoginRequest(BaseModel):
    """Credentials for a regular user login."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AdminLoginRequest(BaseModel):
    """Credentials for one of the configured administrator accounts."""

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    """Issued bearer token together with the principal it identifies."""

    token: str
    token_type: str = Field(default="bearer", frozen=True)
    expires_in: int
    user: PrincipalRead


class TokenPayload(BaseModel):
    """Validated JWT claims."""

    model_config = ConfigDict(extra="ignore")

    sub: str
    username: str
    role: UserRole = UserRole.USER
    exp: datetime
    iat: datetime
    jti: str


__all__ = [
    "AdminLoginRequest",
    "LoginRequest",
    "RegisterRequest",
    "RegisterResponse",
    "TokenPayload",
    "TokenResponse",
]
