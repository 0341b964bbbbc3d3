"""Security helpers for password hashing and JWT access tokens."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable
from uuid import uuid4

from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import AdminAccount, Settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(slots=True)
class GeneratedToken:
    """A signed access token together with its expiry and identifier."""

    token: str
    expires_at: datetime
    jti: str


def get_password_hash(password: str) -> str:
    """Return a salted bcrypt hash of ``password``."""

    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check ``plain_password`` against a stored hash.

    Malformed hashes count as a mismatch rather than an error so that a damaged
    record cannot be told apart from a wrong password.
    """

    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def create_access_token(
    *,
    subject: str | int,
    username: str,
    settings: Settings,
    role: str | None = None,
    expires_delta: timedelta | None = None,
) -> GeneratedToken:
    """Create a signed, time-limited access token for a principal."""

    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expire = now + expires_delta
    payload: dict[str, Any] = {
        "sub": str(subject),
        "username": username,
        "iat": now,
        "exp": expire,
        "jti": uuid4().hex,
    }
    if role is not None:
        payload["role"] = role
    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return GeneratedToken(token=token, expires_at=expire, jti=payload["jti"])


def decode_token(*, token: str, secret: str, algorithm: str) -> dict[str, Any]:
    """Decode and verify a JWT, returning its claims."""

    return jwt.decode(token, secret, algorithms=[algorithm])


def verify_admin_credentials(
    accounts: Iterable[AdminAccount],
    username: str,
    password: str,
) -> AdminAccount | None:
    """Return the configured admin account matching both username and password."""

    for account in accounts:
        if account.username != username:
            continue
        expected = account.password.get_secret_value().encode("utf-8")
        if secrets.compare_digest(expected, password.encode("utf-8")):
            return account
        return None
    return None


__all__ = [
    "GeneratedToken",
    "JWTError",
    "create_access_token",
    "decode_token",
    "get_password_hash",
    "verify_admin_credentials",
    "verify_password",
]
