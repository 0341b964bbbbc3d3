"""Authentication service encapsulating registration and token issuance."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from ..core.config import Settings
from ..core.security import (
    GeneratedToken,
    create_access_token,
    get_password_hash,
    verify_admin_credentials,
    verify_password,
)
from ..db.store import RecordStore
from ..errors import ConflictError, InvalidCredentialsError, ValidationError
from ..models import User, UserRole
from ..repositories import UserRepository

logger = logging.getLogger(__name__)

ADMIN_PRINCIPAL_ID = 0


def normalise_email(email: str) -> str:
    """Return the canonical form of ``email``; the domain part is lowercased.

    Raises ``EmailNotValidError`` when the address is malformed.
    """

    return validate_email(email.strip(), check_deliverability=False).normalized


@dataclass(slots=True, frozen=True)
class Principal:
    """Authenticated identity attached to a request."""

    id: int
    username: str
    role: UserRole = UserRole.USER
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(id=user.id, username=user.username, role=UserRole.USER, email=user.email)


class AuthService:
    """Registration, login and admin login against the record store."""

    def __init__(self, store: RecordStore, settings: Settings) -> None:
        self._settings = settings
        self._users = UserRepository(store)

    def register(self, *, username: str, email: str, password: str) -> User:
        username = (username or "").strip()
        email = (email or "").strip()
        password = password or ""
        missing = [name for name, value in (("username", username), ("email", email), ("password", password)) if not value]
        if missing:
            raise ValidationError("Username, email and password are required.", details={"fields": missing})
        if len(password) < self._settings.password_min_length:
            raise ValidationError(
                f"Password must be at least {self._settings.password_min_length} characters long.",
                details={"field": "password"},
            )
        try:
            email = normalise_email(email)
        except EmailNotValidError as exc:
            raise ValidationError("Email address is not valid.", details={"field": "email"}) from exc

        if self._users.get_by_email(email) is not None:
            raise ConflictError("Email is already registered.", details={"field": "email"})
        if self._users.get_by_username(username) is not None:
            raise ConflictError("Username is already taken.", details={"field": "username"})

        user = self._users.create(
            username=username,
            email=email,
            password_hash=get_password_hash(password),
        )
        logger.info("User registered.", extra={"user_id": user.id})
        return user

    def login(self, *, email: str, password: str) -> tuple[User, GeneratedToken]:
        try:
            user = self._users.get_by_email(normalise_email(email or ""))
        except EmailNotValidError:
            user = None
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Login rejected.")
            raise InvalidCredentialsError()
        token = create_access_token(subject=user.id, username=user.username, settings=self._settings)
        logger.info("User logged in.", extra={"user_id": user.id})
        return user, token

    def admin_login(self, *, username: str, password: str) -> tuple[Principal, GeneratedToken]:
        account = verify_admin_credentials(self._settings.admin_accounts, username, password)
        if account is None:
            logger.warning("Admin login rejected.")
            raise InvalidCredentialsError()
        principal = Principal(id=ADMIN_PRINCIPAL_ID, username=account.username, role=UserRole.ADMIN)
        token = create_access_token(
            subject=principal.id,
            username=principal.username,
            role=UserRole.ADMIN.value,
            settings=self._settings,
        )
        logger.info("Admin logged in.", extra={"admin": account.username})
        return principal, token


__all__ = ["ADMIN_PRINCIPAL_ID", "AuthService", "Principal", "normalise_email"]
