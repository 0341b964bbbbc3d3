"""Reusable FastAPI dependencies."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from pydantic import ValidationError

from .core.config import Settings
from .core.context import bind_principal_id
from .core.security import JWTError, decode_token
from .db.session import get_store
from .db.store import RecordStore
from .errors import ForbiddenError, UnauthorizedError
from .models import UserRole
from .repositories import UserRepository
from .schemas.auth import TokenPayload
from .services.auth import ADMIN_PRINCIPAL_ID, Principal


def get_app_settings(request: Request) -> Settings:
    """Return the settings the running application was built with."""
    return request.app.state.settings


SettingsDependency = Annotated[Settings, Depends(get_app_settings)]
StoreDependency = Annotated[RecordStore, Depends(get_store)]

_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


def _decode_access_token(token: str, settings: Settings) -> TokenPayload:
    try:
        payload = decode_token(
            token=token,
            secret=settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
    except JWTError as exc:
        raise UnauthorizedError() from exc

    try:
        return TokenPayload.model_validate(payload)
    except ValidationError as exc:
        raise UnauthorizedError() from exc


def _resolve_principal(token_payload: TokenPayload, store: RecordStore, settings: Settings) -> Principal:
    try:
        subject = int(token_payload.sub)
    except ValueError as exc:
        raise UnauthorizedError() from exc

    if token_payload.role is UserRole.ADMIN:
        configured = {account.username for account in settings.admin_accounts}
        if subject != ADMIN_PRINCIPAL_ID or token_payload.username not in configured:
            raise UnauthorizedError()
        return Principal(id=ADMIN_PRINCIPAL_ID, username=token_payload.username, role=UserRole.ADMIN)

    user = UserRepository(store).get(subject)
    if user is None:
        raise UnauthorizedError()
    return Principal.from_user(user)


def require_principal(required_role: UserRole | None = None) -> Callable[..., Awaitable[Principal]]:
    """Return a dependency enforcing authentication and an optional role.

    ``UserRole.USER`` admits only principals backed by a stored user, so admin
    tokens are refused on owner-scoped routes.
    """

    async def _dependency(
        request: Request,
        store: StoreDependency,
        settings: SettingsDependency,
        token: str = Depends(_oauth2_scheme),
    ) -> Principal:
        principal = _resolve_principal(_decode_access_token(token, settings), store, settings)
        request.state.principal_id = principal.id
        bind_principal_id(principal.id)
        if required_role is not None and principal.role is not required_role:
            raise ForbiddenError()
        return principal

    return _dependency


PrincipalDependency = Annotated[Principal, Depends(require_principal())]
CurrentUserDependency = Annotated[Principal, Depends(require_principal(UserRole.USER))]
AdminDependency = Annotated[Principal, Depends(require_principal(UserRole.ADMIN))]


__all__ = [
    "AdminDependency",
    "CurrentUserDependency",
    "PrincipalDependency",
    "SettingsDependency",
    "StoreDependency",
    "get_app_settings",
    "require_principal",
]
