"""Per-request values that log records pick up without being passed around."""

from __future__ import annotations

from contextvars import ContextVar, Token

REQUEST_ID_HEADER = "X-Request-ID"
ANONYMOUS = "-"

_request_id: ContextVar[str] = ContextVar("taskdesk_request_id", default=ANONYMOUS)
# Stored user id, or the admin principal id; unset until a token is resolved.
_principal_id: ContextVar[int | None] = ContextVar("taskdesk_principal_id", default=None)


def get_request_id() -> str:
    return _request_id.get()


def bind_request_id(request_id: str) -> Token[str]:
    return _request_id.set(request_id)


def reset_request_id(token: Token[str]) -> None:
    _request_id.reset(token)


def get_principal_id() -> int | None:
    return _principal_id.get()


def bind_principal_id(principal_id: int | None) -> Token[int | None]:
    """Record who the current request acts for.

    Bound by the authentication dependency, which runs inside the request's own
    task, so the value never outlives the request.
    """

    return _principal_id.set(principal_id)


def reset_principal_id(token: Token[int | None]) -> None:
    _principal_id.reset(token)


__all__ = [
    "ANONYMOUS",
    "REQUEST_ID_HEADER",
    "bind_principal_id",
    "bind_request_id",
    "get_principal_id",
    "get_request_id",
    "reset_principal_id",
    "reset_request_id",
]
