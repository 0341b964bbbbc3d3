"""Application-level exception types and their HTTP rendering."""

from __future__ import annotations

import logging
from contextvars import Token
from http import HTTPStatus
from typing import Any, Mapping

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .core.context import REQUEST_ID_HEADER, bind_request_id, reset_request_id
from .schemas.system import ErrorResponse

logger = logging.getLogger(__name__)


class ApplicationError(Exception):
    """Base class for domain-specific errors."""

    default_message = "Application error."
    default_code = "application_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        self.headers = dict(headers) if headers else None


class ValidationError(ApplicationError):
    """Malformed or missing input; the caller's fault and never retried."""

    default_message = "Validation failed."
    default_code = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(ApplicationError):
    """A uniqueness rule would be violated by the requested creation."""

    default_message = "Resource already exists."
    default_code = "conflict"
    status_code = status.HTTP_409_CONFLICT


class NotFoundError(ApplicationError):
    """The entity is absent or not owned by the caller; the two are indistinguishable."""

    default_message = "Resource not found."
    default_code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedError(ApplicationError):
    """Missing or invalid credential."""

    default_message = "Could not validate credentials."
    default_code = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("headers", {"WWW-Authenticate": "Bearer"})
        super().__init__(message, **kwargs)


class InvalidCredentialsError(UnauthorizedError):
    """Login failed; deliberately silent about which part was wrong."""

    default_message = "Invalid credentials."
    default_code = "invalid_credentials"


class ForbiddenError(ApplicationError):
    """Valid credential with insufficient privilege."""

    default_message = "Not enough permissions."
    default_code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class StorageError(ApplicationError):
    """The durable snapshot could not be written."""

    default_message = "Failed to persist data."
    default_code = "storage_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ServerError(ApplicationError):
    """Unexpected server failure."""

    default_message = "Internal server error."
    default_code = "server_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


_HTTP_STATUS_CODE_MAP: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
}


def _bind_request_context(request: Request) -> Token[str] | None:
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        return None
    return bind_request_id(request_id)


def _reset_request_context(token: Token[str] | None) -> None:
    if token is not None:
        reset_request_id(token)


def _merge_details_with_request(request: Request, details: Any | None) -> Any | None:
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        return details
    if details is None:
        return {"request_id": request_id}
    if isinstance(details, dict):
        return {"request_id": request_id, **details}
    return {"request_id": request_id, "detail": details}


def _error_response(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    details: Any | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(
        code=code,
        message=message,
        details=_merge_details_with_request(request, details),
    )
    response = JSONResponse(status_code=status_code, content=jsonable_encoder(payload))
    if headers:
        response.headers.update(headers)
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


def _http_exception_message(status_code: int, detail: Any) -> tuple[str, Any | None]:
    if isinstance(detail, str):
        return detail, None
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        phrase = "Error"
    return phrase, detail


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the provided FastAPI app."""

    @app.exception_handler(ApplicationError)
    async def _handle_application_error(request: Request, exc: ApplicationError) -> JSONResponse:
        token = _bind_request_context(request)
        try:
            log = logger.error if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
            log(
                "Application error encountered",
                extra={"code": exc.code, "status_code": exc.status_code, "path": request.url.path},
            )
            return _error_response(
                request,
                status_code=exc.status_code,
                code=exc.code,
                message=exc.message,
                details=exc.details,
                headers=exc.headers,
            )
        finally:
            _reset_request_context(token)

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        token = _bind_request_context(request)
        try:
            errors = jsonable_encoder(exc.errors(), custom_encoder={Exception: str})
            logger.warning("Request validation failed", extra={"errors": errors})
            return _error_response(
                request,
                status_code=status.HTTP_400_BAD_REQUEST,
                code="validation_error",
                message="Request validation failed.",
                details={"errors": errors},
            )
        finally:
            _reset_request_context(token)

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        token = _bind_request_context(request)
        try:
            code = _HTTP_STATUS_CODE_MAP.get(exc.status_code, "http_error")
            message, details = _http_exception_message(exc.status_code, exc.detail)
            log = logger.error if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
            log(
                "HTTP exception raised",
                extra={"code": code, "status_code": exc.status_code, "path": request.url.path},
            )
            return _error_response(
                request,
                status_code=exc.status_code,
                code=code,
                message=message,
                details=details,
                headers=exc.headers,
            )
        finally:
            _reset_request_context(token)

    @app.exception_handler(Exception)
    async def _handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        token = _bind_request_context(request)
        try:
            logger.exception("Unhandled application error.")
            return _error_response(
                request,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                code=ServerError.default_code,
                message=ServerError.default_message,
            )
        finally:
            _reset_request_context(token)


__all__ = [
    "ApplicationError",
    "ConflictError",
    "ForbiddenError",
    "InvalidCredentialsError",
    "NotFoundError",
    "ServerError",
    "StorageError",
    "UnauthorizedError",
    "ValidationError",
    "register_exception_handlers",
]
