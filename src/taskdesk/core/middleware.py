"""Request correlation and access logging."""

from __future__ import annotations

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from .context import REQUEST_ID_HEADER, bind_principal_id, bind_request_id, reset_principal_id, reset_request_id

access_logger = logging.getLogger("taskdesk.access")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ``X-Request-ID`` and log one line when it finishes.

    The access line carries the principal id that authentication stored on
    ``request.state``, so task and admin activity can be traced per account.
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER) -> None:
        super().__init__(app)
        self._header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(self._header_name) or uuid.uuid4().hex
        request.state.request_id = request_id
        request.state.principal_id = None
        request_token = bind_request_id(request_id)
        principal_token = bind_principal_id(None)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers.setdefault(self._header_name, request_id)
            access_logger.info(
                "Request completed.",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                    "principal_id": request.state.principal_id,
                },
            )
            return response
        finally:
            reset_principal_id(principal_token)
            reset_request_id(request_token)


__all__ = ["CorrelationIdMiddleware"]
