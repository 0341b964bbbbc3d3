"""JSON-lines logging for the service and the uvicorn loggers it runs under."""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

from .config import Settings
from .context import ANONYMOUS, get_principal_id, get_request_id

# Attributes every ``LogRecord`` carries; anything else arrived through ``extra``.
_STANDARD_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class JsonLogFormatter(logging.Formatter):
    """Render a record as one JSON object.

    Fixed keys come first (``timestamp``, ``level``, ``logger``, ``message``,
    ``request_id``), then the configured defaults, then any ``extra`` values.
    Extras that JSON cannot encode are stringified.
    """

    def __init__(self, *, defaults: dict[str, Any] | None = None, datefmt: str | None = None) -> None:
        super().__init__(datefmt=datefmt)
        self._defaults = dict(defaults or {})

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", ANONYMOUS),
            **self._defaults,
        }
        payload.update(
            (key, _jsonable(value))
            for key, value in vars(record).items()
            if key not in _STANDARD_RECORD_ATTRS and key not in payload
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False)


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class RequestContextFilter(logging.Filter):
    """Copy the request id and acting principal onto each record.

    A ``principal_id`` passed explicitly through ``extra`` wins over the bound one.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.request_id = get_request_id()
        principal_id = get_principal_id()
        if principal_id is not None and not hasattr(record, "principal_id"):
            record.principal_id = principal_id
        return True


def configure_logging(settings: Settings) -> None:
    """Route the root and uvicorn loggers through one JSON stdout handler."""

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.captureWarnings(True)

    handler_names = ["stdout"]
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": JsonLogFormatter,
                    "defaults": {
                        "service": settings.project_name,
                        "environment": settings.environment,
                        "storage_backend": settings.storage_backend,
                    },
                }
            },
            "filters": {"request_context": {"()": RequestContextFilter}},
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "json",
                    "level": level,
                    "filters": ["request_context"],
                }
            },
            "root": {"handlers": handler_names, "level": level},
            "loggers": {
                name: {"handlers": handler_names, "level": level, "propagate": False}
                for name in _UVICORN_LOGGERS
            },
        }
    )


__all__ = ["JsonLogFormatter", "RequestContextFilter", "configure_logging"]
