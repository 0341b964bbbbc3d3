"""HTTP interface of the service."""

from __future__ import annotations

from .routers import api_router, health_router

__all__ = ["api_router", "health_router"]
