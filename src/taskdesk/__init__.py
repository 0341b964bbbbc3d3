"""Task management service with per-user task ownership and an admin console."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
