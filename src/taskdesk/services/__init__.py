"""Domain service layer package."""

from __future__ import annotations

from .admin import AdminService
from .auth import ADMIN_PRINCIPAL_ID, AuthService, Principal
from .tasks import TaskService

__all__ = ["ADMIN_PRINCIPAL_ID", "AdminService", "AuthService", "Principal", "TaskService"]
