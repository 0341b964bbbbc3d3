"""Pydantic schemas for public interfaces."""

from __future__ import annotations

from .admin import (
    AdminTaskListResponse,
    AdminTaskQuery,
    AdminTaskRow,
    AdminUserListResponse,
    AdminUserQuery,
    AdminUserRow,
    DeletedTaskResponse,
    DeletedUserResponse,
    SystemStatistics,
    UserDetail,
    UserStatistics,
)
from .auth import (
    AdminLoginRequest,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenPayload,
    TokenResponse,
)
from .system import ErrorResponse, HealthCheckResponse, MessageResponse, RootResponse
from .task import TaskCreate, TaskListQuery, TaskListResponse, TaskRead, TaskStatistics, TaskUpdate
from .user import PrincipalRead, UserPublic

__all__ = [
    "AdminLoginRequest",
    "AdminTaskListResponse",
    "AdminTaskQuery",
    "AdminTaskRow",
    "AdminUserListResponse",
    "AdminUserQuery",
    "AdminUserRow",
    "DeletedTaskResponse",
    "DeletedUserResponse",
    "ErrorResponse",
    "HealthCheckResponse",
    "LoginRequest",
    "MessageResponse",
    "PrincipalRead",
    "RegisterRequest",
    "RegisterResponse",
    "RootResponse",
    "SystemStatistics",
    "TaskCreate",
    "TaskListQuery",
    "TaskListResponse",
    "TaskRead",
    "TaskStatistics",
    "TaskUpdate",
    "TokenPayload",
    "TokenResponse",
    "UserDetail",
    "UserPublic",
    "UserStatistics",
]
