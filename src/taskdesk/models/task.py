"""Task domain models and the value types used to create, patch and filter them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .common import OptionalUtcDatetime, UtcDatetime, blank_to_none


class TaskStatus(str, Enum):
    """Enumeration of possible task states."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    """Task urgency, declared from least to most severe."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


def _coerce_tags(value: object) -> object:
    """Accept a list of tags or a comma separated string; drop blanks."""

    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, (list, tuple)):
        return [str(tag).strip() for tag in value if str(tag).strip()]
    return value


class Task(BaseModel):
    """Persistent task record."""

    model_config = ConfigDict(extra="ignore")

    id: int
    user_id: int
    title: str = Field(min_length=1)
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: OptionalUtcDatetime = None
    estimated_hours: float | None = Field(default=None, gt=0)
    tags: list[str] = Field(default_factory=list)
    created_at: UtcDatetime
    updated_at: UtcDatetime
    completed_at: OptionalUtcDatetime = None

    @field_validator("tags", mode="before")
    @classmethod
    def _normalise_tags(cls, value: object) -> object:
        return _coerce_tags(value)


class TaskDraft(BaseModel):
    """Validated input for creating a task."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: OptionalUtcDatetime = None
    estimated_hours: float | None = Field(default=None, gt=0)
    tags: list[str] = Field(default_factory=list)

    @field_validator("description", "estimated_hours", mode="before")
    @classmethod
    def _blank_values_are_missing(cls, value: object) -> object:
        return blank_to_none(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _default_priority(cls, value: object) -> object:
        return blank_to_none(value) or TaskPriority.MEDIUM

    @field_validator("tags", mode="before")
    @classmethod
    def _normalise_tags(cls, value: object) -> object:
        return _coerce_tags(value)


class TaskPatch(BaseModel):
    """Partial update limited to the fields an owner may change.

    Only fields present in the payload are applied; identifiers and timestamps
    are not part of the model and are rejected outright.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: OptionalUtcDatetime = None
    estimated_hours: float | None = Field(default=None, gt=0)
    tags: list[str] | None = None

    @field_validator("description", "estimated_hours", mode="before")
    @classmethod
    def _blank_values_are_missing(cls, value: object) -> object:
        return blank_to_none(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _normalise_tags(cls, value: object) -> object:
        return _coerce_tags(value)

    @model_validator(mode="after")
    def _ensure_valid_changes(self) -> "TaskPatch":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update.")
        for name in ("title", "status", "priority"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"'{name}' cannot be cleared.")
        return self

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller explicitly supplied."""
        return {name: getattr(self, name) for name in self.model_fields_set}


@dataclass(slots=True, frozen=True)
class TaskFilters:
    """Optional narrowing applied to an owner's task listing."""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search: str | None = None


__all__ = ["Task", "TaskDraft", "TaskFilters", "TaskPatch", "TaskPriority", "TaskStatus"]
