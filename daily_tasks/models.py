"""Pydantic models for the task list.

Field names are snake_case in Python and camelCase on the wire, so the
persisted and exported JSON keeps the `createdAt` / `completedAt` keys that
browser-era task files already use.
"""

from enum import StrEnum
from typing import Annotated

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class Priority(StrEnum):
    """Priority tag shown next to a task."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def coerce(cls, raw: "Priority | str | None") -> "Priority":
        """Map user input to a priority, falling back to medium."""
        if raw is None:
            return cls.MEDIUM
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.MEDIUM


class TaskFilter(StrEnum):
    """Named view predicates applied by TaskStore.filtered_view."""

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"
    HIGH_PRIORITY = "high-priority"

    @classmethod
    def _missing_(cls, value: object) -> "TaskFilter | None":
        # Older front-ends send "high" from their filter buttons.
        if isinstance(value, str) and value.strip().lower() == "high":
            return cls.HIGH_PRIORITY
        return None


class Task(BaseModel):
    """A task item in the task list."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: StrictInt = Field(..., description="Unique identifier for the task")
    text: StrictStr = Field(..., description="The task text, never blank")
    priority: Priority = Field(default=Priority.MEDIUM, description="Priority tag")
    completed: StrictBool = Field(default=False, description="Whether the task has been completed")
    created_at: AwareDatetime = Field(..., strict=True, description="When the task was created")
    completed_at: AwareDatetime | None = Field(
        default=None,
        strict=True,
        description="When the task was completed, null while pending",
    )

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("text must not be blank")
        return value

    @model_validator(mode="after")
    def _completed_at_matches_completed(self) -> "Task":
        if self.completed != (self.completed_at is not None):
            raise ValueError("completedAt must be set if and only if completed is true")
        return self


class TaskCreate(BaseModel):
    """Request body for creating a new task.

    Blank text is accepted here and turned into a no-op by the store.
    """

    text: str = Field(default="", description="The task text")
    priority: str | None = Field(
        default=None,
        description="low, medium or high; anything else falls back to medium",
    )


class TaskUpdate(BaseModel):
    """Request body for editing an existing task."""

    text: str = Field(default="", description="New text for the task")
    priority: str | None = Field(
        default=None,
        description="New priority; omitted keeps the current one",
    )


class TaskStats(BaseModel):
    """Counters shown above the task list."""

    total: Annotated[int, Field(ge=0)] = 0
    completed: Annotated[int, Field(ge=0)] = 0
    pending: Annotated[int, Field(ge=0)] = 0


class ImportResult(BaseModel):
    """Response from the import endpoint."""

    imported: int


class ClearResult(BaseModel):
    """Response from the clear-completed endpoint."""

    removed: int


class HealthResponse(BaseModel):
    """Response from the health check endpoint."""

    status: str = "healthy"
    version: str = "1.0.0"
