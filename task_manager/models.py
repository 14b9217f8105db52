"""Pydantic models for the task manager.

``Task`` is both the in-memory entity owned by the registry and the record
written to the JSON storage file. The remaining models are request and
response bodies for the HTTP API.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator

from task_manager.errors import ValidationError

# Stands in for "no timestamp"; matches the zero time written by older files.
ZERO_TIME = datetime(1, 1, 1, tzinfo=UTC)

MIN_PRIORITY = 1
MAX_PRIORITY = 5
DEFAULT_PRIORITY = 3

PRIORITY_LABELS = {
    1: "Highest",
    2: "High",
    3: "Medium",
    4: "Low",
    5: "Lowest",
}


class Task(BaseModel):
    """A single to-do item."""

    id: int = Field(..., ge=1, description="Unique identifier, never reused")
    title: str = Field(..., description="The task title")
    description: str = Field(default="", description="Free-form details")
    completed: bool = Field(default=False, description="Whether the task has been completed")
    created_at: datetime = Field(..., description="When the task was created")
    completed_at: datetime = Field(
        default=ZERO_TIME,
        description="Last completion state change; only meaningful when completed",
    )
    due_date: datetime = Field(default=ZERO_TIME, description="Due date, zero time when unset")
    priority: int = Field(
        default=DEFAULT_PRIORITY,
        ge=MIN_PRIORITY,
        le=MAX_PRIORITY,
        description="1 (highest) to 5 (lowest)",
    )

    @field_validator("created_at", "completed_at", "due_date")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @classmethod
    def create(cls, task_id: int, title: str, description: str = "") -> "Task":
        """Build a new pending task with medium priority."""
        return cls(
            id=task_id,
            title=title,
            description=description,
            created_at=datetime.now(UTC),
        )

    @property
    def has_due_date(self) -> bool:
        return self.due_date != ZERO_TIME

    def mark_complete(self) -> None:
        self.completed = True
        self.completed_at = datetime.now(UTC)

    def mark_incomplete(self) -> None:
        # completed_at is restamped rather than reset to ZERO_TIME.
        self.completed = False
        self.completed_at = datetime.now(UTC)

    def set_due_date(self, due_date: datetime | None) -> None:
        """Overwrite the due date; ``None`` or ``ZERO_TIME`` clears it."""
        if due_date is None:
            due_date = ZERO_TIME
        elif due_date.tzinfo is None:
            due_date = due_date.replace(tzinfo=UTC)
        self.due_date = due_date

    def set_priority(self, priority: int) -> None:
        """Set the priority, rejecting non-integers and values outside 1-5."""
        if not isinstance(priority, int) or isinstance(priority, bool):
            raise ValidationError(f"invalid priority {priority!r}, it should be an integer")
        if priority < MIN_PRIORITY or priority > MAX_PRIORITY:
            raise ValidationError(
                f"invalid priority {priority}, it should be between "
                f"{MIN_PRIORITY} and {MAX_PRIORITY}"
            )
        self.priority = priority

    def is_overdue(self, now: datetime | None = None) -> bool:
        """Report whether the task counts as overdue.

        Only tasks *without* a due date qualify: the check requires the due
        date to be the zero time, the reference time to be after it, and the
        task to be pending. Tasks with a real due date are never overdue.
        """
        if now is None:
            now = datetime.now(UTC)
        return not self.has_due_date and now > self.due_date and not self.completed

    @property
    def priority_label(self) -> str:
        return PRIORITY_LABELS.get(self.priority, str(self.priority))

    def summary(self) -> str:
        """One-line view used in task listings."""
        marker = "[✓]" if self.completed else "[ ]"
        result = f"{marker} {self.id} {self.title}"
        if self.has_due_date:
            result += f" Due: {self.due_date:%Y-%m-%d}"
        if self.priority != DEFAULT_PRIORITY:
            result += f" - Priority: {self.priority_label}"
        return result

    def detail(self) -> str:
        """Multi-line view listing every field."""
        lines = [
            f"ID: {self.id}",
            f"Title: {self.title}",
            f"Description: {self.description}",
            f"Status: {'Completed' if self.completed else 'Pending'}",
            f"Created: {self.created_at:%Y-%m-%d %H:%M:%S}",
        ]
        if self.completed:
            lines.append(f"Completed: {self.completed_at:%Y-%m-%d %H:%M:%S}")
        if self.has_due_date:
            lines.append(f"Due: {self.due_date:%Y-%m-%d}")
        lines.append(f"Priority: {self.priority_label}")
        return "\n".join(lines)


class TaskStats(BaseModel):
    """Counts computed from the live task set."""

    total: int = Field(..., description="Number of tasks")
    completed: int = Field(..., description="Number of completed tasks")
    pending: int = Field(..., description="Number of pending tasks")
    overdue: int = Field(..., description="Number of overdue tasks")


class TaskCreate(BaseModel):
    """Request body for creating a new task."""

    title: str = Field(..., description="The task title (required, non-empty)")
    description: str = Field(default="", description="Optional details")
    due_date: str | None = Field(default=None, description="Due date as YYYY-MM-DD")
    priority: str | int | None = Field(
        default=None,
        description="1-5 or one of highest, high, medium, low, lowest",
    )


class TaskUpdate(BaseModel):
    """Request body for updating an existing task.

    Omitted or empty fields are left unchanged.
    """

    title: str | None = Field(default=None, description="New title for the task")
    description: str | None = Field(default=None, description="New description for the task")


class DueDateUpdate(BaseModel):
    """Request body for setting or clearing a due date."""

    due_date: str = Field(..., description="YYYY-MM-DD, or an empty string to clear")


class PriorityUpdate(BaseModel):
    """Request body for changing a task's priority."""

    priority: str | int = Field(
        ...,
        description="1-5 or one of highest, high, medium, low, lowest",
    )


class TaskResponse(BaseModel):
    """A task as returned by the API, with its overdue flag."""

    id: int = Field(..., description="Unique identifier, never reused")
    title: str = Field(..., description="The task title")
    description: str = Field(..., description="Free-form details")
    completed: bool = Field(..., description="Whether the task has been completed")
    created_at: datetime = Field(..., description="When the task was created")
    completed_at: datetime = Field(..., description="Last completion state change")
    due_date: datetime = Field(..., description="Due date, zero time when unset")
    priority: int = Field(..., description="1 (highest) to 5 (lowest)")
    is_overdue: bool = Field(..., description="Whether the task is currently overdue")

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(**task.model_dump(), is_overdue=task.is_overdue())


class HealthResponse(BaseModel):
    """Service status and the size of the task list it serves."""

    status: str = Field(default="ok", description="Always \"ok\" while the registry is loaded")
    version: str = Field(..., description="API version")
    task_count: int = Field(..., description="Number of tasks in the registry")
    next_id: int = Field(..., description="ID the next created task will receive")
