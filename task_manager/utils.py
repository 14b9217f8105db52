"""Parsing and formatting helpers shared by the CLI and the API."""

from collections.abc import Sequence
from datetime import UTC, datetime

from task_manager.errors import ValidationError
from task_manager.models import MAX_PRIORITY, MIN_PRIORITY, PRIORITY_LABELS, ZERO_TIME, Task

DATE_FORMAT = "%Y-%m-%d"

_PRIORITY_NAMES = {label.lower(): value for value, label in PRIORITY_LABELS.items()}


def parse_due_date(text: str | None) -> datetime:
    """Parse ``YYYY-MM-DD`` into midnight UTC; empty input means no due date."""
    if not text:
        return ZERO_TIME
    try:
        parsed = datetime.strptime(text.strip(), DATE_FORMAT)
    except ValueError as exc:
        raise ValidationError(f"invalid date format, please use YYYY-MM-DD: {text!r}") from exc
    return parsed.replace(tzinfo=UTC)


def parse_priority(value: str | int) -> int:
    """Parse a priority given as a number (1-5) or a name (highest..lowest)."""
    if isinstance(value, int) and not isinstance(value, bool):
        priority = value
    else:
        text = str(value).strip().lower()
        if not text:
            raise ValidationError("priority is required")
        if text in _PRIORITY_NAMES:
            return _PRIORITY_NAMES[text]
        try:
            priority = int(text)
        except ValueError:
            raise ValidationError(
                "invalid priority format, please use a number between 1 and 5 "
                "or one of: highest, high, medium, low, lowest"
            ) from None

    if priority < MIN_PRIORITY or priority > MAX_PRIORITY:
        raise ValidationError(f"invalid priority {priority}, it should be between 1 and 5")
    return priority


def format_task_list(tasks: Sequence[Task], show_details: bool = False) -> str:
    if not tasks:
        return "No tasks available."
    if show_details:
        return "\n\n".join(task.detail() for task in tasks)
    return "\n".join(task.summary() for task in tasks)
