"""Exceptions raised by the task manager.

Every registry operation fails with one of ValidationError, NotFoundError
or StorageError so that the CLI and the API can map failures to messages
and status codes without inspecting error text.
"""


class TaskManagerError(Exception):
    """Base class for all task manager errors."""


class ValidationError(TaskManagerError):
    """Bad input: empty title, out-of-range priority, unparseable date."""


class NotFoundError(TaskManagerError):
    """No task with the requested ID exists."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"task with ID {task_id} not found")
        self.task_id = task_id


class StorageError(TaskManagerError):
    """Loading or saving tasks failed."""


class DecodeError(StorageError):
    """The storage file exists but does not hold a valid task list."""
