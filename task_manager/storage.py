"""Task persistence.

``TaskStorage`` is the contract the registry depends on: load the whole
task list, save the whole task list. ``JSONStorage`` keeps the list in a
single JSON file.
"""

import contextlib
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from task_manager.errors import DecodeError
from task_manager.models import Task

logger = logging.getLogger(__name__)

_task_list = TypeAdapter(list[Task])


class TaskStorage(ABC):
    """Load/save contract for a persistent task list."""

    @abstractmethod
    def load(self) -> list[Task]:
        """Return every persisted task in stored order.

        Returns an empty list when nothing has been saved yet.
        """

    @abstractmethod
    def save(self, tasks: list[Task]) -> None:
        """Replace the persisted task list with ``tasks``."""


class JSONStorage(TaskStorage):
    """Stores tasks as a JSON array in one file.

    Saves go through a temporary file in the same directory followed by
    ``os.replace`` so readers never observe a half-written file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> list[Task]:
        if not self.path.exists():
            logger.debug("No task file at %s, starting empty", self.path)
            return []

        raw = self.path.read_bytes().strip()
        # A bare null document is an empty list, as older files may hold.
        if not raw or raw == b"null":
            return []

        try:
            return _task_list.validate_json(raw)
        except PydanticValidationError as exc:
            raise DecodeError(f"invalid task file {self.path}: {exc}") from exc

    def save(self, tasks: list[Task]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = _task_list.dump_json(tasks, indent=2)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            dir=self.path.parent,
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise
        logger.debug("Saved %d tasks to %s", len(tasks), self.path)
