"""In-memory task registry.

The registry owns the task list and the next-ID counter. Every mutation is
written through to the storage backend before the call returns, unless
the caller groups several mutations inside ``batch()``.

Registries are plain objects: build one per storage backend and pass it to
whatever needs it. No locking happens here; embedders that call from
several threads must serialize access themselves.
"""

import contextlib
import logging
from collections.abc import Iterable, Iterator
from datetime import datetime

from task_manager.errors import NotFoundError, StorageError, ValidationError
from task_manager.models import Task, TaskStats
from task_manager.storage import TaskStorage

logger = logging.getLogger(__name__)


class TaskRegistry:
    """Task lifecycle manager backed by a ``TaskStorage``."""

    def __init__(self, storage: TaskStorage) -> None:
        """Load the persisted tasks.

        Raises StorageError if the backend cannot load; there is no
        fallback to an empty list.
        """
        self._storage = storage
        self._tasks: list[Task] = []
        self._next_id = 1
        self._batch_depth = 0
        self._dirty = False
        self.reload()

    @property
    def next_id(self) -> int:
        """ID the next added task will receive."""
        return self._next_id

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- persistence ----

    def reload(self) -> None:
        """Replace the in-memory set with what the backend holds."""
        try:
            tasks = self._storage.load()
        except (OSError, StorageError) as exc:
            logger.warning("Loading tasks failed: %s", exc)
            raise StorageError(f"error loading tasks: {exc}") from exc

        self._tasks = list(tasks)
        self._next_id = max((task.id for task in self._tasks), default=0) + 1
        self._dirty = False
        logger.info("Loaded %d tasks, next id %d", len(self._tasks), self._next_id)

    def save(self) -> None:
        """Persist the full task list now."""
        try:
            self._storage.save(list(self._tasks))
        except (OSError, StorageError) as exc:
            logger.warning("Saving %d tasks failed: %s", len(self._tasks), exc)
            raise StorageError(f"failed to save tasks: {exc}") from exc
        self._dirty = False

    def _commit(self) -> None:
        if self._batch_depth:
            self._dirty = True
            return
        self.save()

    @contextlib.contextmanager
    def batch(self) -> Iterator["TaskRegistry"]:
        """Group mutations so they are saved once, on normal exit.

        If the block raises, nothing is saved and the in-memory changes
        stay unsaved until the next successful save.
        """
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
        if not self._batch_depth and self._dirty:
            self.save()

    # ---- mutations ----

    def add(self, title: str, description: str = "") -> Task:
        """Create a task with the next ID and persist it."""
        if not title:
            raise ValidationError("title cannot be empty")

        task = Task.create(self._next_id, title, description)
        self._tasks.append(task)
        self._next_id += 1
        logger.debug("Added task id=%d", task.id)

        self._commit()
        return task

    def get(self, task_id: int) -> Task:
        for task in self._tasks:
            if task.id == task_id:
                return task
        raise NotFoundError(task_id)

    def update(
        self,
        task_id: int,
        title: str | None = None,
        description: str | None = None,
    ) -> None:
        """Change title and/or description; empty values leave a field as is."""
        task = self.get(task_id)
        if title:
            task.title = title
        if description:
            task.description = description
        logger.debug("Updated task id=%d", task_id)
        self._commit()

    def delete(self, task_id: int) -> None:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                del self._tasks[index]
                logger.debug("Deleted task id=%d", task_id)
                self._commit()
                return
        raise NotFoundError(task_id)

    def mark_complete(self, task_id: int) -> None:
        self.get(task_id).mark_complete()
        self._commit()

    def mark_incomplete(self, task_id: int) -> None:
        self.get(task_id).mark_incomplete()
        self._commit()

    def set_due_date(self, task_id: int, due_date: datetime | None) -> None:
        self.get(task_id).set_due_date(due_date)
        self._commit()

    def set_priority(self, task_id: int, priority: int) -> None:
        self.get(task_id).set_priority(priority)
        self._commit()

    # ---- views ----

    def list_all(self) -> list[Task]:
        return list(self._tasks)

    def list_completed(self) -> list[Task]:
        return [task for task in self._tasks if task.completed]

    def list_pending(self) -> list[Task]:
        return [task for task in self._tasks if not task.completed]

    def list_overdue(self) -> list[Task]:
        return [task for task in self._tasks if task.is_overdue()]

    @staticmethod
    def sort_by_priority(tasks: Iterable[Task]) -> list[Task]:
        """Highest urgency (1) first; ties keep their input order."""
        return sorted(tasks, key=lambda t: t.priority)

    @staticmethod
    def sort_by_due_date(tasks: Iterable[Task]) -> list[Task]:
        """Earliest due date first, tasks without a due date last.

        Undated tasks keep their input order among themselves.
        """
        return sorted(tasks, key=lambda t: (not t.has_due_date, t.due_date))

    def stats(self) -> TaskStats:
        return TaskStats(
            total=len(self._tasks),
            completed=len(self.list_completed()),
            pending=len(self.list_pending()),
            overdue=len(self.list_overdue()),
        )
