"""Pytest fixtures for the task manager tests."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from task_manager.config import Settings
from task_manager.main import create_app
from task_manager.models import Task
from task_manager.registry import TaskRegistry
from task_manager.storage import JSONStorage, TaskStorage


class FakeStorage(TaskStorage):
    """In-memory storage with injectable failures."""

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self.tasks: list[Task] = list(tasks or [])
        self.load_error: Exception | None = None
        self.save_error: Exception | None = None
        self.save_calls = 0

    def load(self) -> list[Task]:
        if self.load_error is not None:
            raise self.load_error
        return [task.model_copy() for task in self.tasks]

    def save(self, tasks: list[Task]) -> None:
        if self.save_error is not None:
            raise self.save_error
        self.save_calls += 1
        self.tasks = [task.model_copy() for task in tasks]


@pytest.fixture
def storage() -> FakeStorage:
    """Empty in-memory storage."""
    return FakeStorage()


@pytest.fixture
def registry(storage: FakeStorage) -> TaskRegistry:
    """Registry over the in-memory storage."""
    return TaskRegistry(storage)


@pytest.fixture
def json_storage(tmp_path: Path) -> JSONStorage:
    """JSON file storage in a per-test directory."""
    return JSONStorage(tmp_path / "data" / "tasks.json")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage_file="tasks.json",
        addr=":8080",
        log_level="INFO",
        log_file=None,
        cors_origins=["http://localhost:3000"],
    )


@pytest.fixture
def client(registry: TaskRegistry, settings: Settings) -> TestClient:
    """Create a test client for the API."""
    return TestClient(create_app(registry, settings))
