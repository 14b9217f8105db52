"""Tests for JSON file storage."""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from task_manager.errors import DecodeError, StorageError
from task_manager.models import ZERO_TIME, Task
from task_manager.storage import JSONStorage


def _sample_tasks() -> list[Task]:
    first = Task.create(1, "Task 1", "Description 1")
    first.set_priority(1)
    first.set_due_date(datetime(2030, 6, 1, tzinfo=UTC))
    second = Task.create(2, "Task 2", "")
    second.mark_complete()
    return [first, second]


def test_load_missing_file(json_storage: JSONStorage) -> None:
    """Test that a missing file loads as an empty list."""
    assert not json_storage.path.exists()
    assert json_storage.load() == []


def test_load_empty_file(json_storage: JSONStorage) -> None:
    json_storage.path.parent.mkdir(parents=True)
    json_storage.path.write_text("")
    assert json_storage.load() == []

    json_storage.path.write_text("  \n")
    assert json_storage.load() == []


def test_load_malformed_json(json_storage: JSONStorage) -> None:
    json_storage.path.parent.mkdir(parents=True)
    json_storage.path.write_text("[{not json")

    with pytest.raises(DecodeError):
        json_storage.load()


def test_load_wrong_shape(json_storage: JSONStorage) -> None:
    """Test that valid JSON which is not a task list is a decode error."""
    json_storage.path.parent.mkdir(parents=True)
    json_storage.path.write_text(json.dumps({"id": 1}))

    with pytest.raises(StorageError):
        json_storage.load()


def test_round_trip(json_storage: JSONStorage) -> None:
    """Test that saved tasks load back equal."""
    tasks = _sample_tasks()
    json_storage.save(tasks)

    loaded = json_storage.load()
    assert loaded == tasks
    assert [t.id for t in loaded] == [1, 2]


def test_save_creates_parent_dirs(tmp_path: Path) -> None:
    storage = JSONStorage(tmp_path / "a" / "b" / "tasks.json")
    storage.save([])
    assert json.loads(storage.path.read_text()) == []


def test_save_file_layout(json_storage: JSONStorage) -> None:
    """Test the on-disk format: a JSON array with the persisted keys."""
    json_storage.save(_sample_tasks())

    data = json.loads(json_storage.path.read_text())
    assert isinstance(data, list)
    assert set(data[0]) == {
        "id",
        "title",
        "description",
        "completed",
        "created_at",
        "completed_at",
        "due_date",
        "priority",
    }
    assert data[0]["due_date"] == "2030-06-01T00:00:00Z"
    assert data[1]["due_date"] == "0001-01-01T00:00:00Z"
    assert data[1]["completed"] is True


def test_save_overwrites(json_storage: JSONStorage) -> None:
    json_storage.save(_sample_tasks())
    json_storage.save([Task.create(5, "Only", "")])

    loaded = json_storage.load()
    assert [t.id for t in loaded] == [5]


def test_save_leaves_no_temp_files(json_storage: JSONStorage) -> None:
    json_storage.save(_sample_tasks())
    json_storage.save(_sample_tasks())
    assert [p.name for p in json_storage.path.parent.iterdir()] == ["tasks.json"]


def test_save_unwritable_path(tmp_path: Path) -> None:
    """Test that a path blocked by a regular file fails with OSError."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    storage = JSONStorage(blocker / "tasks.json")

    with pytest.raises(OSError):
        storage.save([])


def test_load_file_written_by_older_version(json_storage: JSONStorage) -> None:
    """Test loading zero timestamps and offsets as written by earlier versions."""
    json_storage.path.parent.mkdir(parents=True)
    json_storage.path.write_text(
        json.dumps(
            [
                {
                    "id": 4,
                    "title": "Legacy",
                    "description": "",
                    "completed": False,
                    "created_at": "2024-03-01T10:00:00.123456+02:00",
                    "completed_at": "0001-01-01T00:00:00Z",
                    "due_date": "0001-01-01T00:00:00Z",
                    "priority": 3,
                }
            ]
        )
    )

    (task,) = json_storage.load()
    assert task.id == 4
    assert task.due_date == ZERO_TIME
    assert task.has_due_date is False


def test_load_null_document(json_storage: JSONStorage) -> None:
    """Test that a file holding only JSON null loads as an empty list."""
    json_storage.path.parent.mkdir(parents=True)
    json_storage.path.write_text("null\n")
    assert json_storage.load() == []
