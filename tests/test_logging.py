"""Tests for request logging and logging setup."""

import logging
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from task_manager.logging_setup import setup_logging


def test_request_is_logged(client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="task_manager.middleware"):
        client.get("/api/v1/tasks")

    (record,) = [r for r in caplog.records if r.name == "task_manager.middleware"]
    assert record.levelno == logging.INFO
    assert "GET /api/v1/tasks | 200" in record.getMessage()


def test_client_error_logged_as_warning(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger="task_manager.middleware"):
        client.get("/api/v1/tasks/42")

    (record,) = [r for r in caplog.records if r.name == "task_manager.middleware"]
    assert record.levelno == logging.WARNING
    assert "| 404 |" in record.getMessage()


def test_setup_logging_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    log_file = tmp_path / "logs" / "task_manager.log"
    try:
        setup_logging(log_file=log_file)
        logging.getLogger("task_manager.test").debug("hello from test")
        logging.getLogger("thirdparty").info("library chatter")
        for handler in root.handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "DEBUG task_manager.test: hello from test" in content
        assert "library chatter" in content
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
