"""Tests for the health check endpoint."""

from fastapi.testclient import TestClient

from task_manager.registry import TaskRegistry


def test_health_check_empty(client: TestClient) -> None:
    """Test that a fresh registry reports no tasks and ID 1 next."""
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "version": "1.0.0",
        "task_count": 0,
        "next_id": 1,
    }


def test_health_check_tracks_registry(client: TestClient, registry: TaskRegistry) -> None:
    """Test that deletions lower the count but never the next ID."""
    registry.add("A", "")
    registry.add("B", "")
    registry.delete(1)

    data = client.get("/api/v1/health").json()
    assert data["task_count"] == 1
    assert data["next_id"] == 3


def test_health_check_is_versioned(client: TestClient) -> None:
    assert client.get("/api/health").status_code == 404
