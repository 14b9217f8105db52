"""FastAPI application for the task manager.

Use ``create_app`` with an already-constructed registry; the CLI's
``--api`` flag does this and serves the result with uvicorn.
"""

import threading
from collections.abc import Iterator
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from task_manager.config import Settings
from task_manager.errors import NotFoundError, StorageError, TaskManagerError, ValidationError
from task_manager.middleware import add_request_logging
from task_manager.models import (
    DueDateUpdate,
    HealthResponse,
    PriorityUpdate,
    TaskCreate,
    TaskResponse,
    TaskStats,
    TaskUpdate,
)
from task_manager.registry import TaskRegistry
from task_manager.utils import parse_due_date, parse_priority

API_VERSION = "1.0.0"

SortKey = Literal["priority", "due_date"]

_ERROR_STATUS: dict[type[TaskManagerError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def locked_registry(request: Request) -> Iterator[TaskRegistry]:
    """Hold the app-wide registry lock while a request uses the registry."""
    with request.app.state.registry_lock:
        yield request.app.state.registry


Registry = Annotated[TaskRegistry, Depends(locked_registry)]

router = APIRouter(prefix="/api/v1", tags=["Tasks"])


@router.get("/health", response_model=HealthResponse, tags=["System"])
def health_check(registry: Registry) -> HealthResponse:
    """Report that the registry is loaded, with its task count and next ID."""
    return HealthResponse(version=API_VERSION, task_count=len(registry), next_id=registry.next_id)


@router.get("/tasks", response_model=list[TaskResponse])
def list_tasks(
    registry: Registry,
    completed: bool | None = None,
    overdue: bool = False,
    sort: SortKey | None = None,
) -> list[TaskResponse]:
    """List tasks, optionally filtered by completion state or overdue status."""
    if completed is True:
        tasks = registry.list_completed()
    elif completed is False:
        tasks = registry.list_pending()
    elif overdue:
        tasks = registry.list_overdue()
    else:
        tasks = registry.list_all()

    if sort == "priority":
        tasks = registry.sort_by_priority(tasks)
    elif sort == "due_date":
        tasks = registry.sort_by_due_date(tasks)
    return [TaskResponse.from_task(task) for task in tasks]


@router.post("/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(data: TaskCreate, registry: Registry) -> TaskResponse:
    """Create a new task, with an optional due date and priority."""
    due_date = parse_due_date(data.due_date) if data.due_date else None
    priority = parse_priority(data.priority) if data.priority not in (None, "") else None

    with registry.batch():
        task = registry.add(data.title, data.description)
        if due_date is not None:
            registry.set_due_date(task.id, due_date)
        if priority is not None:
            registry.set_priority(task.id, priority)
    return TaskResponse.from_task(task)


@router.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(task_id: int, registry: Registry) -> TaskResponse:
    """Get a specific task by ID."""
    return TaskResponse.from_task(registry.get(task_id))


@router.put("/tasks/{task_id}", response_model=TaskResponse)
def update_task(task_id: int, data: TaskUpdate, registry: Registry) -> TaskResponse:
    """Update a task's title and/or description."""
    registry.update(task_id, data.title, data.description)
    return TaskResponse.from_task(registry.get(task_id))


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: int, registry: Registry) -> None:
    """Delete a task."""
    registry.delete(task_id)


@router.patch("/tasks/{task_id}/complete", response_model=TaskResponse)
def complete_task(task_id: int, registry: Registry) -> TaskResponse:
    """Mark a task as completed."""
    registry.mark_complete(task_id)
    return TaskResponse.from_task(registry.get(task_id))


@router.patch("/tasks/{task_id}/uncomplete", response_model=TaskResponse)
def uncomplete_task(task_id: int, registry: Registry) -> TaskResponse:
    """Mark a task as not completed."""
    registry.mark_incomplete(task_id)
    return TaskResponse.from_task(registry.get(task_id))


@router.patch("/tasks/{task_id}/due-date", response_model=TaskResponse)
def set_due_date(task_id: int, data: DueDateUpdate, registry: Registry) -> TaskResponse:
    """Set a task's due date; an empty string clears it."""
    registry.set_due_date(task_id, parse_due_date(data.due_date))
    return TaskResponse.from_task(registry.get(task_id))


@router.patch("/tasks/{task_id}/priority", response_model=TaskResponse)
def set_priority(task_id: int, data: PriorityUpdate, registry: Registry) -> TaskResponse:
    """Set a task's priority by number or name."""
    registry.set_priority(task_id, parse_priority(data.priority))
    return TaskResponse.from_task(registry.get(task_id))


@router.get("/stats", response_model=TaskStats)
def get_stats(registry: Registry) -> TaskStats:
    """Task counts: total, completed, pending and overdue."""
    return registry.stats()


async def _task_manager_error(request: Request, exc: TaskManagerError) -> JSONResponse:
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            status_code = code
            break
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def create_app(registry: TaskRegistry, settings: Settings | None = None) -> FastAPI:
    """Build the API around ``registry``."""
    if settings is None:
        settings = Settings.from_env()

    app = FastAPI(
        title="Task Manager API",
        description="Personal task tracking: tasks, due dates, priorities and stats.",
        version=API_VERSION,
    )
    app.state.registry = registry
    app.state.registry_lock = threading.Lock()

    # Configure CORS for frontend access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    add_request_logging(app)
    app.add_exception_handler(TaskManagerError, _task_manager_error)

    app.include_router(router)
    return app
