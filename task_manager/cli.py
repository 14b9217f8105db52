"""Command-line front end.

    task-manager add "Buy groceries" "Milk, eggs, bread"
    task-manager list
    task-manager complete 1
    task-manager due 2 2026-12-31
    task-manager priority 3 high
    task-manager --api --addr :8080
"""

import argparse
import logging
import sys
from collections.abc import Callable, Sequence

from task_manager.config import Settings, parse_addr, resolve_storage_path
from task_manager.errors import StorageError, TaskManagerError
from task_manager.logging_setup import setup_logging
from task_manager.models import Task
from task_manager.registry import TaskRegistry
from task_manager.storage import JSONStorage
from task_manager.utils import format_task_list, parse_due_date, parse_priority

logger = logging.getLogger(__name__)


def _task_id(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid task ID: {text!r}") from None


def _print_tasks(
    heading: str,
    tasks: list[Task],
    registry: TaskRegistry,
    args: argparse.Namespace,
) -> None:
    sort = getattr(args, "sort", None)
    if sort == "priority":
        tasks = registry.sort_by_priority(tasks)
    elif sort == "due_date":
        tasks = registry.sort_by_due_date(tasks)
    print(f"{heading}:")
    print(format_task_list(tasks, getattr(args, "details", False)))


# ---- commands ----


def cmd_add(registry: TaskRegistry, args: argparse.Namespace) -> None:
    task = registry.add(args.title, " ".join(args.description))
    print(f"Task added: {task.summary()}")


def cmd_list_pending(registry: TaskRegistry, args: argparse.Namespace) -> None:
    _print_tasks("Pending Tasks", registry.list_pending(), registry, args)


def cmd_list_all(registry: TaskRegistry, args: argparse.Namespace) -> None:
    tasks = registry.list_all()
    if not tasks:
        print("No tasks found.")
        return
    _print_tasks("All Tasks", tasks, registry, args)


def cmd_list_completed(registry: TaskRegistry, args: argparse.Namespace) -> None:
    _print_tasks("Completed Tasks", registry.list_completed(), registry, args)


def cmd_list_overdue(registry: TaskRegistry, args: argparse.Namespace) -> None:
    _print_tasks("Overdue Tasks", registry.list_overdue(), registry, args)


def cmd_detail(registry: TaskRegistry, args: argparse.Namespace) -> None:
    print(registry.get(args.id).detail())


def cmd_complete(registry: TaskRegistry, args: argparse.Namespace) -> None:
    registry.mark_complete(args.id)
    print(f"Task {args.id} marked as completed.")


def cmd_uncomplete(registry: TaskRegistry, args: argparse.Namespace) -> None:
    registry.mark_incomplete(args.id)
    print(f"Task {args.id} marked as uncompleted.")


def cmd_update(registry: TaskRegistry, args: argparse.Namespace) -> None:
    registry.update(args.id, args.title, " ".join(args.description))
    print(f"Task updated: {args.id}")


def cmd_delete(registry: TaskRegistry, args: argparse.Namespace) -> None:
    registry.delete(args.id)
    print(f"Task {args.id} deleted successfully.")


def cmd_due(registry: TaskRegistry, args: argparse.Namespace) -> None:
    registry.set_due_date(args.id, parse_due_date(args.date))
    print(f"Due date set for task {args.id}.")


def cmd_priority(registry: TaskRegistry, args: argparse.Namespace) -> None:
    registry.set_priority(args.id, parse_priority(args.priority))
    print(f"Priority set for task {args.id}.")


def cmd_stats(registry: TaskRegistry, args: argparse.Namespace) -> None:
    stats = registry.stats()
    print("Task Statistics:")
    print(f"Total Tasks: {stats.total}")
    print(f"Completed Tasks: {stats.completed}")
    print(f"Pending Tasks: {stats.pending}")
    print(f"Overdue Tasks: {stats.overdue}")


# ---- parser ----


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="task-manager",
        description="Task Manager - a simple CLI task management application",
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--file",
        help="Storage file path (default: tasks.json under ~/.task_manager)",
    )
    parser.add_argument("--api", action="store_true", help="Run the API server")
    parser.add_argument("--addr", help="API server address (default: :8080)")
    parser.add_argument(
        "--log-level",
        help="Console log level (default: TASK_MANAGER_LOG_LEVEL with --api, else WARNING)",
    )
    parser.set_defaults(func=cmd_list_pending, action="listing tasks")

    sub = parser.add_subparsers(dest="command", metavar="command")

    def add_command(
        name: str,
        aliases: list[str],
        func: Callable[[TaskRegistry, argparse.Namespace], None],
        action: str,
        help_text: str,
    ) -> argparse.ArgumentParser:
        p = sub.add_parser(name, aliases=aliases, help=help_text)
        p.set_defaults(func=func, action=action)
        return p

    def add_listing(name: str, aliases: list[str], func, help_text: str) -> None:
        p = add_command(name, aliases, func, "listing tasks", help_text)
        p.add_argument("--details", action="store_true", help="Show every field")
        p.add_argument("--sort", choices=["priority", "due_date"], help="Sort the listing")

    p = add_command("add", ["a"], cmd_add, "adding task", "Add a new task")
    p.add_argument("title")
    p.add_argument("description", nargs="*")

    add_listing("list", ["ls", "l"], cmd_list_pending, "List pending tasks")
    add_listing("list-all", ["la"], cmd_list_all, "List all tasks")
    add_listing("list-completed", ["lc"], cmd_list_completed, "List completed tasks")
    add_listing("list-pending", ["lp"], cmd_list_pending, "List pending tasks")
    add_listing("list-overdue", ["lo"], cmd_list_overdue, "List overdue tasks")

    p = add_command("detail", ["d"], cmd_detail, "getting task", "Show task details")
    p.add_argument("id", type=_task_id)

    p = add_command(
        "complete", ["comp", "c"], cmd_complete, "completing task",
        "Mark task as complete",
    )
    p.add_argument("id", type=_task_id)

    p = add_command(
        "uncomplete", ["uc"], cmd_uncomplete, "uncompleting task",
        "Mark task as incomplete",
    )
    p.add_argument("id", type=_task_id)

    p = add_command(
        "update", ["u"], cmd_update, "updating task",
        "Update task title and description",
    )
    p.add_argument("id", type=_task_id)
    p.add_argument("title")
    p.add_argument("description", nargs="*")

    p = add_command("delete", ["del", "rm"], cmd_delete, "deleting task", "Delete task")
    p.add_argument("id", type=_task_id)

    p = add_command(
        "due", ["due-date"], cmd_due, "setting due date",
        "Set task due date (YYYY-MM-DD)",
    )
    p.add_argument("id", type=_task_id)
    p.add_argument("date")

    p = add_command(
        "priority", ["p"], cmd_priority, "setting priority",
        "Set task priority (1=highest, 5=lowest, or a name)",
    )
    p.add_argument("id", type=_task_id)
    p.add_argument("priority")

    add_command("stats", ["st"], cmd_stats, "showing stats", "Show task statistics")
    sub.add_parser("help", aliases=["h"], help="Show help").set_defaults(func=None)

    return parser


def serve(registry: TaskRegistry, settings: Settings, addr: str) -> None:
    import uvicorn

    from task_manager.main import create_app

    host, port = parse_addr(addr)
    logger.info("Starting API server on %s:%d", host, port)
    uvicorn.run(create_app(registry, settings), host=host, port=port, log_config=None)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.func is None:
        parser.print_help()
        return 0

    settings = Settings.from_env()
    # Plain commands stay quiet unless asked; the server logs at the configured level.
    level_name = (args.log_level or (settings.log_level if args.api else "WARNING")).upper()
    setup_logging(
        console_level=getattr(logging, level_name, logging.WARNING),
        log_file=settings.log_file,
    )

    storage_path = resolve_storage_path(args.file or settings.storage_file)
    try:
        registry = TaskRegistry(JSONStorage(storage_path))
    except StorageError as exc:
        print(f"Error creating task manager: {exc}", file=sys.stderr)
        return 1

    if args.api:
        try:
            serve(registry, settings, args.addr or settings.addr)
        except ValueError as exc:
            print(f"Error starting API server: {exc}", file=sys.stderr)
            return 1
        return 0

    try:
        args.func(registry, args)
    except TaskManagerError as exc:
        print(f"Error {args.action}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
