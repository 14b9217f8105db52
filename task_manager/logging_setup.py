"""Logging configuration for the CLI and the API server."""

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """Keep task_manager logs; let third-party loggers through only at WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "task_manager" or record.name.startswith("task_manager."):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(
    *,
    console_level: int = logging.WARNING,
    log_file: str | Path | None = None,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure the root logger with:
    - Console handler on stderr, filtered
    - File handler with full logs, if log_file is given

    Call this once, before the first log record is emitted.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)
