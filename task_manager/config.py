"""Settings loaded from environment variables (+ optional .env).

All variables use the ``TASK_MANAGER_`` prefix. Command-line flags take
precedence over anything set here.
"""

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TASK_MANAGER"

DEFAULT_STORAGE_FILE = "tasks.json"
DEFAULT_ADDR = ":8080"
DEFAULT_DATA_DIR = Path("~/.task_manager")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv
    except ImportError:
        return
    load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


@dataclass(frozen=True, slots=True)
class Settings:
    storage_file: str
    addr: str
    log_level: str
    log_file: Path | None
    cors_origins: list[str]

    @staticmethod
    def from_env() -> "Settings":
        _load_dotenv_if_available()
        log_file = _env(_k("LOG_FILE"))
        return Settings(
            storage_file=_env(_k("FILE"), DEFAULT_STORAGE_FILE),
            addr=_env(_k("ADDR"), DEFAULT_ADDR),
            log_level=_env(_k("LOG_LEVEL"), "INFO").upper(),
            log_file=Path(log_file).expanduser() if log_file else None,
            cors_origins=_env_list(_k("CORS_ORIGINS"), ["http://localhost:3000"]),
        )


def resolve_storage_path(storage_file: str | Path, data_dir: Path = DEFAULT_DATA_DIR) -> Path:
    """Place relative storage files under the per-user data directory."""
    path = Path(storage_file).expanduser()
    if path.is_absolute():
        return path
    return data_dir.expanduser() / path


def parse_addr(addr: str) -> tuple[str, int]:
    """Split ``host:port`` (``:port`` listens on every interface)."""
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid address {addr!r}, expected HOST:PORT or :PORT")
    port_num = int(port)
    if not 0 < port_num < 65536:
        raise ValueError(f"invalid port {port_num} in address {addr!r}")
    return host or "0.0.0.0", port_num
