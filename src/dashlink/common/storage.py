"""Data storage helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "dashlink"
DEFAULT_SESSION_FILENAME: Final[str] = "session.json"


def get_data_dir() -> Path:
    """Return the directory where dashlink keeps persistent data."""

    env_dir = os.getenv("DASHLINK_DATA_DIR")
    if env_dir:
        return Path(env_dir).expanduser().resolve()

    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")

    return (base_path / APP_DIR_NAME).expanduser().resolve()


def ensure_data_dir(path: Path | None = None) -> Path:
    """Ensure the data directory exists and return it."""

    data_dir = path or get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_session_path() -> Path:
    """Return the persisted session document path, creating its directory."""

    return ensure_data_dir() / DEFAULT_SESSION_FILENAME
