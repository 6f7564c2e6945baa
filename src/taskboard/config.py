# src/taskboard/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKBOARD"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_optional_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Initial data ----
    tasks_source: str
    load_timeout_seconds: float
    seed_count: int
    seed: int | None

    # ---- Console ----
    undo_window_seconds: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    export_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskboard").strip() or "taskboard"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        tasks_source = _env(_k("TASKS_SOURCE"), "tasks.json").strip() or "tasks.json"
        load_timeout_seconds = max(0.1, _env_float(_k("LOAD_TIMEOUT_SECONDS"), 10.0))
        seed_count = max(1, _env_int(_k("SEED_COUNT"), 50))
        seed = _env_optional_int(_k("SEED"))

        undo_window_seconds = max(0.0, _env_float(_k("UNDO_WINDOW_SECONDS"), 10.0))

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskboard"))
        export_path = _env_path(_k("EXPORT_PATH"), data_dir / "tasks.csv")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            tasks_source=tasks_source,
            load_timeout_seconds=load_timeout_seconds,
            seed_count=seed_count,
            seed=seed,
            undo_window_seconds=undo_window_seconds,
            data_dir=data_dir,
            export_path=export_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
