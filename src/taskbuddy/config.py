# src/taskbuddy/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Everything local lives under a gitignored data dir.
- Tests never import this module's singleton; they build their own settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .tasks.task_models import Category

ENV_PREFIX = "TASKBUDDY"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


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

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    store_db_path: Path
    export_dir: Path

    # ---- Tasks ----
    storage_key: str
    default_category: Category

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "TaskBuddy").strip() or "TaskBuddy"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskbuddy"))
        store_db_path = _env_path(_k("STORE_DB_PATH"), data_dir / "taskbuddy.sqlite3")
        export_dir = _env_path(_k("EXPORT_DIR"), data_dir / "exports")

        storage_key = _env(_k("STORAGE_KEY"), "taskbuddy-snapshot").strip() or "taskbuddy-snapshot"
        # Unknown values fall back to Personal rather than failing at import time.
        default_category = Category.parse(_env(_k("DEFAULT_CATEGORY"))) or Category.PERSONAL

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            store_db_path=store_db_path,
            export_dir=export_dir,
            storage_key=storage_key,
            default_category=default_category,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
