"""Helpers for locating the usage source and application directories."""

from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "ScreenTime"
APP_AUTHOR = "ScreenTime"

KNOWLEDGE_DB_RELATIVE = Path("Library/Application Support/Knowledge/knowledgeC.db")


def get_knowledge_db_path() -> Path:
    """Return the default location of the macOS knowledgeC database."""
    return Path.home() / KNOWLEDGE_DB_RELATIVE


def get_data_dir() -> Path:
    """Return the base directory for persistent data."""
    dirs = PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)
    path = Path(dirs.user_data_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_log_path() -> Path:
    return get_data_dir() / "viewer.log"
