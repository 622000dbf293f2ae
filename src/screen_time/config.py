"""Configuration models and helpers for the usage viewer."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Optional

from .paths import get_knowledge_db_path


BREAK_THRESHOLD = timedelta(minutes=10)

DB_ENVVAR = "SCREEN_TIME_DB"


def resolve_db_path(db_path: Optional[Path] = None) -> Path:
    """Pick the explicit path, then ``$SCREEN_TIME_DB``, then the macOS default."""
    if db_path is not None:
        return Path(db_path)
    from_env = os.environ.get(DB_ENVVAR)
    if from_env:
        return Path(from_env).expanduser()
    return get_knowledge_db_path()


@dataclass(slots=True)
class ViewerSettings:
    """Runtime configuration for loading and summarizing usage."""

    db_path: Path = field(default_factory=resolve_db_path)
    break_threshold: timedelta = BREAK_THRESHOLD

    @classmethod
    def from_options(
        cls,
        db_path: Optional[Path] = None,
        break_minutes: Optional[float] = None,
    ) -> "ViewerSettings":
        threshold = (
            timedelta(minutes=break_minutes) if break_minutes is not None else BREAK_THRESHOLD
        )
        return cls(db_path=resolve_db_path(db_path), break_threshold=threshold)
