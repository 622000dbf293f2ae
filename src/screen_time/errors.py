"""Exceptions raised while loading or displaying usage data."""

from __future__ import annotations

from pathlib import Path


class ScreenTimeError(Exception):
    """Base class for failures reported to the user."""


class SourceUnavailable(ScreenTimeError):
    """The usage database cannot be located, read or opened."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{reason} ({self.path})")


class SourceQueryFailure(ScreenTimeError):
    """The usage query failed after the database was opened."""


class MalformedRow(SourceQueryFailure):
    """A fetched row does not carry the fields an event needs."""


class RenderLoopFailure(ScreenTimeError):
    """The terminal backend failed while drawing or reading input."""
