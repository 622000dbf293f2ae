"""Interactive terminal browser for daily and weekly summaries."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional, Sequence

import click
from rich.console import Console
from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text

from .errors import RenderLoopFailure
from .models import DailySummary, WeeklySummary
from .navigation import Command, Projection, Row, Tab, ViewState, apply, commands_for_keys, project

logger = logging.getLogger(__name__)

HEADER_SIZE = 3
SELECTED_TAB_STYLE = "yellow"
SELECTED_ROW_STYLE = "green"


def build_layout(
    state: ViewState, projection: Projection, *, list_height: Optional[int] = None
) -> Layout:
    """Arrange the tab header above the entries list and the details pane."""
    layout = Layout()
    layout.split_column(Layout(name="header", size=HEADER_SIZE), Layout(name="body"))
    layout["body"].split_row(Layout(name="entries"), Layout(name="details"))

    layout["header"].update(Panel(_tab_titles(state.selected_tab), title="Analysis"))
    layout["entries"].update(
        Panel(_entry_lines(projection.rows, list_height), title="Entries")
    )
    layout["details"].update(Panel(Text(projection.detail_text), title="Details"))
    return layout


def visible_window(count: int, selected: int, height: Optional[int]) -> tuple[int, int]:
    """Return the slice of rows to draw so the selected row stays on screen."""
    if height is None or height <= 0 or count <= height:
        return 0, count
    start = min(max(selected - height + 1, 0), count - height)
    return start, start + height


def run_viewer(
    daily: Sequence[tuple[date, DailySummary]],
    weekly: Sequence[tuple[int, WeeklySummary]],
    *,
    console: Optional[Console] = None,
    read_key: Optional[Callable[[], str]] = None,
) -> ViewState:
    """Draw and read keys until the user quits; returns the final state."""
    console = console or Console()
    read_key = read_key or click.getchar
    state = ViewState()
    logger.info("Viewer started with %d days and %d weeks.", len(daily), len(weekly))

    try:
        with console.screen(hide_cursor=True) as screen:
            while state.running:
                projection = project(state, daily, weekly)
                screen.update(
                    build_layout(state, projection, list_height=_list_height(console))
                )
                for command in _read_commands(read_key):
                    state = apply(state, command, len(daily), len(weekly))
                    if not state.running:
                        break
    except OSError as exc:
        logger.exception("Terminal backend failed.")
        raise RenderLoopFailure(f"TUI Error: {exc}") from exc

    logger.info("Viewer closed.")
    return state


def _read_commands(read_key: Callable[[], str]) -> list[Command]:
    try:
        key = read_key()
    except (KeyboardInterrupt, EOFError):
        return [Command.QUIT]
    return commands_for_keys(key)


def _list_height(console: Console) -> int:
    # Header panel plus the top and bottom border of the entries panel.
    return console.size.height - HEADER_SIZE - 2


def _tab_titles(selected: Tab) -> Text:
    titles = Text()
    for index, tab in enumerate(Tab):
        if index:
            titles.append(" │ ")
        titles.append(tab.value, style=SELECTED_TAB_STYLE if tab is selected else "")
    return titles


def _entry_lines(rows: Sequence[Row], height: Optional[int]) -> Text:
    selected = next((index for index, row in enumerate(rows) if row.is_selected), 0)
    start, end = visible_window(len(rows), selected, height)
    return Text("\n").join(
        Text(row.label, style=SELECTED_ROW_STYLE if row.is_selected else "")
        for row in rows[start:end]
    )
