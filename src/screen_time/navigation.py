"""Selection state for the two-tab summary browser."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Sequence

from .models import DailySummary, WeeklySummary
from .reporting import (
    day_label,
    format_daily_summary,
    format_weekly_summary,
    week_label,
)

PLACEHOLDER_DETAIL = "No data available"


class Tab(enum.Enum):
    DAILY = "Daily Analysis"
    WEEKLY = "Weekly Analysis"


class Command(enum.Enum):
    SELECT_DAILY_TAB = "select_daily_tab"
    SELECT_WEEKLY_TAB = "select_weekly_tab"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    QUIT = "quit"


# ANSI escape sequences plus the two Windows console prefixes.
_KEY_COMMANDS: dict[str, Command] = {
    "\x1b[D": Command.SELECT_DAILY_TAB,
    "\x1bOD": Command.SELECT_DAILY_TAB,
    "\xe0K": Command.SELECT_DAILY_TAB,
    "\x00K": Command.SELECT_DAILY_TAB,
    "\x1b[C": Command.SELECT_WEEKLY_TAB,
    "\x1bOC": Command.SELECT_WEEKLY_TAB,
    "\xe0M": Command.SELECT_WEEKLY_TAB,
    "\x00M": Command.SELECT_WEEKLY_TAB,
    "\x1b[A": Command.MOVE_UP,
    "\x1bOA": Command.MOVE_UP,
    "\xe0H": Command.MOVE_UP,
    "\x00H": Command.MOVE_UP,
    "\x1b[B": Command.MOVE_DOWN,
    "\x1bOB": Command.MOVE_DOWN,
    "\xe0P": Command.MOVE_DOWN,
    "\x00P": Command.MOVE_DOWN,
    "\x1b": Command.QUIT,
    "q": Command.QUIT,
}

_MAX_KEY_LENGTH = max(len(key) for key in _KEY_COMMANDS)


@dataclass(frozen=True)
class ViewState:
    selected_tab: Tab = Tab.DAILY
    selected_index: int = 0
    running: bool = True


@dataclass(frozen=True)
class Row:
    is_selected: bool
    label: str


@dataclass(frozen=True)
class Projection:
    rows: list[Row]
    detail_text: str


def command_for_key(key: str) -> Optional[Command]:
    """Translate a raw key read from the terminal; unknown keys map to None."""
    return _KEY_COMMANDS.get(key)


def commands_for_keys(buffer: str) -> list[Command]:
    """Split one terminal read into the commands it holds.

    A held-down arrow can deliver several escape sequences in a single read.
    A bare Esc quits only when it is the whole read; inside a longer read an
    unknown escape sequence is skipped up to the next Esc.
    """
    single = command_for_key(buffer)
    if single is not None:
        return [single]

    commands: list[Command] = []
    index = 0
    while index < len(buffer):
        for length in range(_MAX_KEY_LENGTH, 1, -1):
            command = _KEY_COMMANDS.get(buffer[index : index + length])
            if command is not None:
                commands.append(command)
                index += length
                break
        else:
            if buffer[index] == "\x1b":
                next_escape = buffer.find("\x1b", index + 1)
                index = len(buffer) if next_escape == -1 else next_escape
                continue
            command = _KEY_COMMANDS.get(buffer[index])
            if command is not None:
                commands.append(command)
            index += 1
    return commands


def apply(
    state: ViewState,
    command: Optional[Command],
    daily_count: int,
    weekly_count: int,
) -> ViewState:
    """Return the state that follows ``command``. Never fails."""
    if command is Command.SELECT_DAILY_TAB:
        return replace(state, selected_tab=Tab.DAILY, selected_index=0)
    if command is Command.SELECT_WEEKLY_TAB:
        return replace(state, selected_tab=Tab.WEEKLY, selected_index=0)
    if command is Command.MOVE_UP:
        return replace(state, selected_index=max(state.selected_index - 1, 0))
    if command is Command.MOVE_DOWN:
        count = daily_count if state.selected_tab is Tab.DAILY else weekly_count
        return replace(
            state, selected_index=min(state.selected_index + 1, max(count - 1, 0))
        )
    if command is Command.QUIT:
        return replace(state, running=False)
    return state


def project(
    state: ViewState,
    daily: Sequence[tuple[date, DailySummary]],
    weekly: Sequence[tuple[int, WeeklySummary]],
) -> Projection:
    """Build the list rows and detail text for the active tab."""
    if state.selected_tab is Tab.DAILY:
        labels = [day_label(day) for day, _ in daily]
        selected = _entry_at(daily, state.selected_index)
        detail_text = format_daily_summary(selected) if selected is not None else PLACEHOLDER_DETAIL
    else:
        labels = [week_label(number, summary) for number, summary in weekly]
        selected = _entry_at(weekly, state.selected_index)
        detail_text = format_weekly_summary(selected) if selected is not None else PLACEHOLDER_DETAIL

    rows = [
        Row(is_selected=index == state.selected_index, label=label)
        for index, label in enumerate(labels)
    ]
    return Projection(rows=rows, detail_text=detail_text)


def _entry_at(entries: Sequence[tuple[object, object]], index: int):
    if 0 <= index < len(entries):
        return entries[index][1]
    return None
