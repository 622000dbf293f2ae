"""Command-line interface for the usage viewer."""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import NoReturn, Optional

import typer

from .aggregation import aggregate_daily, aggregate_weekly
from .config import ViewerSettings
from .errors import RenderLoopFailure, ScreenTimeError
from .models import DailySummary, WeeklySummary
from .paths import get_log_path

logger = logging.getLogger(__name__)

app = typer.Typer(help="Browse daily and weekly app usage recorded by macOS.")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        filename=str(get_log_path()),
    )
    if ctx.invoked_subcommand is None:
        view(db_path=None, break_minutes=None)


@app.command()
def view(
    db_path: Optional[Path] = typer.Option(
        None,
        "--db",
        path_type=Path,
        help="Location of the knowledgeC database (or set SCREEN_TIME_DB).",
    ),
    break_minutes: Optional[float] = typer.Option(
        None,
        "--break-threshold",
        min=0.0,
        help="Minutes between sessions before the gap counts as a break (default 10).",
    ),
) -> None:
    """Open the interactive daily/weekly usage browser."""
    from .tui import run_viewer

    settings = ViewerSettings.from_options(db_path=db_path, break_minutes=break_minutes)
    daily, weekly = _load_summaries(settings)
    try:
        run_viewer(daily, weekly)
    except RenderLoopFailure as exc:
        _fail(str(exc))


@app.command()
def summary(
    day: Optional[str] = typer.Option(
        None,
        "--date",
        help="Date (YYYY-MM-DD) to summarize. Defaults to today.",
    ),
    db_path: Optional[Path] = typer.Option(
        None,
        "--db",
        path_type=Path,
        help="Location of the knowledgeC database (or set SCREEN_TIME_DB).",
    ),
    break_minutes: Optional[float] = typer.Option(
        None,
        "--break-threshold",
        min=0.0,
        help="Minutes between sessions before the gap counts as a break (default 10).",
    ),
) -> None:
    """Print the usage summary for a single day."""
    from .reporting import SummaryPrinter

    target = _parse_day(day) if day else date.today()
    settings = ViewerSettings.from_options(db_path=db_path, break_minutes=break_minutes)
    try:
        SummaryPrinter(settings).print_daily_summary(target)
    except ScreenTimeError as exc:
        _fail(str(exc))


def _load_summaries(
    settings: ViewerSettings,
) -> tuple[list[tuple[date, DailySummary]], list[tuple[int, WeeklySummary]]]:
    from .db import load_usage_events

    try:
        events = load_usage_events(settings.db_path)
    except ScreenTimeError as exc:
        _fail(str(exc))
    daily = aggregate_daily(events, break_threshold=settings.break_threshold)
    weekly = aggregate_weekly(daily)
    logger.info("Summarized %d events into %d days.", len(events), len(daily))
    return daily, weekly


def _parse_day(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got {value!r}.") from exc


def _fail(message: str) -> NoReturn:
    logger.error(message)
    typer.echo(message, err=True)
    raise typer.Exit(code=1)
