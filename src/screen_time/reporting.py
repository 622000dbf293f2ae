"""Text formatting for usage summaries."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Union

from .aggregation import aggregate_daily
from .config import ViewerSettings
from .db import load_usage_events
from .models import DailySummary, WeeklySummary

TIMESTAMP_FMT = "%Y-%m-%d %H:%M:%S %z"


class SummaryPrinter:
    """Render human-readable summaries in the console."""

    def __init__(self, settings: ViewerSettings) -> None:
        self.settings = settings
        self.db_path = Path(settings.db_path)

    def print_daily_summary(self, day: date) -> None:
        events = load_usage_events(self.db_path)
        daily = dict(aggregate_daily(events, break_threshold=self.settings.break_threshold))
        summary = daily.get(day)
        if summary is None:
            print("No activity recorded for the selected day.")
            return
        print(format_daily_summary(summary), end="")


def format_duration(value: Union[timedelta, float]) -> str:
    seconds = int(value.total_seconds() if isinstance(value, timedelta) else value)
    if seconds < 0:
        return "-" + format_duration(-seconds)
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}min"
    if minutes > 0:
        return f"{minutes}min {secs}s"
    return f"{secs}s"


def format_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FMT)


def format_daily_summary(summary: DailySummary) -> str:
    lines = [
        f"Date: {summary.day.isoformat()}",
        f"  Total Usage: {format_duration(summary.total_usage)}",
        f"  First Usage: {format_timestamp(summary.first_usage)}",
        f"  Last Usage: {format_timestamp(summary.last_usage)}",
        f"  Net Active Hours: {format_duration(summary.net_active_time)}",
    ]
    if summary.recovered_events:
        lines.append(f"  Events With Unparsed Timestamps: {summary.recovered_events}")
    lines.append("  Per App Usage:")
    lines.extend(_per_app_lines(summary.per_app_usage))
    lines.append("  Breaks:")
    for item in summary.breaks:
        lines.append(
            f"    Break from {format_timestamp(item.start)} to {format_timestamp(item.end)}"
            f" ({format_duration(item.duration)})"
        )
    return "\n".join(lines) + "\n"


def format_weekly_summary(summary: WeeklySummary) -> str:
    marker = " (Current Week)" if summary.is_current_week else ""
    lines = [
        f"{week_label(summary.week_number, summary)}{marker}:",
        f"  Days With Usage: {summary.days}",
        f"  Total Usage: {format_duration(summary.total_usage)}",
        f"  Net Active Time: {format_duration(summary.net_active_hours)}",
        "  Per App Usage:",
    ]
    lines.extend(_per_app_lines(summary.per_app_usage))
    return "\n".join(lines) + "\n"


def day_label(day: date) -> str:
    return day.isoformat()


def week_label(week_number: int, summary: WeeklySummary) -> str:
    return f"Week {week_number} (Starting {summary.first_day.isoformat()})"


def _per_app_lines(per_app_usage: dict[str, timedelta]) -> list[str]:
    ordered = sorted(per_app_usage.items(), key=lambda item: item[1], reverse=True)
    return [f"    {app}: {format_duration(usage)}" for app, usage in ordered]
