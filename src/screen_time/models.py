"""Domain models for app usage and the summaries built from it."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta


@dataclass(slots=True)
class UsageEvent:
    """Represents one contiguous interval of foreground use of an app."""

    app: str
    start_time: datetime
    end_time: datetime
    recovered: bool = False

    @property
    def usage(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def usage_seconds(self) -> float:
        return self.usage.total_seconds()


@dataclass(slots=True)
class Break:
    start: datetime
    end: datetime
    duration: timedelta


@dataclass(slots=True)
class DailySummary:
    """Usage recorded on a single local calendar day."""

    day: date
    first_usage: datetime
    last_usage: datetime
    total_usage: timedelta = timedelta(0)
    per_app_usage: dict[str, timedelta] = field(default_factory=dict)
    breaks: list[Break] = field(default_factory=list)
    net_active_time: timedelta = timedelta(0)
    recovered_events: int = 0

    @property
    def total_break_duration(self) -> timedelta:
        return sum((item.duration for item in self.breaks), timedelta(0))


@dataclass(slots=True)
class WeeklySummary:
    """Roll-up of the daily summaries falling in one ISO week."""

    iso_year: int
    week_number: int
    first_day: date
    total_usage: timedelta = timedelta(0)
    net_active_hours: timedelta = timedelta(0)
    per_app_usage: dict[str, timedelta] = field(default_factory=dict)
    is_current_week: bool = False
    days: int = 0

    @property
    def key(self) -> tuple[int, int]:
        return self.iso_year, self.week_number
