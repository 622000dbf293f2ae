"""Build daily and weekly summaries from raw usage events."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Optional, Sequence

from .config import BREAK_THRESHOLD
from .models import Break, DailySummary, UsageEvent, WeeklySummary


def aggregate_daily(
    events: Iterable[UsageEvent],
    *,
    tz: Optional[tzinfo] = None,
    break_threshold: timedelta = BREAK_THRESHOLD,
) -> list[tuple[date, DailySummary]]:
    """Group events by local start date, newest day first.

    ``tz`` defaults to the local zone of the running process.
    """
    buckets: defaultdict[date, list[UsageEvent]] = defaultdict(list)
    for event in events:
        buckets[event.start_time.astimezone(tz).date()].append(event)

    summaries = [
        (day, summarize_day(day, bucket, tz=tz, break_threshold=break_threshold))
        for day, bucket in buckets.items()
    ]
    return sorted(summaries, key=lambda item: item[0], reverse=True)


def summarize_day(
    day: date,
    events: Sequence[UsageEvent],
    *,
    tz: Optional[tzinfo] = None,
    break_threshold: timedelta = BREAK_THRESHOLD,
) -> DailySummary:
    if not events:
        raise ValueError(f"No events to summarize for {day}")

    per_app: defaultdict[str, timedelta] = defaultdict(timedelta)
    total = timedelta(0)
    for event in events:
        per_app[event.app] += event.usage
        total += event.usage

    # Elapsed span is taken before localizing; two datetimes sharing one
    # zoneinfo subtract as wall-clock times and drift across DST changes.
    earliest = min(event.start_time for event in events)
    latest = max(event.end_time for event in events)
    breaks = detect_breaks(events, tz=tz, threshold=break_threshold)
    total_breaks = sum((item.duration for item in breaks), timedelta(0))

    return DailySummary(
        day=day,
        first_usage=earliest.astimezone(tz),
        last_usage=latest.astimezone(tz),
        total_usage=total,
        per_app_usage=dict(per_app),
        breaks=breaks,
        net_active_time=(latest - earliest) - total_breaks,
        recovered_events=sum(1 for event in events if event.recovered),
    )


def detect_breaks(
    events: Iterable[UsageEvent],
    *,
    tz: Optional[tzinfo] = None,
    threshold: timedelta = BREAK_THRESHOLD,
) -> list[Break]:
    """Return gaps longer than ``threshold`` between consecutive sessions.

    Sessions are compared pairwise in start order only; overlapping sessions
    give a non-positive gap and never count as a break.
    """
    sessions = sorted(events, key=lambda event: event.start_time)
    breaks: list[Break] = []
    for previous, current in zip(sessions, sessions[1:]):
        gap = current.start_time - previous.end_time
        if gap > threshold:
            breaks.append(
                Break(
                    start=previous.end_time.astimezone(tz),
                    end=current.start_time.astimezone(tz),
                    duration=gap,
                )
            )
    return breaks


def aggregate_weekly(
    daily: Iterable[tuple[date, DailySummary]],
    *,
    now: Optional[datetime] = None,
) -> list[tuple[int, WeeklySummary]]:
    """Roll daily summaries up into ISO weeks, newest week first.

    Weeks are keyed by ``(iso_year, week_number)`` so equal week numbers from
    different years stay apart.
    """
    current = (now or datetime.now()).isocalendar()
    current_key = (current[0], current[1])

    weeks: dict[tuple[int, int], WeeklySummary] = {}
    for day, summary in daily:
        iso_year, week_number, weekday = day.isocalendar()
        key = (iso_year, week_number)
        week = weeks.get(key)
        if week is None:
            week = weeks[key] = WeeklySummary(
                iso_year=iso_year,
                week_number=week_number,
                first_day=day - timedelta(days=weekday - 1),
                is_current_week=key == current_key,
            )
        week.total_usage += summary.total_usage
        week.net_active_hours += summary.net_active_time
        for app, usage in summary.per_app_usage.items():
            week.per_app_usage[app] = week.per_app_usage.get(app, timedelta(0)) + usage
        week.days += 1

    ordered = sorted(weeks.values(), key=lambda week: week.key, reverse=True)
    return [(week.week_number, week) for week in ordered]
