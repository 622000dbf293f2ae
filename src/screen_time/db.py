"""Read-only access to the macOS knowledgeC usage database."""

from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .errors import MalformedRow, SourceQueryFailure, SourceUnavailable
from .models import UsageEvent

logger = logging.getLogger(__name__)

# Core Data timestamps count seconds from 2001-01-01 UTC.
CORE_DATA_EPOCH_OFFSET = 978307200

APP_USAGE_STREAM = "/app/usage"

TIMESTAMP_SENTINEL = datetime(1970, 1, 1, tzinfo=timezone.utc)

FULL_DISK_ACCESS_HINT = (
    "Please grant Full Disk Access to the application running this program "
    "(System Settings > Privacy & Security > Full Disk Access)."
)

USAGE_QUERY = f"""
    SELECT
        ZOBJECT.ZVALUESTRING AS app,
        (ZOBJECT.ZENDDATE - ZOBJECT.ZSTARTDATE) AS usage,
        (ZOBJECT.ZSTARTDATE + {CORE_DATA_EPOCH_OFFSET}) AS start_time,
        (ZOBJECT.ZENDDATE + {CORE_DATA_EPOCH_OFFSET}) AS end_time
    FROM ZOBJECT
    WHERE ZOBJECT.ZSTREAMNAME = ?
    ORDER BY ZOBJECT.ZSTARTDATE DESC
"""


def open_knowledge_db(path: Path) -> sqlite3.Connection:
    """Open the usage database read-only, validating that it can be read."""
    path = Path(path)
    if not path.exists():
        raise SourceUnavailable(path, "Could not find knowledgeC.db")
    if not os.access(path, os.R_OK):
        raise SourceUnavailable(path, f"knowledgeC.db is not readable. {FULL_DISK_ACCESS_HINT}")

    try:
        conn = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
    except sqlite3.Error as exc:
        raise SourceUnavailable(path, f"Could not open knowledgeC.db: {exc}") from exc

    try:
        conn.execute("SELECT 1 FROM sqlite_master LIMIT 1").fetchall()
    except sqlite3.Error as exc:
        conn.close()
        raise SourceUnavailable(
            path, f"knowledgeC.db could not be read: {exc}. {FULL_DISK_ACCESS_HINT}"
        ) from exc

    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def knowledge_connection(path: Path) -> Iterator[sqlite3.Connection]:
    conn = open_knowledge_db(path)
    try:
        yield conn
    finally:
        conn.close()


def fetch_usage_events(conn: sqlite3.Connection) -> list[UsageEvent]:
    """Return every app usage event recorded in the database."""
    try:
        rows = conn.execute(USAGE_QUERY, (APP_USAGE_STREAM,)).fetchall()
    except sqlite3.Error as exc:
        raise SourceQueryFailure(f"Error querying database: {exc}") from exc
    return rows_to_events(rows)


def rows_to_events(rows: Iterable[sqlite3.Row]) -> list[UsageEvent]:
    events: list[UsageEvent] = []
    recovered = 0
    discarded = 0
    for row in rows:
        event = _row_to_event(row)
        if event.end_time < event.start_time:
            discarded += 1
            continue
        if event.recovered:
            recovered += 1
        events.append(event)

    if recovered:
        logger.warning(
            "Replaced unparsable timestamps with %s for %d events.",
            TIMESTAMP_SENTINEL.isoformat(),
            recovered,
        )
    if discarded:
        logger.warning("Discarded %d events that end before they start.", discarded)
    logger.debug("Loaded %d usage events.", len(events))
    return events


def load_usage_events(path: Path) -> list[UsageEvent]:
    with knowledge_connection(path) as conn:
        return fetch_usage_events(conn)


def _row_to_event(row: sqlite3.Row) -> UsageEvent:
    app = row["app"]
    if not isinstance(app, str):
        raise MalformedRow(f"Usage row has no app name: {tuple(row)!r}")

    start_time = _parse_timestamp(row["start_time"])
    end_time = _parse_timestamp(row["end_time"])
    return UsageEvent(
        app=app,
        start_time=start_time or TIMESTAMP_SENTINEL,
        end_time=end_time or TIMESTAMP_SENTINEL,
        recovered=start_time is None or end_time is None,
    )


def _parse_timestamp(value: object) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(float(value), tz=timezone.utc)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError, OSError):
        return None
