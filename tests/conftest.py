"""Shared fixtures: usage events and knowledgeC-shaped SQLite files."""

import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

MAC_EPOCH = 978307200


def utc(year, month, day, hour=0, minute=0, second=0):
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


def create_knowledge_db(path, rows):
    """Write a minimal ZOBJECT table; rows are (stream, app, start_epoch, end_epoch)."""
    conn = sqlite3.connect(path)
    conn.execute(
        """
        CREATE TABLE ZOBJECT (
            Z_PK INTEGER PRIMARY KEY,
            ZSTREAMNAME TEXT,
            ZVALUESTRING TEXT,
            ZSTARTDATE REAL,
            ZENDDATE REAL
        )
        """
    )
    conn.executemany(
        "INSERT INTO ZOBJECT (ZSTREAMNAME, ZVALUESTRING, ZSTARTDATE, ZENDDATE) VALUES (?, ?, ?, ?)",
        [
            (
                stream,
                app,
                None if start is None else start - MAC_EPOCH,
                None if end is None else end - MAC_EPOCH,
            )
            for stream, app, start, end in rows
        ],
    )
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def knowledge_db(tmp_path):
    """A database holding two app sessions at midday UTC on 2024-03-04."""
    start = utc(2024, 3, 4, 12, 0)
    rows = [
        ("/app/usage", "Browser", start.timestamp(), (start + timedelta(minutes=30)).timestamp()),
        (
            "/app/usage",
            "Editor",
            (start + timedelta(minutes=45)).timestamp(),
            (start + timedelta(minutes=60)).timestamp(),
        ),
        ("/app/inFocus", "Ignored", start.timestamp(), (start + timedelta(hours=1)).timestamp()),
    ]
    return create_knowledge_db(tmp_path / "knowledgeC.db", rows)
