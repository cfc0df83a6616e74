"""SQLite helpers for the causelist engine.

This module defines the project database path, connection helper, schema
initialisation, the per-user causelist upsert/lookups and the sync run
audit log.
"""
from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from . import config
from .errors import PersistenceError
from .models import CauselistRecord, SyncResult
from .utils import utc_now, utc_now_precise

DB_PATH: Path = config.DB_PATH


def get_connection() -> sqlite3.Connection:
    """Return a SQLite connection to the project database.

    The parent directory is created if missing and ``check_same_thread`` is
    disabled to allow reuse from different threads. Callers must manage
    concurrency at a higher layer.
    """

    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(DB_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def initialize_schema() -> None:
    """Create the baseline tables if they do not yet exist.

    Safe to call multiple times; each statement uses ``IF NOT EXISTS`` to avoid
    duplicate objects.
    """

    statements: Iterable[str] = (
        """
        CREATE TABLE IF NOT EXISTS user_causelists (
            id                   INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id              TEXT NOT NULL,
            advocate_identifier  TEXT NOT NULL,
            court                TEXT NOT NULL,
            last_synced_at       TEXT NOT NULL,
            data_json            TEXT NOT NULL DEFAULT '[]',
            created_at           TEXT NOT NULL,
            updated_at           TEXT NOT NULL,
            UNIQUE(user_id, advocate_identifier, court)
        );
        """,
        """
        CREATE INDEX IF NOT EXISTS idx_user_causelists_user
            ON user_causelists(user_id, updated_at DESC);
        """,
        """
        CREATE TABLE IF NOT EXISTS sync_runs (
            id                   INTEGER PRIMARY KEY AUTOINCREMENT,
            started_at           TEXT NOT NULL,
            ended_at             TEXT,
            user_id              TEXT NOT NULL,
            advocate_identifier  TEXT NOT NULL,
            court                TEXT NOT NULL,
            status               TEXT NOT NULL,
            record_count         INTEGER,
            error_code           TEXT,
            error_message        TEXT,
            skipped_steps_json   TEXT
        );
        """,
        """
        CREATE INDEX IF NOT EXISTS idx_sync_runs_user
            ON sync_runs(user_id, id DESC);
        """,
    )

    conn = get_connection()
    with conn:
        for statement in statements:
            conn.execute(statement)


def upsert_user_causelist(result: SyncResult) -> None:
    """Replace the stored causelist for the result's (user, advocate, court).

    The previous ``data_json`` and ``last_synced_at`` are overwritten, never
    merged. Raises ``PersistenceError`` carrying ``result`` on failure.
    """

    payload = json.dumps([record.to_dict() for record in result.records], ensure_ascii=False)
    now = utc_now_precise()
    try:
        conn = get_connection()
        with conn:
            conn.execute(
                """
                INSERT INTO user_causelists (
                    user_id, advocate_identifier, court, last_synced_at,
                    data_json, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id, advocate_identifier, court) DO UPDATE SET
                    last_synced_at = excluded.last_synced_at,
                    data_json = excluded.data_json,
                    updated_at = excluded.updated_at
                """,
                (
                    result.user_id,
                    result.advocate_identifier,
                    result.court,
                    result.last_synced_at,
                    payload,
                    now,
                    now,
                ),
            )
    except sqlite3.Error as exc:
        raise PersistenceError(f"Failed to store causelist: {exc}", result) from exc


def _row_to_result(row: sqlite3.Row) -> SyncResult:
    try:
        data = json.loads(row["data_json"] or "[]")
    except json.JSONDecodeError:
        data = []
    records = [CauselistRecord.from_dict(item) for item in data if isinstance(item, dict)]
    return SyncResult(
        user_id=row["user_id"],
        advocate_identifier=row["advocate_identifier"],
        court=row["court"],
        records=records,
        last_synced_at=row["last_synced_at"],
        empty=not records,
    )


def get_user_causelist(
    user_id: str, advocate_identifier: str, court: str
) -> Optional[SyncResult]:
    """Return the stored causelist for an exact key, if any."""

    conn = get_connection()
    cursor = conn.execute(
        """
        SELECT * FROM user_causelists
        WHERE user_id = ? AND advocate_identifier = ? AND court = ?
        LIMIT 1
        """,
        (user_id, advocate_identifier, court),
    )
    row = cursor.fetchone()
    return _row_to_result(row) if row else None


def get_latest_user_causelist(user_id: str) -> Optional[SyncResult]:
    """Return the most recently updated causelist for ``user_id``."""

    conn = get_connection()
    cursor = conn.execute(
        """
        SELECT * FROM user_causelists
        WHERE user_id = ?
        ORDER BY updated_at DESC, id DESC
        LIMIT 1
        """,
        (user_id,),
    )
    row = cursor.fetchone()
    return _row_to_result(row) if row else None


def create_sync_run(user_id: str, advocate_identifier: str, court: str) -> int:
    """Insert a ``sync_runs`` row with status ``running`` and return its id."""

    conn = get_connection()
    with conn:
        cursor = conn.execute(
            """
            INSERT INTO sync_runs (
                started_at, user_id, advocate_identifier, court, status
            ) VALUES (?, ?, ?, ?, 'running')
            """,
            (utc_now(), user_id, advocate_identifier, court),
        )
    return int(cursor.lastrowid)


def finish_sync_run(
    run_id: int,
    status: str,
    *,
    record_count: Optional[int] = None,
    error_code: Optional[str] = None,
    error_message: Optional[str] = None,
    skipped_steps: Optional[List[str]] = None,
) -> None:
    """Close out a ``sync_runs`` row with its terminal status."""

    conn = get_connection()
    with conn:
        conn.execute(
            """
            UPDATE sync_runs
            SET status = ?, ended_at = ?, record_count = ?, error_code = ?,
                error_message = ?, skipped_steps_json = ?
            WHERE id = ?
            """,
            (
                status,
                utc_now(),
                record_count,
                error_code,
                error_message,
                json.dumps(skipped_steps or []),
                run_id,
            ),
        )


def list_sync_runs(user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
    """Return the latest sync runs for ``user_id``, newest first."""

    conn = get_connection()
    cursor = conn.execute(
        """
        SELECT * FROM sync_runs
        WHERE user_id = ?
        ORDER BY id DESC
        LIMIT ?
        """,
        (user_id, max(1, int(limit))),
    )
    runs: List[Dict[str, Any]] = []
    for row in cursor.fetchall():
        item = dict(row)
        try:
            item["skipped_steps"] = json.loads(item.pop("skipped_steps_json") or "[]")
        except json.JSONDecodeError:
            item["skipped_steps"] = []
        runs.append(item)
    return runs
