"""SQLite journal of submitted registrations."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from regkiosk.config import DB_PATH
from regkiosk.models import DuplicateName, Failure, SubmissionOutcome, SubmissionRequest, Success


@dataclass(frozen=True)
class JournalRow:
    """One recorded submission attempt."""

    id: int
    created_at: str
    group_name: str
    member_count: int
    difficulty: int
    queue_number: str
    dup_check: bool
    outcome: str
    room_id: str | None
    message: str


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _connect(db_path: str | Path | None = None) -> sqlite3.Connection:
    db_file = Path(db_path or DB_PATH)
    db_file.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(db_file)


def _outcome_columns(outcome: SubmissionOutcome) -> tuple[str, str | None, str]:
    if isinstance(outcome, Success):
        return ("success", outcome.room_id, outcome.message)
    if isinstance(outcome, DuplicateName):
        return ("duplicate", None, outcome.message)
    if isinstance(outcome, Failure):
        return ("failure", None, outcome.message)
    raise TypeError(f"unknown outcome {outcome!r}")


def bootstrap_schema(db_path: str | Path | None = None) -> None:
    """Create the journal schema if it does not already exist."""
    with _connect(db_path) as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS submissions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                created_at TEXT NOT NULL,
                group_name TEXT NOT NULL,
                member_count INTEGER NOT NULL,
                difficulty INTEGER NOT NULL,
                queue_number TEXT NOT NULL,
                dup_check INTEGER NOT NULL DEFAULT 0,
                outcome TEXT NOT NULL,
                room_id TEXT,
                message TEXT NOT NULL DEFAULT ''
            );

            CREATE INDEX IF NOT EXISTS idx_submissions_created_at
                ON submissions(created_at);
            """
        )


def record_submission(
    request: SubmissionRequest, outcome: SubmissionOutcome, db_path: str | Path | None = None
) -> int:
    """Persist one submission attempt and return its row id."""
    kind, room_id, message = _outcome_columns(outcome)
    with _connect(db_path) as conn:
        cur = conn.execute(
            """
            INSERT INTO submissions
                (created_at, group_name, member_count, difficulty, queue_number, dup_check, outcome, room_id, message)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                _utc_now_iso(),
                request.group_name,
                request.member_count,
                request.difficulty_level,
                request.queue_number,
                int(request.duplicate_override),
                kind,
                room_id,
                message,
            ),
        )
        return int(cur.lastrowid)


def recent_submissions(limit: int = 20, db_path: str | Path | None = None) -> list[JournalRow]:
    """Return the newest journal rows first."""
    with _connect(db_path) as conn:
        rows = conn.execute(
            """
            SELECT id, created_at, group_name, member_count, difficulty, queue_number,
                   dup_check, outcome, room_id, message
            FROM submissions
            ORDER BY id DESC
            LIMIT ?
            """,
            (limit,),
        ).fetchall()
    return [
        JournalRow(
            id=row[0],
            created_at=row[1],
            group_name=row[2],
            member_count=row[3],
            difficulty=row[4],
            queue_number=row[5],
            dup_check=bool(row[6]),
            outcome=row[7],
            room_id=row[8],
            message=row[9],
        )
        for row in rows
    ]
