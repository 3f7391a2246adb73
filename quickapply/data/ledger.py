"""Append-only application ledger backed by SQLite"""

import json
import sqlite3
import uuid
from contextlib import closing
from pathlib import Path

from quickapply.errors import LedgerError
from quickapply.models import (
    APPLIED_OUTCOMES,
    AttemptRecord,
    Outcome,
    RunRecord,
    UnmatchedFieldEvent,
    utc_now,
)
from quickapply.utils.logging import get_logger

log = get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS attempts (
    attempt_id INTEGER PRIMARY KEY AUTOINCREMENT,
    platform TEXT NOT NULL,
    job_id TEXT NOT NULL,
    job_title TEXT,
    company TEXT,
    job_url TEXT,
    outcome TEXT NOT NULL,
    error_detail TEXT,
    timestamp TEXT NOT NULL,
    run_id TEXT
);
CREATE INDEX IF NOT EXISTS idx_attempts_platform_job ON attempts(platform, job_id);
CREATE INDEX IF NOT EXISTS idx_attempts_run ON attempts(run_id);

CREATE VIEW IF NOT EXISTS latest_attempts AS
    SELECT a.* FROM attempts a
    WHERE a.attempt_id = (
        SELECT MAX(b.attempt_id) FROM attempts b
        WHERE b.platform = a.platform AND b.job_id = a.job_id
    );

CREATE TABLE IF NOT EXISTS runs (
    run_id TEXT PRIMARY KEY,
    started_at TEXT NOT NULL,
    completed_at TEXT,
    platform_summary TEXT
);

CREATE TABLE IF NOT EXISTS unmatched_fields (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    platform TEXT NOT NULL,
    job_id TEXT NOT NULL,
    label TEXT NOT NULL,
    field_kind TEXT NOT NULL,
    run_id TEXT,
    timestamp TEXT NOT NULL
);
"""

_ATTEMPT_COLUMNS = (
    "attempt_id, platform, job_id, job_title, company, job_url, "
    "outcome, error_detail, timestamp, run_id"
)


class Ledger:
    """
    Durable record of every application attempt.

    Rows in `attempts` are only ever inserted. "Has this job been handled?"
    is answered across all rows, so a later error or skip can never hide an
    earlier success. `latest_attempts` is for display only.
    """

    def __init__(self, db_path="data/quickapply.db"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self):
        with closing(self._connect()) as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.executescript(_SCHEMA)
            conn.commit()

    # ------------------------------------------------------------------
    # Attempts
    # ------------------------------------------------------------------

    def has_applied(self, platform, job_id):
        placeholders = ", ".join("?" for _ in APPLIED_OUTCOMES)
        with closing(self._connect()) as conn:
            row = conn.execute(
                f"""SELECT 1 FROM attempts
                    WHERE platform = ? AND job_id = ? AND outcome IN ({placeholders})
                    LIMIT 1""",
                (platform, job_id, *sorted(APPLIED_OUTCOMES)),
            ).fetchone()
        return row is not None

    def record_attempt(self, record):
        """Append one attempt row; returns the assigned attempt_id"""
        outcome = Outcome(record.outcome).value
        with closing(self._connect()) as conn:
            cursor = conn.execute(
                """INSERT INTO attempts
                   (platform, job_id, job_title, company, job_url, outcome,
                    error_detail, timestamp, run_id)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    record.platform,
                    record.job_id,
                    record.job_title,
                    record.company,
                    record.job_url,
                    outcome,
                    record.error_detail,
                    record.timestamp,
                    record.run_id,
                ),
            )
            conn.commit()
            attempt_id = cursor.lastrowid
        log.debug("Recorded %s for %s/%s (#%s)", outcome, record.platform, record.job_id, attempt_id)
        return attempt_id

    def attempts_for(self, platform, job_id):
        with closing(self._connect()) as conn:
            rows = conn.execute(
                f"SELECT {_ATTEMPT_COLUMNS} FROM attempts "
                "WHERE platform = ? AND job_id = ? ORDER BY attempt_id",
                (platform, job_id),
            ).fetchall()
        return [AttemptRecord(**dict(row)) for row in rows]

    def latest_attempts(self, platform=None):
        query = f"SELECT {_ATTEMPT_COLUMNS} FROM latest_attempts"
        params = ()
        if platform:
            query += " WHERE platform = ?"
            params = (platform,)
        with closing(self._connect()) as conn:
            rows = conn.execute(query + " ORDER BY attempt_id", params).fetchall()
        return [AttemptRecord(**dict(row)) for row in rows]

    # ------------------------------------------------------------------
    # Unmatched fields
    # ------------------------------------------------------------------

    def record_unmatched(self, event):
        with closing(self._connect()) as conn:
            conn.execute(
                """INSERT INTO unmatched_fields
                   (platform, job_id, label, field_kind, run_id, timestamp)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (event.platform, event.job_id, event.label, event.field_kind, event.run_id, event.timestamp),
            )
            conn.commit()

    def unmatched_for(self, platform, job_id):
        with closing(self._connect()) as conn:
            rows = conn.execute(
                """SELECT platform, job_id, label, field_kind, run_id, timestamp
                   FROM unmatched_fields WHERE platform = ? AND job_id = ? ORDER BY id""",
                (platform, job_id),
            ).fetchall()
        return [UnmatchedFieldEvent(**dict(row)) for row in rows]

    def top_unmatched(self, limit=10):
        """Most frequent unmatched labels - candidates for new answers"""
        with closing(self._connect()) as conn:
            rows = conn.execute(
                """SELECT label, field_kind, COUNT(*) AS seen FROM unmatched_fields
                   GROUP BY label, field_kind ORDER BY seen DESC, label LIMIT ?""",
                (limit,),
            ).fetchall()
        return [(row["label"], row["field_kind"], row["seen"]) for row in rows]

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    def create_run(self):
        run = RunRecord(run_id=str(uuid.uuid4()), started_at=utc_now())
        with closing(self._connect()) as conn:
            conn.execute(
                "INSERT INTO runs (run_id, started_at) VALUES (?, ?)",
                (run.run_id, run.started_at),
            )
            conn.commit()
        return run

    def complete_run(self, run_id, platform_summary):
        """Close a run; a run can only be completed once"""
        completed_at = utc_now()
        with closing(self._connect()) as conn:
            cursor = conn.execute(
                """UPDATE runs SET completed_at = ?, platform_summary = ?
                   WHERE run_id = ? AND completed_at IS NULL""",
                (completed_at, json.dumps(platform_summary, sort_keys=True), run_id),
            )
            conn.commit()
            if cursor.rowcount != 1:
                raise LedgerError(f"Run {run_id} is unknown or already completed")
        return completed_at

    def get_run(self, run_id):
        with closing(self._connect()) as conn:
            row = conn.execute(
                "SELECT run_id, started_at, completed_at, platform_summary FROM runs WHERE run_id = ?",
                (run_id,),
            ).fetchone()
        if row is None:
            return None
        summary = json.loads(row["platform_summary"]) if row["platform_summary"] else None
        return RunRecord(row["run_id"], row["started_at"], row["completed_at"], summary)

    def run_stats(self, run_id):
        """Outcome counts per platform for one run: {platform: {outcome: n}}"""
        with closing(self._connect()) as conn:
            rows = conn.execute(
                """SELECT platform, outcome, COUNT(*) AS n FROM attempts
                   WHERE run_id = ? GROUP BY platform, outcome""",
                (run_id,),
            ).fetchall()
            unmatched = conn.execute(
                "SELECT COUNT(*) FROM unmatched_fields WHERE run_id = ?", (run_id,)
            ).fetchone()[0]
        stats = {}
        for row in rows:
            stats.setdefault(row["platform"], {})[row["outcome"]] = row["n"]
        return {"platforms": stats, "unmatched_fields": unmatched}
