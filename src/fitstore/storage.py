"""SQLite repository: transactional writes, queries and maintenance."""

from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from datetime import date, timedelta
from typing import Any, Iterator

from fitstore.config import FitstoreConfig
from fitstore.errors import ConstraintViolationError, StorageBackendError
from fitstore.logging import get_logger
from fitstore.migration import OpenReport, open_database, stored_version
from fitstore.schema import (
    DAILY_PROGRESS,
    SESSIONS,
    TABLES_BY_NAME,
    USER_PROFILE,
    schema_identity,
)
from fitstore.types import PROFILE_SLOT_ID, DailyProgress, UserProfile, WorkoutSession

log = get_logger(__name__)


def _select_list(table: str) -> str:
    return ", ".join(f"`{name}`" for name in TABLES_BY_NAME[table].column_names())


def _row_to_model(table: str, row: tuple[Any, ...]) -> dict[str, Any]:
    attrs = [c.attr for c in TABLES_BY_NAME[table].columns]
    return dict(zip(attrs, row))


def _session_from_row(row: tuple[Any, ...]) -> WorkoutSession:
    return WorkoutSession(**_row_to_model(SESSIONS, row))


def _daily_from_row(row: tuple[Any, ...]) -> DailyProgress:
    fields = _row_to_model(DAILY_PROGRESS, row)
    fields["goals_met"] = bool(fields["goals_met"])
    return DailyProgress(**fields)


def _profile_from_row(row: tuple[Any, ...]) -> UserProfile:
    return UserProfile(**_row_to_model(USER_PROFILE, row))


def _translate(operation: str, exc: sqlite3.Error) -> Exception:
    if isinstance(exc, sqlite3.IntegrityError):
        return ConstraintViolationError(operation, str(exc))
    return StorageBackendError(operation, str(exc))


class Repository:
    """SQLite-backed repository for sessions, daily progress and the profile.

    One connection per repository, in autocommit mode with explicit
    ``BEGIN IMMEDIATE``/``COMMIT``/``ROLLBACK`` around every write. Opening
    runs the schema validator before any operation is reachable.
    """

    def __init__(self, db_path: str | None = None, config: FitstoreConfig | None = None) -> None:
        self.config = config or FitstoreConfig()
        self.db_path = db_path or self.config.db_path
        try:
            self._conn = sqlite3.connect(
                self.db_path,
                isolation_level=None,
                check_same_thread=False,
                timeout=self.config.busy_timeout_ms / 1000.0,
            )
        except sqlite3.Error as e:
            raise StorageBackendError("open", str(e)) from e
        try:
            self._conn.execute(f"PRAGMA busy_timeout = {int(self.config.busy_timeout_ms)}")
            self.journal_mode = str(
                self._conn.execute(f"PRAGMA journal_mode={self.config.journal_mode}").fetchone()[0]
            )
            self.open_report: OpenReport = open_database(self._conn)
        except sqlite3.Error as e:
            self._conn.close()
            raise StorageBackendError("open", str(e)) from e
        except Exception:
            self._conn.close()
            raise

    def close(self) -> None:
        self._conn.close()

    # --- Transaction helpers ---

    def begin_transaction(self) -> None:
        self._conn.execute("BEGIN IMMEDIATE")

    def commit_transaction(self) -> None:
        self._conn.execute("COMMIT")

    def rollback_transaction(self) -> None:
        self._conn.execute("ROLLBACK")

    @property
    def in_transaction(self) -> bool:
        return self._conn.in_transaction

    @contextmanager
    def transaction(self, operation: str) -> Iterator[sqlite3.Connection]:
        """Run the body as one atomic unit; roll back on any failure."""
        try:
            self.begin_transaction()
        except sqlite3.Error as e:
            raise _translate(operation, e) from e
        try:
            yield self._conn
            self.commit_transaction()
        except Exception as e:
            if self._conn.in_transaction:
                self.rollback_transaction()
            log.warning("write_failed", operation=operation, error=str(e))
            if isinstance(e, sqlite3.Error):
                raise _translate(operation, e) from e
            raise

    def _query(
        self, operation: str, sql: str, params: tuple[Any, ...] = ()
    ) -> list[tuple[Any, ...]]:
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageBackendError(operation, str(e)) from e

    # --- Session writes ---

    def insert_session(self, session: WorkoutSession) -> int:
        """Strict insert. A colliding id raises ConstraintViolationError."""
        with self.transaction("insert_session") as conn:
            cursor = conn.execute(
                "INSERT INTO sessions "
                "(id, timestampIso, exercise, reps, durationSeconds, totalXp) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    session.id,
                    session.timestamp_iso,
                    session.exercise,
                    session.reps,
                    session.duration_seconds,
                    session.total_xp,
                ),
            )
            new_id = cursor.lastrowid
        log.debug("session_inserted", session_id=new_id, exercise=session.exercise)
        return int(new_id)  # type: ignore[arg-type]

    def delete_session(self, session_id: int) -> int:
        """Delete by id; returns the affected row count (0 when absent)."""
        with self.transaction("delete_session") as conn:
            cursor = conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
            affected = cursor.rowcount
        return int(affected)

    # --- Daily progress / profile writes ---

    def upsert_daily(self, progress: DailyProgress) -> None:
        with self.transaction("upsert_daily") as conn:
            conn.execute(
                "INSERT OR REPLACE INTO daily_progress "
                "(date, pushups, squats, plankSeconds, bicepLeft, bicepRight, "
                "goalsMet, lastUpdatedIso) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    progress.date,
                    progress.pushups,
                    progress.squats,
                    progress.plank_seconds,
                    progress.bicep_left,
                    progress.bicep_right,
                    int(progress.goals_met),
                    progress.last_updated_iso,
                ),
            )

    def upsert_profile(self, profile: UserProfile) -> None:
        with self.transaction("upsert_profile") as conn:
            self._replace_profile(conn, profile)

    def set_total_xp(self, total_xp: int, name: str | None = None) -> UserProfile:
        """Write total XP; keeps the stored name unless ``name`` is given."""
        with self.transaction("set_total_xp") as conn:
            existing = self._read_profile(conn)
            profile = UserProfile(
                total_xp=total_xp,
                name=name if name is not None else (existing.name if existing else ""),
            )
            self._replace_profile(conn, profile)
        return profile

    def update_name(self, name: str) -> UserProfile:
        """Write the display name; keeps the stored XP (0 if never written)."""
        with self.transaction("update_name") as conn:
            existing = self._read_profile(conn)
            profile = UserProfile(total_xp=existing.total_xp if existing else 0, name=name)
            self._replace_profile(conn, profile)
        return profile

    @staticmethod
    def _replace_profile(conn: sqlite3.Connection, profile: UserProfile) -> None:
        conn.execute(
            "INSERT OR REPLACE INTO user_profile (id, totalXp, name) VALUES (?, ?, ?)",
            (PROFILE_SLOT_ID, profile.total_xp, profile.name),
        )

    @staticmethod
    def _read_profile(conn: sqlite3.Connection) -> UserProfile | None:
        row = conn.execute(
            f"SELECT {_select_list(USER_PROFILE)} FROM user_profile WHERE id = ?",
            (PROFILE_SLOT_ID,),
        ).fetchone()
        return _profile_from_row(row) if row else None

    # --- Queries ---

    def list_sessions(self) -> list[WorkoutSession]:
        rows = self._query(
            "list_sessions",
            f"SELECT {_select_list(SESSIONS)} FROM sessions ORDER BY id DESC",
        )
        return [_session_from_row(r) for r in rows]

    def get_session(self, session_id: int) -> WorkoutSession | None:
        rows = self._query(
            "get_session",
            f"SELECT {_select_list(SESSIONS)} FROM sessions WHERE id = ?",
            (session_id,),
        )
        return _session_from_row(rows[0]) if rows else None

    def count_sessions(self) -> int:
        rows = self._query("count_sessions", "SELECT COUNT(*) FROM sessions")
        return int(rows[0][0]) if rows else 0

    def sum_reps_for_exercise(self, exercise: str) -> int | None:
        """Total reps for ``exercise``; None when the exercise was never logged."""
        rows = self._query(
            "sum_reps_for_exercise",
            "SELECT SUM(reps) FROM sessions WHERE exercise = ?",
            (exercise,),
        )
        value = rows[0][0] if rows else None
        return int(value) if value is not None else None

    def sum_total_xp(self) -> int | None:
        """Total XP across sessions; None when there are no sessions."""
        rows = self._query("sum_total_xp", "SELECT SUM(totalXp) FROM sessions")
        value = rows[0][0] if rows else None
        return int(value) if value is not None else None

    def get_daily(self, day: str | date) -> DailyProgress | None:
        key = day.isoformat() if isinstance(day, date) else day
        rows = self._query(
            "get_daily",
            f"SELECT {_select_list(DAILY_PROGRESS)} FROM daily_progress WHERE date = ?",
            (key,),
        )
        return _daily_from_row(rows[0]) if rows else None

    def get_recent_daily(self, limit: int | None = None) -> list[DailyProgress]:
        """Most recent days first, at most ``limit`` rows; empty when limit <= 0."""
        if limit is None:
            limit = self.config.recent_daily_limit
        if limit <= 0:
            return []
        rows = self._query(
            "get_recent_daily",
            f"SELECT {_select_list(DAILY_PROGRESS)} FROM daily_progress "
            "ORDER BY date DESC LIMIT ?",
            (limit,),
        )
        return [_daily_from_row(r) for r in rows]

    def get_profile(self) -> UserProfile | None:
        try:
            return self._read_profile(self._conn)
        except sqlite3.Error as e:
            raise StorageBackendError("get_profile", str(e)) from e

    def get_streak(self, today: str | date, window: int | None = None) -> int:
        """Count consecutive goal-met days ending at ``today``."""
        expected = date.fromisoformat(today) if isinstance(today, str) else today
        streak = 0
        for dp in self.get_recent_daily(window or self.config.streak_window_days):
            day = date.fromisoformat(dp.date)
            if day > expected:
                continue
            if day < expected or not dp.goals_met:
                break
            streak += 1
            expected -= timedelta(days=1)
        return streak

    # --- Maintenance ---

    def clear_all(self) -> bool:
        """Delete every row, checkpoint the WAL and compact when possible.

        Returns True when the VACUUM pass ran.
        """
        with self.transaction("clear_all") as conn:
            conn.execute("DELETE FROM sessions")
            conn.execute("DELETE FROM daily_progress")
            conn.execute("DELETE FROM user_profile")

        try:
            self._conn.execute("PRAGMA wal_checkpoint(FULL)").fetchall()
            vacuumed = False
            if not self._conn.in_transaction:
                self._conn.execute("VACUUM")
                vacuumed = True
        except sqlite3.Error as e:
            raise StorageBackendError("clear_all", str(e)) from e
        log.info("store_cleared", vacuumed=vacuumed)
        return vacuumed

    def storage_info(self) -> dict[str, Any]:
        """Return backend info for operator commands."""
        info: dict[str, Any] = {
            "backend": "sqlite",
            "db_path": self.db_path,
            "journal_mode": self.journal_mode,
            "schema_version": stored_version(self._conn),
            "identity_hash": schema_identity(),
            "open_path": self.open_report.path,
        }
        if self.db_path != ":memory:" and os.path.exists(self.db_path):
            info["file_size_bytes"] = os.path.getsize(self.db_path)
        return info

    def table_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for table in (SESSIONS, DAILY_PROGRESS, USER_PROFILE):
            rows = self._query("table_counts", f"SELECT COUNT(*) FROM `{table}`")
            counts[table] = int(rows[0][0])
        return counts
