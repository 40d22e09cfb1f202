"""Configuration for the fitstore persistence layer."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class FitstoreConfig:
    """Configuration for the store and its I/O worker."""

    db_path: str = "fitstore.db"
    journal_mode: str = "WAL"
    busy_timeout_ms: int = 5000
    recent_daily_limit: int = 14
    streak_window_days: int = 30
    worker_thread_name: str = "fitstore-io"
    log_level: str = "WARNING"
    log_format: str = "console"

    @classmethod
    def from_env(cls, **overrides: object) -> FitstoreConfig:
        """Build a config from FITSTORE_* environment variables.

        Explicit keyword overrides win over the environment.
        """
        values: dict[str, object] = {}
        db_path = os.getenv("FITSTORE_DB")
        if db_path:
            values["db_path"] = db_path
        log_level = os.getenv("FITSTORE_LOG_LEVEL")
        if log_level:
            values["log_level"] = log_level.upper()
        log_format = os.getenv("FITSTORE_LOG_FORMAT")
        if log_format:
            values["log_format"] = log_format.lower()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]
