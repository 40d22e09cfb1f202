"""Async facade: every operation runs on a dedicated single-thread I/O worker."""

from __future__ import annotations

import asyncio
import functools
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any, Callable, TypeVar

from fitstore.config import FitstoreConfig
from fitstore.errors import StoreClosedError
from fitstore.logging import get_logger
from fitstore.storage import Repository
from fitstore.types import DailyProgress, UserProfile, WorkoutSession

T = TypeVar("T")

log = get_logger(__name__)


class FitnessStore:
    """Non-blocking access to the fitness repository.

    The SQLite connection is owned by one worker thread, so calls are
    serialized there and the caller's event loop never waits on disk I/O.
    Cancelling an awaiting caller only abandons the wait: the job already
    handed to the worker still commits or rolls back on its own.
    """

    def __init__(self, repo: Repository, executor: ThreadPoolExecutor) -> None:
        self._repo = repo
        self._executor = executor
        self._closed = False

    @classmethod
    async def open(
        cls,
        db_path: str | None = None,
        *,
        config: FitstoreConfig | None = None,
    ) -> FitnessStore:
        """Open (and validate or migrate) the database on a fresh I/O worker."""
        cfg = config or FitstoreConfig()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=cfg.worker_thread_name)
        loop = asyncio.get_running_loop()
        try:
            repo = await loop.run_in_executor(executor, functools.partial(Repository, db_path, cfg))
        except BaseException:
            executor.shutdown(wait=False)
            raise
        log.info("store_opened", db_path=repo.db_path, open_path=repo.open_report.path)
        return cls(repo, executor)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(self._executor, self._repo.close)
        finally:
            self._executor.shutdown(wait=True)
        log.info("store_closed", db_path=self._repo.db_path)

    async def __aenter__(self) -> FitnessStore:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        if self._closed:
            raise StoreClosedError()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, functools.partial(func, *args))

    # --- Writes ---

    async def insert_session(self, session: WorkoutSession) -> int:
        return await self._run(self._repo.insert_session, session)

    async def upsert_daily(self, progress: DailyProgress) -> None:
        await self._run(self._repo.upsert_daily, progress)

    async def upsert_profile(self, profile: UserProfile) -> None:
        await self._run(self._repo.upsert_profile, profile)

    async def set_total_xp(self, total_xp: int, name: str | None = None) -> UserProfile:
        return await self._run(self._repo.set_total_xp, total_xp, name)

    async def update_name(self, name: str) -> UserProfile:
        return await self._run(self._repo.update_name, name)

    async def delete_session(self, session_id: int) -> int:
        return await self._run(self._repo.delete_session, session_id)

    # --- Queries ---

    async def list_sessions(self) -> list[WorkoutSession]:
        return await self._run(self._repo.list_sessions)

    async def get_session(self, session_id: int) -> WorkoutSession | None:
        return await self._run(self._repo.get_session, session_id)

    async def count_sessions(self) -> int:
        return await self._run(self._repo.count_sessions)

    async def sum_reps_for_exercise(self, exercise: str) -> int | None:
        return await self._run(self._repo.sum_reps_for_exercise, exercise)

    async def sum_total_xp(self) -> int | None:
        return await self._run(self._repo.sum_total_xp)

    async def get_daily(self, day: str | date) -> DailyProgress | None:
        return await self._run(self._repo.get_daily, day)

    async def get_recent_daily(self, limit: int | None = None) -> list[DailyProgress]:
        return await self._run(self._repo.get_recent_daily, limit)

    async def get_profile(self) -> UserProfile | None:
        return await self._run(self._repo.get_profile)

    async def get_streak(self, today: str | date, window: int | None = None) -> int:
        return await self._run(self._repo.get_streak, today, window)

    # --- Maintenance ---

    async def clear_all(self) -> bool:
        return await self._run(self._repo.clear_all)

    async def storage_info(self) -> dict[str, Any]:
        return await self._run(self._repo.storage_info)
