# tasks_api/repositories/task_repository.py
from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, Optional
from uuid import uuid4

from tasks_api.core.clock import utc_now
from tasks_api.models.task import Task, TaskStatus
from tasks_api.repositories.task_query import TaskQuery, run_query

logger = logging.getLogger(__name__)

_MUTABLE_FIELDS = ("title", "status", "due_date")


class TaskRepository:
    """
    In-memory task store keyed by id.

    - No business rules here; inputs are expected to be validated already.
    - Every method returns copies, callers cannot mutate stored records.
    - One RLock serializes access (sync FastAPI endpoints run on a thread pool).
    - Timestamps are strictly increasing across the store, so every mutation
      moves updated_at forward even when the wall clock has not ticked.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._tasks: dict[str, Task] = {}
        self._lock = threading.RLock()
        self._clock = clock
        self._last_ts: Optional[datetime] = None

    # ---- low-level helpers ----

    def _next_timestamp(self) -> datetime:
        now = self._clock()
        if self._last_ts is not None and now <= self._last_ts:
            now = self._last_ts + timedelta(microseconds=1)
        self._last_ts = now
        return now

    def _new_id(self) -> str:
        task_id = str(uuid4())
        while task_id in self._tasks:
            task_id = str(uuid4())
        return task_id

    # ---- CRUD ----

    def create(
        self,
        *,
        title: str,
        status: Optional[TaskStatus] = None,
        due_date: Optional[datetime] = None,
    ) -> Task:
        with self._lock:
            now = self._next_timestamp()
            task = Task(
                id=self._new_id(),
                title=title,
                status=status or TaskStatus.TODO,
                due_date=due_date,
                created_at=now,
                updated_at=now,
            )
            self._tasks[task.id] = task
            logger.debug("task stored id=%s total=%s", task.id, len(self._tasks))
            return task.model_copy()

    def find_by_id(self, task_id: str) -> Optional[Task]:
        with self._lock:
            task = self._tasks.get(task_id)
            return task.model_copy() if task is not None else None

    def find_all(self, query: Optional[TaskQuery] = None) -> tuple[list[Task], int]:
        with self._lock:
            snapshot = [t.model_copy() for t in self._tasks.values()]
        return run_query(snapshot, query or TaskQuery())

    def list_all(self) -> list[Task]:
        """Every live task, insertion order."""
        with self._lock:
            return [t.model_copy() for t in self._tasks.values()]

    def update(self, task_id: str, changes: dict[str, Any]) -> Optional[Task]:
        """
        Merge only the keys present in ``changes`` and bump updated_at.
        Returns None when the id is unknown.
        """
        unknown = set(changes) - set(_MUTABLE_FIELDS)
        if unknown:
            raise KeyError(f"not updatable: {', '.join(sorted(unknown))}")

        with self._lock:
            current = self._tasks.get(task_id)
            if current is None:
                return None
            updated = current.model_copy(
                update={**changes, "updated_at": self._next_timestamp()}
            )
            self._tasks[task_id] = updated
            logger.debug("task updated id=%s fields=%s", task_id, sorted(changes))
            return updated.model_copy()

    def delete(self, task_id: str) -> bool:
        with self._lock:
            removed = self._tasks.pop(task_id, None) is not None
        if removed:
            logger.debug("task deleted id=%s", task_id)
        return removed

    def count(self) -> int:
        with self._lock:
            return len(self._tasks)

    def clear(self) -> None:
        """Drop every task (explicit reset, e.g. between tests)."""
        with self._lock:
            self._tasks.clear()
