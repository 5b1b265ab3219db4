# tasks_api/repositories/task_query.py
"""
Read path over a snapshot of tasks.

Order is fixed: status filter -> title search -> newest-first sort -> total ->
page slice. ``total`` is always the size of the filtered set, before slicing.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from tasks_api.models.task import Task, TaskStatus


@dataclass(frozen=True)
class TaskQuery:
    status: Optional[TaskStatus] = None
    q: Optional[str] = None
    page: Optional[int] = None
    page_size: Optional[int] = None


def run_query(tasks: Iterable[Task], query: TaskQuery) -> tuple[list[Task], int]:
    filtered = list(tasks)

    if query.status is not None:
        filtered = [t for t in filtered if t.status == query.status]

    if query.q:
        needle = query.q.lower()
        filtered = [t for t in filtered if needle in t.title.lower()]

    # list.sort is stable; equal created_at keeps insertion order
    filtered.sort(key=lambda t: t.created_at, reverse=True)

    total = len(filtered)

    if query.page is not None and query.page_size is not None:
        start = (query.page - 1) * query.page_size
        if start < 0 or query.page_size < 1:
            filtered = []
        else:
            filtered = filtered[start:start + query.page_size]

    return filtered, total
