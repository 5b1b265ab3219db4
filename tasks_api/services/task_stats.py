# tasks_api/services/task_stats.py
from __future__ import annotations

from datetime import datetime
from typing import Iterable

from tasks_api.models.task import Task, TaskStatus
from tasks_api.schemas.task import StatusCounts, TaskStats


def is_overdue(task: Task, now: datetime) -> bool:
    return (
        task.due_date is not None
        and task.due_date < now
        and task.status != TaskStatus.DONE
    )


def compute_stats(tasks: Iterable[Task], now: datetime) -> TaskStats:
    """Full recount on every call; no cached counters."""
    counts = {s.value: 0 for s in TaskStatus}
    total = 0
    overdue = 0
    for task in tasks:
        total += 1
        counts[task.status.value] += 1
        if is_overdue(task, now):
            overdue += 1
    return TaskStats(total=total, by_status=StatusCounts(**counts), overdue=overdue)
