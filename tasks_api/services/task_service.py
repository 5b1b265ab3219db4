# tasks_api/services/task_service.py
from __future__ import annotations

import math
from datetime import datetime
from typing import Callable, Optional

from tasks_api.core.clock import utc_now
from tasks_api.core.errors import NotFoundError
from tasks_api.models.task import Task
from tasks_api.repositories.task_query import TaskQuery
from tasks_api.repositories.task_repository import TaskRepository
from tasks_api.schemas.task import (
    Pagination,
    TaskCreate,
    TaskListQuery,
    TaskPage,
    TaskStats,
    TaskUpdate,
)
from tasks_api.services.task_stats import compute_stats
from tasks_api.services.task_validation import (
    validate_create,
    validate_status_filter,
    validate_update,
)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class TaskService:
    """
    Gatekeeper between request payloads and the task store.

    Raises ValidationError / NotFoundError; the HTTP layer maps them to
    400 / 404. Built once at startup and handed to the routes.
    """

    def __init__(
        self,
        repository: TaskRepository,
        *,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.repository = repository
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
        self._clock = clock

    def create_task(self, payload: TaskCreate) -> Task:
        fields = validate_create(payload.title, payload.status, payload.due_date)
        return self.repository.create(**fields)

    def get_task(self, task_id: str) -> Task:
        task = self.repository.find_by_id(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    def _page_params(self, page: Optional[int], page_size: Optional[int]) -> tuple[int, int]:
        page = page if page and page > 0 else 1
        # oversize pages are clamped, not rejected
        if page_size and page_size > 0:
            page_size = min(page_size, self.max_page_size)
        else:
            page_size = self.default_page_size
        return page, page_size

    def list_tasks(self, params: Optional[TaskListQuery] = None) -> TaskPage:
        params = params or TaskListQuery()
        page, page_size = self._page_params(params.page, params.page_size)
        status = validate_status_filter(params.status)

        items, total = self.repository.find_all(
            TaskQuery(status=status, q=params.q, page=page, page_size=page_size)
        )
        return TaskPage(
            data=items,
            pagination=Pagination(
                page=page,
                page_size=page_size,
                total=total,
                total_pages=math.ceil(total / page_size),
            ),
        )

    def update_task(self, task_id: str, payload: TaskUpdate) -> Task:
        if self.repository.find_by_id(task_id) is None:
            raise NotFoundError("Task", task_id)

        changes = validate_update(payload.provided())
        updated = self.repository.update(task_id, changes)
        if updated is None:
            # deleted between the lookup and the write
            raise NotFoundError("Task", task_id)
        return updated

    def delete_task(self, task_id: str) -> None:
        if not self.repository.delete(task_id):
            raise NotFoundError("Task", task_id)

    def get_stats(self) -> TaskStats:
        return compute_stats(self.repository.list_all(), self._clock())
