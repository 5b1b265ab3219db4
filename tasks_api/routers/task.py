# tasks_api/routers/task.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from tasks_api.core.errors import ValidationError
from tasks_api.dependencies.services import get_task_service
from tasks_api.models.task import Task
from tasks_api.schemas.task import (
    ErrorResponse,
    TaskCreate,
    TaskListQuery,
    TaskPage,
    TaskStats,
    TaskUpdate,
)
from tasks_api.services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/tasks",
    tags=["Tasks"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: TaskCreate,
    service: TaskService = Depends(get_task_service),
):
    task = service.create_task(payload)
    logger.info("Task created id=%s", task.id)
    return task


@router.get("", response_model=TaskPage)
def list_tasks(
    status_filter: Optional[str] = Query(None, alias="status"),
    q: Optional[str] = Query(None, description="제목 부분 검색(대소문자 무시)"),
    page: Optional[int] = Query(None),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    service: TaskService = Depends(get_task_service),
):
    # 범위 밖 page/pageSize 는 서비스에서 기본값/상한으로 보정된다
    params = TaskListQuery(status=status_filter, q=q, page=page, page_size=page_size)
    result = service.list_tasks(params)
    logger.info(
        "Tasks listed count=%s total=%s status=%s q=%s",
        len(result.data),
        result.pagination.total,
        status_filter,
        q,
    )
    return result


@router.get("/stats", response_model=TaskStats)
def get_stats(service: TaskService = Depends(get_task_service)):
    stats = service.get_stats()
    logger.info("Task stats total=%s overdue=%s", stats.total, stats.overdue)
    return stats


@router.get("/{task_id}", response_model=Task)
def get_task(task_id: str, service: TaskService = Depends(get_task_service)):
    task = service.get_task(task_id)
    logger.info("Task retrieved id=%s", task.id)
    return task


@router.patch("/{task_id}", response_model=Task)
def update_task(
    task_id: str,
    payload: TaskUpdate,
    service: TaskService = Depends(get_task_service),
):
    if not payload.provided():
        raise ValidationError("At least one field must be provided")
    task = service.update_task(task_id, payload)
    logger.info("Task updated id=%s fields=%s", task.id, sorted(payload.provided()))
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
    service.delete_task(task_id)
    logger.info("Task deleted id=%s", task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
