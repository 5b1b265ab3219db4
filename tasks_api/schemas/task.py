# tasks_api/schemas/task.py
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from tasks_api.models.task import Task

# 필드 규칙(빈 제목, 길이, 상태 값, 날짜 형식)은 services/task_validation.py 에서 검사한다.
# 여기서는 형태만 받는다. dueDate 는 문자열만 받는다(숫자 epoch 는 요청 검증에서 400).
_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskCreate(BaseModel):
    title: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[str] = None

    model_config = _camel


class TaskUpdate(BaseModel):
    """Partial update; only fields present in the payload are applied."""

    title: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[str] = None

    model_config = _camel

    def provided(self) -> dict:
        return self.model_dump(exclude_unset=True)


class TaskListQuery(BaseModel):
    status: Optional[str] = None
    q: Optional[str] = None
    page: Optional[int] = None
    page_size: Optional[int] = None

    model_config = _camel


class Pagination(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int

    model_config = _camel


class TaskPage(BaseModel):
    data: List[Task]
    pagination: Pagination

    model_config = _camel


class StatusCounts(BaseModel):
    todo: int = 0
    in_progress: int = 0
    done: int = 0


class TaskStats(BaseModel):
    total: int
    by_status: StatusCounts
    overdue: int

    model_config = _camel


class ErrorBody(BaseModel):
    message: str
    status_code: int

    model_config = _camel


class ErrorResponse(BaseModel):
    error: ErrorBody
