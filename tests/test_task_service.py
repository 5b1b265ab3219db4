from __future__ import annotations

from datetime import timedelta

import pytest

from tasks_api.core.errors import NotFoundError, ValidationError
from tasks_api.models.task import TaskStatus
from tasks_api.repositories.task_repository import TaskRepository
from tasks_api.schemas.task import TaskCreate, TaskListQuery, TaskUpdate
from tasks_api.services.task_service import TaskService


def _create(service, title, **kwargs):
    return service.create_task(TaskCreate(title=title, **kwargs))


# ---- createTask ----

def test_create_task(service):
    task = _create(service, "Test task", status="todo")

    assert task.id
    assert task.title == "Test task"
    assert task.status is TaskStatus.TODO


def test_create_task_with_due_date(service):
    task = _create(service, "Test task", due_date="2024-07-01T09:00:00Z")

    assert task.due_date.isoformat() == "2024-07-01T09:00:00+00:00"


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"title": ""}, "Title is required"),
        ({"title": "a" * 201}, "Title cannot exceed 200 characters"),
        ({"title": "t", "status": "bogus"}, "Status must be one of"),
        ({"title": "t", "due_date": "invalid-date"}, "Invalid dueDate format"),
    ],
)
def test_create_task_rejects_invalid_input(service, repository, payload, message):
    with pytest.raises(ValidationError, match=message):
        service.create_task(TaskCreate(**payload))

    assert repository.count() == 0


# ---- getTask ----

def test_get_task_round_trip(service):
    created = _create(service, "Test")

    assert service.get_task(created.id) == created


def test_get_task_missing(service):
    with pytest.raises(NotFoundError) as excinfo:
        service.get_task("non-existent-id")

    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "Task with id 'non-existent-id' not found"


# ---- listTasks ----

@pytest.fixture()
def seeded(service, clock):
    for title, status in [
        ("Todo 1", "todo"),
        ("In Progress", "in_progress"),
        ("Todo 2", "todo"),
        ("Done", "done"),
    ]:
        _create(service, title, status=status)
        clock.advance(seconds=1)
    return service


def test_list_defaults(seeded):
    result = seeded.list_tasks()

    assert len(result.data) == 4
    assert result.pagination.total == 4
    assert result.pagination.page == 1
    assert result.pagination.page_size == 10
    assert result.pagination.total_pages == 1
    assert [t.title for t in result.data] == ["Done", "Todo 2", "In Progress", "Todo 1"]


def test_list_filter_by_status(seeded):
    result = seeded.list_tasks(TaskListQuery(status="todo"))

    assert len(result.data) == 2
    assert result.pagination.total == 2
    assert all(t.status is TaskStatus.TODO for t in result.data)


def test_list_search_by_title(service):
    for title in ["Buy groceries", "Buy tickets", "Sell car"]:
        _create(service, title)

    result = service.list_tasks(TaskListQuery(q="buy"))

    assert sorted(t.title for t in result.data) == ["Buy groceries", "Buy tickets"]
    assert result.pagination.total == 2


def test_list_paginates_with_total_independent_of_slice(service, clock):
    for i in range(5):
        _create(service, f"Task {i}")
        clock.advance(seconds=1)

    page1 = service.list_tasks(TaskListQuery(page=1, page_size=2))
    page2 = service.list_tasks(TaskListQuery(page=2, page_size=2))
    page3 = service.list_tasks(TaskListQuery(page=3, page_size=2))
    beyond = service.list_tasks(TaskListQuery(page=9, page_size=2))

    assert [t.title for t in page1.data] == ["Task 4", "Task 3"]
    assert [t.title for t in page2.data] == ["Task 2", "Task 1"]
    assert [t.title for t in page3.data] == ["Task 0"]
    assert beyond.data == []
    for page in (page1, page2, page3, beyond):
        assert page.pagination.total == 5
        assert page.pagination.total_pages == 3


def test_list_clamps_page_size(seeded):
    result = seeded.list_tasks(TaskListQuery(page_size=1000))

    assert result.pagination.page_size == 100


@pytest.mark.parametrize(("page", "page_size"), [(0, 0), (-3, -1), (None, None)])
def test_list_non_positive_values_fall_back_to_defaults(seeded, page, page_size):
    result = seeded.list_tasks(TaskListQuery(page=page, page_size=page_size))

    assert result.pagination.page == 1
    assert result.pagination.page_size == 10


def test_list_uses_configured_page_sizes(clock):
    service = TaskService(TaskRepository(clock=clock), default_page_size=3, max_page_size=5, clock=clock)
    for i in range(7):
        _create(service, f"t{i}")

    assert service.list_tasks().pagination.page_size == 3
    assert len(service.list_tasks(TaskListQuery(page_size=50)).data) == 5


def test_list_empty_store(service):
    result = service.list_tasks()

    assert result.data == []
    assert result.pagination.total == 0
    assert result.pagination.total_pages == 0


def test_list_invalid_status_filter(seeded):
    with pytest.raises(ValidationError, match="Invalid status"):
        seeded.list_tasks(TaskListQuery(status="invalid"))


# ---- updateTask ----

def test_update_task_fields(service, clock):
    task = _create(service, "Original")
    clock.advance(milliseconds=500)

    updated = service.update_task(task.id, TaskUpdate(title="Updated", status="done"))

    assert updated.title == "Updated"
    assert updated.status is TaskStatus.DONE
    assert updated.updated_at != task.updated_at
    assert updated.created_at == task.created_at


def test_partial_update_preserves_untouched_fields(service):
    task = _create(service, "Original", status="todo", due_date="2030-01-01")

    updated = service.update_task(task.id, TaskUpdate(status="in_progress"))

    assert updated.title == "Original"
    assert updated.due_date == task.due_date
    assert updated.status is TaskStatus.IN_PROGRESS


def test_update_clears_due_date_with_null(service):
    task = _create(service, "Has due", due_date="2030-01-01")

    updated = service.update_task(task.id, TaskUpdate(due_date=None))

    assert updated.due_date is None


def test_update_missing_task(service):
    with pytest.raises(NotFoundError):
        service.update_task("non-existent-id", TaskUpdate(title="Updated"))


def test_update_missing_task_reports_not_found_before_validation(service):
    with pytest.raises(NotFoundError):
        service.update_task("non-existent-id", TaskUpdate(title=""))


@pytest.mark.parametrize(
    ("patch", "message"),
    [
        ({"title": ""}, "Title cannot be empty"),
        ({"status": "invalid"}, "Status must be one of"),
        ({"title": "ok", "due_date": "bad"}, "Invalid dueDate format"),
    ],
)
def test_invalid_update_leaves_task_untouched(service, patch, message):
    task = _create(service, "Original")

    with pytest.raises(ValidationError, match=message):
        service.update_task(task.id, TaskUpdate(**patch))

    assert service.get_task(task.id) == task


# ---- deleteTask ----

def test_delete_task(service):
    task = _create(service, "Delete me")

    service.delete_task(task.id)

    with pytest.raises(NotFoundError):
        service.get_task(task.id)
    with pytest.raises(NotFoundError):
        service.delete_task(task.id)


def test_delete_missing_task(service):
    with pytest.raises(NotFoundError):
        service.delete_task("non-existent-id")


# ---- getStats ----

def test_stats_counts_by_status(service):
    for title, status in [("Todo", "todo"), ("In Progress", "in_progress"), ("Done", "done")]:
        _create(service, title, status=status)

    stats = service.get_stats()

    assert stats.total == 3
    assert stats.by_status.todo == 1
    assert stats.by_status.in_progress == 1
    assert stats.by_status.done == 1
    assert stats.by_status.todo + stats.by_status.in_progress + stats.by_status.done == stats.total


def test_stats_empty(service):
    stats = service.get_stats()

    assert stats.total == 0
    assert stats.by_status.model_dump() == {"todo": 0, "in_progress": 0, "done": 0}
    assert stats.overdue == 0


def test_stats_overdue(service, clock):
    yesterday = (clock.now - timedelta(days=1)).isoformat()
    task = _create(service, "Overdue", status="todo", due_date=yesterday)
    _create(service, "Future", status="todo", due_date=(clock.now + timedelta(days=1)).isoformat())
    _create(service, "No due date")

    assert service.get_stats().overdue == 1

    service.update_task(task.id, TaskUpdate(status="done"))

    assert service.get_stats().overdue == 0


def test_stats_follow_deletes(service):
    task = _create(service, "Gone soon")
    _create(service, "Stays")

    service.delete_task(task.id)

    assert service.get_stats().total == 1
