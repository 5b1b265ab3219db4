from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tasks_api.repositories.task_repository import TaskRepository  # noqa: E402
from tasks_api.services.task_service import TaskService  # noqa: E402


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def repository(clock: FakeClock) -> TaskRepository:
    return TaskRepository(clock=clock)


@pytest.fixture()
def service(repository: TaskRepository, clock: FakeClock) -> TaskService:
    return TaskService(repository, clock=clock)
