# tasks_api/services/task_validation.py
"""
Field rules for task writes and list filters.

Checks run in a fixed order (title, status, dueDate) and the first failure
raises ValidationError; nothing reaches the store unless every rule passes.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, Union

from tasks_api.core.errors import ValidationError
from tasks_api.models.task import TaskStatus

TITLE_MAX_LENGTH = 200

_STATUS_LIST = ", ".join(TaskStatus.values())


def parse_due_date(value: Union[datetime, str]) -> datetime:
    """ISO-8601 date or date-time -> aware datetime (naive is taken as UTC)."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        raw = value.strip()
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            raise ValidationError("Invalid dueDate format. Use ISO8601 format")
    else:
        raise ValidationError("Invalid dueDate format. Use ISO8601 format")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _check_title_length(title: str) -> None:
    # raw length, not trimmed
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")


def _parse_status(value: Any, message: str) -> TaskStatus:
    if isinstance(value, TaskStatus):
        return value
    try:
        return TaskStatus(value)
    except ValueError:
        raise ValidationError(message)


def validate_create(
    title: Optional[str],
    status: Optional[Any] = None,
    due_date: Optional[Union[datetime, str]] = None,
) -> dict[str, Any]:
    """Returns normalized store kwargs: title, status, due_date."""
    if not title or not title.strip():
        raise ValidationError("Title is required and cannot be empty")
    _check_title_length(title)

    parsed_status = None
    if status:
        parsed_status = _parse_status(status, f"Status must be one of: {_STATUS_LIST}")

    parsed_due = parse_due_date(due_date) if due_date else None

    return {
        "title": title,
        "status": parsed_status or TaskStatus.TODO,
        "due_date": parsed_due,
    }


def validate_update(changes: dict[str, Any]) -> dict[str, Any]:
    """
    Only keys present in ``changes`` are checked and returned.
    A falsy dueDate clears it (-> None) and skips the format check.
    """
    normalized: dict[str, Any] = {}

    if "title" in changes:
        title = changes["title"]
        if title is None or not title.strip():
            raise ValidationError("Title cannot be empty")
        _check_title_length(title)
        normalized["title"] = title

    if "status" in changes:
        status = changes["status"]
        if status is None:
            raise ValidationError(f"Status must be one of: {_STATUS_LIST}")
        normalized["status"] = _parse_status(
            status, f"Status must be one of: {_STATUS_LIST}"
        )

    if "due_date" in changes:
        due = changes["due_date"]
        normalized["due_date"] = parse_due_date(due) if due else None

    return normalized


def validate_status_filter(status: Optional[str]) -> Optional[TaskStatus]:
    if not status:
        return None
    return _parse_status(status, f"Invalid status. Must be one of: {_STATUS_LIST}")
