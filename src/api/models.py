from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, TypedDict
from uuid import UUID

from .exceptions import TaskValidationError


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A lightweight domain model representing a Task for the storage backends.

    Fields:
    - id: UUID assigned by the store on first save (None before that)
    - title: Short title, required and non-blank
    - description: Optional detailed description
    - status: Free-form status string (e.g. TODO, IN_PROGRESS, DONE), non-blank
    - due_date: Optional due datetime
    - created_at: Creation timestamp, set once by the store
    - updated_at: Last update timestamp, refreshed by the store on every save
    """

    id: Optional[UUID]
    title: str
    description: Optional[str]
    status: str
    due_date: Optional[datetime]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


# PUBLIC_INTERFACE
def validate_task(task: TaskEntity) -> None:
    """
    Enforce the field-level constraints every store checks before writing.

    Raises:
        TaskValidationError: if title or status is missing or blank.
    """
    if _is_blank(task.get("title")):
        raise TaskValidationError("Title is required")
    if _is_blank(task.get("status")):
        raise TaskValidationError("Status is required")


# PUBLIC_INTERFACE
def new_task(
    title: str,
    status: str,
    description: Optional[str] = None,
    due_date: Optional[datetime] = None,
) -> TaskEntity:
    """Build an unsaved TaskEntity; id and timestamps are left for the store."""
    return {
        "id": None,
        "title": title,
        "description": description,
        "status": status,
        "due_date": due_date,
        "created_at": None,
        "updated_at": None,
    }


# PUBLIC_INTERFACE
def next_updated_at(previous: datetime, now: datetime) -> datetime:
    """
    Timestamp for a save over a task last stamped at `previous`.

    Always strictly later than `previous`, even when the wall clock has
    stepped back or has not ticked since the last save.
    """
    return max(now, previous + timedelta(microseconds=1))
