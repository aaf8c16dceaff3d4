from __future__ import annotations

from typing import Union
from uuid import UUID


# PUBLIC_INTERFACE
class TaskNotFound(Exception):
    """
    Raised when a task (or any task at all) cannot be found.

    Accepts either the missing task id, producing the message
    "Task not found with ID: <id>", or a literal reason such as
    "No tasks found".
    """

    def __init__(self, id_or_message: Union[UUID, str]) -> None:
        if isinstance(id_or_message, UUID):
            self.task_id = id_or_message
            message = f"Task not found with ID: {id_or_message}"
        else:
            self.task_id = None
            message = id_or_message
        super().__init__(message)


# PUBLIC_INTERFACE
class TaskValidationError(ValueError):
    """Raised when a task would be persisted with a blank required field."""


# PUBLIC_INTERFACE
class StorageError(Exception):
    """Raised by storage backends when the underlying store fails."""
