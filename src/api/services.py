from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from fastapi import Depends

from .exceptions import TaskNotFound, TaskValidationError
from .models import TaskEntity
from .repositories import Repository, get_repository

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class TaskService:
    """
    Business rules for tasks on top of a Repository.

    This is the only layer that decides a task does not exist. It keeps no
    state between calls; the repository owns every stored task.
    """

    def __init__(self, repository: Repository) -> None:
        self._repository = repository

    def get_task_by_id(self, task_id: UUID) -> TaskEntity:
        """Return the task with the given id or raise TaskNotFound."""
        task = self._repository.find_by_id(task_id)
        if task is None:
            logger.debug("Task %s not found", task_id)
            raise TaskNotFound(task_id)
        return task

    def get_all_tasks(self) -> List[TaskEntity]:
        """
        Return every task.

        An empty store is reported as TaskNotFound("No tasks found") rather
        than an empty list; clients rely on the 404 for that case.
        """
        tasks = self._repository.find_all()
        if not tasks:
            raise TaskNotFound("No tasks found")
        logger.debug("Listing %d tasks", len(tasks))
        return tasks

    def create_task(self, task: TaskEntity) -> TaskEntity:
        """Persist a new task; the store assigns id and timestamps."""
        fresh: TaskEntity = task.copy()
        fresh["id"] = None
        fresh["created_at"] = None
        fresh["updated_at"] = None
        created = self._repository.save(fresh)
        logger.info("Created task %s status=%s", created["id"], created["status"])
        return created

    def update_task_status(self, task_id: UUID, new_status: str) -> TaskEntity:
        """Change only the status of an existing task."""
        task = self.get_task_by_id(task_id)
        if new_status is None or new_status.strip() == "":
            raise TaskValidationError("Status is required")
        new_status = new_status.strip()
        old_status = task["status"]
        task["status"] = new_status
        updated = self._repository.save(task)
        logger.info("Task %s status %s -> %s", task_id, old_status, new_status)
        return updated

    def delete_task(self, task_id: UUID) -> None:
        """Permanently remove an existing task."""
        task = self.get_task_by_id(task_id)
        self._repository.delete(task)
        logger.info("Deleted task %s", task_id)


# PUBLIC_INTERFACE
def get_task_service(repo: Repository = Depends(get_repository)) -> TaskService:
    """
    Dependency providing a request-scoped TaskService over the shared repository.
    """
    return TaskService(repo)
