from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from ..schemas import TaskCreate, TaskOut
from ..services import TaskService, get_task_service

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new task with title, description, status, and due date.",
    responses={
        201: {"description": "Task created successfully"},
        400: {"description": "Invalid task data provided"},
    },
)
def create_task(payload: TaskCreate, service: TaskService = Depends(get_task_service)) -> TaskOut:
    """
    Create a new Task.
    """
    created = service.create_task(payload.to_entity())
    return TaskOut(**created)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskOut],
    summary="List Tasks",
    description="Return every task. Responds 404 when no tasks exist.",
    responses={
        200: {"description": "List of tasks returned"},
        404: {"description": "No tasks found"},
    },
)
def get_all_tasks(service: TaskService = Depends(get_task_service)) -> List[TaskOut]:
    return [TaskOut(**t) for t in service.get_all_tasks()]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/{task_id}",
    response_model=TaskOut,
    summary="Get Task",
    description="Get a single task by its unique identifier.",
    responses={
        200: {"description": "Task found"},
        404: {"description": "Task not found with provided ID"},
    },
)
def get_task(task_id: UUID, service: TaskService = Depends(get_task_service)) -> TaskOut:
    """
    Retrieve a single Task by its ID.
    """
    return TaskOut(**service.get_task_by_id(task_id))  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.patch(
    "/{task_id}/status",
    response_model=TaskOut,
    summary="Update Task Status",
    description="Update the status of an existing task (e.g., TODO, IN_PROGRESS, COMPLETED).",
    responses={
        200: {"description": "Task status updated"},
        400: {"description": "Invalid status provided"},
        404: {"description": "Task not found with provided ID"},
    },
)
def update_task_status(
    task_id: UUID,
    new_status: str = Query(..., alias="status", description="New status for the task"),
    service: TaskService = Depends(get_task_service),
) -> TaskOut:
    """
    Change only the status of a Task; other fields are left untouched.
    """
    updated = service.update_task_status(task_id, new_status)
    return TaskOut(**updated)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Task",
    description="Permanently remove a task.",
    responses={
        204: {"description": "Task deleted"},
        404: {"description": "Task not found with provided ID"},
    },
)
def delete_task(task_id: UUID, service: TaskService = Depends(get_task_service)) -> None:
    """
    Delete a Task. Returns 204 on success, 404 if not found.
    """
    service.delete_task(task_id)
    return None
