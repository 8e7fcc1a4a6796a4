"""Task management API routes."""

from typing import List

from fastapi import APIRouter, Depends, Path, Query, status

from taskapi.api.dependencies import get_task_service, verify_api_key
from taskapi.core.services.task_service import TaskService
from .schemas import TaskCreateRequest, TaskResponse, TaskUpdateRequest

router = APIRouter(
    prefix="/tasks",
    tags=["Task Management"],
    dependencies=[Depends(verify_api_key)],
)


@router.get(
    "",
    response_model=List[TaskResponse],
    summary="List tasks",
    description="Get a page of tasks ordered by creation time, oldest first.",
    responses={
        200: {"description": "Tasks retrieved successfully"},
        401: {"description": "Invalid or missing API key"},
    },
)
async def list_tasks(
    limit: int = Query(50, ge=1, le=100, description="Maximum number of tasks to return"),
    offset: int = Query(0, ge=0, description="Number of tasks to skip"),
    task_service: TaskService = Depends(get_task_service),
) -> List[TaskResponse]:
    """Get a paginated list of tasks."""
    tasks = await task_service.list_tasks(limit=limit, offset=offset)
    return [TaskResponse.model_validate(task) for task in tasks]


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new task",
    description="Create a pending task.",
    responses={
        201: {"description": "Task created successfully"},
        400: {"description": "Invalid task data"},
        401: {"description": "Invalid or missing API key"},
    },
)
async def create_task(
    task_data: TaskCreateRequest,
    task_service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """
    Create a new task.

    The task starts as pending with no runner pid and no output.
    """
    task = await task_service.create_task(task_data.title, task_data.description or "")
    return TaskResponse.model_validate(task)


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Get task by id",
    description="Retrieve a specific task by its identifier.",
    responses={
        200: {"description": "Task retrieved successfully"},
        404: {"description": "Task not found"},
        401: {"description": "Invalid or missing API key"},
    },
)
async def get_task(
    task_id: int = Path(..., description="Task identifier"),
    task_service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """Get a task by id."""
    task = await task_service.get_task(task_id)
    return TaskResponse.model_validate(task)


@router.patch(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Update task",
    description="Update the title or description of a task that is not running.",
    responses={
        200: {"description": "Task updated successfully"},
        400: {"description": "Invalid task data"},
        404: {"description": "Task not found"},
        409: {"description": "Task is running"},
        401: {"description": "Invalid or missing API key"},
    },
)
async def update_task(
    task_data: TaskUpdateRequest,
    task_id: int = Path(..., description="Task identifier"),
    task_service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """
    Update an existing task.

    Status is driven by executions and cannot be set here.
    """
    task = await task_service.update_task(
        task_id,
        title=task_data.title,
        description=task_data.description,
    )
    return TaskResponse.model_validate(task)
