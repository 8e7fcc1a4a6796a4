"""Task logs endpoint routes."""

from fastapi import APIRouter, Depends, Path

from taskapi.api.dependencies import get_task_service, verify_api_key
from taskapi.core.services.task_service import TaskService
from .schemas import TaskLogsResponse

router = APIRouter(
    prefix="/tasks",
    tags=["Task Execution"],
    dependencies=[Depends(verify_api_key)],
)


@router.get(
    "/{task_id}/logs",
    response_model=TaskLogsResponse,
    summary="Get task logs",
    description="Return the captured output of the most recent run split into lines.",
    responses={
        200: {"description": "Logs retrieved successfully"},
        404: {"description": "Task not found"},
        401: {"description": "Invalid or missing API key"},
    },
)
async def get_task_logs(
    task_id: int = Path(..., description="Task identifier"),
    task_service: TaskService = Depends(get_task_service),
) -> TaskLogsResponse:
    """Get the output lines, status and runner pid of a task."""
    task = await task_service.get_logs(task_id)
    return TaskLogsResponse(
        logs=task.log_lines(),
        status=task.status,
        runner_pid=task.runner_pid,
    )
