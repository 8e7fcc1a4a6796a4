"""Run task endpoint routes."""

from fastapi import APIRouter, Depends, Path

from taskapi.api.dependencies import get_execution_service, verify_api_key
from taskapi.core.services.execution_service import ExecutionService
from .schemas import RunTaskResponse

router = APIRouter(
    prefix="/tasks",
    tags=["Task Execution"],
    dependencies=[Depends(verify_api_key)],
)


@router.post(
    "/{task_id}/run",
    response_model=RunTaskResponse,
    summary="Run task",
    description="Start the coding agent for a task and return without waiting for it to finish.",
    responses={
        200: {
            "description": "Execution started",
            "content": {
                "application/json": {
                    "example": {
                        "message": "Task execution started",
                        "runnerPid": 48213,
                        "taskId": 1,
                    }
                }
            },
        },
        400: {"description": "Task description has no GitHub repository URL"},
        404: {"description": "Task not found"},
        409: {"description": "Task is already running"},
        500: {"description": "Internal server error"},
    },
)
async def run_task(
    task_id: int = Path(..., description="Task identifier"),
    execution_service: ExecutionService = Depends(get_execution_service),
) -> RunTaskResponse:
    """
    Start executing a task.

    The task is marked running before the agent starts. The final status
    and output are recorded once the agent exits and can be read from the
    logs endpoint.
    """
    started = await execution_service.start_execution(task_id)
    return RunTaskResponse.model_validate(started)
