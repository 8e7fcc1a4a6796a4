"""Run task endpoint schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RunTaskResponse(BaseModel):
    """Response schema for a started execution."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    message: str = Field(
        ...,
        description="Human-readable confirmation",
        examples=["Task execution started"],
    )
    runner_pid: Optional[int] = Field(
        None,
        description="Process id of the agent runner, null if it failed to start",
        examples=[48213],
    )
    task_id: int = Field(
        ...,
        description="Identifier of the executed task",
        examples=[1],
    )
