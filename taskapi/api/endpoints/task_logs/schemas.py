"""Task logs endpoint schemas."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from taskapi.core.domain.enums import TaskStatus


class TaskLogsResponse(BaseModel):
    """Captured runner output of a task."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    logs: List[str] = Field(
        ...,
        description="Output lines of the most recent run",
        examples=[["Cloning repository...", "Done"]],
    )
    status: TaskStatus = Field(
        ...,
        description="Current task status",
        examples=["done"],
    )
    runner_pid: Optional[int] = Field(
        None,
        description="Process id of the most recent agent runner",
        examples=[48213],
    )
