"""Task management API schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from taskapi.core.domain.entities import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, TITLE_MIN_LENGTH
from taskapi.core.domain.enums import TaskStatus

UPDATE_DESCRIPTION_MIN_LENGTH = 10


def _reject_blank(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value


class TaskCreateRequest(BaseModel):
    """Task creation request schema."""

    title: str = Field(
        ...,
        min_length=TITLE_MIN_LENGTH,
        max_length=TITLE_MAX_LENGTH,
        description="Task title",
        examples=["Fix flaky integration tests"],
    )
    description: Optional[str] = Field(
        None,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Task description, may reference a GitHub repository",
        examples=["Stabilize the CI suite in https://github.com/acme/widgets"],
    )

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        """Reject titles made only of whitespace, keeping the text as sent."""
        return _reject_blank(value)


class TaskUpdateRequest(BaseModel):
    """Task update request schema."""

    title: Optional[str] = Field(
        None,
        min_length=TITLE_MIN_LENGTH,
        max_length=TITLE_MAX_LENGTH,
        description="Updated task title",
        examples=["Fix flaky integration tests on CI"],
    )
    description: Optional[str] = Field(
        None,
        min_length=UPDATE_DESCRIPTION_MIN_LENGTH,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Updated task description",
        examples=["Stabilize the CI suite in https://github.com/acme/widgets"],
    )

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        return _reject_blank(value)


class TaskResponse(BaseModel):
    """Task response schema."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: int = Field(
        ...,
        description="Task identifier",
        examples=[1],
    )
    title: str = Field(
        ...,
        description="Task title",
        examples=["Fix flaky integration tests"],
    )
    description: str = Field(
        ...,
        description="Task description",
        examples=["Stabilize the CI suite in https://github.com/acme/widgets"],
    )
    status: TaskStatus = Field(
        ...,
        description="Current task status",
        examples=["pending"],
    )
    runner_pid: Optional[int] = Field(
        None,
        description="Process id of the most recent agent runner",
        examples=[48213],
    )
    output: Optional[str] = Field(
        None,
        description="Combined output of the most recent run",
        examples=["Cloning repository...\nDone"],
    )
    created_at: Optional[datetime] = Field(
        None,
        description="Task creation timestamp",
        examples=["2025-01-01T12:00:00Z"],
    )
    updated_at: Optional[datetime] = Field(
        None,
        description="Last task update timestamp",
        examples=["2025-01-01T12:00:00Z"],
    )
