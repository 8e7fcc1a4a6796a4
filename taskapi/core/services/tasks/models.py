"""Task service database models."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from taskapi.infrastructure.database.connection import Base


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


class TaskModel(Base):
    """
    Database model for tasks.

    Represents tasks with their execution status and captured runner output.
    """

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Store-assigned task identifier"
    )

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        doc="Short task title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        doc="Free text description, may embed a GitHub repository URL"
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        index=True,
        doc="Current task execution status"
    )

    runner_pid: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        doc="Pid of the most recently launched agent runner"
    )

    output: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        doc="Combined stdout and stderr of the latest execution attempt"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        index=True,
        doc="Task creation timestamp"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
        doc="Last task update timestamp"
    )

    def __repr__(self) -> str:
        """String representation of task model."""
        return f"<TaskModel(id={self.id}, title='{self.title}', status='{self.status}')>"
