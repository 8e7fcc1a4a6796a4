"""Tests for domain entities."""

import pytest

from taskapi.core.domain.entities import Task
from taskapi.core.domain.enums import TaskStatus


class TestTask:
    """Test cases for Task entity."""

    def test_defaults(self):
        """Test a new task is pending without runner data."""
        task = Task(title="Fix the build")

        assert task.status == TaskStatus.PENDING
        assert task.description == ""
        assert task.runner_pid is None
        assert task.output is None
        assert not task.is_running

    def test_empty_title_rejected(self):
        """Test blank titles are invalid."""
        with pytest.raises(ValueError):
            Task(title="   ")

    def test_description_too_long(self):
        """Test descriptions over the limit are invalid."""
        with pytest.raises(ValueError):
            Task(title="Fix the build", description="x" * 5001)

    def test_is_running_requires_pid(self):
        """Test running without a recorded pid is not an execution in flight."""
        assert Task(title="Fix", status=TaskStatus.RUNNING, runner_pid=10).is_running
        assert not Task(title="Fix", status=TaskStatus.RUNNING, runner_pid=None).is_running
        assert not Task(title="Fix", status=TaskStatus.DONE, runner_pid=10).is_running

    def test_log_lines_split_on_newline(self):
        """Test output splitting keeps a trailing empty line."""
        task = Task(title="Fix", output="a\nb\n")

        assert task.log_lines() == ["a", "b", ""]

    def test_log_lines_empty_output(self):
        """Test missing or empty output has no lines."""
        assert Task(title="Fix").log_lines() == []
        assert Task(title="Fix", output="").log_lines() == []


class TestTaskStatus:
    """Test cases for TaskStatus."""

    def test_terminal_states(self):
        """Test only done and error are terminal."""
        assert TaskStatus.DONE.is_terminal
        assert TaskStatus.ERROR.is_terminal
        assert not TaskStatus.PENDING.is_terminal
        assert not TaskStatus.RUNNING.is_terminal

    def test_values(self):
        """Test wire values."""
        assert [status.value for status in TaskStatus] == ["pending", "running", "done", "error"]
