"""Tests for the YAML task seed loader."""

import pytest

from taskapi.core.exceptions import ConfigurationException
from taskapi.infrastructure.database.repositories.task_repository import SqlTaskRepository
from taskapi.infrastructure.services.yaml_loader import TaskSeed, import_task_seeds, load_task_seeds


def write_yaml(tmp_path, content):
    path = tmp_path / "tasks.yaml"
    path.write_text(content, encoding="utf-8")
    return str(path)


class TestLoadTaskSeeds:
    """Test cases for load_task_seeds."""

    @pytest.mark.asyncio
    async def test_parses_tasks(self, tmp_path):
        """Test valid entries are returned in file order."""
        path = write_yaml(
            tmp_path,
            "tasks:\n"
            "  - title: Fix flaky tests\n"
            "    description: See https://github.com/acme/widgets\n"
            "  - title: '  Update README  '\n",
        )

        seeds = await load_task_seeds(path)

        assert seeds == [
            TaskSeed(title="Fix flaky tests", description="See https://github.com/acme/widgets"),
            TaskSeed(title="Update README", description=""),
        ]

    @pytest.mark.asyncio
    async def test_empty_file(self, tmp_path):
        """Test an empty file has no tasks."""
        assert await load_task_seeds(write_yaml(tmp_path, "")) == []

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        """Test a missing file is a configuration error."""
        with pytest.raises(ConfigurationException, match="not found"):
            await load_task_seeds(str(tmp_path / "missing.yaml"))

    @pytest.mark.asyncio
    async def test_invalid_yaml(self, tmp_path):
        """Test malformed YAML is reported."""
        with pytest.raises(ConfigurationException, match="Invalid YAML"):
            await load_task_seeds(write_yaml(tmp_path, "tasks: [unclosed"))

    @pytest.mark.asyncio
    async def test_tasks_must_be_list(self, tmp_path):
        """Test the tasks key must hold a list."""
        with pytest.raises(ConfigurationException, match="must be a list"):
            await load_task_seeds(write_yaml(tmp_path, "tasks:\n  title: Not a list\n"))

    @pytest.mark.asyncio
    async def test_short_title_rejected(self, tmp_path):
        """Test titles shorter than three characters are rejected."""
        with pytest.raises(ConfigurationException, match="Entry 0"):
            await load_task_seeds(write_yaml(tmp_path, "tasks:\n  - title: ab\n"))


class TestImportTaskSeeds:
    """Test cases for import_task_seeds."""

    @pytest.mark.asyncio
    async def test_skips_existing_titles(self, db_session):
        """Test importing twice does not duplicate tasks."""
        repository = SqlTaskRepository(db_session)
        seeds = [TaskSeed(title="First task"), TaskSeed(title="Second task", description="details")]

        first = await import_task_seeds(repository, seeds)
        second = await import_task_seeds(repository, seeds)

        assert first == 2
        assert second == 0
        assert [task.title for task in await repository.list_tasks()] == ["First task", "Second task"]
