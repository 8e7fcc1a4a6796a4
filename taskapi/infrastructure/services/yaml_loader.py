"""YAML task seed loader."""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List

import yaml

from taskapi.core.domain.entities import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, TITLE_MIN_LENGTH
from taskapi.core.exceptions import ConfigurationException
from taskapi.infrastructure.database.repositories.interfaces import TaskRepositoryInterface


@dataclass(frozen=True)
class TaskSeed:
    """Task definition read from a seed file."""

    title: str
    description: str = ""


async def load_task_seeds(file_path: str) -> List[TaskSeed]:
    """
    Load task definitions from a YAML file.

    Expected layout::

        tasks:
          - title: Fix flaky tests
            description: See https://github.com/acme/widgets

    Args:
        file_path: Path to YAML file

    Returns:
        Parsed task definitions in file order

    Raises:
        ConfigurationException: If the file is missing or malformed
    """
    path = Path(file_path)
    if not path.is_file():
        raise ConfigurationException("tasks", f"Seed file not found: {file_path}")

    content = await asyncio.to_thread(path.read_text, encoding="utf-8")
    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationException("tasks", f"Invalid YAML in {file_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationException("tasks", f"Root element must be a dictionary in {file_path}")

    entries = data.get("tasks", [])
    if not isinstance(entries, list):
        raise ConfigurationException("tasks", "'tasks' must be a list")

    return [_parse_seed(index, entry) for index, entry in enumerate(entries)]


async def import_task_seeds(repository: TaskRepositoryInterface, seeds: List[TaskSeed]) -> int:
    """
    Create tasks for seeds whose title is not stored yet.

    Args:
        repository: Task repository
        seeds: Task definitions

    Returns:
        Number of tasks created
    """
    created = 0
    for seed in seeds:
        if await repository.get_task_by_title(seed.title):
            continue
        await repository.create_task(seed.title, seed.description)
        created += 1
    return created


def _parse_seed(index: int, entry: Any) -> TaskSeed:
    if not isinstance(entry, dict):
        raise ConfigurationException("tasks", f"Entry {index} must be a mapping")

    title = entry.get("title")
    if not isinstance(title, str) or not TITLE_MIN_LENGTH <= len(title.strip()) <= TITLE_MAX_LENGTH:
        raise ConfigurationException(
            "tasks",
            f"Entry {index}: title must be {TITLE_MIN_LENGTH}-{TITLE_MAX_LENGTH} characters",
        )

    description = entry.get("description") or ""
    if not isinstance(description, str) or len(description) > DESCRIPTION_MAX_LENGTH:
        raise ConfigurationException(
            "tasks",
            f"Entry {index}: description must be text of at most {DESCRIPTION_MAX_LENGTH} characters",
        )

    return TaskSeed(title=title.strip(), description=description)
