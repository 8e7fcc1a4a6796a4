"""Integration tests for task logs API."""

import asyncio

from taskapi.core.domain.enums import TaskStatus
from taskapi.infrastructure.database.repositories.task_repository import SqlTaskRepository


def set_task_columns(session_maker, task_id, **values):
    """Write task columns directly, as the execution callbacks would."""

    async def _update():
        async with session_maker() as session:
            await SqlTaskRepository(session).update_task(task_id, **values)
            await session.commit()

    asyncio.run(_update())


class TestTaskLogsAPI:
    """Test task logs endpoint."""

    def test_logs_of_new_task_are_empty(self, client, auth_headers, create_task):
        """Test a task that never ran has no log lines."""
        task = create_task()

        response = client.get(f"/tasks/{task['id']}/logs", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"logs": [], "status": "pending", "runnerPid": None}

    def test_logs_split_output_into_lines(self, client, auth_headers, create_task, session_maker):
        """Test output is split on newlines, keeping a trailing empty line."""
        task = create_task()
        set_task_columns(session_maker, task["id"], status=TaskStatus.DONE, runner_pid=321, output="a\nb\n")

        response = client.get(f"/tasks/{task['id']}/logs", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"logs": ["a", "b", ""], "status": "done", "runnerPid": 321}

    def test_logs_empty_output(self, client, auth_headers, create_task, session_maker):
        """Test empty output gives no lines."""
        task = create_task()
        set_task_columns(session_maker, task["id"], status=TaskStatus.ERROR, output="")

        response = client.get(f"/tasks/{task['id']}/logs", headers=auth_headers)

        assert response.json()["logs"] == []
        assert response.json()["status"] == "error"

    def test_logs_after_callback(self, client, auth_headers, create_task, fake_supervisor):
        """Test exit callback output is visible through the logs endpoint."""
        task = create_task()
        client.post(f"/tasks/{task['id']}/run", headers=auth_headers)
        on_exit = fake_supervisor.launches[0]["on_exit"]

        client.portal.call(on_exit, 0, "step one\nstep two")

        response = client.get(f"/tasks/{task['id']}/logs", headers=auth_headers)
        assert response.json() == {
            "logs": ["step one", "step two"],
            "status": "done",
            "runnerPid": 4242,
        }

    def test_logs_not_found(self, client, auth_headers):
        """Test logs of non-existent task."""
        response = client.get("/tasks/9999/logs", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_logs_no_auth(self, client, create_task):
        """Test logs without API key."""
        task = create_task()

        response = client.get(f"/tasks/{task['id']}/logs")

        assert response.status_code == 401
