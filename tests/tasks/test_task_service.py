from __future__ import annotations

from dataclasses import replace
from datetime import date

import mysql.connector
import pytest
from mysql.connector import errorcode

from itp_admin.core.enums import TaskCategory, TaskPriority, TaskStatus
from itp_admin.core.exceptions import NotFoundError, ValidationError
from itp_admin.players.service import PlayerService
from itp_admin.tasks.model import Task
from itp_admin.tasks.service import TaskService


class FakeTaskRepo:
    def __init__(self, tasks=()):
        self.tasks = {t.task_id: t for t in tasks}

    def get_by_id(self, task_id):
        return self.tasks.get(task_id)

    def list_tasks(self):
        return list(self.tasks.values())

    def create_task(self, **values):
        task_id = len(self.tasks) + 1
        self.tasks[task_id] = Task(task_id=task_id, status=TaskStatus.PENDING, **values)
        return task_id

    def update_task(self, task_id, changes):
        if task_id not in self.tasks:
            return False
        self.tasks[task_id] = replace(self.tasks[task_id], **changes)
        return True

    def set_status(self, task_id, status):
        return self.update_task(task_id, {"status": status})

    def delete_task(self, task_id):
        return self.tasks.pop(task_id, None) is not None


def _task(task_id, status=TaskStatus.PENDING, assigned_to=None):
    return Task(
        task_id=task_id,
        title=f"Task {task_id}",
        status=status,
        priority=TaskPriority.MEDIUM,
        category=TaskCategory.OTHER,
        created_by=1,
        assigned_to=assigned_to,
    )


@pytest.fixture
def repo():
    return FakeTaskRepo(
        [
            _task(1, assigned_to=7),
            _task(2, TaskStatus.IN_PROGRESS, assigned_to=8),
            _task(3, TaskStatus.COMPLETED, assigned_to=7),
        ]
    )


def test_status_cycles_and_wraps():
    assert TaskStatus.PENDING.next() is TaskStatus.IN_PROGRESS
    assert TaskStatus.IN_PROGRESS.next() is TaskStatus.COMPLETED
    assert TaskStatus.COMPLETED.next() is TaskStatus.PENDING


def test_board_filters_and_counts(repo):
    service = TaskService(repo)

    board = service.board(task_filter="my_tasks", current_account_id=7)
    assert [t.task_id for t in board.tasks] == [1, 3]
    assert board.counts == {"all": 3, "my_tasks": 2, "pending": 1, "in_progress": 1, "completed": 1}

    assert [t.task_id for t in service.board(task_filter="completed").tasks] == [3]
    with pytest.raises(ValidationError):
        service.board(task_filter="archived")


def test_create_task_defaults(repo):
    service = TaskService(repo)
    task_id = service.create_task(created_by=7, data={"title": "Book flights", "due_date": "2024-04-01", "assigned_to": ""})

    task = repo.get_by_id(task_id)
    assert task.priority is TaskPriority.MEDIUM
    assert task.category is TaskCategory.OTHER
    assert task.assigned_to is None
    assert task.due_date == date(2024, 4, 1)

    with pytest.raises(ValidationError, match="Title is required"):
        service.create_task(created_by=7, data={"title": " "})


def test_advance_moves_to_next_status(repo):
    service = TaskService(repo)
    assert service.advance(1) is TaskStatus.IN_PROGRESS
    assert service.advance(3) is TaskStatus.PENDING
    with pytest.raises(NotFoundError):
        service.advance(99)


def test_update_and_delete(repo):
    service = TaskService(repo)
    service.update_task(1, {"priority": "urgent", "player_id": "4"})
    assert repo.get_by_id(1).priority is TaskPriority.URGENT
    assert repo.get_by_id(1).player_id == 4

    with pytest.raises(ValidationError, match="Nothing to update"):
        service.update_task(1, {})

    service.delete_task(2)
    with pytest.raises(NotFoundError):
        service.delete_task(2)


def test_task_endpoints(make_client, repo, player_repo):
    client = make_client(task_service=TaskService(repo), player_service=PlayerService(player_repo))

    body = client.get("/api/tasks?filter=my_tasks").get_json()
    assert [t["task_id"] for t in body["tasks"]] == [1, 3]
    assert body["tasks"][0]["priority_badge"] == "bg-blue-100 text-blue-800"

    res = client.post("/api/tasks/2/advance")
    assert res.get_json()["status"] == "completed"

    res = client.post("/api/tasks", json={"title": "Renew visa", "category": "visa"})
    assert res.status_code == 201


class ConstrainedTaskRepo(FakeTaskRepo):
    """Raises the errors MySQL reports for foreign keys."""

    def create_task(self, **values):
        raise mysql.connector.IntegrityError(msg="Cannot add or update a child row", errno=errorcode.ER_NO_REFERENCED_ROW_2)

    def delete_task(self, task_id):
        raise mysql.connector.IntegrityError(msg="Cannot delete or update a parent row", errno=errorcode.ER_ROW_IS_REFERENCED_2)


def test_foreign_key_errors_reach_the_operator(make_client):
    client = make_client(task_service=TaskService(ConstrainedTaskRepo()))

    res = client.delete("/api/tasks/1")
    assert res.status_code == 409
    assert res.get_json() == {"success": False, "message": "Cannot delete: this record is referenced by other data"}

    res = client.post("/api/tasks", json={"title": "Book flights", "assigned_to": 999})
    assert res.status_code == 409
    assert res.get_json()["message"] == "The referenced record does not exist"


def test_numeric_title_is_accepted():
    repo = FakeTaskRepo()
    task_id = TaskService(repo).create_task(created_by=7, data={"title": 5})
    assert repo.tasks[task_id].title == "5"
