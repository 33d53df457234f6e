from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import parse_optional_date
from ..common.validators import optional_str, parse_enum, require_non_empty
from ..core.enums import TaskCategory, TaskPriority, TaskStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)

ALL = "all"
MY_TASKS = "my_tasks"
TASK_FILTERS = (ALL, MY_TASKS) + tuple(s.value for s in TaskStatus)


@dataclass(frozen=True)
class TaskBoard:
    tasks: Sequence[Task]
    counts: Dict[str, int]
    filter: str


def filter_tasks(tasks: Sequence[Task], task_filter: str, *, current_account_id: Optional[int]) -> list[Task]:
    if task_filter == ALL:
        return list(tasks)
    if task_filter == MY_TASKS:
        return [t for t in tasks if current_account_id is not None and t.assigned_to == current_account_id]
    status = parse_enum(TaskStatus, task_filter, "filter")
    return [t for t in tasks if t.status == status]


def count_tasks(tasks: Sequence[Task], *, current_account_id: Optional[int]) -> Dict[str, int]:
    counts = {ALL: len(tasks), MY_TASKS: len(filter_tasks(tasks, MY_TASKS, current_account_id=current_account_id))}
    for status in TaskStatus:
        counts[status.value] = sum(1 for t in tasks if t.status == status)
    return counts


def _optional_id(value) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid id: {value!r}")


class TaskService:
    def __init__(self, tasks: TaskRepository):
        self._tasks = tasks

    def board(self, *, task_filter: str = ALL, current_account_id: Optional[int] = None) -> TaskBoard:
        if task_filter not in TASK_FILTERS:
            raise ValidationError(f"Invalid filter: {task_filter!r}")
        tasks = list(self._tasks.list_tasks())
        return TaskBoard(
            tasks=filter_tasks(tasks, task_filter, current_account_id=current_account_id),
            counts=count_tasks(tasks, current_account_id=current_account_id),
            filter=task_filter,
        )

    def _get(self, task_id: int) -> Task:
        task = self._tasks.get_by_id(int(task_id))
        if not task:
            raise NotFoundError("Task not found")
        return task

    def create_task(self, *, created_by: int, data: Dict[str, Any]) -> int:
        title = require_non_empty(data.get("title"), "Title")
        task_id = self._tasks.create_task(
            title=title,
            description=optional_str(data.get("description")),
            priority=parse_enum(TaskPriority, data.get("priority") or TaskPriority.MEDIUM, "priority"),
            category=parse_enum(TaskCategory, data.get("category") or TaskCategory.OTHER, "category"),
            assigned_to=_optional_id(data.get("assigned_to")),
            player_id=_optional_id(data.get("player_id")),
            due_date=parse_optional_date(data.get("due_date")),
            created_by=int(created_by),
        )
        logger.info("Task %s created by %s: %s", task_id, created_by, title)
        return task_id

    def update_task(self, task_id: int, data: Dict[str, Any]) -> None:
        task = self._get(task_id)
        changes: Dict[str, Any] = {}
        if "title" in data:
            changes["title"] = require_non_empty(data.get("title"), "Title")
        if "description" in data:
            changes["description"] = optional_str(data.get("description"))
        if "priority" in data:
            changes["priority"] = parse_enum(TaskPriority, data["priority"], "priority")
        if "category" in data:
            changes["category"] = parse_enum(TaskCategory, data["category"], "category")
        if "status" in data:
            changes["status"] = parse_enum(TaskStatus, data["status"], "status")
        if "assigned_to" in data:
            changes["assigned_to"] = _optional_id(data["assigned_to"])
        if "player_id" in data:
            changes["player_id"] = _optional_id(data["player_id"])
        if "due_date" in data:
            changes["due_date"] = parse_optional_date(data["due_date"])
        if not changes:
            raise ValidationError("Nothing to update")
        if not self._tasks.update_task(task.task_id, changes):
            raise ValidationError("Failed to update task")

    def advance(self, task_id: int) -> TaskStatus:
        task = self._get(task_id)
        new_status = task.status.next()
        self.set_status(task.task_id, new_status)
        return new_status

    def set_status(self, task_id: int, status) -> TaskStatus:
        status = parse_enum(TaskStatus, status, "status")
        if not self._tasks.set_status(int(task_id), status):
            raise NotFoundError("Task not found")
        logger.info("Task %s moved to %s", task_id, status.value)
        return status

    def delete_task(self, task_id: int) -> None:
        if not self._tasks.delete_task(int(task_id)):
            raise NotFoundError("Task not found")
