from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Protocol, Sequence

from ..core.enums import TaskCategory, TaskPriority, TaskStatus
from .model import Task


class TaskRepository(Protocol):
    def get_by_id(self, task_id: int) -> Optional[Task]:
        raise NotImplementedError

    def list_tasks(self) -> Sequence[Task]:
        raise NotImplementedError

    def create_task(
        self,
        *,
        title: str,
        description: Optional[str],
        priority: TaskPriority,
        category: TaskCategory,
        assigned_to: Optional[int],
        player_id: Optional[int],
        due_date: Optional[date],
        created_by: int,
    ) -> int:
        raise NotImplementedError

    def update_task(self, task_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def set_status(self, task_id: int, status: TaskStatus) -> bool:
        raise NotImplementedError

    def delete_task(self, task_id: int) -> bool:
        raise NotImplementedError
