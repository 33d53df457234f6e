from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import TaskCategory, TaskPriority, TaskStatus


@dataclass(frozen=True)
class Task:
    task_id: int
    title: str
    status: TaskStatus
    priority: TaskPriority
    category: TaskCategory
    created_by: int
    description: Optional[str] = None
    assigned_to: Optional[int] = None
    player_id: Optional[int] = None
    due_date: Optional[date] = None
    created_at: Optional[datetime] = None
    assignee_name: Optional[str] = None
    player_name: Optional[str] = None
