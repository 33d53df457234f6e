from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import TaskCategory, TaskPriority, TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import Task
from .repository import TaskRepository

_SELECT = """
    SELECT t.task_id, t.title, t.description, t.status, t.priority, t.category,
           t.assigned_to, t.player_id, t.due_date, t.created_by, t.created_at,
           a.full_name AS assignee_name,
           CONCAT(p.first_name, ' ', p.last_name) AS player_name
    FROM tasks t
    LEFT JOIN accounts a ON a.account_id = t.assigned_to
    LEFT JOIN players p ON p.id = t.player_id
"""

_UPDATABLE = ("title", "description", "priority", "category", "assigned_to", "player_id", "due_date", "status")


def _to_task(row: dict) -> Task:
    return Task(
        task_id=int(row["task_id"]),
        title=row["title"],
        description=row.get("description"),
        status=TaskStatus(row["status"]),
        priority=TaskPriority(row["priority"]),
        category=TaskCategory(row["category"]),
        assigned_to=int(row["assigned_to"]) if row.get("assigned_to") is not None else None,
        player_id=int(row["player_id"]) if row.get("player_id") is not None else None,
        due_date=row.get("due_date"),
        created_by=int(row["created_by"]),
        created_at=row.get("created_at"),
        assignee_name=row.get("assignee_name"),
        player_name=row.get("player_name"),
    )


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, task_id: int) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE t.task_id=%s", (task_id,))
            row = fetchone(cur)
            return _to_task(row) if row else None

    def list_tasks(self) -> Sequence[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY t.created_at DESC, t.task_id DESC")
            return [_to_task(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks(title, description, status, priority, category, assigned_to, player_id, due_date, created_by)
                VALUES(%s,%s,'pending',%s,%s,%s,%s,%s,%s)
                """,
                (title, description, priority.value, category.value, assigned_to, player_id, due_date, created_by),
            )
            return int(cur.lastrowid)

    def update_task(self, task_id: int, changes: Dict[str, Any]) -> bool:
        set_clause, params = build_update(changes, _UPDATABLE)
        if not set_clause:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE tasks SET {set_clause} WHERE task_id=%s", (*params, task_id))
            return cur.rowcount > 0

    def set_status(self, task_id: int, status: TaskStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE tasks SET status=%s WHERE task_id=%s", (status.value, task_id))
            return cur.rowcount > 0

    def delete_task(self, task_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM tasks WHERE task_id=%s", (task_id,))
            return cur.rowcount > 0
