from __future__ import annotations

from typing import Any, Dict, Sequence

from ..core.enums import BugReportStatus, TaskPriority
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, insert_row
from .model import BugReport
from .repository import BugReportRepository

COLUMNS = ("title", "description", "page_url", "reporter_name", "status", "priority", "reported_by")


def _to_report(row: dict) -> BugReport:
    return BugReport(
        report_id=int(row["report_id"]),
        title=row["title"],
        description=row.get("description"),
        page_url=row.get("page_url"),
        reporter_name=row.get("reporter_name"),
        status=BugReportStatus(row["status"]),
        priority=TaskPriority(row["priority"]),
        reported_by=int(row["reported_by"]) if row.get("reported_by") is not None else None,
        created_at=row.get("created_at"),
    )


class MySQLBugReportRepository(BugReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_reports(self) -> Sequence[BugReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM bug_reports ORDER BY created_at DESC")
            return [_to_report(r) for r in fetchall(cur)]

    def create_report(self, values: Dict[str, Any]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return insert_row(cur, "bug_reports", values, COLUMNS)

    def set_status(self, report_id: int, status: BugReportStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE bug_reports SET status=%s WHERE report_id=%s", (status.value, report_id))
            return cur.rowcount > 0
