from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import optional_str, parse_enum, require_non_empty
from ..core.enums import BugReportStatus, Role, TaskPriority
from ..core.exceptions import AuthorizationError, NotFoundError
from .model import BugReport
from .repository import BugReportRepository

logger = logging.getLogger(__name__)


class BugReportService:
    def __init__(self, reports: BugReportRepository):
        self._reports = reports

    def list_reports(self) -> Sequence[BugReport]:
        return self._reports.list_reports()

    def report_bug(
        self,
        *,
        title: str,
        description: Optional[str] = None,
        page_url: Optional[str] = None,
        reported_by: Optional[int] = None,
        reporter_name: Optional[str] = None,
    ) -> int:
        report_id = self._reports.create_report(
            {
                "title": require_non_empty(title, "Title"),
                "description": optional_str(description),
                "page_url": optional_str(page_url),
                "reporter_name": optional_str(reporter_name),
                "reported_by": reported_by,
                "status": BugReportStatus.OPEN,
                "priority": TaskPriority.MEDIUM,
            }
        )
        logger.info("Bug report %s: %s", report_id, title)
        return report_id

    def change_status(self, *, current_role: Role, report_id: int, status) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change bug report status")
        new_status = parse_enum(BugReportStatus, status, "status")
        if not self._reports.set_status(int(report_id), new_status):
            raise NotFoundError("Bug report not found")
