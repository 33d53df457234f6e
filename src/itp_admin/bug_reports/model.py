from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import BugReportStatus, TaskPriority


@dataclass(frozen=True)
class BugReport:
    report_id: int
    title: str
    status: BugReportStatus
    priority: TaskPriority
    description: Optional[str] = None
    page_url: Optional[str] = None
    reporter_name: Optional[str] = None
    reported_by: Optional[int] = None
    created_at: Optional[datetime] = None
