from __future__ import annotations

from typing import Any, Dict, Protocol, Sequence

from ..core.enums import BugReportStatus
from .model import BugReport


class BugReportRepository(Protocol):
    def list_reports(self) -> Sequence[BugReport]:
        raise NotImplementedError

    def create_report(self, values: Dict[str, Any]) -> int:
        raise NotImplementedError

    def set_status(self, report_id: int, status: BugReportStatus) -> bool:
        raise NotImplementedError
