from __future__ import annotations

from dataclasses import replace

import pytest

from itp_admin.bug_reports.model import BugReport
from itp_admin.bug_reports.service import BugReportService
from itp_admin.core.enums import BugReportStatus, Role, TaskPriority
from itp_admin.core.exceptions import AuthorizationError, NotFoundError, ValidationError


class FakeBugReportRepo:
    def __init__(self):
        self.reports = {}

    def list_reports(self):
        return list(self.reports.values())

    def create_report(self, values):
        report_id = len(self.reports) + 1
        self.reports[report_id] = BugReport(report_id=report_id, **values)
        return report_id

    def set_status(self, report_id, status):
        if report_id not in self.reports:
            return False
        self.reports[report_id] = replace(self.reports[report_id], status=status)
        return True


def test_report_bug_defaults():
    repo = FakeBugReportRepo()
    report_id = BugReportService(repo).report_bug(title="Calendar is blank", page_url="/calendar", reported_by=7, reporter_name="Tom")

    report = repo.reports[report_id]
    assert report.status is BugReportStatus.OPEN
    assert report.priority is TaskPriority.MEDIUM
    assert report.description is None
    assert report.reporter_name == "Tom"

    with pytest.raises(ValidationError):
        BugReportService(repo).report_bug(title=" ")


def test_only_admins_change_status():
    repo = FakeBugReportRepo()
    service = BugReportService(repo)
    report_id = service.report_bug(title="Broken export")

    with pytest.raises(AuthorizationError):
        service.change_status(current_role=Role.STAFF, report_id=report_id, status="resolved")
    service.change_status(current_role=Role.ADMIN, report_id=report_id, status="resolved")
    assert repo.reports[report_id].status is BugReportStatus.RESOLVED
    with pytest.raises(NotFoundError):
        service.change_status(current_role=Role.ADMIN, report_id=99, status="closed")


def test_bug_report_endpoints(make_client):
    repo = FakeBugReportRepo()
    client = make_client(bug_report_service=BugReportService(repo), role="coach")

    res = client.post("/api/bug-reports", json={"title": "Typo on dashboard", "page_url": "/dashboard"})
    assert res.status_code == 201
    assert repo.reports[1].reporter_name == "Tom Coach"
    assert repo.reports[1].reported_by == 7

    assert client.post("/api/bug-reports/1/status", json={"status": "closed"}).status_code == 403
    assert client.get("/api/bug-reports").get_json()["reports"][0]["title"] == "Typo on dashboard"
